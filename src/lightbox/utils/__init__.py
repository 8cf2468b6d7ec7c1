"""Utility functions for lightbox.

This module provides the parity signal and frame layout calculations.
"""

from __future__ import annotations

from .parity import even_parity, verify_even_parity
from .sizing import cell_of, encoded_bits, field_offsets, field_sizes

__all__ = [
    # Parity
    "even_parity",
    "verify_even_parity",
    # Layout
    "cell_of",
    "encoded_bits",
    "field_offsets",
    "field_sizes",
]
