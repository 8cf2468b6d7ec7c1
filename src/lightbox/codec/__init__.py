"""Frame codec for lightbox.

This module provides field encoding, frame assembly, symbol mapping and the
reference decoder for fixed-length, versioned pixel-grid frames.
"""

from __future__ import annotations

from .assembler import Frame, FrameAssembler
from .decoder import DecodedFrame, FrameDecoder
from .fields import FieldEncoder, Ratio
from .schema import (
    ClampPolicy,
    EncodingRule,
    FieldSpec,
    FrameLayout,
    GridGeometry,
    MarkerStrategy,
    SchemaVersion,
)
from .symbols import SymbolMapper, palette_for

__all__ = [
    "Frame",
    "FrameAssembler",
    "DecodedFrame",
    "FrameDecoder",
    "FieldEncoder",
    "Ratio",
    "ClampPolicy",
    "EncodingRule",
    "FieldSpec",
    "FrameLayout",
    "GridGeometry",
    "MarkerStrategy",
    "SchemaVersion",
    "SymbolMapper",
    "palette_for",
]
