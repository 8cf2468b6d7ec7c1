"""Even parity over a bit sequence.

The only integrity signal lightbox frames carry besides the sync bit. It
detects any odd number of flipped bits and nothing else.
"""

from __future__ import annotations

from typing import Iterable


def even_parity(bits: Iterable[int]) -> int:
    """Return the bit that makes the total count of 1s even.

    Args:
        bits: Iterable of 0/1 values

    Returns:
        1 if ``bits`` holds an odd number of 1s, else 0

    Example:
        >>> even_parity([1, 0, 1, 1])
        1
    """
    return sum(1 for bit in bits if bit) % 2


def verify_even_parity(bits: Iterable[int], parity_bit: int) -> bool:
    """Check a parity bit produced by :func:`even_parity`."""
    return even_parity(bits) == (1 if parity_bit else 0)
