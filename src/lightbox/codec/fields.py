"""Field encoding rules.

This module turns one raw sample value into the unsigned integer a field
occupies on the wire. Encoding never fails: missing, malformed or
out-of-range values degrade to 0 or to the field's maximum.
"""

from __future__ import annotations

import enum
import math
import numbers
from typing import Any, NamedTuple, Optional

from loguru import logger

from .schema import ClampPolicy, EncodingRule, FieldSpec


class Ratio(NamedTuple):
    """A ``current / maximum`` pair for percentage-like fields."""

    current: float
    maximum: float


def clamp(value: Any, bit_width: int) -> int:
    """Clamp a numeric value into ``[0, 2**bit_width - 1]``.

    Floats are floored, values above the maximum saturate, negatives and NaN
    become 0.

    Example:
        >>> clamp(200, 7)
        127
        >>> clamp(-3, 7)
        0
    """
    max_value = (1 << bit_width) - 1
    if isinstance(value, bool):
        return int(value)
    if not isinstance(value, numbers.Real):
        return 0
    if isinstance(value, numbers.Integral):
        return min(max(int(value), 0), max_value)

    number = float(value)
    if math.isnan(number) or number <= 0:
        return 0
    if number >= max_value:
        return max_value
    return math.floor(number)


def ratio(current: Any, maximum: Any, bit_width: int) -> int:
    """Scale ``current / maximum`` onto the field's full range.

    Returns ``floor(current / maximum * (2**bit_width - 1))`` when ``maximum > 0``,
    otherwise 0. The result is clamped.

    Example:
        >>> ratio(50, 100, 7)
        63
    """
    if not isinstance(current, numbers.Real) or not isinstance(maximum, numbers.Real):
        return 0
    if isinstance(current, bool) or isinstance(maximum, bool):
        return 0
    if not maximum > 0:
        return 0
    max_value = (1 << bit_width) - 1
    try:
        scaled = current / maximum * max_value
    except OverflowError:
        return max_value if current > 0 else 0
    return clamp(scaled, bit_width)


def octant(angle: Any) -> int:
    """Compass octant (0-7) of a facing angle in radians."""
    if not isinstance(angle, numbers.Real) or isinstance(angle, bool):
        return 0
    try:
        radians = float(angle)
    except OverflowError:
        return 0
    if not math.isfinite(radians):
        return 0
    return math.floor(radians / (2 * math.pi) * 8) % 8


def categorical(value: Any, categories: dict[str, int]) -> Optional[int]:
    """Look a label up in a closed table.

    Enum members are looked up by name, strings exactly and then upper-cased,
    integers only if they are one of the table's indices.

    Returns:
        The table index, or None if the label isn't in the table
    """
    if isinstance(value, enum.Enum):
        value = value.name
    if isinstance(value, str):
        if value in categories:
            return categories[value]
        return categories.get(value.upper())
    if isinstance(value, numbers.Integral) and not isinstance(value, bool):
        if int(value) in categories.values():
            return int(value)
    return None


class FieldEncoder:
    """Encodes sample values according to their field spec.

    Example:
        >>> spec = FieldSpec(name="hp", bit_width=7, rule=EncodingRule.RATIO)
        >>> FieldEncoder().encode(spec, Ratio(50, 100))
        63
    """

    def __init__(self, version: int = 0) -> None:
        """Initialize the encoder.

        Args:
            version: Schema id written by ``EncodingRule.VERSION`` fields
        """
        self.version = version

    def encode(self, spec: FieldSpec, value: Any) -> int:
        """Encode one value into an integer in ``[0, spec.max_value]``.

        Args:
            spec: Field spec describing width and rule
            value: Raw sample value, or None if unavailable

        Returns:
            Unsigned integer that fits in ``spec.bit_width`` bits
        """
        rule = spec.rule

        if rule is EncodingRule.VERSION:
            return clamp(self.version, spec.bit_width)

        if value is None:
            return 0

        if rule is EncodingRule.BOOLEAN:
            return 1 if value else 0

        if rule is EncodingRule.CATEGORICAL:
            index = categorical(value, spec.categories or {})
            if index is None:
                logger.debug("Field {}: unmapped label {!r}, encoding 0", spec.name, value)
                return 0
            return index

        if rule is EncodingRule.RATIO:
            if isinstance(value, (tuple, list)) and len(value) == 2:
                current, maximum = value
            else:
                current, maximum = value, 1
            if spec.policy is ClampPolicy.DEFAULT and _exceeds(current, maximum):
                return self._fall_back(spec, value)
            return ratio(current, maximum, spec.bit_width)

        if rule is EncodingRule.OCTANT:
            return clamp(octant(value), spec.bit_width)

        if not isinstance(value, numbers.Real):
            logger.debug("Field {}: non-numeric value {!r}, encoding 0", spec.name, value)
            return 0
        if spec.policy is ClampPolicy.DEFAULT and not 0 <= value < spec.max_value + 1:
            return self._fall_back(spec, value)
        return clamp(value, spec.bit_width)

    @staticmethod
    def _fall_back(spec: FieldSpec, value: Any) -> int:
        logger.debug("Field {}: {!r} is outside the domain, encoding 0", spec.name, value)
        return 0


def _exceeds(current: Any, maximum: Any) -> bool:
    """Whether a ratio sample lies outside ``0 <= current <= maximum``."""
    if not isinstance(current, numbers.Real) or not isinstance(maximum, numbers.Real):
        return False
    if isinstance(current, bool) or isinstance(maximum, bool) or not maximum > 0:
        return False
    return current < 0 or current > maximum
