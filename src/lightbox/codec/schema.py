"""Schema definitions for lightbox frames.

A schema version is a closed, ordered table of field specs plus the grid
geometry and symbol depth that fix the frame's total bit length. Schemas are
pydantic models so deployments can ship them as JSON next to the decoder.
"""

from __future__ import annotations

import enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..exceptions import SchemaError

Color = tuple[int, int, int]


class EncodingRule(str, enum.Enum):
    """How a raw sample value becomes an unsigned integer."""

    UNSIGNED = "unsigned"
    BOOLEAN = "boolean"
    RATIO = "ratio"
    CATEGORICAL = "categorical"
    OCTANT = "octant"
    VERSION = "version"


class ClampPolicy(str, enum.Enum):
    """What happens to values outside the field's domain."""

    SATURATE = "saturate"  # clamp into [0, 2**width - 1]
    DEFAULT = "default"  # fall back to the reserved 0 entry


class MarkerStrategy(str, enum.Enum):
    """How a decoder locates or identifies a frame."""

    SYNC_BIT = "sync_bit"
    VERSION_FIELD = "version_field"


class FrameLayout(str, enum.Enum):
    """Whether the payload is packed bits or a fixed-length ASCII array."""

    BITS = "bits"
    TEXT = "text"


class FieldSpec(BaseModel):
    """Schema information for a single field.

    Attributes:
        name: Field name, also the key looked up in each sample
        bit_width: Number of bits the field occupies (1-32)
        rule: Encoding rule applied to the raw sample value
        policy: Out-of-domain handling for unsigned and ratio fields.
            Unknown categorical labels always encode as 0.
        categories: Label -> index table for categorical fields
        description: Free-form note published with the schema table
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(min_length=1)
    bit_width: int = Field(ge=1, le=32)
    rule: EncodingRule = EncodingRule.UNSIGNED
    policy: ClampPolicy = ClampPolicy.SATURATE
    categories: Optional[dict[str, int]] = None
    description: str = ""

    @model_validator(mode="after")
    def _check_rule(self) -> FieldSpec:
        if self.rule is EncodingRule.BOOLEAN and self.bit_width != 1:
            raise SchemaError(f"Field {self.name}: boolean fields are 1 bit, got {self.bit_width}")

        if self.rule is EncodingRule.CATEGORICAL:
            if not self.categories:
                raise SchemaError(f"Field {self.name}: categorical fields need a lookup table")
            if 0 not in self.categories.values():
                raise SchemaError(
                    f"Field {self.name}: lookup table must reserve index 0 for unknown labels"
                )
            for label, index in self.categories.items():
                if not 0 <= index <= self.max_value:
                    raise SchemaError(
                        f"Field {self.name}: category {label}={index} doesn't fit "
                        f"in {self.bit_width} bits"
                    )
        elif self.categories is not None:
            raise SchemaError(f"Field {self.name}: only categorical fields take a lookup table")

        return self

    @property
    def max_value(self) -> int:
        """Largest encodable value, ``2**bit_width - 1``."""
        return (1 << self.bit_width) - 1

    @property
    def value_domain(self) -> range | tuple[str, ...]:
        """Category labels for categorical fields, the integer range otherwise."""
        if self.categories is not None:
            return tuple(self.categories)
        return range(0, self.max_value + 1)

    def label_for(self, index: int) -> Optional[str]:
        """Reverse lookup of a categorical index (first label wins)."""
        if self.categories is None:
            return None
        for label, value in self.categories.items():
            if value == index:
                return label
        return None


class GridGeometry(BaseModel):
    """Cell grid dimensions. Cells are read row-major from the top-left."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    cols: int = Field(ge=1)
    rows: int = Field(ge=1)

    @property
    def cells(self) -> int:
        return self.cols * self.rows


class SchemaVersion(BaseModel):
    """One closed, versioned frame format.

    ``total_bits`` is always ``cols * rows * symbol_depth``. Payloads that don't
    fill it are padded; payloads that overflow it are truncated by the
    assembler, so overflow is deliberately not a validation error here.

    Example:
        >>> schema = SchemaVersion(
        ...     id=7,
        ...     name="tiny",
        ...     fields=(FieldSpec(name="hp", bit_width=7, rule=EncodingRule.RATIO),),
        ...     geometry=GridGeometry(cols=4, rows=2),
        ...     symbol_depth=1,
        ... )
        >>> schema.total_bits
        8
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: int = Field(ge=0)
    name: str = Field(min_length=1)
    fields: tuple[FieldSpec, ...]
    geometry: GridGeometry
    symbol_depth: int = Field(ge=1, le=8)
    marker: MarkerStrategy = MarkerStrategy.SYNC_BIT
    layout: FrameLayout = FrameLayout.BITS
    palette: Optional[tuple[Color, ...]] = None
    parity: bool = False
    description: str = ""

    @model_validator(mode="after")
    def _check_layout(self) -> SchemaVersion:
        names = [spec.name for spec in self.fields]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise SchemaError(f"Schema {self.name}: duplicate field names {duplicates}")

        for position, spec in enumerate(self.fields):
            if spec.rule is EncodingRule.VERSION and (
                position != 0 or self.marker is not MarkerStrategy.VERSION_FIELD
            ):
                raise SchemaError(
                    f"Schema {self.name}: version field {spec.name} must be the first field "
                    f"of a version-field schema"
                )

        if self.marker is MarkerStrategy.VERSION_FIELD:
            if not self.fields or self.fields[0].rule is not EncodingRule.VERSION:
                raise SchemaError(
                    f"Schema {self.name}: version-field schemas must start with a version field"
                )
            if self.id > self.fields[0].max_value:
                raise SchemaError(
                    f"Schema {self.name}: id {self.id} doesn't fit in "
                    f"{self.fields[0].bit_width}-bit version field"
                )

        if self.layout is FrameLayout.TEXT:
            if self.marker is not MarkerStrategy.VERSION_FIELD:
                raise SchemaError(f"Schema {self.name}: text layouts carry a version field")
            if self.total_bits % 8:
                raise SchemaError(
                    f"Schema {self.name}: text layouts need a whole number of bytes, "
                    f"got {self.total_bits} bits"
                )
            if self.parity:
                raise SchemaError(f"Schema {self.name}: parity applies to bit layouts only")

        if self.palette is not None:
            if len(self.palette) != self.palette_size:
                raise SchemaError(
                    f"Schema {self.name}: palette needs {self.palette_size} colors for "
                    f"{self.symbol_depth}-bit symbols, got {len(self.palette)}"
                )
            if len(set(self.palette)) != len(self.palette):
                raise SchemaError(f"Schema {self.name}: palette colors must be distinct")
            for color in self.palette:
                if any(not 0 <= channel <= 255 for channel in color):
                    raise SchemaError(f"Schema {self.name}: color {color} out of 0-255 range")

        return self

    @property
    def total_bits(self) -> int:
        """Fixed frame length: ``cols * rows * symbol_depth``."""
        return self.geometry.cells * self.symbol_depth

    @property
    def palette_size(self) -> int:
        return 1 << self.symbol_depth

    @property
    def marker_bits(self) -> int:
        """Bits spent on the sync marker (version fields count as payload)."""
        return 1 if self.marker is MarkerStrategy.SYNC_BIT else 0

    @property
    def payload_bits(self) -> int:
        """Field bits plus the optional parity bit."""
        return sum(spec.bit_width for spec in self.fields) + (1 if self.parity else 0)

    @property
    def slack_bits(self) -> int:
        """Padding left after marker and payload; negative when the schema overflows."""
        return self.total_bits - self.marker_bits - self.payload_bits

    @property
    def text_length(self) -> int:
        """Fixed byte length of a text-layout frame."""
        return self.total_bits // 8

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(spec.name for spec in self.fields)

    def field(self, name: str) -> FieldSpec:
        """Look up a field spec by name.

        Raises:
            KeyError: If the schema has no such field
        """
        for spec in self.fields:
            if spec.name == name:
                return spec
        raise KeyError(f"Schema {self.name} has no field {name!r}")

    def summary(self) -> dict[str, Any]:
        """Headline numbers for reports and logs."""
        return {
            "id": self.id,
            "name": self.name,
            "marker": self.marker.value,
            "layout": self.layout.value,
            "fields": len(self.fields),
            "payload_bits": self.payload_bits,
            "total_bits": self.total_bits,
            "symbol_depth": self.symbol_depth,
            "grid": f"{self.geometry.cols}x{self.geometry.rows}",
        }
