"""Reference decoder.

Capture tools live outside this package, but every one of them has to undo the
symbol mapping and frame assembly exactly as written here. This module is the
executable form of that contract and what the tests decode against.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

from ..exceptions import DecodeError
from ..schemas.categories import CompassOctant
from ..utils.parity import verify_even_parity
from .assembler import TEXT_PAD, TEXT_SEPARATOR, Frame
from .bitpack import BitUnpacker, bits_to_bytes
from .schema import EncodingRule, FieldSpec, FrameLayout, MarkerStrategy, SchemaVersion
from .symbols import SymbolMapper


@dataclass(frozen=True)
class DecodedFrame:
    """Field values recovered from one frame.

    Attributes:
        schema_id: Schema version the frame was decoded with
        raw: Field name -> wire integer
        values: Field name -> interpreted value (bool, category label,
            CompassOctant or int)
        truncated: Names of schema fields lost to tail truncation
    """

    schema_id: int
    raw: dict[str, int] = field(default_factory=dict)
    values: dict[str, Any] = field(default_factory=dict)
    truncated: tuple[str, ...] = ()

    def __getitem__(self, name: str) -> Any:
        return self.values[name]


class FrameDecoder:
    """Decodes bits or cell colors produced for one schema version.

    Example:
        >>> schema = get_schema("compact-v1")
        >>> frame = FrameAssembler(schema).assemble({"player_level": 17})
        >>> FrameDecoder(schema).decode_frame(frame)["player_level"]
        17
    """

    def __init__(self, schema: SchemaVersion, *, verify_parity: bool = True) -> None:
        """Initialize the decoder.

        Args:
            schema: Schema version the frames were encoded with
            verify_parity: Reject frames whose parity bit doesn't match
        """
        self.schema = schema
        self.verify_parity = verify_parity
        self.mapper = SymbolMapper.for_schema(schema)

    def decode_frame(self, frame: Frame) -> DecodedFrame:
        return self.decode_bits(frame.bits)

    def decode_colors(self, colors: Sequence[Sequence[int]]) -> DecodedFrame:
        """Decode one color per cell, row-major from the top-left.

        Raises:
            DecodeError: If the cell count is wrong or a color isn't in the palette
        """
        if len(colors) != self.schema.geometry.cells:
            raise DecodeError(
                f"Schema {self.schema.name}: expected {self.schema.geometry.cells} cells, "
                f"got {len(colors)}"
            )
        return self.decode_bits(self.mapper.to_bits(colors))

    def decode_bits(self, bits: Sequence[int]) -> DecodedFrame:
        """Decode a full frame's bits.

        Raises:
            DecodeError: If the frame length, marker, version or parity is wrong
        """
        if len(bits) != self.schema.total_bits:
            raise DecodeError(
                f"Schema {self.schema.name}: expected {self.schema.total_bits} bits, "
                f"got {len(bits)}"
            )

        if self.schema.layout is FrameLayout.TEXT:
            raw = self._read_text(bits)
        else:
            raw = self._read_bits(bits)

        if self.schema.marker is MarkerStrategy.VERSION_FIELD:
            version_field = self.schema.fields[0].name
            version = raw.get(version_field)
            if version != self.schema.id:
                raise DecodeError(
                    f"Version mismatch: frame says {version}, schema {self.schema.name} "
                    f"is {self.schema.id}"
                )

        values = {
            spec.name: self._interpret(spec, raw[spec.name])
            for spec in self.schema.fields
            if spec.name in raw
        }
        truncated = tuple(name for name in self.schema.field_names if name not in raw)
        return DecodedFrame(self.schema.id, raw, values, truncated)

    def _read_bits(self, bits: Sequence[int]) -> dict[str, int]:
        unpacker = BitUnpacker(bits)

        if self.schema.marker is MarkerStrategy.SYNC_BIT and not unpacker.read_bool():
            raise DecodeError("Missing sync bit: frame doesn't start with 1")

        start = unpacker.position()
        raw: dict[str, int] = {}
        for spec in self.schema.fields:
            if unpacker.bits_remaining() < spec.bit_width:
                break
            raw[spec.name] = unpacker.read_uint(spec.bit_width)

        complete = len(raw) == len(self.schema.fields)
        if self.schema.parity and self.verify_parity and complete and unpacker.bits_remaining():
            payload = list(bits[start : unpacker.position()])
            if not verify_even_parity(payload, unpacker.read_uint(1)):
                raise DecodeError("Parity check failed")

        return raw

    def _read_text(self, bits: Sequence[int]) -> dict[str, int]:
        data = bits_to_bytes(bits)
        try:
            text = data.decode("ascii")
        except UnicodeDecodeError as err:
            raise DecodeError(f"Text frame isn't ASCII: {err}") from err

        body = text.rstrip(TEXT_PAD.decode("ascii"))
        tokens = body.split(TEXT_SEPARATOR) if body else []
        # A text with no padding may have been cut inside its last value.
        if len(body) == len(text) and len(tokens) > 1:
            tokens.pop()

        raw: dict[str, int] = {}
        for spec, token in zip(self.schema.fields, tokens):
            if not token.isdigit():
                raise DecodeError(f"Field {spec.name}: {token!r} isn't a decimal integer")
            raw[spec.name] = int(token)
        return raw

    @staticmethod
    def _interpret(spec: FieldSpec, value: int) -> Any:
        if spec.rule is EncodingRule.BOOLEAN:
            return bool(value)
        if spec.rule is EncodingRule.CATEGORICAL:
            label = spec.label_for(value)
            if label is None:
                raise DecodeError(f"Field {spec.name}: index {value} isn't in the lookup table")
            return label
        if spec.rule is EncodingRule.OCTANT and value < len(CompassOctant):
            return CompassOctant(value)
        return value
