"""Frame assembly.

This module provides the FrameAssembler that turns one sample into a frame of
exactly ``schema.total_bits`` bits: marker, fields in schema order, optional
parity, then deterministic padding. Over-capacity payloads lose their tail.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from loguru import logger

from ..utils.parity import even_parity
from .bitpack import BitPacker, bits_to_bytes, bytes_to_bits
from .fields import FieldEncoder
from .schema import FrameLayout, MarkerStrategy, SchemaVersion

TEXT_SEPARATOR = ","
TEXT_PAD = b" "


@dataclass(frozen=True)
class Frame:
    """One encoded snapshot.

    Attributes:
        schema_id: Id of the schema version that produced the frame
        bits: Exactly ``total_bits`` bits, MSB first
        values: Encoded field integers in schema order, before truncation
        text: Fixed-length ASCII payload for text layouts, else None
    """

    schema_id: int
    bits: tuple[int, ...]
    values: tuple[tuple[str, int], ...] = ()
    text: Optional[bytes] = None

    def bit_length(self) -> int:
        return len(self.bits)

    def to_bytes(self) -> bytes:
        """Pack the frame's bits into bytes (last byte zero-filled)."""
        return bits_to_bytes(self.bits)

    def describe(self) -> str:
        """Human-readable mirror of the payload, e.g. ``v2 player_hp=63 in_combat=1``."""
        parts = [f"v{self.schema_id}"]
        parts.extend(f"{name}={value}" for name, value in self.values)
        return " ".join(parts)


class FrameAssembler:
    """Builds frames for one schema version.

    Example:
        >>> assembler = FrameAssembler(get_schema("compact-v1"))
        >>> frame = assembler.assemble({"player_hp": Ratio(50, 100), "in_combat": True})
        >>> frame.bit_length()
        40
        >>> frame.bits[0]  # sync bit
        1
    """

    def __init__(self, schema: SchemaVersion) -> None:
        """Initialize the assembler.

        Args:
            schema: Active schema version
        """
        self.schema = schema
        self.encoder = FieldEncoder(version=schema.id)
        self._overflow_reported = False

    def encode_fields(self, sample: Optional[Mapping[str, Any]]) -> tuple[tuple[str, int], ...]:
        """Encode every schema field from one sample snapshot.

        Fields absent from the sample encode as 0.
        """
        snapshot = sample if sample is not None else {}
        return tuple(
            (spec.name, self.encoder.encode(spec, snapshot.get(spec.name)))
            for spec in self.schema.fields
        )

    def assemble(self, sample: Optional[Mapping[str, Any]]) -> Frame:
        """Encode a sample into a frame of exactly ``schema.total_bits`` bits.

        Args:
            sample: Field name -> raw value, read once for the whole frame

        Returns:
            Assembled frame
        """
        values = self.encode_fields(sample)

        if self.schema.layout is FrameLayout.TEXT:
            return self._assemble_text(values)

        packer = BitPacker()
        if self.schema.marker is MarkerStrategy.SYNC_BIT:
            packer.write_bool(True)

        payload = BitPacker()
        for spec, (_, value) in zip(self.schema.fields, values):
            payload.write_uint(value, spec.bit_width)
        if self.schema.parity:
            payload.write_bool(bool(even_parity(payload.bits())))

        packer.write_bits(payload.bits())
        self._report_overflow(packer.bit_length())

        return Frame(
            schema_id=self.schema.id,
            bits=packer.fit(self.schema.total_bits),
            values=values,
        )

    def _assemble_text(self, values: tuple[tuple[str, int], ...]) -> Frame:
        raw = TEXT_SEPARATOR.join(str(value) for _, value in values).encode("ascii")
        self._report_overflow(len(raw) * 8)

        length = self.schema.text_length
        text = raw[:length].ljust(length, TEXT_PAD)

        return Frame(
            schema_id=self.schema.id,
            bits=tuple(bytes_to_bits(text)),
            values=values,
            text=text,
        )

    def _report_overflow(self, assembled_bits: int) -> None:
        if assembled_bits <= self.schema.total_bits or self._overflow_reported:
            return
        self._overflow_reported = True
        logger.debug(
            "Schema {}: payload of {} bits exceeds {}-bit frame, dropping the tail",
            self.schema.name,
            assembled_bits,
            self.schema.total_bits,
        )
