"""Frame layout calculations.

This module answers "where does each field live" for bit-layout schemas,
which is what capture tools need to slice frames without running the decoder.
"""

from __future__ import annotations

from ..codec.schema import FrameLayout, SchemaVersion


def field_sizes(schema: SchemaVersion) -> dict[str, int]:
    """Get the width in bits of each field, in wire order.

    Example:
        >>> field_sizes(get_schema("compact-v1"))["player_hp"]
        7
    """
    return {spec.name: spec.bit_width for spec in schema.fields}


def encoded_bits(schema: SchemaVersion) -> int:
    """Bits used before padding: marker, fields and parity.

    May exceed ``schema.total_bits`` for over-capacity schemas, whose tail is
    truncated on assembly.
    """
    return schema.marker_bits + schema.payload_bits


def field_offsets(schema: SchemaVersion) -> dict[str, tuple[int, int]]:
    """Get ``(bit offset, width)`` of each field within the frame.

    Offsets count from the first bit of the frame, sync bit included. Fields
    pushed past ``total_bits`` are still listed; they're lost on the wire.

    Raises:
        ValueError: For text layouts, whose field positions depend on values

    Example:
        >>> field_offsets(get_schema("compact-v1"))["target_hp"]
        (8, 7)
    """
    if schema.layout is FrameLayout.TEXT:
        raise ValueError(f"Schema {schema.name}: text layouts have no fixed field offsets")

    offsets: dict[str, tuple[int, int]] = {}
    position = schema.marker_bits
    for spec in schema.fields:
        offsets[spec.name] = (position, spec.bit_width)
        position += spec.bit_width
    return offsets


def cell_of(schema: SchemaVersion, bit_offset: int) -> tuple[int, int]:
    """Grid ``(col, row)`` of the cell carrying a given frame bit.

    Raises:
        ValueError: If the offset is outside the frame
    """
    if not 0 <= bit_offset < schema.total_bits:
        raise ValueError(f"Bit {bit_offset} is outside the {schema.total_bits}-bit frame")
    row, col = divmod(bit_offset // schema.symbol_depth, schema.geometry.cols)
    return col, row
