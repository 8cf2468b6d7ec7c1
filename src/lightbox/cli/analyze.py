"""Schema analysis CLI command."""

from __future__ import annotations

from ..codec.schema import EncodingRule, FrameLayout, SchemaVersion
from ..codec.symbols import palette_for
from ..schemas.registry import list_schemas
from ..utils.sizing import encoded_bits, field_offsets


def print_schema_list() -> None:
    """Print one line per registered schema."""
    print("|" * 7, "lightbox: pixel-grid state codec", "|" * 7)
    for schema in list_schemas():
        info = schema.summary()
        print(
            f"{info['id']:>3}  {info['name']:<14} {info['marker']:<14} {info['layout']:<5} "
            f"{info['grid']:>6} k={info['symbol_depth']}  {info['total_bits']} bits"
        )


def analyze_schema(schema: SchemaVersion) -> None:
    """Print the full wire table of one schema.

    Args:
        schema: Schema version to describe
    """
    print(f"{'=' * 19} {schema.id}: {schema.name} {'=' * 19}")
    if schema.description:
        print(schema.description)

    used = encoded_bits(schema)
    print(
        f"Frame: {schema.total_bits} bits on a {schema.geometry.cols}x{schema.geometry.rows} "
        f"grid, {schema.symbol_depth} bit(s) per cell"
    )
    print(f"        marker ({schema.marker.value}){'.' * 20}{schema.marker_bits}")
    if schema.layout is FrameLayout.TEXT:
        print(f"        text bytes{'.' * 32}{schema.text_length}")
    else:
        print(f"        payload{'.' * 35}{schema.payload_bits}")
        if schema.slack_bits >= 0:
            print(f"        padding{'.' * 35}{schema.slack_bits}")
        else:
            print(f"        truncated{'.' * 33}{used - schema.total_bits}")
    print()

    print(f"{'-' * 27} Fields {'-' * 27}")
    offsets = {} if schema.layout is FrameLayout.TEXT else field_offsets(schema)
    for i, spec in enumerate(schema.fields, 1):
        field_desc = f"{i}. {spec.name}"
        position = f"@{offsets[spec.name][0]}" if spec.name in offsets else ""
        dots = "." * max(1, 40 - len(field_desc) - len(position))
        print(f"        {field_desc}{dots}{position} {spec.bit_width} bits {spec.rule.value}")
        if spec.rule is EncodingRule.CATEGORICAL and spec.categories:
            table = ", ".join(f"{label}={index}" for label, index in spec.categories.items())
            print(f"            {table}")
    if schema.parity:
        print(f"        parity{'.' * 36}1 bit even")
    print()

    print(f"{'=' * 24} Palette {'=' * 24}")
    for index, color in enumerate(palette_for(schema)):
        print(f"        {index:>2}: #{color[0]:02x}{color[1]:02x}{color[2]:02x}")
    print()
