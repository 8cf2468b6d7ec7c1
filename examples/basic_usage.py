#!/usr/bin/env python3
"""Basic usage example for lightbox.

This example demonstrates:
1. Picking a shipped schema generation
2. Driving the fixed-rate scheduler from a host update loop
3. Rendering the grid to a PNG
4. Capturing and decoding the PNG like an external reader
"""

from __future__ import annotations

import math

from PIL import Image

from lightbox import (
    FeedConfig,
    FrameDecoder,
    FrameScheduler,
    ImageRenderer,
    Ratio,
    StaticSampleProvider,
    field_sizes,
    get_schema,
)
from lightbox.render.image import read_grid_colors


def main() -> None:
    """Run the basic usage example."""
    print("=" * 60)
    print("lightbox Basic Usage Example")
    print("=" * 60)
    print()

    config = FeedConfig(schema_name="tactical-v3", cell_size=8, show_debug=True)
    schema = get_schema(config.schema_name)

    print(f"1. Schema {schema.name} (id {schema.id})...")
    for field_name, bits in field_sizes(schema).items():
        print(f"   {field_name}: {bits} bits")
    print(f"   Frame: {schema.total_bits} bits on {schema.geometry.cells} cells")
    print()

    print("2. Running the scheduler at 60 fps for half a second...")
    provider = StaticSampleProvider(
        {
            "player_hp": Ratio(3120, 4800),
            "target_hp": Ratio(900, 1000),
            "player_resource": Ratio(45, 100),
            "target_distance": 8,
            "in_combat": True,
            "has_target": True,
            "player_level": 27,
            "target_level": 28,
            "facing": math.pi * 0.6,
            "player_class": "ROGUE",
            "target_class": "PRIEST",
            "in_stealth": False,
            "target_classification": "ELITE",
        }
    )
    renderer = ImageRenderer(schema.geometry, config.cell_layout())
    scheduler = FrameScheduler(provider, schema, config, renderers=[renderer])
    for _ in range(30):
        scheduler.tick(1 / 60)
    print(f"   Frames emitted: {scheduler.frames_emitted}")
    print(f"   Debug mirror: {scheduler.render_state.debug_text}")
    print()

    print("3. Saving the grid...")
    renderer.save("lightbox_frame.png")
    print("   Written to lightbox_frame.png")
    print()

    print("4. Decoding the capture...")
    with Image.open("lightbox_frame.png") as img:
        colors = read_grid_colors(img, schema.geometry, config.cell_layout())
    decoded = FrameDecoder(schema).decode_colors(colors)
    for name, value in decoded.values.items():
        print(f"   {name}: {getattr(value, 'name', value)}")
    print()

    print("=" * 60)
    print("Example complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()
