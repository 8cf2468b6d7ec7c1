"""Main CLI entry point for lightbox."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from loguru import logger
from PIL import Image

from .. import __version__
from ..codec.decoder import FrameDecoder
from ..codec.schema import SchemaVersion
from ..config import FeedConfig, load_config
from ..exceptions import DecodeError
from ..render.image import ImageRenderer, read_grid_colors
from ..scheduler import FrameScheduler, StaticSampleProvider
from ..schemas.registry import get_schema
from .analyze import analyze_schema, print_schema_list


def main() -> int:
    """Main entry point for the lightbox CLI.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = argparse.ArgumentParser(
        description="lightbox: pixel-grid state codec",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  lightbox --list-schemas                         List registered schemas
  lightbox --analyze extended-v2                  Show a schema's wire table
  lightbox --encode sample.json --out frame.png   Encode a sample to an image
  lightbox --decode frame.png --schema 2          Decode a captured image
        """,
    )

    parser.add_argument("--list-schemas", action="store_true", help="List registered schemas")
    parser.add_argument("--analyze", metavar="SCHEMA", help="Show field layout of a schema")
    parser.add_argument("--encode", metavar="SAMPLE", help="Encode a JSON sample file")
    parser.add_argument("--decode", metavar="IMAGE", help="Decode a captured grid image")
    parser.add_argument("--schema", metavar="SCHEMA", help="Schema id or name (default: config)")
    parser.add_argument("--config", metavar="FILE", help="JSON settings record")
    parser.add_argument("--out", metavar="FILE", help="Where --encode writes the grid image")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug details")
    parser.add_argument("--version", action="version", version=f"lightbox {__version__}")

    args = parser.parse_args()

    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if args.verbose else "WARNING")
    logger.enable("lightbox")

    if args.list_schemas:
        print_schema_list()
        return 0

    if args.analyze:
        try:
            analyze_schema(get_schema(args.analyze))
        except KeyError as e:
            print(f"Error: {e.args[0]}", file=sys.stderr)
            return 1
        return 0

    if args.encode or args.decode:
        config = load_config(args.config) if args.config else FeedConfig()
        try:
            schema = get_schema(args.schema or config.schema_name)
        except KeyError as e:
            print(f"Error: {e.args[0]}", file=sys.stderr)
            return 1

        if args.encode:
            return _encode(Path(args.encode), schema, config, args.out)
        return _decode(Path(args.decode), schema, config)

    # If no command specified, show help
    parser.print_help()
    return 0


def _encode(
    sample_path: Path, schema: SchemaVersion, config: FeedConfig, out: str | None
) -> int:
    if not sample_path.exists():
        print(f"Error: File not found: {sample_path}", file=sys.stderr)
        return 1
    try:
        sample = json.loads(sample_path.read_text(encoding="utf-8"))
    except ValueError as e:
        print(f"Error: {sample_path} is not valid JSON: {e}", file=sys.stderr)
        return 1
    if not isinstance(sample, dict):
        print(f"Error: {sample_path} must hold a JSON object", file=sys.stderr)
        return 1

    renderer = ImageRenderer(schema.geometry, config.cell_layout())
    scheduler = FrameScheduler(
        StaticSampleProvider(sample), schema, config, renderers=[renderer]
    )
    frame = scheduler.run_cycle()
    if frame is None:
        print("Error: sampling failed", file=sys.stderr)
        return 1

    print(frame.describe())
    print("".join(str(bit) for bit in frame.bits))
    if out:
        renderer.save(out)
        print(f"Grid written to {out}")
    return 0


def _decode(image_path: Path, schema: SchemaVersion, config: FeedConfig) -> int:
    if not image_path.exists():
        print(f"Error: File not found: {image_path}", file=sys.stderr)
        return 1

    try:
        with Image.open(image_path) as img:
            colors = read_grid_colors(img, schema.geometry, config.cell_layout())
        decoded = FrameDecoder(schema).decode_colors(colors)
    except (OSError, ValueError, DecodeError) as e:
        print(f"Error decoding {image_path}: {e}", file=sys.stderr)
        return 1

    print(f"schema {decoded.schema_id}")
    for name, value in decoded.values.items():
        print(f"{name}={getattr(value, 'name', value)}")
    for name in decoded.truncated:
        print(f"{name}=<truncated>")
    return 0


if __name__ == "__main__":
    sys.exit(main())
