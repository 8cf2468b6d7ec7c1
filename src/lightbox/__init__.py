"""lightbox: Pixel-Grid State Codec

A Python library that samples live application state at a fixed rate and
encodes it into a versioned bitstream drawn as a grid of colored cells, so an
observer with nothing but a screen capture can reconstruct the state.

Key Features:
- Closed, versioned schema tables (pydantic models)
- Saturating field encoding that never fails on bad samples
- Fixed-length frames with sync bit or version discriminator
- 1, 2 or 3 bits per cell over black/white, 4- and 8-color palettes
- Drift-free fixed-rate scheduling with atomic grid swaps

Quick Start:
    >>> from lightbox import FrameAssembler, FrameDecoder, Ratio, get_schema
    >>>
    >>> schema = get_schema("compact-v1")
    >>> frame = FrameAssembler(schema).assemble(
    ...     {"player_hp": Ratio(50, 100), "in_combat": True, "player_level": 17}
    ... )
    >>> frame.bit_length()
    40
    >>> FrameDecoder(schema).decode_frame(frame)["player_hp"]
    63

Logging goes through loguru and is disabled for the ``lightbox`` namespace
until the host calls ``logger.enable("lightbox")``.
"""

from __future__ import annotations

from loguru import logger

from .codec import (
    ClampPolicy,
    DecodedFrame,
    EncodingRule,
    FieldEncoder,
    FieldSpec,
    Frame,
    FrameAssembler,
    FrameDecoder,
    FrameLayout,
    GridGeometry,
    MarkerStrategy,
    Ratio,
    SchemaVersion,
    SymbolMapper,
    palette_for,
)
from .config import FeedConfig, FrameRate, load_config, save_config
from .exceptions import ConfigError, DecodeError, LightboxError, SchemaError
from .render import CellLayout, GridRenderer, GridSnapshot, ImageRenderer, RenderState
from .scheduler import FrameScheduler, SampleProvider, StaticSampleProvider
from .schemas import (
    BUILTIN_SCHEMAS,
    decode_by_version,
    get_schema,
    list_schemas,
    register_schema,
)
from .utils import even_parity, field_offsets, field_sizes

__version__ = "0.1.0"

logger.disable("lightbox")

__all__ = [
    # Schemas
    "FieldSpec",
    "SchemaVersion",
    "GridGeometry",
    "EncodingRule",
    "ClampPolicy",
    "MarkerStrategy",
    "FrameLayout",
    "BUILTIN_SCHEMAS",
    "register_schema",
    "get_schema",
    "list_schemas",
    # Codec
    "FieldEncoder",
    "Ratio",
    "Frame",
    "FrameAssembler",
    "SymbolMapper",
    "palette_for",
    "DecodedFrame",
    "FrameDecoder",
    "decode_by_version",
    # Scheduling and rendering
    "FrameRate",
    "FeedConfig",
    "load_config",
    "save_config",
    "SampleProvider",
    "StaticSampleProvider",
    "FrameScheduler",
    "RenderState",
    "GridSnapshot",
    "GridRenderer",
    "CellLayout",
    "ImageRenderer",
    # Exceptions
    "LightboxError",
    "SchemaError",
    "DecodeError",
    "ConfigError",
    # Utilities
    "even_parity",
    "field_offsets",
    "field_sizes",
    # Version
    "__version__",
]
