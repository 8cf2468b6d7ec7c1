"""Grid rendering for lightbox.

RenderState publishes whole frames atomically; renderers turn published
snapshots into something a screen capture can see.
"""

from __future__ import annotations

from .driver import GridRenderer
from .image import CellLayout, ImageRenderer, read_grid_colors, render_image
from .state import GridSnapshot, RenderState

__all__ = [
    "GridRenderer",
    "CellLayout",
    "ImageRenderer",
    "read_grid_colors",
    "render_image",
    "GridSnapshot",
    "RenderState",
]
