"""Raster rendering and sampling of the cell grid.

Cell size, gaps and anchor offset affect only capture ergonomics, not data.
Gaps and the margin left by the offset are filled with the background color.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from PIL import Image, ImageDraw

from ..codec.schema import Color, GridGeometry
from ..codec.symbols import BLACK
from .driver import GridRenderer
from .state import GridSnapshot


@dataclass(frozen=True)
class CellLayout:
    """Pixel placement of the grid, anchored at the top-left.

    Attributes:
        cell_size: Edge length of each square cell in pixels
        gap_x: Horizontal gap between cells in pixels
        gap_y: Vertical gap between cells in pixels
        offset_x: Distance from the left edge to the first cell
        offset_y: Distance from the top edge to the first cell
    """

    cell_size: int = 5
    gap_x: int = 0
    gap_y: int = 0
    offset_x: int = 0
    offset_y: int = 0

    def __post_init__(self) -> None:
        if self.cell_size < 1:
            raise ValueError(f"cell_size must be >= 1, got {self.cell_size}")
        for name in ("gap_x", "gap_y", "offset_x", "offset_y"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0, got {getattr(self, name)}")

    def canvas_size(self, geometry: GridGeometry) -> tuple[int, int]:
        """Image size needed to hold the grid and its offset."""
        width = self.offset_x + geometry.cols * self.cell_size + (geometry.cols - 1) * self.gap_x
        height = self.offset_y + geometry.rows * self.cell_size + (geometry.rows - 1) * self.gap_y
        return width, height

    def cell_box(self, col: int, row: int) -> tuple[int, int, int, int]:
        """Inclusive pixel box ``(x0, y0, x1, y1)`` of one cell."""
        x0 = self.offset_x + col * (self.cell_size + self.gap_x)
        y0 = self.offset_y + row * (self.cell_size + self.gap_y)
        return x0, y0, x0 + self.cell_size - 1, y0 + self.cell_size - 1

    def cell_center(self, col: int, row: int) -> tuple[int, int]:
        x0, y0, _, _ = self.cell_box(col, row)
        return x0 + self.cell_size // 2, y0 + self.cell_size // 2


def render_image(
    cells: Sequence[Color],
    geometry: GridGeometry,
    layout: Optional[CellLayout] = None,
    background: Color = BLACK,
) -> Image.Image:
    """Rasterise one color per cell into an RGB image.

    Raises:
        ValueError: If ``cells`` doesn't cover the grid
    """
    if len(cells) != geometry.cells:
        raise ValueError(f"Got {len(cells)} cells, grid needs {geometry.cells}")
    layout = layout or CellLayout()

    img = Image.new("RGB", layout.canvas_size(geometry), background)
    draw = ImageDraw.Draw(img)
    for index, color in enumerate(cells):
        row, col = divmod(index, geometry.cols)
        draw.rectangle(layout.cell_box(col, row), fill=tuple(color))
    return img


def read_grid_colors(
    img: Image.Image,
    geometry: GridGeometry,
    layout: Optional[CellLayout] = None,
) -> list[Color]:
    """Sample the center pixel of every cell, row-major from the top-left.

    The sampled colors are returned as-is; matching them to the palette is
    the decoder's job.

    Raises:
        ValueError: If the image is too small for the grid
    """
    layout = layout or CellLayout()
    width, height = layout.canvas_size(geometry)
    if img.width < width or img.height < height:
        raise ValueError(
            f"Image is {img.width}x{img.height}, grid needs at least {width}x{height}"
        )

    rgb = img.convert("RGB")
    colors: list[Color] = []
    for row in range(geometry.rows):
        for col in range(geometry.cols):
            r, g, b = rgb.getpixel(layout.cell_center(col, row))
            colors.append((r, g, b))
    return colors


class ImageRenderer(GridRenderer):
    """Renders each presented snapshot into a Pillow image.

    Attributes:
        image: Image of the last presented snapshot, or None before the first
    """

    def __init__(
        self,
        geometry: GridGeometry,
        layout: Optional[CellLayout] = None,
        background: Color = BLACK,
    ) -> None:
        self.geometry = geometry
        self.layout = layout or CellLayout()
        self.background = background
        self.image: Optional[Image.Image] = None

    def present(self, snapshot: GridSnapshot) -> None:
        self.image = render_image(snapshot.cells, self.geometry, self.layout, self.background)

    def save(self, path: str) -> None:
        """Write the last rendered image.

        Raises:
            RuntimeError: If nothing has been presented yet
        """
        if self.image is None:
            raise RuntimeError("No frame has been presented yet")
        self.image.save(path)
