"""Render state shared between the encode loop and the screen capturer.

The visible grid is published as one immutable snapshot. A new frame is built
off-screen and swapped in with a single reference assignment, so a reader
never sees cells from two different frames.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from ..codec.schema import Color, GridGeometry
from ..codec.symbols import BLACK


@dataclass(frozen=True)
class GridSnapshot:
    """One published grid.

    Attributes:
        cells: One color per cell, row-major from the top-left
        frame_number: Count of frames published so far (0 = initial blank grid)
        debug_text: Human-readable mirror of the payload, if enabled
    """

    cells: tuple[Color, ...]
    frame_number: int = 0
    debug_text: Optional[str] = None


class RenderState:
    """The grid's current per-cell colors.

    Example:
        >>> state = RenderState(GridGeometry(cols=2, rows=1))
        >>> state.swap([(255, 255, 255), (0, 0, 0)])
        >>> state.snapshot().frame_number
        1
    """

    def __init__(self, geometry: GridGeometry, background: Color = BLACK) -> None:
        """Initialize an all-background grid.

        Args:
            geometry: Grid dimensions
            background: Color of every cell before the first frame
        """
        self.geometry = geometry
        self._published = GridSnapshot(cells=(background,) * geometry.cells)

    def snapshot(self) -> GridSnapshot:
        """Return the currently published grid."""
        return self._published

    @property
    def cells(self) -> tuple[Color, ...]:
        return self._published.cells

    @property
    def frame_number(self) -> int:
        return self._published.frame_number

    @property
    def debug_text(self) -> Optional[str]:
        return self._published.debug_text

    def swap(self, colors: Sequence[Color], debug_text: Optional[str] = None) -> None:
        """Publish a complete frame.

        Args:
            colors: Off-screen buffer holding exactly one color per cell
            debug_text: Optional payload mirror to publish with the frame

        Raises:
            ValueError: If the buffer doesn't cover the whole grid
        """
        buffer = tuple(tuple(color) for color in colors)
        if len(buffer) != self.geometry.cells:
            raise ValueError(
                f"Frame buffer has {len(buffer)} cells, grid needs {self.geometry.cells}"
            )
        self._published = GridSnapshot(
            cells=buffer,  # type: ignore[arg-type]
            frame_number=self._published.frame_number + 1,
            debug_text=debug_text,
        )

    def cell(self, col: int, row: int) -> Color:
        """Color of one cell in the published grid."""
        return self._published.cells[row * self.geometry.cols + col]

    def rows(self) -> list[tuple[Color, ...]]:
        """Published grid split into rows."""
        cells = self._published.cells
        cols = self.geometry.cols
        return [cells[i : i + cols] for i in range(0, len(cells), cols)]
