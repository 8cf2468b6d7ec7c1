"""Abstract interface for grid renderers.

The codec's job ends at "render the correct colors for the correct bits". How
those colors reach the screen belongs to the host: an overlay frame, a
compositor layer, or an image written to disk. Renderers implement this
interface and receive whole published snapshots, never individual cells.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from .state import GridSnapshot


class GridRenderer(ABC):
    """Abstract interface for anything that shows the grid.

    Implementations include:

    - **ImageRenderer**: rasterises the grid into a Pillow image
    - Host overlays: draw the snapshot onto the host's UI layer

    Examples:
        ```python
        from lightbox.render import ImageRenderer, RenderState

        state = RenderState(schema.geometry)
        renderer = ImageRenderer(schema.geometry)
        state.swap(colors)
        renderer.present(state.snapshot())
        renderer.image.save("frame.png")
        ```
    """

    @abstractmethod
    def present(self, snapshot: GridSnapshot) -> None:
        """Show a complete grid.

        Called once per published frame, after the RenderState swap.

        Args:
            snapshot: The newly published grid
        """
        pass
