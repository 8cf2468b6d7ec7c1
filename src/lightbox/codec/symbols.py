"""Symbol mapping between bit groups and palette colors.

A frame of ``total_bits`` bits is cut into ``k``-bit symbols (MSB first), one
per grid cell, and symbol ``i`` is drawn as ``palette[i]``. The palette order is
part of the wire contract.
"""

from __future__ import annotations

from typing import Optional, Sequence

from ..exceptions import DecodeError, SchemaError
from .bitpack import BitPacker, BitUnpacker
from .schema import Color, SchemaVersion

BLACK: Color = (0, 0, 0)
WHITE: Color = (255, 255, 255)

PALETTE_2: tuple[Color, ...] = (BLACK, WHITE)
PALETTE_4: tuple[Color, ...] = (BLACK, WHITE, (255, 0, 0), (0, 255, 0))
# Index bits are R, G, B: 0b100 is red, 0b001 is blue.
PALETTE_8: tuple[Color, ...] = tuple(
    (255 if i & 4 else 0, 255 if i & 2 else 0, 255 if i & 1 else 0) for i in range(8)
)

DEFAULT_PALETTES: dict[int, tuple[Color, ...]] = {
    1: PALETTE_2,
    2: PALETTE_4,
    3: PALETTE_8,
}


def palette_for(schema: SchemaVersion) -> tuple[Color, ...]:
    """Return the schema's own palette or the default for its symbol depth.

    Raises:
        SchemaError: If the schema has no palette and no default exists
    """
    if schema.palette is not None:
        return schema.palette
    try:
        return DEFAULT_PALETTES[schema.symbol_depth]
    except KeyError as err:
        raise SchemaError(
            f"Schema {schema.name}: no default palette for {schema.symbol_depth}-bit symbols, "
            f"declare one explicitly"
        ) from err


class SymbolMapper:
    """Maps bits to cell colors and back.

    Example:
        >>> mapper = SymbolMapper(symbol_depth=3, palette=PALETTE_8)
        >>> mapper.to_colors([1, 0, 0, 0, 0, 1])
        [(255, 0, 0), (0, 0, 255)]
        >>> mapper.to_bits([(255, 0, 0), (0, 0, 255)])
        [1, 0, 0, 0, 0, 1]
    """

    def __init__(self, symbol_depth: int, palette: Optional[Sequence[Color]] = None) -> None:
        """Initialize the mapper.

        Args:
            symbol_depth: Bits per cell (k)
            palette: Exactly ``2**k`` distinct colors; defaults by depth

        Raises:
            SchemaError: If the palette size or contents don't fit ``k``
        """
        if symbol_depth < 1:
            raise SchemaError(f"symbol_depth must be >= 1, got {symbol_depth}")
        if palette is None:
            if symbol_depth not in DEFAULT_PALETTES:
                raise SchemaError(f"No default palette for {symbol_depth}-bit symbols")
            palette = DEFAULT_PALETTES[symbol_depth]

        colors = tuple(tuple(color) for color in palette)
        if len(colors) != 1 << symbol_depth:
            raise SchemaError(
                f"Palette needs {1 << symbol_depth} colors for {symbol_depth}-bit symbols, "
                f"got {len(colors)}"
            )
        if len(set(colors)) != len(colors):
            raise SchemaError("Palette colors must be distinct")

        self.symbol_depth = symbol_depth
        self.palette: tuple[Color, ...] = colors  # type: ignore[assignment]
        self._index = {color: i for i, color in enumerate(self.palette)}

    @classmethod
    def for_schema(cls, schema: SchemaVersion) -> SymbolMapper:
        return cls(schema.symbol_depth, palette_for(schema))

    def to_symbols(self, bits: Sequence[int]) -> list[int]:
        """Group bits into k-bit symbols, MSB first.

        A trailing partial group is zero-filled on the right.
        """
        padded = list(bits) + [0] * ((-len(bits)) % self.symbol_depth)
        unpacker = BitUnpacker(padded)
        return [unpacker.read_uint(self.symbol_depth) for _ in range(len(padded) // self.symbol_depth)]

    def from_symbols(self, symbols: Sequence[int]) -> list[int]:
        """Expand symbols back into bits.

        Raises:
            DecodeError: If a symbol is outside ``[0, 2**k - 1]``
        """
        packer = BitPacker()
        for symbol in symbols:
            try:
                packer.write_uint(symbol, self.symbol_depth)
            except ValueError as err:
                raise DecodeError(f"Invalid symbol {symbol}: {err}") from err
        return packer.bits()

    def color_of(self, symbol: int) -> Color:
        """Palette color for a symbol index."""
        return self.palette[symbol]

    def symbol_of(self, color: Sequence[int]) -> int:
        """Palette index of an observed color, matched exactly.

        Raises:
            DecodeError: If the color isn't in the palette
        """
        key = tuple(int(channel) for channel in color[:3])
        try:
            return self._index[key]  # type: ignore[index]
        except KeyError as err:
            raise DecodeError(f"Color {key} is not in the palette") from err

    def to_colors(self, bits: Sequence[int]) -> list[Color]:
        """Map a bit sequence to one color per k-bit symbol."""
        return [self.palette[symbol] for symbol in self.to_symbols(bits)]

    def to_bits(self, colors: Sequence[Sequence[int]]) -> list[int]:
        """Inverse of :meth:`to_colors` under exact color matching.

        Raises:
            DecodeError: If any color isn't in the palette
        """
        return self.from_symbols([self.symbol_of(color) for color in colors])
