"""Bit-level packing and unpacking utilities.

This module provides the low-level bit manipulation shared by the assembler,
the symbol mapper and the reference decoder. Bits are kept as plain lists of
0s and 1s; all integers are written most-significant-bit first.
"""

from __future__ import annotations

from typing import Iterable, Sequence


class BitPacker:
    """Packs values bit-by-bit into a bit buffer.

    Example:
        >>> packer = BitPacker()
        >>> packer.write_bool(True)
        >>> packer.write_uint(63, num_bits=7)
        >>> packer.bits()
        [1, 0, 1, 1, 1, 1, 1, 1]
    """

    def __init__(self) -> None:
        """Initialize an empty bit packer."""
        self._bits: list[int] = []  # List of 0s and 1s

    def write_bool(self, value: bool) -> None:
        """Write a boolean as a single bit.

        Args:
            value: Boolean value to write (True=1, False=0)
        """
        self._bits.append(1 if value else 0)

    def write_uint(self, value: int, num_bits: int) -> None:
        """Write an unsigned integer using the specified number of bits.

        Callers are expected to clamp first; the field encoder always does.

        Args:
            value: Unsigned integer value to write (must be >= 0)
            num_bits: Number of bits to use for encoding (1-64)

        Raises:
            ValueError: If value is negative or doesn't fit in num_bits
        """
        if value < 0:
            raise ValueError(f"write_uint requires non-negative value, got {value}")
        if num_bits < 1 or num_bits > 64:
            raise ValueError(f"num_bits must be 1-64, got {num_bits}")

        max_value = (1 << num_bits) - 1
        if value > max_value:
            raise ValueError(f"Value {value} requires more than {num_bits} bits (max: {max_value})")

        for i in range(num_bits - 1, -1, -1):
            self._bits.append((value >> i) & 1)

    def write_bytes(self, data: bytes) -> None:
        """Write raw bytes, eight bits per byte.

        Args:
            data: Bytes to write
        """
        for byte in data:
            self.write_uint(byte, 8)

    def write_bits(self, bits: Iterable[int]) -> None:
        """Append already-packed bits.

        Args:
            bits: Iterable of 0/1 values
        """
        for bit in bits:
            self._bits.append(1 if bit else 0)

    def bit_length(self) -> int:
        """Return the current number of bits written."""
        return len(self._bits)

    def bits(self) -> list[int]:
        """Return a copy of the bit buffer."""
        return list(self._bits)

    def fit(self, total_bits: int) -> tuple[int, ...]:
        """Return the buffer resized to exactly ``total_bits``.

        Short buffers are right-padded with zero bits. Long buffers lose their
        tail.

        Args:
            total_bits: Required length in bits

        Returns:
            Tuple of exactly ``total_bits`` bits
        """
        if len(self._bits) >= total_bits:
            return tuple(self._bits[:total_bits])
        return tuple(self._bits) + (0,) * (total_bits - len(self._bits))

    def to_bytes(self) -> bytes:
        """Convert the bit buffer to bytes.

        If the number of bits is not a multiple of 8, the last byte
        is padded with zeros on the right (LSB side).

        Returns:
            Packed bytes
        """
        return bits_to_bytes(self._bits)


class BitUnpacker:
    """Unpacks values bit-by-bit from a bit sequence.

    Example:
        >>> unpacker = BitUnpacker([1, 0, 1, 1, 1, 1, 1, 1])
        >>> unpacker.read_bool()
        True
        >>> unpacker.read_uint(7)
        63
    """

    def __init__(self, bits: Sequence[int]) -> None:
        """Initialize a bit unpacker.

        Args:
            bits: Sequence of 0/1 values to read from
        """
        self._bits = [1 if bit else 0 for bit in bits]
        self._position = 0

    @classmethod
    def from_bytes(cls, data: bytes) -> BitUnpacker:
        """Create an unpacker over the bits of ``data`` (MSB first)."""
        return cls(bytes_to_bits(data))

    def read_bool(self) -> bool:
        """Read a single bit as a boolean.

        Raises:
            IndexError: If no more bits are available
        """
        if self._position >= len(self._bits):
            raise IndexError("Attempted to read past end of bit buffer")

        value = self._bits[self._position] == 1
        self._position += 1
        return value

    def read_uint(self, num_bits: int) -> int:
        """Read an unsigned integer of the specified bit width.

        Args:
            num_bits: Number of bits to read (1-64)

        Returns:
            Unsigned integer value

        Raises:
            ValueError: If num_bits is out of range
            IndexError: If not enough bits are available
        """
        if num_bits < 1 or num_bits > 64:
            raise ValueError(f"num_bits must be 1-64, got {num_bits}")

        if self._position + num_bits > len(self._bits):
            raise IndexError(
                f"Not enough bits: need {num_bits}, have {len(self._bits) - self._position}"
            )

        value = 0
        for _ in range(num_bits):
            value = (value << 1) | self._bits[self._position]
            self._position += 1

        return value

    def read_bytes(self, num_bytes: int) -> bytes:
        """Read raw bytes.

        Raises:
            IndexError: If not enough bits are available
        """
        return bytes(self.read_uint(8) for _ in range(num_bytes))

    def bits_remaining(self) -> int:
        """Return the number of unread bits."""
        return len(self._bits) - self._position

    def position(self) -> int:
        """Return the current read position in bits."""
        return self._position


def bytes_to_bits(data: bytes) -> list[int]:
    """Expand bytes into an MSB-first bit list."""
    bits: list[int] = []
    for byte in data:
        for i in range(7, -1, -1):
            bits.append((byte >> i) & 1)
    return bits


def bits_to_bytes(bits: Sequence[int]) -> bytes:
    """Pack an MSB-first bit sequence into bytes, zero-filling the last byte."""
    if not bits:
        return b""

    padded = list(bits) + [0] * ((-len(bits)) % 8)
    result = bytearray()
    for i in range(0, len(padded), 8):
        byte = 0
        for j in range(8):
            byte = (byte << 1) | (1 if padded[i + j] else 0)
        result.append(byte)
    return bytes(result)
