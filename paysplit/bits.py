"""Conversions between integers, strings and little-endian bit lists."""

from __future__ import annotations

from collections.abc import Sequence

__all__ = ["u32_to_bits", "my_u32_to_bits", "string_to_bits", "bits_to_string"]

_MAX_BITS = 32


def _check_width(nbits: int) -> None:
    if not 0 <= nbits <= _MAX_BITS:
        raise ValueError(f"bit width must be between 0 and {_MAX_BITS}, got {nbits}")


def u32_to_bits(nbits: int, value: int) -> list[bool]:
    """Return the lowest ``nbits`` bits of ``value``, least significant first."""
    _check_width(nbits)
    return [bool(value & (1 << i)) for i in range(nbits)]


def my_u32_to_bits(nbits: int, value: int) -> list[bool]:
    """Return bits ``nbits-2 .. 0`` of ``value``, most significant first, then a trailing False."""
    _check_width(nbits)
    if nbits == 0:
        raise ValueError("bit width must be at least 1")
    low_first = u32_to_bits(nbits, value)
    return [*reversed(low_first[: nbits - 1]), False]


def string_to_bits(s: str) -> list[bool]:
    """Return the UTF-8 bytes of ``s`` as bits, each byte least significant bit first."""
    return [bit for byte in s.encode("utf-8") for bit in u32_to_bits(8, byte)]


def _bits_to_byte(bits: Sequence[bool]) -> int:
    return sum(1 << i for i, bit in enumerate(bits) if bit)


def bits_to_string(bits: Sequence[bool]) -> str:
    """Inverse of :func:`string_to_bits` for text whose bytes each decode on their own."""
    if len(bits) % 8:
        raise ValueError(f"bit count must be a multiple of 8, got {len(bits)}")
    return "".join(
        bytes([_bits_to_byte(bits[start : start + 8])]).decode("utf-8")
        for start in range(0, len(bits), 8)
    )