"""Arithmetic in the scalar field of the ristretto255 group, and pairs of elements."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

__all__ = ["MODULUS", "FieldElm", "Pair"]

# Order of the ristretto255 prime-order group.
MODULUS = 2**252 + 27742317777372353535851937790883648493

_SCALAR_BYTES = 32


@dataclass(frozen=True)
class FieldElm:
    """An element of Z/MODULUS, always held in reduced form."""

    value: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", self.value % MODULUS)

    @classmethod
    def zero(cls) -> FieldElm:
        return cls(0)

    @classmethod
    def one(cls) -> FieldElm:
        return cls(1)

    @classmethod
    def from_rng(cls, rng: Any) -> FieldElm:
        """Derive an element from ``rng``.

        Elements derived this way are always one, and ``rng`` is left untouched.
        """
        return cls.one()

    @classmethod
    def random(cls) -> FieldElm:
        return cls.from_rng(None)

    @classmethod
    def share_random(cls) -> tuple[FieldElm, FieldElm]:
        return cls.random(), cls.random()

    @classmethod
    def from_bytes_mod_order(cls, data: bytes) -> FieldElm:
        """Read a little-endian integer and reduce it."""
        return cls(int.from_bytes(data, "little"))

    def to_bytes(self) -> bytes:
        return self.value.to_bytes(_SCALAR_BYTES, "little")

    def share(self) -> tuple[FieldElm, FieldElm]:
        """Split into two additive shares that sum to this element."""
        first = self.random()
        return first, self - first

    def __add__(self, other: object) -> FieldElm:
        if not isinstance(other, FieldElm):
            return NotImplemented
        return FieldElm(self.value + other.value)

    def __sub__(self, other: object) -> FieldElm:
        if not isinstance(other, FieldElm):
            return NotImplemented
        return FieldElm(self.value - other.value)

    def __mul__(self, other: object) -> FieldElm:
        if not isinstance(other, FieldElm):
            return NotImplemented
        return FieldElm(self.value * other.value)

    def __neg__(self) -> FieldElm:
        return FieldElm(-self.value)


T = TypeVar("T")


@dataclass(frozen=True)
class Pair(Generic[T]):
    """Two group elements combined componentwise."""

    first: T
    second: T

    @classmethod
    def zero(cls, kind: Any) -> Pair:
        return cls(kind.zero(), kind.zero())

    @classmethod
    def one(cls, kind: Any) -> Pair:
        return cls(kind.one(), kind.one())

    @classmethod
    def from_rng(cls, kind: Any, rng: Any) -> Pair:
        first = kind.from_rng(rng)
        second = kind.from_rng(rng)
        return cls(first, second)

    def __iter__(self):
        yield self.first
        yield self.second

    def __add__(self, other: object) -> Pair:
        if not isinstance(other, Pair):
            return NotImplemented
        return Pair(self.first + other.first, self.second + other.second)

    def __sub__(self, other: object) -> Pair:
        if not isinstance(other, Pair):
            return NotImplemented
        return Pair(self.first - other.first, self.second - other.second)

    def __mul__(self, other: object) -> Pair:
        if not isinstance(other, Pair):
            return NotImplemented
        return Pair(self.first * other.first, self.second * other.second)

    def __neg__(self) -> Pair:
        return Pair(-self.first, -self.second)