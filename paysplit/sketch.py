"""DPF keys that carry MAC shares so servers can check a key is well formed."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field, replace
from typing import Any, Generic, TypeVar

from paysplit.bits import string_to_bits
from paysplit.dpf import DPFKey, EvalState
from paysplit.field import FieldElm, Pair
from paysplit.mpc import TRIPLES_PER_LEVEL, TripleShare

__all__ = ["TRIPLES_PER_LEVEL", "SketchOutput", "SketchDPFKey"]

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class SketchOutput(Generic[T]):
    """Random linear sketches of an evaluated vector, plus shared random coefficients."""

    r_x: T
    r2_x: T
    r3_x: T
    r_kx: T
    rand1: T
    rand2: T
    rand3: T

    @classmethod
    def zero(cls, kind: Any) -> SketchOutput:
        zero = kind.zero()
        return cls(zero, zero, zero, zero, zero, zero, zero)

    def add(self, other: SketchOutput[T]) -> SketchOutput[T]:
        """Sum the sketch values; the random coefficients are kept from ``self``."""
        return replace(
            self,
            r_x=self.r_x + other.r_x,
            r2_x=self.r2_x + other.r2_x,
            r3_x=self.r3_x + other.r3_x,
            r_kx=self.r_kx + other.r_kx,
        )


def _sketch(kind: Any, vector: Iterable[Any], rand_stream: Any, cubes: bool) -> SketchOutput:
    rand1 = kind.from_rng(rand_stream)
    rand2 = kind.from_rng(rand_stream)
    rand3 = kind.from_rng(rand_stream)
    r_x = r2_x = r3_x = r_kx = kind.zero()
    for x, kx in vector:
        r = kind.from_rng(rand_stream)
        r2 = r * r
        r_x = r_x + x * r
        r2_x = r2_x + x * r2
        r_kx = r_kx + kx * r
        if cubes:
            r3_x = r3_x + x * (r2 * r)
    return SketchOutput(r_x, r2_x, r3_x, r_kx, rand1, rand2, rand3)


@dataclass(frozen=True)
class SketchDPFKey(Generic[T, U]):
    """One server's DPF key over values ``(x, k.x)`` with shares of ``k``, ``k^2`` and the payload.

    The payload is the value at the last level that carries a word.
    """

    mac_key: T
    mac_key2: T
    val_share: T
    val2_share: T
    key: DPFKey
    triples: tuple[TripleShare[T], ...]
    last_kind: Any = field(default=None, repr=False, compare=False)

    @classmethod
    def gen(
        cls, alpha_bits: Sequence[bool], values: Sequence[T], value_last: U
    ) -> tuple[SketchDPFKey[T, U], SketchDPFKey[T, U]]:
        """Build both servers' keys for the path ``alpha_bits``."""
        if len(alpha_bits) < 2:
            raise ValueError("path must have at least two bits")
        levels = len(alpha_bits) - 1
        if len(values) < levels:
            raise ValueError(f"expected at least {levels} values, got {len(values)}")
        kind = type(values[0])
        last_kind = type(value_last)

        mac_key = kind.random()
        mac_key_shares = mac_key.share()
        mac_key2_shares = (mac_key * mac_key).share()

        # The last level is authenticated under a separate key.
        mac_key_last = last_kind.random()

        payload = values[levels - 1]
        val_shares = payload.share()
        val2_shares = (payload * payload).share()

        with_mac = [Pair(value, value * mac_key) for value in values[:levels]]
        last_with_mac = Pair(value_last, value_last * mac_key_last)
        dpf_keys = DPFKey.gen(alpha_bits, with_mac, last_with_mac)

        dealt = [TripleShare.new(kind) for _ in range(TRIPLES_PER_LEVEL)]
        return tuple(
            cls(
                mac_key=mac_key_shares[idx],
                mac_key2=mac_key2_shares[idx],
                val_share=val_shares[idx],
                val2_share=val2_shares[idx],
                key=dpf_keys[idx],
                triples=tuple(triple[idx] for triple in dealt),
                last_kind=last_kind,
            )
            for idx in (0, 1)
        )

    @classmethod
    def gen_from_str(cls, s: str) -> tuple[SketchDPFKey, SketchDPFKey]:
        """Build keys for the bits of ``s`` with the value one at every level."""
        bits = string_to_bits(s)
        if not bits:
            raise ValueError("string must not be empty")
        return cls.gen(bits, [FieldElm.one()] * (len(bits) - 1), FieldElm.one())

    def sketch_at(self, vector: Iterable[Any], rand_stream: Any) -> SketchOutput[T]:
        """Sketch a vector of ``(x, k.x)`` pairs with coefficients drawn from ``rand_stream``."""
        return _sketch(type(self.mac_key), vector, rand_stream, cubes=True)

    def sketch_at_last(self, vector: Iterable[Any], rand_stream: Any) -> SketchOutput[U]:
        """Sketch last-level pairs; ``r3_x`` is left at zero."""
        kind = self.last_kind if self.last_kind is not None else type(self.mac_key)
        return _sketch(kind, vector, rand_stream, cubes=False)

    def eval(self, idx: Sequence[bool]) -> U:
        """The MAC component of the last word along ``idx``."""
        return self.key.eval(idx)[1].second

    def eval_bit(self, state: EvalState, direction: bool) -> tuple[EvalState, T, T]:
        new_state, word = self.key.eval_bit(state, direction)
        return new_state, word.first, word.second

    def eval_bit_last(self, state: EvalState, direction: bool) -> tuple[EvalState, U, U]:
        new_state, word = self.key.eval_bit_last(state, direction)
        return new_state, word.first, word.second

    def eval_init(self) -> EvalState:
        return self.key.eval_init()