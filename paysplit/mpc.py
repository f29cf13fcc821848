"""Two-party multiplication checks with Beaver triples."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

__all__ = ["TRIPLES_PER_LEVEL", "TripleShare", "CorShare", "Cor", "OutShare", "MulState"]

TRIPLES_PER_LEVEL = 7

T = TypeVar("T")


@dataclass(frozen=True)
class TripleShare(Generic[T]):
    """One server's share of a Beaver triple ``c = a * b``."""

    a: T
    b: T
    c: T

    @classmethod
    def new(cls, kind: Any) -> tuple[TripleShare, TripleShare]:
        """Deal a fresh triple of elements of ``kind`` into two shares."""
        a_s0, a_s1 = kind.share_random()
        b_s0, b_s1 = kind.share_random()
        c = (a_s0 + a_s1) * (b_s0 + b_s1)
        c_s0, c_s1 = c.share()
        return cls(a_s0, b_s0, c_s0), cls(a_s1, b_s1, c_s1)


@dataclass(frozen=True)
class CorShare(Generic[T]):
    """One server's masked inputs ``x - a`` and ``y - b``."""

    ds: tuple[T, ...]
    es: tuple[T, ...]


@dataclass(frozen=True)
class Cor(Generic[T]):
    """Masked inputs opened from both servers' shares."""

    ds: tuple[T, ...]
    es: tuple[T, ...]


@dataclass(frozen=True)
class OutShare(Generic[T]):
    share: T


def _require(count: int, what: str) -> None:
    if count < TRIPLES_PER_LEVEL:
        raise ValueError(f"need {TRIPLES_PER_LEVEL} {what}, got {count}")


class MulState(Generic[T]):
    """One server's state for checking that a sum of ``x_i * y_i + z_i`` vanishes."""

    def __init__(
        self,
        server_idx: bool,
        triples: Sequence[TripleShare[T]],
        mac_key: T,
        mac_key2: T,
        val_share: T,
        val2_share: T,
        sketch: Any,
    ) -> None:
        self.server_idx = bool(server_idx)
        self.triples = tuple(triples)
        zero = type(val_share).zero()

        checks = [
            # <r,x> <r^2,x> - beta^2
            (sketch.r_x, sketch.r2_x, -val2_share),
            # k * k - k^2
            (mac_key, mac_key, -mac_key2),
            # k <r,x> - <r,kx>
            (sketch.r_x, mac_key, -sketch.r_kx),
            # beta * beta - beta^2
            (val_share, val_share, -val2_share),
            # z1^2 - z2 w
            (sketch.r_x, sketch.r_x, zero),
            (sketch.r2_x, -val_share, zero),
            # z1 z2 - z3 w
            (sketch.r_x, sketch.r2_x, zero),
            (sketch.r3_x, -val_share, zero),
        ]
        xs, ys, zs = zip(*checks)
        self.xs: tuple[T, ...] = xs
        self.ys: tuple[T, ...] = ys
        self.zs: tuple[T, ...] = zs
        self.rs: tuple[T, ...] = (sketch.rand1, sketch.rand2, sketch.rand3)

    def cor_share(self) -> CorShare[T]:
        """Mask this server's inputs with its triple shares."""
        _require(len(self.triples), "triples")
        rows = list(zip(self.xs, self.ys, self.triples))[:TRIPLES_PER_LEVEL]
        return CorShare(
            ds=tuple(x - triple.a for x, _, triple in rows),
            es=tuple(y - triple.b for _, y, triple in rows),
        )

    @staticmethod
    def cor(share0: CorShare[T], share1: CorShare[T]) -> Cor[T]:
        """Open the masked inputs from both servers' shares."""
        for share in (share0, share1):
            _require(min(len(share.ds), len(share.es)), "masked inputs")
        return Cor(
            ds=tuple(a + b for a, b in zip(share0.ds, share1.ds))[:TRIPLES_PER_LEVEL],
            es=tuple(a + b for a, b in zip(share0.es, share1.es))[:TRIPLES_PER_LEVEL],
        )

    def out_share(self, cor: Cor[T]) -> OutShare[T]:
        """This server's share of the checked sum."""
        _require(len(self.triples), "triples")
        _require(min(len(cor.ds), len(cor.es)), "opened inputs")
        total = type(self.zs[0]).zero()
        rows = zip(cor.ds, cor.es, self.triples, self.zs)
        for d, e, triple, z in list(rows)[:TRIPLES_PER_LEVEL]:
            term = d * triple.b + e * triple.a + triple.c + z
            if self.server_idx:
                term = term + d * e
            total = total + term
        return OutShare(share=total)

    @staticmethod
    def verify(out0: OutShare[T], out1: OutShare[T]) -> bool:
        """True when the two output shares sum to zero."""
        total = out0.share + out1.share
        return total == type(total).zero()