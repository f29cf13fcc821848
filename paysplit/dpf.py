"""All-prefix distributed point functions over a binary tree of PRG seeds."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from functools import partial
from typing import Any, Generic, TypeVar

from paysplit.bits import string_to_bits
from paysplit.field import Pair
from paysplit.prg import PrgSeed

__all__ = ["DPF_DOMAIN", "SETTLE_DOMAIN", "CorWord", "EvalState", "DPFKey"]

# Depths of the full-domain evaluations: words are emitted at level DOMAIN - 2.
DPF_DOMAIN = 10
SETTLE_DOMAIN = 8

T = TypeVar("T")
U = TypeVar("U")
W = TypeVar("W")


@dataclass(frozen=True)
class CorWord(Generic[W]):
    """Correction word for one level of the tree."""

    seed: PrgSeed
    bits: tuple[bool, bool]
    word: W | None = None


@dataclass(frozen=True)
class EvalState:
    """Position reached while walking down the tree."""

    level: int
    seed: PrgSeed
    bit: bool


def _word_maker(sample: Any) -> Callable[[Any], Any]:
    """Return a function that derives a word of the same kind as ``sample`` from a stream."""
    if isinstance(sample, Pair):
        return partial(Pair.from_rng, type(sample.first))
    return type(sample).from_rng


def _gen_cor_word(
    bit: bool,
    value: W,
    bits: tuple[bool, bool],
    seeds: tuple[PrgSeed, PrgSeed],
    need_word: bool,
    make_word: Callable[[Any], W],
) -> tuple[CorWord[W], tuple[bool, bool], tuple[PrgSeed, PrgSeed]]:
    data = tuple(seed.expand() for seed in seeds)
    keep = bit
    lose = not keep

    # The level's value is carried in the correction word as it is.
    cor_word = CorWord(
        seed=data[0].seeds[lose] ^ data[1].seeds[lose],
        bits=(
            data[0].bits[0] ^ data[1].bits[0] ^ bit ^ True,
            data[0].bits[1] ^ data[1].bits[1] ^ bit,
        ),
        word=value if need_word else None,
    )

    new_seeds = []
    new_bits = []
    for expanded, control in zip(data, bits):
        seed = expanded.seeds[keep]
        new_bit = expanded.bits[keep]
        if control:
            seed = seed ^ cor_word.seed
            new_bit ^= cor_word.bits[keep]
        new_seeds.append(seed.convert(make_word).seed)
        new_bits.append(new_bit)

    return cor_word, (new_bits[0], new_bits[1]), (new_seeds[0], new_seeds[1])


@dataclass(frozen=True)
class DPFKey(Generic[T, U]):
    """One server's key of an all-prefix DPF with words of kind T and a last word of kind U."""

    key_idx: bool
    root_seed: PrgSeed
    cor_words: tuple[CorWord[T], ...]
    cor_word_last: CorWord[U]
    make_word: Callable[[Any], T] = field(repr=False, compare=False)
    make_last_word: Callable[[Any], U] = field(repr=False, compare=False)

    @classmethod
    def gen(
        cls, alpha_bits: Sequence[bool], values: Sequence[T], value_last: U
    ) -> tuple[DPFKey[T, U], DPFKey[T, U]]:
        """Build the two keys for the path ``alpha_bits``; one value per level but the last."""
        if not values:
            raise ValueError("at least one value is needed")
        if len(alpha_bits) != len(values) + 1:
            raise ValueError(
                f"expected {len(values) + 1} path bits for {len(values)} values, "
                f"got {len(alpha_bits)}"
            )
        make_word = _word_maker(values[0])
        make_last_word = _word_maker(value_last)

        root_seeds = (PrgSeed.random(), PrgSeed.random())
        seeds = root_seeds
        bits = (False, True)

        cor_words = []
        for level, (bit, value) in enumerate(zip(alpha_bits, values)):
            need_word = level == len(values) - 1
            cor_word, bits, seeds = _gen_cor_word(
                bool(bit), value, bits, seeds, need_word, make_word
            )
            cor_words.append(cor_word)
        cor_word_last, _, _ = _gen_cor_word(
            bool(alpha_bits[-1]), value_last, bits, seeds, False, make_last_word
        )

        shared = tuple(cor_words)
        return tuple(
            cls(
                key_idx=idx,
                root_seed=root,
                cor_words=shared,
                cor_word_last=cor_word_last,
                make_word=make_word,
                make_last_word=make_last_word,
            )
            for idx, root in zip((False, True), root_seeds)
        )

    @classmethod
    def gen_from_str(cls, s: str, one: T, one_last: U) -> tuple[DPFKey[T, U], DPFKey[T, U]]:
        """Build keys for the bits of ``s`` with ``one`` at every level."""
        bits = string_to_bits(s)
        if not bits:
            raise ValueError("string must not be empty")
        return cls.gen(bits, [one] * (len(bits) - 1), one_last)

    def domain_size(self) -> int:
        return len(self.cor_words)

    def eval_init(self) -> EvalState:
        return EvalState(level=0, seed=self.root_seed, bit=self.key_idx)

    def _advance(
        self,
        state: EvalState,
        seed: PrgSeed,
        new_bit: bool,
        direction: bool,
        cor_word: CorWord[Any],
        make_word: Callable[[Any], Any],
        finish: bool,
    ) -> tuple[EvalState, Any]:
        if state.bit:
            seed = seed ^ cor_word.seed
            new_bit ^= cor_word.bits[direction]

        converted = seed.convert(make_word)
        word = converted.word
        if finish:
            if new_bit and cor_word.word is not None:
                word = word + cor_word.word
            if self.key_idx:
                word = -word
        return EvalState(level=state.level + 1, seed=converted.seed, bit=bool(new_bit)), word

    def eval_bit(self, state: EvalState, direction: bool) -> tuple[EvalState, T]:
        """Step one level down towards ``direction`` and return this key's word there."""
        direction = bool(direction)
        cor_word = self.cor_words[state.level]
        tau = state.seed.expand_dir(not direction, direction)
        return self._advance(
            state, tau.seeds[direction], tau.bits[direction], direction,
            cor_word, self.make_word, True,
        )

    def my_eval_bit(
        self, state: EvalState, seed: PrgSeed, new_bit: bool, direction: bool, target: bool
    ) -> tuple[EvalState, T]:
        """Step down from an already expanded child; the word is finished only at ``target``."""
        direction = bool(direction)
        cor_word = self.cor_words[state.level]
        return self._advance(
            state, seed, bool(new_bit), direction, cor_word, self.make_word, bool(target)
        )

    def eval_bit_last(self, state: EvalState, direction: bool) -> tuple[EvalState, U]:
        """Step down using the last level's correction word."""
        direction = bool(direction)
        tau = state.seed.expand_dir(not direction, direction)
        return self._advance(
            state, tau.seeds[direction], tau.bits[direction], direction,
            self.cor_word_last, self.make_last_word, True,
        )

    def eval(self, idx: Sequence[bool]) -> tuple[list[T], U]:
        """Evaluate along ``idx``: one word per step but the last, then the last word."""
        if not idx:
            raise ValueError("index must not be empty")
        if len(idx) > self.domain_size() + 1:
            raise ValueError(
                f"index has {len(idx)} bits, the key covers {self.domain_size() + 1}"
            )
        words = []
        state = self.eval_init()
        for bit in idx[:-1]:
            state, word = self.eval_bit(state, bit)
            words.append(word)
        _, last = self.eval_bit_last(state, idx[-1])
        return words, last

    def _eval_full(self, domain: int) -> list[T]:
        depth = domain - 2
        if self.domain_size() <= depth:
            raise ValueError(
                f"key covers {self.domain_size()} levels, full evaluation needs {depth + 1}"
            )
        out: list[T] = []

        def walk(state: EvalState, length: int) -> None:
            target = length == depth
            tau = state.seed.expand()
            children = [
                self.my_eval_bit(state, tau.seeds[d], tau.bits[d], d, target)
                for d in (False, True)
            ]
            if target:
                out.extend(word for _, word in children)
            else:
                for child, _ in children:
                    walk(child, length + 1)

        walk(self.eval_init(), 0)
        return out

    def eval_all(self) -> list[T]:
        """Words at level ``DPF_DOMAIN - 2`` for every leaf, leftmost first."""
        return self._eval_full(DPF_DOMAIN)

    def eval_all_settle(self) -> list[T]:
        """Words at level ``SETTLE_DOMAIN - 2`` for every leaf, leftmost first."""
        return self._eval_full(SETTLE_DOMAIN)