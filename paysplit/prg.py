"""AES-based pseudorandom generators used for seed expansion in the DPF tree."""

from __future__ import annotations

import secrets
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

__all__ = [
    "AES_KEY_SIZE",
    "AES_BLOCK_SIZE",
    "PrgSeed",
    "PrgOutput",
    "ConvertOutput",
    "FixedKeyPrgStream",
    "PrgStream",
]

AES_KEY_SIZE = 16
AES_BLOCK_SIZE = 16

_MASK64 = (1 << 64) - 1
_MASK128 = (1 << 128) - 1


def _ecb_encryptor(key: bytes):
    return Cipher(algorithms.AES(key), modes.ECB()).encryptor()


def _xor(left: bytes, right: bytes) -> bytes:
    return (int.from_bytes(left, "big") ^ int.from_bytes(right, "big")).to_bytes(
        len(left), "big"
    )


class FixedKeyPrgStream:
    """Stream of blocks ``AES_0(ctr) XOR ctr`` under the all-zero AES key.

    The counter is seeded from a key; stepping it adds one to its upper
    64-bit little-endian half, wrapping without carry.
    """

    def __init__(self) -> None:
        self._encryptor = _ecb_encryptor(bytes(AES_KEY_SIZE))
        self._ctr_low = bytes(8)
        self._ctr_high = 0
        self._buf = b""
        self._pos = 0
        self.count = 0

    def set_key(self, key: bytes) -> None:
        key = bytes(key)
        if len(key) != AES_KEY_SIZE:
            raise ValueError(f"key must be {AES_KEY_SIZE} bytes, got {len(key)}")
        self._ctr_low = key[:8]
        self._ctr_high = int.from_bytes(key[8:], "little")
        self._buf = b""
        self._pos = 0

    def skip_block(self) -> None:
        self._ctr_high = (self._ctr_high + 1) & _MASK64

    def _counter_block(self) -> bytes:
        return self._ctr_low + self._ctr_high.to_bytes(8, "little")

    def _refill(self, blocks: int) -> None:
        counters = []
        for _ in range(blocks):
            counters.append(self._counter_block())
            self.skip_block()
        plain = b"".join(counters)
        self._buf = _xor(self._encryptor.update(plain), plain)
        self._pos = 0
        self.count += len(plain)

    def fill_bytes(self, n: int) -> bytes:
        """Return the next ``n`` bytes of the stream."""
        if n < 0:
            raise ValueError("byte count must not be negative")
        out = bytearray()
        while len(out) < n:
            if self._pos == len(self._buf):
                self._refill(8 if n > 4 * AES_BLOCK_SIZE else 1)
            take = min(len(self._buf) - self._pos, n - len(out))
            out += self._buf[self._pos : self._pos + take]
            self._pos += take
        return bytes(out)


_local = threading.local()


def _fixed_key_stream() -> FixedKeyPrgStream:
    stream = getattr(_local, "stream", None)
    if stream is None:
        stream = _local.stream = FixedKeyPrgStream()
    return stream


class PrgStream:
    """AES-128 in counter mode with a 128-bit little-endian counter starting at zero."""

    def __init__(self, key: bytes) -> None:
        self._encryptor = _ecb_encryptor(bytes(key))
        self._block = 0
        self._pending = b""

    def fill_bytes(self, n: int) -> bytes:
        """Return the next ``n`` keystream bytes."""
        if n < 0:
            raise ValueError("byte count must not be negative")
        out = bytearray(self._pending[:n])
        self._pending = self._pending[n:]
        needed = n - len(out)
        if needed:
            blocks = -(-needed // AES_BLOCK_SIZE)
            counters = b"".join(
                ((self._block + i) & _MASK128).to_bytes(AES_BLOCK_SIZE, "little")
                for i in range(blocks)
            )
            self._block = (self._block + blocks) & _MASK128
            keystream = self._encryptor.update(counters)
            out += keystream[:needed]
            self._pending = keystream[needed:]
        return bytes(out)


W = TypeVar("W")


@dataclass(frozen=True)
class PrgSeed:
    """A 16-byte PRG seed."""

    key: bytes

    def __post_init__(self) -> None:
        key = bytes(self.key)
        if len(key) != AES_KEY_SIZE:
            raise ValueError(f"seed must be {AES_KEY_SIZE} bytes, got {len(key)}")
        object.__setattr__(self, "key", key)

    @classmethod
    def zero(cls) -> PrgSeed:
        return cls(bytes(AES_KEY_SIZE))

    @classmethod
    def random(cls) -> PrgSeed:
        return cls(secrets.token_bytes(AES_KEY_SIZE))

    def __xor__(self, other: object) -> PrgSeed:
        if not isinstance(other, PrgSeed):
            return NotImplemented
        return PrgSeed(_xor(self.key, other.key))

    def to_rng(self) -> PrgStream:
        return PrgStream(self.key)

    def expand_dir(self, left: bool, right: bool) -> PrgOutput:
        """Derive the requested child seeds; a child not asked for is the zero seed."""
        key_short = bytes([self.key[0] & 0xFC]) + self.key[1:]
        stream = _fixed_key_stream()
        stream.set_key(key_short)
        bits = ((key_short[0] & 0x1) == 0, (key_short[0] & 0x2) == 0)

        children = []
        for wanted in (left, right):
            if wanted:
                children.append(PrgSeed(stream.fill_bytes(AES_KEY_SIZE)))
            else:
                stream.skip_block()
                children.append(PrgSeed.zero())
        return PrgOutput(bits=bits, seeds=(children[0], children[1]))

    def expand(self) -> PrgOutput:
        return self.expand_dir(True, True)

    def convert(self, make_word: Callable[[FixedKeyPrgStream], W]) -> ConvertOutput[W]:
        """Derive a fresh seed and a group word; ``make_word`` reads the rest of the stream."""
        stream = _fixed_key_stream()
        stream.set_key(self.key)
        seed = PrgSeed(stream.fill_bytes(AES_KEY_SIZE))
        return ConvertOutput(seed=seed, word=make_word(stream))


@dataclass(frozen=True)
class PrgOutput:
    bits: tuple[bool, bool]
    seeds: tuple[PrgSeed, PrgSeed]


@dataclass(frozen=True)
class ConvertOutput(Generic[W]):
    seed: PrgSeed
    word: W