"""The ristretto255 prime-order group built on edwards25519."""

from __future__ import annotations

import hashlib
import secrets
from typing import Any

from paysplit.field import MODULUS, FieldElm

__all__ = ["RistrettoPoint", "random_scalar", "scalar_from_bytes_mod_order"]

_P = 2**255 - 19
_ENCODED_SIZE = 32


def _inv(x: int) -> int:
    return pow(x, _P - 2, _P)


def _is_negative(x: int) -> bool:
    return bool((x % _P) & 1)


def _abs(x: int) -> int:
    x %= _P
    return _P - x if x & 1 else x


_D = (-121665 * _inv(121666)) % _P
_SQRT_M1 = pow(2, (_P - 1) // 4, _P)


def _sqrt_ratio_m1(u: int, v: int) -> tuple[bool, int]:
    """Return whether ``u/v`` is square, and the non-negative root of ``u/v`` or ``i*u/v``."""
    u %= _P
    v %= _P
    v3 = v * v % _P * v % _P
    v7 = v3 * v3 % _P * v % _P
    r = u * v3 % _P * pow(u * v7 % _P, (_P - 5) // 8, _P) % _P
    check = v * r % _P * r % _P
    correct = check == u
    flipped = check == (-u) % _P
    flipped_i = check == (-u * _SQRT_M1) % _P
    if flipped or flipped_i:
        r = r * _SQRT_M1 % _P
    return correct or flipped, _abs(r)


# The conventional choice of this root is the negative one.
_SQRT_AD_MINUS_ONE = (-_sqrt_ratio_m1((-_D - 1) % _P, 1)[1]) % _P
_INVSQRT_A_MINUS_D = _sqrt_ratio_m1(1, (-1 - _D) % _P)[1]
_ONE_MINUS_D_SQ = (1 - _D * _D) % _P
_D_MINUS_ONE_SQ = (_D - 1) * (_D - 1) % _P


def _elligator(t: int) -> tuple[int, int, int, int]:
    r = _SQRT_M1 * t % _P * t % _P
    u = (r + 1) * _ONE_MINUS_D_SQ % _P
    v = (-1 - r * _D) * (r + _D) % _P
    was_square, s = _sqrt_ratio_m1(u, v)
    if not was_square:
        s = (-_abs(s * t)) % _P
        c = r
    else:
        c = _P - 1
    n = (c * (r - 1) % _P * _D_MINUS_ONE_SQ - v) % _P
    w0 = 2 * s * v % _P
    w1 = n * _SQRT_AD_MINUS_ONE % _P
    w2 = (1 - s * s) % _P
    w3 = (1 + s * s) % _P
    return w0 * w3 % _P, w2 * w1 % _P, w1 * w3 % _P, w0 * w2 % _P


def _scalar_value(scalar: Any) -> int | None:
    if isinstance(scalar, FieldElm):
        return scalar.value
    if isinstance(scalar, int) and not isinstance(scalar, bool):
        return scalar % MODULUS
    return None


class RistrettoPoint:
    """A ristretto255 element, held as an edwards25519 point in extended coordinates."""

    __slots__ = ("_x", "_y", "_z", "_t")

    def __init__(self, x: int, y: int, z: int, t: int) -> None:
        self._x = x % _P
        self._y = y % _P
        self._z = z % _P
        self._t = t % _P

    @classmethod
    def identity(cls) -> RistrettoPoint:
        return cls(0, 1, 1, 0)

    @classmethod
    def basepoint(cls) -> RistrettoPoint:
        y = 4 * _inv(5) % _P
        yy = y * y % _P
        _, x = _sqrt_ratio_m1(yy - 1, _D * yy + 1)
        return cls(x, y, 1, x * y)

    @classmethod
    def hash_from_bytes(cls, data: bytes) -> RistrettoPoint:
        """Map ``data`` to a point via SHA-512 and two Elligator maps."""
        digest = hashlib.sha512(bytes(data)).digest()
        mask = (1 << 255) - 1
        halves = (
            int.from_bytes(digest[:32], "little") & mask,
            int.from_bytes(digest[32:], "little") & mask,
        )
        first, second = (cls(*_elligator(half % _P)) for half in halves)
        return first + second

    @classmethod
    def decompress(cls, data: bytes) -> RistrettoPoint:
        """Decode a 32-byte canonical encoding; raise ValueError if it is not one."""
        data = bytes(data)
        if len(data) != _ENCODED_SIZE:
            raise ValueError(f"encoding must be {_ENCODED_SIZE} bytes, got {len(data)}")
        s = int.from_bytes(data, "little")
        if s >= _P or _is_negative(s):
            raise ValueError("non-canonical point encoding")
        ss = s * s % _P
        u1 = (1 - ss) % _P
        u2 = (1 + ss) % _P
        u2_sqr = u2 * u2 % _P
        v = (-(_D * u1 % _P * u1) - u2_sqr) % _P
        was_square, invsqrt = _sqrt_ratio_m1(1, v * u2_sqr)
        den_x = invsqrt * u2 % _P
        den_y = invsqrt * den_x % _P * v % _P
        x = _abs(2 * s * den_x)
        y = u1 * den_y % _P
        t = x * y % _P
        if not was_square or _is_negative(t) or y == 0:
            raise ValueError("invalid point encoding")
        return cls(x, y, 1, t)

    def compress(self) -> bytes:
        """The canonical 32-byte encoding."""
        x0, y0, z0, t0 = self._x, self._y, self._z, self._t
        u1 = (z0 + y0) * (z0 - y0) % _P
        u2 = x0 * y0 % _P
        _, invsqrt = _sqrt_ratio_m1(1, u1 * u2 % _P * u2)
        den1 = invsqrt * u1 % _P
        den2 = invsqrt * u2 % _P
        z_inv = den1 * den2 % _P * t0 % _P
        if _is_negative(t0 * z_inv):
            x, y = y0 * _SQRT_M1 % _P, x0 * _SQRT_M1 % _P
            den_inv = den1 * _INVSQRT_A_MINUS_D % _P
        else:
            x, y, den_inv = x0, y0, den2
        if _is_negative(x * z_inv):
            y = (-y) % _P
        s = _abs(den_inv * (z0 - y))
        return s.to_bytes(_ENCODED_SIZE, "little")

    def is_identity(self) -> bool:
        return self == RistrettoPoint.identity()

    def __add__(self, other: object) -> RistrettoPoint:
        if not isinstance(other, RistrettoPoint):
            return NotImplemented
        a = (self._y - self._x) * (other._y - other._x) % _P
        b = (self._y + self._x) * (other._y + other._x) % _P
        c = self._t * 2 * _D % _P * other._t % _P
        d = self._z * 2 * other._z % _P
        e, f, g, h = b - a, d - c, d + c, b + a
        return RistrettoPoint(e * f, g * h, f * g, e * h)

    def __neg__(self) -> RistrettoPoint:
        return RistrettoPoint(-self._x, self._y, self._z, -self._t)

    def __sub__(self, other: object) -> RistrettoPoint:
        if not isinstance(other, RistrettoPoint):
            return NotImplemented
        return self + (-other)

    def __mul__(self, scalar: object) -> RistrettoPoint:
        k = _scalar_value(scalar)
        if k is None:
            return NotImplemented
        result = RistrettoPoint.identity()
        addend = self
        while k:
            if k & 1:
                result = result + addend
            addend = addend + addend
            k >>= 1
        return result

    def __rmul__(self, scalar: object) -> RistrettoPoint:
        return self.__mul__(scalar)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RistrettoPoint):
            return NotImplemented
        return (self._x * other._y - self._y * other._x) % _P == 0 or (
            self._y * other._y - self._x * other._x
        ) % _P == 0

    def __hash__(self) -> int:
        return hash(self.compress())

    def __repr__(self) -> str:
        return f"RistrettoPoint({self.compress().hex()})"


def random_scalar() -> int:
    """A uniformly random scalar modulo the group order."""
    return int.from_bytes(secrets.token_bytes(64), "little") % MODULUS


def scalar_from_bytes_mod_order(data: bytes) -> int:
    """Read 32 little-endian bytes and reduce modulo the group order."""
    data = bytes(data)
    if len(data) != _ENCODED_SIZE:
        raise ValueError(f"scalar must be {_ENCODED_SIZE} bytes, got {len(data)}")
    return int.from_bytes(data, "little") % MODULUS