"""Non-interactive Schnorr-style proofs of knowledge for linear relations over ristretto255."""

from __future__ import annotations

import hashlib
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from paysplit.field import MODULUS, FieldElm
from paysplit.ristretto import RistrettoPoint, random_scalar

__all__ = ["ProofError", "Transcript", "CompactProof", "Statement"]


class ProofError(Exception):
    """A proof failed to verify."""


def _as_bytes(value: bytes | str) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    return bytes(value)


def _scalar(value: Any) -> int:
    if isinstance(value, FieldElm):
        return value.value
    if isinstance(value, int) and not isinstance(value, bool):
        return value % MODULUS
    raise TypeError(f"expected a scalar, got {type(value).__name__}")


class Transcript:
    """A running hash of labelled messages from which challenges are drawn."""

    def __init__(self, label: bytes | str) -> None:
        self._state = hashlib.sha512()
        self.append_message(b"dom-sep", label)

    def append_message(self, label: bytes | str, message: bytes | str) -> None:
        for part in (_as_bytes(label), _as_bytes(message)):
            self._state.update(len(part).to_bytes(4, "little"))
            self._state.update(part)

    def challenge_scalar(self, label: bytes | str) -> int:
        """Draw a scalar bound to everything appended so far."""
        self.append_message(b"challenge", label)
        digest = self._state.copy().digest()
        self._state.update(digest)
        return int.from_bytes(digest, "little") % MODULUS


@dataclass(frozen=True)
class CompactProof:
    """A challenge and one response per secret."""

    challenge: int
    responses: tuple[int, ...]


class Statement:
    """A conjunction of equations ``LHS = sum(secret * point)`` between named points."""

    def __init__(
        self,
        label: bytes | str,
        secrets: Iterable[str],
        equations: Iterable[tuple[str, Iterable[tuple[str, str]]]],
    ) -> None:
        self.label = _as_bytes(label)
        self.secrets = tuple(secrets)
        if len(set(self.secrets)) != len(self.secrets):
            raise ValueError("secret names must be distinct")

        parsed = []
        for lhs, terms in equations:
            terms = tuple((secret, point) for secret, point in terms)
            if not terms:
                raise ValueError(f"equation for {lhs} has no terms")
            for secret, _ in terms:
                if secret not in self.secrets:
                    raise ValueError(f"unknown secret {secret!r}")
            parsed.append((lhs, terms))
        if not parsed:
            raise ValueError("a statement needs at least one equation")
        self.equations = tuple(parsed)

        names: list[str] = []
        for lhs, terms in self.equations:
            for name in (lhs, *(point for _, point in terms)):
                if name not in names:
                    names.append(name)
        overlap = set(names) & set(self.secrets)
        if overlap:
            raise ValueError(f"names used both as secret and point: {sorted(overlap)}")
        self.points = tuple(names)

    def _check_points(self, points: Mapping[str, RistrettoPoint]) -> None:
        missing = [name for name in self.points if name not in points]
        if missing:
            raise ValueError(f"missing points: {missing}")

    def _challenge(
        self,
        transcript: Transcript,
        points: Mapping[str, RistrettoPoint],
        commitments: Sequence[RistrettoPoint],
    ) -> int:
        transcript.append_message(b"dom-sep", self.label)
        for name in self.points:
            transcript.append_message(name, points[name].compress())
        for commitment in commitments:
            transcript.append_message(b"com", commitment.compress())
        return transcript.challenge_scalar(b"chal")

    def prove(
        self,
        transcript: Transcript,
        points: Mapping[str, RistrettoPoint],
        secrets: Mapping[str, Any],
    ) -> CompactProof:
        """Prove knowledge of ``secrets`` satisfying every equation."""
        self._check_points(points)
        missing = [name for name in self.secrets if name not in secrets]
        if missing:
            raise ValueError(f"missing secrets: {missing}")
        values = {name: _scalar(secrets[name]) for name in self.secrets}
        blindings = {name: random_scalar() for name in self.secrets}

        commitments = []
        for _, terms in self.equations:
            total = RistrettoPoint.identity()
            for secret, point in terms:
                total = total + blindings[secret] * points[point]
            commitments.append(total)

        challenge = self._challenge(transcript, points, commitments)
        responses = tuple(
            (blindings[name] - challenge * values[name]) % MODULUS for name in self.secrets
        )
        return CompactProof(challenge=challenge, responses=responses)

    def verify(
        self,
        proof: CompactProof,
        transcript: Transcript,
        points: Mapping[str, RistrettoPoint],
    ) -> None:
        """Raise ProofError unless ``proof`` is valid for ``points``."""
        self._check_points(points)
        if len(proof.responses) != len(self.secrets):
            raise ProofError("wrong number of responses")
        responses = dict(zip(self.secrets, proof.responses))

        commitments = []
        for lhs, terms in self.equations:
            total = proof.challenge * points[lhs]
            for secret, point in terms:
                total = total + responses[secret] * points[point]
            commitments.append(total)

        if self._challenge(transcript, points, commitments) != proof.challenge:
            raise ProofError("verification failed")