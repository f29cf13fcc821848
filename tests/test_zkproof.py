from dataclasses import replace

import pytest

from paysplit.field import MODULUS
from paysplit.ristretto import RistrettoPoint
from paysplit.zkproof import CompactProof, ProofError, Statement, Transcript

B = RistrettoPoint.basepoint()
H = RistrettoPoint.hash_from_bytes(b"second generator")

DLOG = Statement("dlog", ("x",), [("X", [("x", "B")])])
PEDERSEN = Statement(
    "pedersen",
    ("m", "r"),
    [("C", [("m", "B"), ("r", "H")]), ("M", [("m", "B")])],
)


def test_transcript_is_deterministic():
    t1 = Transcript(b"label")
    t2 = Transcript("label")
    t1.append_message(b"a", b"data")
    t2.append_message("a", "data")
    assert t1.challenge_scalar(b"c") == t2.challenge_scalar(b"c")


def test_transcript_depends_on_messages():
    t1 = Transcript(b"label")
    t2 = Transcript(b"label")
    t1.append_message(b"a", b"data")
    t2.append_message(b"a", b"other")
    assert t1.challenge_scalar(b"c") != t2.challenge_scalar(b"c")


def test_successive_challenges_differ_and_are_reduced():
    t = Transcript(b"label")
    first = t.challenge_scalar(b"c")
    second = t.challenge_scalar(b"c")
    assert first != second
    assert 0 <= first < MODULUS and 0 <= second < MODULUS


def test_dlog_round_trip():
    x = 123456789
    points = {"X": x * B, "B": B}
    proof = DLOG.prove(Transcript(b"t"), points, {"x": x})
    assert len(proof.responses) == 1
    assert DLOG.verify(proof, Transcript(b"t"), points) is None


def test_pedersen_round_trip():
    m, r = 42, 987654321
    points = {"C": m * B + r * H, "M": m * B, "B": B, "H": H}
    proof = PEDERSEN.prove(Transcript(b"t"), points, {"m": m, "r": r})
    assert PEDERSEN.verify(proof, Transcript(b"t"), points) is None


def test_wrong_public_point_fails():
    x = 77
    proof = DLOG.prove(Transcript(b"t"), {"X": x * B, "B": B}, {"x": x})
    with pytest.raises(ProofError):
        DLOG.verify(proof, Transcript(b"t"), {"X": (x + 1) * B, "B": B})


def test_false_statement_does_not_verify():
    points = {"X": 5 * B, "B": B}
    proof = DLOG.prove(Transcript(b"t"), points, {"x": 6})
    with pytest.raises(ProofError):
        DLOG.verify(proof, Transcript(b"t"), points)


def test_tampered_response_fails():
    points = {"X": 9 * B, "B": B}
    proof = DLOG.prove(Transcript(b"t"), points, {"x": 9})
    bad = replace(proof, responses=((proof.responses[0] + 1) % MODULUS,))
    with pytest.raises(ProofError):
        DLOG.verify(bad, Transcript(b"t"), points)


def test_different_transcript_label_fails():
    points = {"X": 9 * B, "B": B}
    proof = DLOG.prove(Transcript(b"t"), points, {"x": 9})
    with pytest.raises(ProofError):
        DLOG.verify(proof, Transcript(b"u"), points)


def test_wrong_response_count_fails():
    points = {"X": 9 * B, "B": B}
    with pytest.raises(ProofError):
        DLOG.verify(CompactProof(challenge=1, responses=(1, 2)), Transcript(b"t"), points)


def test_missing_point_is_rejected():
    with pytest.raises(ValueError):
        DLOG.prove(Transcript(b"t"), {"X": B}, {"x": 1})


def test_missing_secret_is_rejected():
    with pytest.raises(ValueError):
        DLOG.prove(Transcript(b"t"), {"X": B, "B": B}, {})


def test_undeclared_secret_is_rejected():
    with pytest.raises(ValueError):
        Statement("bad", ("x",), [("X", [("y", "B")])])


def test_points_collected_in_order():
    assert PEDERSEN.points == ("C", "B", "H", "M")