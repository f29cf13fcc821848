"""Keyed-verification anonymous credentials with algebraic MACs (GGM variant)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from paysplit.field import MODULUS, FieldElm
from paysplit.ristretto import RistrettoPoint, random_scalar
from paysplit.zkproof import CompactProof, ProofError, Statement, Transcript

__all__ = [
    "CMZ_A",
    "CMZ_B",
    "IssuerPrivKey",
    "IssuerPubKey",
    "Credential",
    "CredentialRequest",
    "CredentialRequestState",
    "CredentialResponse",
    "ShowMessage",
    "VerifiedCredential",
    "Issuer",
    "request_blind124_5",
    "verify_blind124_5",
    "show_blind345_5",
]

CMZ_A = RistrettoPoint.hash_from_bytes(b"CMZ Generator A")
CMZ_B = RistrettoPoint.basepoint()

_USERBLIND_LABEL = b"Blind124 5 userblind proof"
_ISSUE_LABEL = b"Blind124 5 issuing proof"
_SHOW_LABEL = b"Blind345 5 showing proof"

_USER_BLINDING = Statement(
    _USERBLIND_LABEL,
    ("d", "e1", "m1"),
    [
        ("Encm1B0", [("e1", "B")]),
        ("Encm1B1", [("m1", "B"), ("e1", "D")]),
        ("D", [("d", "B")]),
    ],
)

_BLIND_ISSUE = Statement(
    _ISSUE_LABEL,
    ("x0", "x0tilde", "x1", "x3", "s", "b", "t1"),
    [
        ("X1", [("x1", "A")]),
        ("X3", [("x3", "A")]),
        ("X0", [("x0", "B"), ("x0tilde", "A")]),
        ("P", [("b", "B")]),
        ("T1", [("b", "X1")]),
        ("T1", [("t1", "A")]),
        ("EncQ0", [("s", "B"), ("t1", "Encm1B0")]),
        ("EncQ1", [("s", "D"), ("t1", "Encm1B1"), ("x0", "P"), ("x3", "P3")]),
    ],
)

_SHOW = Statement(
    _SHOW_LABEL,
    ("m3", "z3", "negzQ"),
    [
        ("Cm3", [("m3", "P"), ("z3", "A")]),
        ("V", [("z3", "X3"), ("negzQ", "A")]),
    ],
)


def _scalar(value: Any) -> int:
    if isinstance(value, FieldElm):
        return value.value
    if isinstance(value, int) and not isinstance(value, bool):
        return value % MODULUS
    raise TypeError(f"expected a scalar, got {type(value).__name__}")


@dataclass(frozen=True)
class IssuerPrivKey:
    x0tilde: int
    x: tuple[int, ...]

    @classmethod
    def generate(cls, n: int) -> IssuerPrivKey:
        """A key for credentials with ``n`` attributes: ``n + 1`` MAC scalars."""
        if n < 0:
            raise ValueError("attribute count must not be negative")
        return cls(random_scalar(), tuple(random_scalar() for _ in range(n + 1)))


@dataclass(frozen=True)
class IssuerPubKey:
    X: tuple[RistrettoPoint, ...]

    @classmethod
    def from_private(cls, privkey: IssuerPrivKey) -> IssuerPubKey:
        """``X[0] = x0tilde*A + x[0]*B`` and ``X[i] = x[i]*A`` for the rest."""
        first = privkey.x0tilde * CMZ_A + privkey.x[0] * CMZ_B
        return cls((first, *(xi * CMZ_A for xi in privkey.x[1:])))


@dataclass(frozen=True)
class Credential:
    """A MAC ``(P, Q)`` on attributes ``m[1:]``; ``m[0]`` is a placeholder zero."""

    P: RistrettoPoint
    Q: RistrettoPoint
    m: tuple[int, ...]


@dataclass(frozen=True)
class CredentialRequest:
    D: RistrettoPoint
    Encm1B: tuple[RistrettoPoint, RistrettoPoint]
    m3: int
    pi_user_blinding: CompactProof


@dataclass(frozen=True)
class CredentialRequestState:
    d: int
    D: RistrettoPoint
    Encm1B: tuple[RistrettoPoint, RistrettoPoint]
    m1: int
    m3: int


@dataclass(frozen=True)
class CredentialResponse:
    P: RistrettoPoint
    EncQ: tuple[RistrettoPoint, RistrettoPoint]
    T1: RistrettoPoint
    pi_blind_issue: CompactProof


@dataclass(frozen=True)
class ShowMessage:
    P: RistrettoPoint
    m1: int
    Cm3: RistrettoPoint
    CQ: RistrettoPoint
    pi_cred_show: CompactProof


@dataclass(frozen=True)
class VerifiedCredential:
    m1: int
    Cm3: RistrettoPoint


def _require_attributes(pubkey: IssuerPubKey) -> None:
    if len(pubkey.X) < 4:
        raise ValueError("the issuer key must cover at least 3 attributes")


class Issuer:
    """Holds the private MAC key and issues and checks credentials."""

    def __init__(self, n: int) -> None:
        self._privkey = IssuerPrivKey.generate(n)
        self.pubkey = IssuerPubKey.from_private(self._privkey)

    def issue_blind124_5(self, req: CredentialRequest) -> CredentialResponse:
        """Issue a credential on a blinded attribute 1 and a visible attribute 3."""
        _require_attributes(self.pubkey)
        _USER_BLINDING.verify(
            req.pi_user_blinding,
            Transcript(_USERBLIND_LABEL),
            {"B": CMZ_B, "Encm1B0": req.Encm1B[0], "Encm1B1": req.Encm1B[1], "D": req.D},
        )

        x = self._privkey.x
        m3 = _scalar(req.m3)
        b = random_scalar()
        P = b * CMZ_B
        QHc = ((x[0] + x[3] * m3) % MODULUS) * P

        # ElGamal-encrypt the visible part of the MAC to the requester's key.
        s = random_scalar()
        enc_qhc = (s * CMZ_B, QHc + s * req.D)

        # Homomorphically add the part for the blinded attribute.
        t1 = x[1] * b % MODULUS
        T1 = t1 * CMZ_A
        enc_q1 = (t1 * req.Encm1B[0], t1 * req.Encm1B[1])
        EncQ = (enc_qhc[0] + enc_q1[0], enc_qhc[1] + enc_q1[1])

        proof = _BLIND_ISSUE.prove(
            Transcript(_ISSUE_LABEL),
            {
                "A": CMZ_A,
                "B": CMZ_B,
                "P": P,
                "EncQ0": EncQ[0],
                "EncQ1": EncQ[1],
                "X0": self.pubkey.X[0],
                "X1": self.pubkey.X[1],
                "X3": self.pubkey.X[3],
                "P3": m3 * P,
                "T1": T1,
                "D": req.D,
                "Encm1B0": req.Encm1B[0],
                "Encm1B1": req.Encm1B[1],
            },
            {
                "x0": x[0],
                "x0tilde": self._privkey.x0tilde,
                "x1": x[1],
                "x3": x[3],
                "s": s,
                "b": b,
                "t1": t1,
            },
        )
        return CredentialResponse(P=P, EncQ=EncQ, T1=T1, pi_blind_issue=proof)

    def verify_blind345_5(
        self, showmsg: ShowMessage
    ) -> tuple[RistrettoPoint, VerifiedCredential]:
        """Check a showing that reveals attribute 1 and commits to attribute 3."""
        _require_attributes(self.pubkey)
        if showmsg.P.is_identity():
            raise ProofError("P is the identity")

        x = self._privkey.x
        m1 = _scalar(showmsg.m1)
        v_prime = (
            ((x[0] + x[1] * m1) % MODULUS) * showmsg.P
            + x[3] * showmsg.Cm3
            - showmsg.CQ
        )
        _SHOW.verify(
            showmsg.pi_cred_show,
            Transcript(_SHOW_LABEL),
            {
                "A": CMZ_A,
                "P": showmsg.P,
                "Cm3": showmsg.Cm3,
                "V": v_prime,
                "X3": self.pubkey.X[3],
            },
        )
        return showmsg.P, VerifiedCredential(m1=m1, Cm3=showmsg.Cm3)


def request_blind124_5(
    m1: Any, m2: Any, m3: Any, m4: Any, m5: Any
) -> tuple[CredentialRequest, CredentialRequestState]:
    """Ask for a credential on ``m1`` (blinded) and ``m3`` (visible)."""
    m1 = _scalar(m1)
    m3 = _scalar(m3)

    d = random_scalar()
    D = d * CMZ_B
    e1 = random_scalar()
    Encm1B = (e1 * CMZ_B, m1 * CMZ_B + e1 * D)

    proof = _USER_BLINDING.prove(
        Transcript(_USERBLIND_LABEL),
        {"B": CMZ_B, "Encm1B0": Encm1B[0], "Encm1B1": Encm1B[1], "D": D},
        {"d": d, "e1": e1, "m1": m1},
    )
    return (
        CredentialRequest(D=D, Encm1B=Encm1B, m3=m3, pi_user_blinding=proof),
        CredentialRequestState(d=d, D=D, Encm1B=Encm1B, m1=m1, m3=m3),
    )


def verify_blind124_5(
    state: CredentialRequestState, resp: CredentialResponse, pubkey: IssuerPubKey
) -> Credential:
    """Check the issuer's proof and decrypt the credential."""
    _require_attributes(pubkey)
    if resp.P.is_identity():
        raise ProofError("P is the identity")

    _BLIND_ISSUE.verify(
        resp.pi_blind_issue,
        Transcript(_ISSUE_LABEL),
        {
            "A": CMZ_A,
            "B": CMZ_B,
            "P": resp.P,
            "EncQ0": resp.EncQ[0],
            "EncQ1": resp.EncQ[1],
            "X0": pubkey.X[0],
            "X1": pubkey.X[1],
            "X3": pubkey.X[3],
            "P3": state.m3 * resp.P,
            "T1": resp.T1,
            "D": state.D,
            "Encm1B0": state.Encm1B[0],
            "Encm1B1": state.Encm1B[1],
        },
    )
    Q = resp.EncQ[1] - state.d * resp.EncQ[0]
    return Credential(
        P=resp.P,
        Q=Q,
        m=(0, state.m1, state.m1, state.m3, state.m3, state.m3),
    )


def show_blind345_5(cred: Credential, pubkey: IssuerPubKey) -> tuple[int, ShowMessage]:
    """Present ``cred`` revealing attribute 1; return the commitment opening and the message."""
    _require_attributes(pubkey)
    t = random_scalar()
    P = t * cred.P
    Q = t * cred.Q

    z3 = random_scalar()
    Cm3 = cred.m[3] * P + z3 * CMZ_A

    neg_zq = random_scalar()
    CQ = Q - neg_zq * CMZ_A
    V = z3 * pubkey.X[3] + neg_zq * CMZ_A

    proof = _SHOW.prove(
        Transcript(_SHOW_LABEL),
        {"A": CMZ_A, "P": P, "Cm3": Cm3, "V": V, "X3": pubkey.X[3]},
        {"m3": cred.m[3], "z3": z3, "negzQ": neg_zq},
    )
    return z3, ShowMessage(P=P, m1=cred.m[1], Cm3=Cm3, CQ=CQ, pi_cred_show=proof)