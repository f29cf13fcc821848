from dataclasses import replace

import pytest

from paysplit.ggm import (
    CMZ_A,
    CMZ_B,
    Issuer,
    IssuerPrivKey,
    IssuerPubKey,
    request_blind124_5,
    show_blind345_5,
    verify_blind124_5,
)
from paysplit.ristretto import RistrettoPoint
from paysplit.zkproof import ProofError

M1 = 1111
M3 = 3333


@pytest.fixture(scope="module")
def issuer():
    return Issuer(5)


@pytest.fixture(scope="module")
def issued(issuer):
    req, state = request_blind124_5(M1, 2, M3, 4, 5)
    resp = issuer.issue_blind124_5(req)
    return req, state, resp


@pytest.fixture(scope="module")
def credential(issuer, issued):
    _, state, resp = issued
    return verify_blind124_5(state, resp, issuer.pubkey)


def test_generators():
    assert CMZ_B == RistrettoPoint.basepoint()
    assert CMZ_A == RistrettoPoint.hash_from_bytes(b"CMZ Generator A")
    assert CMZ_A != CMZ_B


def test_public_key_structure():
    priv = IssuerPrivKey.generate(3)
    pub = IssuerPubKey.from_private(priv)
    assert len(priv.x) == 4
    assert len(pub.X) == 4
    assert pub.X[0] == priv.x0tilde * CMZ_A + priv.x[0] * CMZ_B
    assert all(pub.X[i] == priv.x[i] * CMZ_A for i in range(1, 4))


def test_negative_attribute_count_rejected():
    with pytest.raises(ValueError):
        IssuerPrivKey.generate(-1)


def test_issued_credential_attributes(credential):
    assert credential.m == (0, M1, M1, M3, M3, M3)
    assert not credential.P.is_identity()


def test_request_state_matches_request(issued):
    req, state, _ = issued
    assert state.D == req.D == state.d * CMZ_B
    assert state.Encm1B == req.Encm1B
    assert req.m3 == M3


def test_tampered_request_rejected(issuer, issued):
    req, _, _ = issued
    bad = replace(req, D=req.D + CMZ_B)
    with pytest.raises(ProofError):
        issuer.issue_blind124_5(bad)


def test_response_checked_against_wrong_key(issued):
    _, state, resp = issued
    other = Issuer(5)
    with pytest.raises(ProofError):
        verify_blind124_5(state, resp, other.pubkey)


def test_identity_p_in_response_rejected(issuer, issued):
    _, state, resp = issued
    with pytest.raises(ProofError):
        verify_blind124_5(state, replace(resp, P=RistrettoPoint.identity()), issuer.pubkey)


def test_show_and_verify(issuer, credential):
    z3, msg = show_blind345_5(credential, issuer.pubkey)
    assert msg.Cm3 == M3 * msg.P + z3 * CMZ_A
    P, verified = issuer.verify_blind345_5(msg)
    assert P == msg.P
    assert verified.m1 == M1
    assert verified.Cm3 == msg.Cm3


def test_showings_are_unlinkable(issuer, credential):
    _, first = show_blind345_5(credential, issuer.pubkey)
    _, second = show_blind345_5(credential, issuer.pubkey)
    assert first.P != second.P
    assert first.P != credential.P


def test_show_with_wrong_attribute_rejected(issuer, credential):
    _, msg = show_blind345_5(credential, issuer.pubkey)
    with pytest.raises(ProofError):
        issuer.verify_blind345_5(replace(msg, m1=M1 + 1))


def test_show_to_other_issuer_rejected(credential, issuer):
    other = Issuer(5)
    _, msg = show_blind345_5(credential, issuer.pubkey)
    with pytest.raises(ProofError):
        other.verify_blind345_5(msg)


def test_show_identity_p_rejected(issuer, credential):
    _, msg = show_blind345_5(credential, issuer.pubkey)
    with pytest.raises(ProofError):
        issuer.verify_blind345_5(replace(msg, P=RistrettoPoint.identity()))


def test_too_few_attributes_rejected(issued):
    req, _, _ = issued
    with pytest.raises(ValueError):
        Issuer(1).issue_blind124_5(req)