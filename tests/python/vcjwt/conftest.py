"""Pytest fixtures for the vcjwt converter tests."""

import json
from pathlib import Path

import pytest
from joserfc import jws
from joserfc.jwk import ECKey

FIXTURES_DIR = Path(__file__).resolve().parents[2] / "fixtures"


@pytest.fixture(scope="session")
def p256_key():
    """A throwaway P-256 key for producing compact JWTs."""
    return ECKey.generate_key("P-256")


@pytest.fixture(scope="session")
def make_jwt(p256_key):
    """Factory that signs a claims dict as an ES256 compact JWT."""

    def _make_jwt(claims) -> str:
        header = {"alg": "ES256", "typ": "JWT"}
        payload = json.dumps(claims, ensure_ascii=False).encode("utf-8")
        return jws.serialize_compact(header, payload, p256_key, algorithms=["ES256"])

    return _make_jwt


@pytest.fixture()
def sample_vc():
    """A canonical W3C VCDM 1.1 credential (no JWT claims)."""
    with open(FIXTURES_DIR / "sample-vc.json") as f:
        return json.load(f)


@pytest.fixture()
def complex_payload():
    """A JWT payload mixing JWT claims, W3C fields and app specific fields."""
    return {
        "context": "top context",
        "@context": ["also top"],
        "type": ["A"],
        "issuer": {"claim": "issuer claim"},
        "iss": "foo",
        "sub": "bar",
        "vc": {
            "@context": ["vc context"],
            "type": ["B"],
            "credentialSubject": {"something": "nothing"},
            "appSpecific": "some app specific field",
        },
        "nbf": 1234567890,
        "iat": 1111111111,
        "exp": 1231231231,
        "appSpecific": "another app specific field",
    }


@pytest.fixture()
def complex_normalized():
    """``complex_payload`` after normalization, without the proof member."""
    return {
        "@context": ["top context", "also top", "vc context"],
        "type": ["A", "B"],
        "issuer": {"id": "foo", "claim": "issuer claim"},
        "credentialSubject": {"id": "bar", "something": "nothing"},
        "issuanceDate": "2009-02-13T23:31:30.000Z",
        "expirationDate": "2009-01-06T08:40:31.000Z",
        "iat": 1111111111,
        "vc": {"appSpecific": "some app specific field"},
        "appSpecific": "another app specific field",
    }
