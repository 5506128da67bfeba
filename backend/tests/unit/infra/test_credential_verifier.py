# tests/unit/infra/test_credential_verifier.py
from __future__ import annotations

import hashlib

import pytest

from authcore.infra.security import WerkzeugCredentialVerifier


@pytest.fixture()
def verifier() -> WerkzeugCredentialVerifier:
    return WerkzeugCredentialVerifier(method="pbkdf2:sha256:1000")


def test_hash_is_salted_and_verifiable(verifier):
    first = verifier.hash("secret1")
    second = verifier.hash("secret1")

    assert first != second
    assert first.startswith("pbkdf2:sha256:1000$")
    assert verifier.compare("secret1", first)
    assert not verifier.compare("secret2", first)


@pytest.mark.parametrize("hashed", [None, "", "not-a-hash", "pbkdf2:sha256"])
def test_compare_never_raises_on_bad_hash(verifier, hashed):
    assert verifier.compare("secret1", hashed) is False


def test_refresh_digest_is_deterministic_sha256(verifier):
    raw = "some.raw.token"
    digest = verifier.hash_refresh_token(raw)
    assert digest == hashlib.sha256(raw.encode()).hexdigest()
    assert digest == verifier.hash_refresh_token(raw)
    assert len(digest) == 64
