from __future__ import annotations

import hashlib
from dataclasses import dataclass

from werkzeug.security import check_password_hash, generate_password_hash

from authcore.services._shared.ports import CredentialVerifier

DEFAULT_METHOD = "scrypt"


@dataclass(slots=True)
class WerkzeugCredentialVerifier(CredentialVerifier):
    """
    Password hashing via :mod:`werkzeug.security`; refresh digests via SHA-256.

    :param method: Werkzeug hash method string (e.g. ``"scrypt"``,
        ``"pbkdf2:sha256:600000"``). Tests use a low-cost pbkdf2 method.
    """

    method: str = DEFAULT_METHOD

    def hash(self, plaintext: str) -> str:
        return generate_password_hash(plaintext, method=self.method)

    def compare(self, plaintext: str, hashed: str | None) -> bool:
        if not hashed:
            return False
        try:
            return check_password_hash(hashed, plaintext)
        except (ValueError, TypeError):
            # malformed hash string
            return False

    def hash_refresh_token(self, raw: str) -> str:
        return hashlib.sha256(raw.encode("utf-8")).hexdigest()
