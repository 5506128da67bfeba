from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import uuid4

import jwt

from authcore.services._shared.dto import Role
from authcore.services._shared.ports import (
    AccessClaims,
    IssuedRefreshToken,
    RefreshClaims,
    TokenSigner,
)

ACCESS = "access"
REFRESH = "refresh"


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(slots=True)
class PyJWTTokenSigner(TokenSigner):
    """
    HMAC-signed JWTs via PyJWT, with separate keys per token kind.

    Payload shape::

        {"sub": <account_id>, "role": <role>, "typ": "access"|"refresh",
         "iat": <epoch>, "exp": <epoch>, ["jti": <session_id>]}

    Expiry is checked against ``clock`` rather than the wall clock so tests can
    pin time.

    :param access_secret: Key for access tokens.
    :param refresh_secret: Key for refresh tokens. MUST differ from ``access_secret``.
    :param access_ttl: Access token lifetime.
    :param refresh_ttl: Refresh token lifetime.
    :param algorithm: HMAC algorithm name understood by PyJWT.
    :param clock: Callable returning the current aware UTC datetime.
    """

    access_secret: str
    refresh_secret: str
    access_ttl: timedelta
    refresh_ttl: timedelta
    algorithm: str = "HS256"
    clock: Callable[[], datetime] = field(default=_utcnow)

    # -------------------- helpers --------------------

    @staticmethod
    def _ts(dt: datetime) -> int:
        return int(dt.timestamp())

    def _encode(self, payload: dict[str, Any], secret: str) -> str:
        return jwt.encode(payload, secret, algorithm=self.algorithm)

    def _decode(self, token: str, secret: str, typ: str, required: list[str]) -> dict[str, Any] | None:
        if not token:
            return None
        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=[self.algorithm],
                options={"require": required, "verify_exp": False, "verify_iat": False},
            )
        except jwt.PyJWTError:
            return None
        if payload.get("typ") != typ:
            return None
        exp = payload.get("exp")
        if not isinstance(exp, int | float) or self._ts(self.clock()) >= exp:
            return None
        return payload

    @staticmethod
    def _role(value: Any) -> Role | None:
        try:
            return Role(value)
        except ValueError:
            return None

    # -------------------- API ------------------------

    def sign_access(self, claims: AccessClaims) -> str:
        now = self.clock()
        payload = {
            "sub": claims.account_id,
            "role": Role(claims.role).value,
            "typ": ACCESS,
            "iat": self._ts(now),
            "exp": self._ts(now + self.access_ttl),
        }
        return self._encode(payload, self.access_secret)

    def sign_refresh(self, claims: AccessClaims) -> IssuedRefreshToken:
        now = self.clock()
        expires_at = now + self.refresh_ttl
        session_id = str(uuid4())
        payload = {
            "sub": claims.account_id,
            "role": Role(claims.role).value,
            "typ": REFRESH,
            "jti": session_id,
            "iat": self._ts(now),
            "exp": self._ts(expires_at),
        }
        return IssuedRefreshToken(
            id=session_id,
            account_id=claims.account_id,
            raw_token=self._encode(payload, self.refresh_secret),
            created_at=now,
            expires_at=expires_at,
        )

    def verify_access(self, token: str) -> AccessClaims | None:
        payload = self._decode(token, self.access_secret, ACCESS, ["sub", "role", "typ", "exp"])
        if payload is None:
            return None
        role = self._role(payload["role"])
        if role is None or not payload["sub"]:
            return None
        return AccessClaims(account_id=str(payload["sub"]), role=role)

    def verify_refresh(self, token: str) -> RefreshClaims | None:
        payload = self._decode(
            token, self.refresh_secret, REFRESH, ["sub", "role", "typ", "jti", "exp"]
        )
        if payload is None:
            return None
        role = self._role(payload["role"])
        if role is None or not payload["sub"] or not payload["jti"]:
            return None
        return RefreshClaims(
            session_id=str(payload["jti"]),
            account_id=str(payload["sub"]),
            role=role,
        )
