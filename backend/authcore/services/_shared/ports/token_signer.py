from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from authcore.services._shared.dto import Role


@dataclass(frozen=True, slots=True)
class AccessClaims:
    """
    Identity asserted by an access token.

    :ivar account_id: Subject account.
    :ivar role: Role snapshot at issuance.
    """

    account_id: str
    role: Role


@dataclass(frozen=True, slots=True)
class RefreshClaims:
    """
    Verified refresh-token payload.

    :ivar session_id: Id embedded inside the signed payload (``jti``).
    :ivar account_id: Subject account.
    :ivar role: Role snapshot at issuance.
    """

    session_id: str
    account_id: str
    role: Role


@dataclass(frozen=True, slots=True)
class IssuedRefreshToken:
    """
    Result of minting a refresh token.

    ``raw_token`` is the only copy of the usable credential; persist its
    digest, never the value.
    """

    id: str
    account_id: str
    raw_token: str
    created_at: datetime
    expires_at: datetime


class TokenSigner(Protocol):
    """Port for minting and verifying signed access/refresh tokens."""

    def sign_access(self, claims: AccessClaims) -> str:
        """Sign a short-lived access token with the access key."""

    def sign_refresh(self, claims: AccessClaims) -> IssuedRefreshToken:
        """
        Sign a long-lived refresh token with the refresh key.

        A fresh random id is generated and embedded in the signed payload.
        """

    def verify_access(self, token: str) -> AccessClaims | None:
        """Return the claims, or ``None`` for any malformed/expired/mis-signed token."""

    def verify_refresh(self, token: str) -> RefreshClaims | None:
        """Return the claims with session id, or ``None`` on any failure."""
