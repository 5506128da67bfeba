# comments in English; reST docstrings strict
"""Read models shared by ports, adapters and services.

These are plain frozen dataclasses so that nothing above the persistence
adapters ever holds an ORM instance or a Redis hash.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class Role(str, Enum):
    """Account roles, lowest privilege first."""

    USER = "user"
    ADMIN = "admin"
    SUPERADMIN = "superadmin"


@dataclass(frozen=True, slots=True)
class AccountView:
    """
    Directory entry for an account.

    :param id: Stable account identifier.
    :type id: str
    :param name: Display name.
    :type name: str
    :param email: Unique login email, exactly as stored.
    :type email: str
    :param role: Account role.
    :type role: Role
    :param password_hash: Opaque password hash; ``None`` for federated-only accounts.
    :type password_hash: str | None
    :param external_id: Provider-issued id for federated accounts.
    :type external_id: str | None
    """

    id: str
    name: str
    email: str
    role: Role
    password_hash: str | None = None
    external_id: str | None = None


@dataclass(frozen=True, slots=True)
class RefreshSessionRecord:
    """
    One live refresh session.

    :param id: Session id; equals the ``jti`` embedded in the refresh token.
    :type id: str
    :param account_id: Owning account.
    :type account_id: str
    :param token_hash: Digest of the raw refresh token (never the token itself).
    :type token_hash: str
    :param created_at: Issuance instant (UTC).
    :type created_at: datetime
    :param expires_at: Absolute expiry (UTC).
    :type expires_at: datetime
    """

    id: str
    account_id: str
    token_hash: str
    created_at: datetime
    expires_at: datetime
