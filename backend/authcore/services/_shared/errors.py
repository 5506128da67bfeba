"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and never depend on Flask or
HTTP. They are the stable contract between adapters, ports and the
authentication orchestrator.

The translation to HTTP responses (RFC 7807) is handled by
``authcore/core/errors.py`` via ``BaseService.translate_exceptions()``.
"""

from __future__ import annotations

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, *markers: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    PostgreSQL reports the constraint name (``uq_accounts_email``); SQLite only
    reports the column (``accounts.email``). Pass both to be dialect-neutral.

    :param exc: The exception raised by SQLAlchemy during flush/commit.
    :param markers: Constraint names or ``table.column`` strings to look for.
    :returns: ``True`` if any marker appears in the driver message.
    """
    message = str(exc.orig).lower() if exc.orig else ""
    return any(marker.lower() in message for marker in markers)


# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors and are never faults: callers can recover.
    - Storage or connectivity failures are NOT ServiceErrors; they propagate
      untouched.
    """


class AuthError(ServiceError):
    """Base class for authentication outcomes that reject the caller."""

    default_message = "Authentication failed"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


# --------------------------------------------------------------------------- #
# Orchestrator outcomes
# --------------------------------------------------------------------------- #


class AccountExists(AuthError):
    """Registration for an email that already has an account."""

    default_message = "User already exists"


class AccountNotFound(AuthError):
    """Login for an email with no account."""

    default_message = "User not found"


class InvalidCredentials(AuthError):
    """Password does not match (or the account has no local password)."""

    default_message = "Invalid credentials"


class InvalidToken(AuthError):
    """
    Token failed signature, expiry, payload or digest checks.

    One type for all causes so callers cannot tell which check failed.
    """

    default_message = "Invalid token"


class TokenNotFoundOrAlreadyRotated(AuthError):
    """No live session for the token's id: replayed, revoked or never issued."""

    default_message = "Refresh token not found or already rotated"


class TokenExpired(AuthError):
    """The session record exists but is past ``expires_at``."""

    default_message = "Refresh token expired"


# --------------------------------------------------------------------------- #
# Storage-level uniqueness (raised by directory adapters)
# --------------------------------------------------------------------------- #


class DuplicateEmail(ServiceError):
    """The directory's unique email constraint rejected an insert."""

    def __init__(self, email: str) -> None:
        super().__init__("Email already in use")
        self.email = email


class DuplicateExternalId(ServiceError):
    """The directory's unique external-id constraint rejected an insert."""

    def __init__(self, external_id: str) -> None:
        super().__init__("External identity already linked")
        self.external_id = external_id
