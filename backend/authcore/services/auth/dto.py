# authcore/services/auth/dto.py
from __future__ import annotations

from dataclasses import dataclass

from authcore.services._shared.dto import Role

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class RegisterIn:
    """
    Input DTO for local registration.

    Field rules (name length, email syntax, password length) are enforced at
    the HTTP boundary before this DTO is built.

    :param name: Display name.
    :type name: str
    :param email: Login email, used as-is.
    :type email: str
    :param password: Raw password (hashed by the service).
    :type password: str
    """

    name: str
    email: str
    password: str


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for login.

    :param email: Account email.
    :type email: str
    :param password: Raw password (to be verified).
    :type password: str
    """

    email: str
    password: str


@dataclass(frozen=True, slots=True)
class RefreshIn:
    """
    Input DTO for token refresh.

    :param refresh_token: Raw refresh JWT as returned by login/refresh.
    :type refresh_token: str
    """

    refresh_token: str


@dataclass(frozen=True, slots=True)
class VerifyIn:
    """
    Input DTO for access-token verification.

    :param token: Encoded access JWT.
    :type token: str
    """

    token: str


@dataclass(frozen=True, slots=True)
class ExternalIdentityIn:
    """
    Identity already verified by an external provider.

    :param email: Email asserted by the provider.
    :type email: str
    :param name: Display name asserted by the provider.
    :type name: str
    :param external_id: Provider-issued subject id.
    :type external_id: str
    """

    email: str
    name: str
    external_id: str


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class TokenPairOut:
    """
    Output DTO with access and refresh tokens.

    :param access_token: Encoded access JWT.
    :type access_token: str
    :param refresh_token: Raw refresh JWT; the only copy the caller gets.
    :type refresh_token: str
    """

    access_token: str
    refresh_token: str


@dataclass(frozen=True, slots=True)
class VerifyOut:
    """
    Output DTO for access-token verification.

    ``account_id`` and ``role`` are set only when ``valid`` is true.
    """

    valid: bool
    account_id: str | None = None
    role: Role | None = None

    @classmethod
    def invalid(cls) -> VerifyOut:
        return cls(valid=False)
