"""Authentication-related Marshmallow schemas.

Wire names are camelCase (``accessToken``, ``refreshToken``, ``accountId``);
``data_key`` maps them onto the snake_case DTO fields.
"""

from __future__ import annotations

from typing import Any

from marshmallow import Schema, fields, post_dump, validate

from authcore.services._shared.dto import Role


class RegisterSchema(Schema):
    """Input payload for account registration."""

    name = fields.String(required=True, validate=validate.Length(min=2, max=100))
    email = fields.Email(required=True, validate=validate.Length(max=254))
    password = fields.String(required=True, validate=validate.Length(min=6, max=128))


class LoginSchema(Schema):
    """Input payload for authenticating an account."""

    email = fields.Email(required=True, validate=validate.Length(max=254))
    password = fields.String(required=True, validate=validate.Length(min=1, max=128))


class RefreshSchema(Schema):
    """Input payload for rotating a refresh token."""

    refresh_token = fields.String(
        required=True, data_key="refreshToken", validate=validate.Length(min=10)
    )


class VerifySchema(Schema):
    """Input payload for checking an access token."""

    token = fields.String(required=True, validate=validate.Length(min=1))


class MessageSchema(Schema):
    message = fields.String(required=True)


class TokenPairSchema(Schema):
    """Response payload containing an access/refresh token pair."""

    access_token = fields.String(required=True, data_key="accessToken")
    refresh_token = fields.String(required=True, data_key="refreshToken")


class VerifyResultSchema(Schema):
    """Response payload for token verification.

    Invalid results serialise as ``{"valid": false}`` only.
    """

    valid = fields.Boolean(required=True)
    account_id = fields.String(data_key="accountId", allow_none=True)
    role = fields.Enum(Role, by_value=True, allow_none=True)

    @post_dump
    def _drop_empty(self, data: dict[str, Any], **kwargs: Any) -> dict[str, Any]:
        return {key: value for key, value in data.items() if value is not None}


class WhoAmISchema(Schema):
    """Response payload exposing the authenticated identity."""

    account_id = fields.String(required=True, data_key="accountId")
    role = fields.Enum(Role, by_value=True, required=True)
