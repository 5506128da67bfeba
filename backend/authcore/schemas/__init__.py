"""Marshmallow schemas for the HTTP boundary."""

from .auth import (
    LoginSchema,
    MessageSchema,
    RefreshSchema,
    RegisterSchema,
    TokenPairSchema,
    VerifyResultSchema,
    VerifySchema,
    WhoAmISchema,
)

__all__ = [
    "LoginSchema",
    "MessageSchema",
    "RefreshSchema",
    "RegisterSchema",
    "TokenPairSchema",
    "VerifyResultSchema",
    "VerifySchema",
    "WhoAmISchema",
]
