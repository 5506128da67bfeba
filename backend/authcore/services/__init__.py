"""Service layer public API.

Re-exports
----------
- Base primitives (from ``authcore.services._shared.base``)
    * :class:`BaseService`

- Authentication service (from ``authcore.services.auth``)
    * :class:`AuthService`
    * DTOs: :class:`RegisterIn`, :class:`LoginIn`, :class:`RefreshIn`,
      :class:`VerifyIn`, :class:`ExternalIdentityIn`, :class:`TokenPairOut`,
      :class:`VerifyOut`
"""

from __future__ import annotations

from ._shared.base import BaseService
from .auth.dto import (
    ExternalIdentityIn,
    LoginIn,
    RefreshIn,
    RegisterIn,
    TokenPairOut,
    VerifyIn,
    VerifyOut,
)
from .auth.service import AuthService

__all__ = [
    # Base
    "BaseService",
    # Auth
    "AuthService",
    "RegisterIn",
    "LoginIn",
    "RefreshIn",
    "VerifyIn",
    "ExternalIdentityIn",
    "TokenPairOut",
    "VerifyOut",
]
