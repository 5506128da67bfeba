from .dto import (
    ExternalIdentityIn,
    LoginIn,
    RefreshIn,
    RegisterIn,
    TokenPairOut,
    VerifyIn,
    VerifyOut,
)
from .service import REGISTERED_MESSAGE, AuthService

__all__ = [
    "REGISTERED_MESSAGE",
    "AuthService",
    "ExternalIdentityIn",
    "LoginIn",
    "RefreshIn",
    "RegisterIn",
    "TokenPairOut",
    "VerifyIn",
    "VerifyOut",
]
