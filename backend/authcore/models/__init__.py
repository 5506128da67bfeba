from authcore.models.account import Account
from authcore.models.refresh_session import RefreshSession

__all__ = [
    "Account",
    "RefreshSession",
]
