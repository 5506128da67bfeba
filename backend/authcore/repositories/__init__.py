"""Repository package exposing persistence-layer access for all domain models."""

from __future__ import annotations

from authcore.repositories.account import AccountRepository
from authcore.repositories.base import BaseRepository
from authcore.repositories.refresh_session import RefreshSessionRepository

__all__ = [
    "BaseRepository",
    "AccountRepository",
    "RefreshSessionRepository",
]
