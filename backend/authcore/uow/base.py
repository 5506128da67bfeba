"""
Transaction boundary used by the SQL adapters.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from authcore.repositories import AccountRepository, RefreshSessionRepository


class UnitOfWork(ABC):
    """
    One adapter call, one transaction.

    Each directory or session-store method opens its own unit so a failed
    insert or delete never leaves a half-finished transaction behind for the
    next call.
    """

    accounts: AccountRepository
    refresh_sessions: RefreshSessionRepository

    @abstractmethod
    def __enter__(self) -> UnitOfWork: ...

    @abstractmethod
    def __exit__(self, exc_type, exc, tb) -> None: ...

    @abstractmethod
    def commit(self) -> None: ...

    @abstractmethod
    def rollback(self) -> None: ...
