from __future__ import annotations

from datetime import datetime

from authcore.models.refresh_session import RefreshSession
from authcore.services._shared.dto import RefreshSessionRecord
from authcore.services._shared.ports import SessionStore
from authcore.uow import SQLAlchemyReadOnlyUnitOfWork, SQLAlchemyUnitOfWork


class SQLAlchemySessionStore(SessionStore):
    """
    Refresh session store backed by the ``refresh_sessions`` table.

    ``delete_by_id`` is a single ``DELETE ... WHERE id = :id``; the database
    row lock makes its ``rowcount`` the single-winner signal.
    """

    def store(self, session: RefreshSessionRecord) -> None:
        with SQLAlchemyUnitOfWork() as uow:
            uow.refresh_sessions.add(RefreshSession.from_record(session))

    def find_by_id(self, session_id: str) -> RefreshSessionRecord | None:
        with SQLAlchemyReadOnlyUnitOfWork() as uow:
            row = uow.refresh_sessions.get(session_id)
            return row.to_record() if row else None

    def delete_by_id(self, session_id: str) -> bool:
        with SQLAlchemyUnitOfWork() as uow:
            return uow.refresh_sessions.delete_by_id(session_id)

    def purge_expired(self, now: datetime) -> int:
        with SQLAlchemyUnitOfWork() as uow:
            return uow.refresh_sessions.delete_expired(now)
