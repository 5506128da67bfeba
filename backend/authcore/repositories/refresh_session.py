"""Refresh session repository with single-statement delete semantics."""

from __future__ import annotations

from datetime import datetime
from typing import cast

from sqlalchemy import CursorResult, delete

from authcore.models.refresh_session import RefreshSession
from authcore.repositories.base import BaseRepository


class RefreshSessionRepository(BaseRepository[RefreshSession]):
    """Persistence-only repository for :class:`RefreshSession`."""

    model = RefreshSession

    def delete_by_id(self, session_id: str) -> bool:
        """Delete a session row with one ``DELETE`` statement.

        The database serialises concurrent deletes of the same row, so only
        one caller observes ``rowcount == 1``.

        :param session_id: Session identifier.
        :type session_id: str
        :returns: ``True`` if this statement removed the row.
        :rtype: bool
        """
        stmt = delete(RefreshSession).where(RefreshSession.id == session_id)
        result = cast(CursorResult, self.session.execute(stmt))
        return result.rowcount == 1

    def delete_expired(self, now: datetime) -> int:
        """Delete every session whose ``expires_at`` is at or before ``now``.

        :returns: Number of rows removed.
        :rtype: int
        """
        stmt = (
            delete(RefreshSession)
            .where(RefreshSession.expires_at <= now)
            .execution_options(synchronize_session="fetch")
        )
        result = cast(CursorResult, self.session.execute(stmt))
        return int(result.rowcount or 0)
