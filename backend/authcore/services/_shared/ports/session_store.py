from __future__ import annotations

import threading
from datetime import datetime
from typing import Protocol

from authcore.services._shared.dto import RefreshSessionRecord


class SessionStore(Protocol):
    """
    Stateful store for refresh sessions.

    Absence of a record is the "already used or revoked" signal: sessions are
    deleted on consumption, never flagged.
    """

    def store(self, session: RefreshSessionRecord) -> None:
        """
        Persist a new session.

        Behaviour for a colliding id is undefined; ids are UUIDs.
        """

    def find_by_id(self, session_id: str) -> RefreshSessionRecord | None:
        """Fetch a session snapshot (if present)."""

    def delete_by_id(self, session_id: str) -> bool:
        """
        Atomically delete a session. Idempotent.

        :returns: ``True`` only for the one caller whose delete removed the
            record; ``False`` if it was already absent.
        """

    def purge_expired(self, now: datetime) -> int:
        """
        Remove sessions with ``expires_at <= now``.

        Stores that expire records natively return ``0``.

        :returns: Number of sessions removed.
        """


class InMemorySessionStore(SessionStore):
    """
    In-memory session store.

    .. note::
       A lock makes ``delete_by_id`` a true test-and-delete, mirroring the
       single-winner guarantee of the real backends.
    """

    def __init__(self) -> None:
        self._by_id: dict[str, RefreshSessionRecord] = {}
        self._lock = threading.Lock()

    def store(self, session: RefreshSessionRecord) -> None:
        with self._lock:
            self._by_id[session.id] = session

    def find_by_id(self, session_id: str) -> RefreshSessionRecord | None:
        with self._lock:
            return self._by_id.get(session_id)

    def delete_by_id(self, session_id: str) -> bool:
        with self._lock:
            return self._by_id.pop(session_id, None) is not None

    def purge_expired(self, now: datetime) -> int:
        with self._lock:
            expired = [sid for sid, s in self._by_id.items() if s.expires_at <= now]
            for sid in expired:
                del self._by_id[sid]
            return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._by_id)
