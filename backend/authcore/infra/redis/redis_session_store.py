from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, cast

import redis  # type: ignore[import-untyped]

from authcore.core.config import DEFAULT_REDIS_SESSION_GRACE_SECONDS
from authcore.services._shared.dto import RefreshSessionRecord
from authcore.services._shared.ports import SessionStore


@dataclass(slots=True)
class RedisSessionStore(SessionStore):
    """
    Redis-backed refresh session store.

    Each session is a hash at ``rs:{id}`` whose key TTL is the remaining
    lifetime plus ``grace_seconds``. The grace window keeps a just-expired
    session readable so callers can tell "expired" apart from "already
    rotated"; Redis reclaims it afterwards, so :meth:`purge_expired` is a no-op.

    :param r: A Redis client (already connected).
    :param grace_seconds: Extra TTL beyond ``expires_at``.
    """

    r: redis.Redis
    grace_seconds: int = DEFAULT_REDIS_SESSION_GRACE_SECONDS

    # -------------------- helpers --------------------

    @staticmethod
    def _k(session_id: str) -> str:
        return f"rs:{session_id}"

    @staticmethod
    def _s(value: Any) -> str:
        return value.decode() if isinstance(value, bytes | bytearray) else str(value)

    @staticmethod
    def _dt(value: str) -> datetime:
        dt = datetime.fromisoformat(value)
        return dt if dt.tzinfo else dt.replace(tzinfo=UTC)

    def _ttl(self, expires_at: datetime) -> int:
        remaining = int((expires_at - datetime.now(UTC)).total_seconds())
        return max(1, remaining + self.grace_seconds)

    # -------------------- API ------------------------

    def store(self, session: RefreshSessionRecord) -> None:
        key = self._k(session.id)
        pipe = self.r.pipeline(transaction=True)
        pipe.hset(
            key,
            mapping={
                "account_id": session.account_id,
                "token_hash": session.token_hash,
                "created_at": session.created_at.isoformat(),
                "expires_at": session.expires_at.isoformat(),
            },
        )
        pipe.expire(key, self._ttl(session.expires_at))
        pipe.execute()

    def find_by_id(self, session_id: str) -> RefreshSessionRecord | None:
        raw = cast(dict[Any, Any], self.r.hgetall(self._k(session_id)))
        if not raw:
            return None
        h = {self._s(k): self._s(v) for k, v in raw.items()}
        return RefreshSessionRecord(
            id=session_id,
            account_id=h["account_id"],
            token_hash=h["token_hash"],
            created_at=self._dt(h["created_at"]),
            expires_at=self._dt(h["expires_at"]),
        )

    def delete_by_id(self, session_id: str) -> bool:
        # DEL is atomic: only one concurrent caller sees a reply of 1.
        return int(self.r.delete(self._k(session_id))) == 1

    def purge_expired(self, now: datetime) -> int:
        return 0
