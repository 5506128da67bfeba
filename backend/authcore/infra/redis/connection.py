from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import redis  # type: ignore[import-untyped]
from redis.exceptions import RedisError  # type: ignore[import-untyped]

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class RedisConnection:
    """
    Owned Redis client with an explicit lifecycle.

    Nothing connects at import time: the composition root calls
    :meth:`connect` once at startup and :meth:`close` at shutdown, then hands
    :attr:`client` to the adapters that need it.

    :param url: Redis URL (``redis://host:port/db``).
    :param client_factory: Builds a client from ``url``. Tests pass
        ``fakeredis.FakeRedis.from_url``.
    """

    url: str
    client_factory: Callable[..., Any] = field(default=redis.Redis.from_url)
    _client: redis.Redis | None = field(default=None, init=False, repr=False)

    @property
    def connected(self) -> bool:
        return self._client is not None

    def connect(self) -> redis.Redis:
        """
        Create the client and check it answers ``PING``. Idempotent.

        :raises RuntimeError: If the server is unreachable.
        """
        if self._client is not None:
            return self._client
        client = self.client_factory(self.url)
        try:
            client.ping()
        except RedisError as exc:
            client.close()
            raise RuntimeError(f"Failed to connect to Redis at {self.url!r}") from exc
        self._client = client
        logger.info("Redis connected", extra={"endpoint": self.url})
        return client

    @property
    def client(self) -> redis.Redis:
        """Return the connected client."""
        if self._client is None:
            raise RuntimeError("Redis connection is not open. Call connect() first.")
        return self._client

    def close(self) -> None:
        """Release the client's connection pool. Safe to call twice."""
        if self._client is None:
            return
        try:
            self._client.close()
        finally:
            self._client = None
            logger.info("Redis connection closed")
