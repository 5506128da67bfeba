from .connection import RedisConnection
from .redis_session_store import RedisSessionStore

__all__ = ["RedisConnection", "RedisSessionStore"]
