from .account_directory import SQLAlchemyAccountDirectory
from .session_store import SQLAlchemySessionStore

__all__ = ["SQLAlchemyAccountDirectory", "SQLAlchemySessionStore"]
