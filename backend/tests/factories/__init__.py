"""Factory Boy helpers wired to the project's SQLAlchemy session."""

from __future__ import annotations

import factory

# Cheap hash so factories stay fast; matches the testing config.
TEST_HASH_METHOD = "pbkdf2:sha256:1000"


class SQLAlchemySession:
    """Store the session provided by the pytest fixture layer."""

    _session = None

    @classmethod
    def set(cls, session):
        """Register the SQLAlchemy session used to persist factory objects."""
        cls._session = session

    @classmethod
    def get(cls):
        """Return the registered SQLAlchemy session.

        Raises
        ------
        RuntimeError
            If factories are used without the ``session`` fixture wiring.
        """
        if cls._session is None:
            raise RuntimeError("Factories session not set. Did you pass the 'session' fixture?")
        return cls._session


class BaseFactory(factory.alchemy.SQLAlchemyModelFactory):
    """Base class configuring Factory Boy for the transactional session."""

    class Meta:
        abstract = True
        # A callable keeps Factory Boy lazy and reuses the scoped session.
        sqlalchemy_session_factory = SQLAlchemySession.get
        sqlalchemy_session_persistence = "flush"


from tests.factories.account import AccountFactory  # noqa: E402
from tests.factories.refresh_session import RefreshSessionFactory  # noqa: E402

__all__ = [
    "TEST_HASH_METHOD",
    "AccountFactory",
    "BaseFactory",
    "RefreshSessionFactory",
    "SQLAlchemySession",
]
