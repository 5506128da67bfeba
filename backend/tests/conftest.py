"""Shared fixtures: one app per run, one rolled-back transaction per test.

Tables live in an in-memory SQLite database reached through a single
connection. Each test opens a SAVEPOINT on that connection, and the whole
outer transaction is rolled back at teardown, so rows never leak between
tests even when adapters commit.
"""

from __future__ import annotations

import os

import pytest
from sqlalchemy import event
from sqlalchemy.orm import scoped_session, sessionmaker

from authcore.core.config import TestingConfig
from authcore.core.extensions import db as _db
from authcore.factory import create_app


class TestConfig(TestingConfig):
    """Pinned settings so the suite ignores the developer's environment."""

    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    JWT_ACCESS_SECRET = "test-access-secret"
    JWT_REFRESH_SECRET = "test-refresh-secret"
    JWT_ACCESS_EXPIRES = "15m"
    JWT_REFRESH_EXPIRES = "7d"
    SESSION_STORE = "sql"
    PASSWORD_HASH_METHOD = "pbkdf2:sha256:1000"
    LOG_LEVEL = "WARNING"


@pytest.fixture(scope="session")
def app():
    """Application built from :class:`TestConfig` with the SQL session store."""
    os.environ.pop("DATABASE_URL", None)
    application = create_app(TestConfig)
    application.logger.setLevel("WARNING")
    return application


@pytest.fixture(scope="session")
def db(app):
    """Create ``accounts`` and ``refresh_sessions`` once for the run."""
    with app.app_context():
        _db.create_all()
        yield _db
        _db.session.remove()
        _db.drop_all()


@pytest.fixture(scope="session")
def connection(db):
    """The single DBAPI connection every test session binds to."""
    conn = db.engine.connect()
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="function")
def session(db, connection):
    """Scoped session on a per-test SAVEPOINT, swapped in as ``db.session``.

    Unit of Work commits release the session's own SAVEPOINT; the outer
    transaction is rolled back when the test ends.
    """
    outer = connection.begin()
    scoped = scoped_session(sessionmaker(bind=connection, future=True))
    nested = connection.begin_nested()

    @event.listens_for(scoped(), "after_transaction_end")
    def _restart_savepoint(sess, trans):  # pragma: no cover
        nonlocal nested
        if trans.nested and not trans._parent.nested:
            nested = connection.begin_nested()

    original = db.session
    db.session.remove()
    db.session = scoped
    try:
        yield scoped
    finally:
        scoped.remove()
        db.session = original
        outer.rollback()


@pytest.fixture()
def app_ctx(app, session):
    """Application context for adapter and service tests."""
    with app.app_context():
        yield app


@pytest.fixture()
def client(app, session):
    """Test client whose requests share the per-test session."""
    return app.test_client()


@pytest.fixture(scope="session")
def faker():
    """Seeded :class:`faker.Faker` instance."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk


@pytest.fixture(autouse=True)
def _factories_session(session):
    """Point the factories at this test's session."""
    from tests.factories import SQLAlchemySession

    SQLAlchemySession.set(session)
    yield
