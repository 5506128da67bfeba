"""
Read-write and read-only Units of Work over the Flask-scoped session.
"""

from __future__ import annotations

from sqlalchemy import event
from sqlalchemy.orm import Session

from authcore.core.extensions import db
from authcore.repositories import AccountRepository, RefreshSessionRepository
from authcore.uow.base import UnitOfWork


class _Repositories:
    """Bind every repository to one session."""

    def __init__(self, session: Session) -> None:
        self.session = session
        self.accounts = AccountRepository(session=session)
        self.refresh_sessions = RefreshSessionRepository(session=session)


class SQLAlchemyUnitOfWork(_Repositories, UnitOfWork):
    """
    Read-write scope.

    A clean exit commits. Any exception, including one raised by the commit
    itself (a unique violation surfacing late), rolls back and propagates.
    """

    def __init__(self) -> None:
        super().__init__(db.session())

    def __enter__(self) -> SQLAlchemyUnitOfWork:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is not None:
            self.rollback()
            return
        try:
            self.commit()
        except Exception:
            self.rollback()
            raise

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


class SQLAlchemyReadOnlyUnitOfWork(_Repositories, UnitOfWork):
    """
    Lookup scope that refuses to write.

    Pending ORM changes make the flush raise. The scope rolls back on exit
    only when it began the transaction itself; inside an outer transaction
    (a fixture, or a caller's own unit) it leaves the outcome to the owner.
    """

    def __init__(self) -> None:
        super().__init__(db.session())
        self._owns_txn = False

    def __enter__(self) -> SQLAlchemyReadOnlyUnitOfWork:
        self._owns_txn = not self.session.in_transaction()
        event.listen(self.session, "before_flush", self._refuse_flush)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        event.remove(self.session, "before_flush", self._refuse_flush)
        if self._owns_txn:
            self.rollback()
        self._owns_txn = False

    @staticmethod
    def _refuse_flush(session: Session, flush_context, instances) -> None:
        if session.new or session.dirty or session.deleted:
            raise RuntimeError(
                "Read-only UnitOfWork: ORM flush blocked (new/dirty/deleted objects present)."
            )

    def commit(self) -> None:
        """:raises RuntimeError: Always; this scope never commits."""
        raise RuntimeError("Read-only UnitOfWork does not allow commit().")

    def rollback(self) -> None:
        self.session.rollback()
