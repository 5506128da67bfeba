"""Persistence-only repository base for the auth tables.

Repositories stage, query and flush. They never commit: the Unit of Work
that hands them their session decides the transaction's outcome.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Generic, TypeVar, cast

from sqlalchemy import Select, func, select
from sqlalchemy.orm import InstrumentedAttribute, Session

from authcore.core.extensions import db

E = TypeVar("E")


class BaseRepository(Generic[E]):
    """Session-bound CRUD helpers for one mapped model.

    Subclasses set ``model`` and list the columns callers may filter on in
    :meth:`_filterable_fields`.
    """

    model: type[E]

    def __init__(self, session: Session | None = None) -> None:
        """
        :param session: Session shared by the enclosing Unit of Work. Falls
            back to the Flask-scoped ``db.session`` when omitted.
        """
        self._session = session

    @property
    def session(self) -> Session:
        return self._session if self._session is not None else cast(Session, db.session)

    def _filterable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        return {}

    def _where(self, stmt: Select[Any], filters: Mapping[str, Any]) -> Select[Any]:
        """Add ``column == value`` clauses for whitelisted keys.

        :raises ValueError: On a key missing from :meth:`_filterable_fields`.
        """
        columns = self._filterable_fields()
        unknown = sorted(set(filters) - set(columns))
        if unknown:
            raise ValueError(f"Unknown or non-filterable fields: {unknown}")
        for key, value in filters.items():
            stmt = stmt.where(columns[key] == value)
        return stmt

    def add(self, instance: E) -> E:
        """Stage ``instance`` and flush, so unique violations raise here."""
        self.session.add(instance)
        self.session.flush()
        return instance

    def get(self, entity_id: Any) -> E | None:
        return self.session.get(self.model, entity_id)

    def find_one(self, **filters: Any) -> E | None:
        stmt = self._where(select(self.model), filters).limit(1)
        return cast(E | None, self.session.execute(stmt).scalars().first())

    def count(self) -> int:
        stmt = select(func.count()).select_from(self.model)
        return int(self.session.execute(stmt).scalar_one())
