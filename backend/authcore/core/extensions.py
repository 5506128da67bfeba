"""Shared Flask-SQLAlchemy handle for the account and session tables."""

from __future__ import annotations

from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import MetaData

# Constraint names are part of the contract: the SQL directory recognises
# duplicate inserts by ``uq_accounts_email`` / ``uq_accounts_external_id``.
NAMING_CONVENTION = {
    "pk": "pk_%(table_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
}

db: SQLAlchemy = SQLAlchemy(
    metadata=MetaData(naming_convention=NAMING_CONVENTION),
    session_options={"autoflush": False},
)


def init_app(app: Flask) -> None:
    """Bind :data:`db` to ``app`` and register the model tables."""
    db.init_app(app)

    import authcore.models  # noqa: F401
