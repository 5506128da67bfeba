"""Flask CLI commands for schema setup and session housekeeping."""

from __future__ import annotations

import logging

import click
from flask import current_app
from flask.cli import with_appcontext

from authcore.api.deps import get_auth_service
from authcore.core.extensions import db

LOGGER = logging.getLogger(__name__)


def _ensure_non_production() -> None:
    """Abort destructive commands when running in production."""
    config = current_app.config
    app_env = str(config.get("APP_ENV", "")).lower()
    if app_env == "production" and not config.get("DEBUG") and not config.get("TESTING"):
        raise click.UsageError("--drop is restricted to non-production environments.")


@click.group("auth")
def auth_cli() -> None:
    """Authentication maintenance commands."""


@auth_cli.command("init-db")
@click.option("--drop", is_flag=True, help="Drop existing tables first (non-production only).")
@with_appcontext
def init_db(drop: bool) -> None:
    """Create the ``accounts`` and ``refresh_sessions`` tables."""
    if drop:
        _ensure_non_production()
        db.drop_all()
        LOGGER.info("Tables dropped")
    db.create_all()
    LOGGER.info("Tables created")
    click.echo("Database initialised.")


@auth_cli.command("purge-sessions")
@with_appcontext
def purge_sessions() -> None:
    """Delete expired refresh sessions from the configured store."""
    removed = get_auth_service().purge_expired_sessions()
    click.echo(f"Purged {removed} expired session(s).")
