"""Health check endpoint."""

from __future__ import annotations

from flask import Blueprint, current_app
from redis.exceptions import RedisError  # type: ignore[import-untyped]
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from authcore.api.deps import json_response
from authcore.core.extensions import db

bp = Blueprint("health", __name__)


@bp.get("/health")
def healthcheck():
    """Return application, database and session store health."""

    db_status = "ok"
    try:
        db.session.execute(text("SELECT 1"))
    except SQLAlchemyError:  # pragma: no cover - depends on DB backend
        current_app.logger.exception("healthcheck.db_error")
        db_status = "fail"
    payload = {
        "status": "ok",
        "db": db_status,
        "version": current_app.config.get("APP_VERSION", "dev"),
    }

    redis_conn = current_app.extensions.get("redis_connection")
    if redis_conn is not None:
        try:
            redis_conn.client.ping()
            payload["sessions"] = "ok"
        except (RedisError, RuntimeError):  # pragma: no cover - depends on Redis
            current_app.logger.exception("healthcheck.redis_error")
            payload["sessions"] = "fail"
    return json_response(payload)
