"""Application factory wiring Flask extensions, adapters and blueprints."""

from __future__ import annotations

import atexit
import logging
from collections.abc import Callable
from typing import Any

from flask import Flask

from authcore.core.config import (
    DEFAULT_REDIS_SESSION_GRACE_SECONDS,
    BaseConfig,
    get_config,
    parse_duration,
    validate_secrets,
)
from authcore.core.logger import configure_logging, init_app as init_logging
from authcore.services._shared.ports import SessionStore
from authcore.services.auth import AuthService
from authcore.services.auth.service import RegisteredHook

log = logging.getLogger(__name__)

SESSION_STORES = ("sql", "redis")


def build_session_store(
    app: Flask, *, redis_factory: Callable[..., Any] | None = None
) -> SessionStore:
    """Build the refresh session store selected by ``SESSION_STORE``.

    For ``redis`` an owned :class:`RedisConnection` is opened, stored in
    ``app.extensions["redis_connection"]`` and closed at interpreter exit.

    :raises RuntimeError: On an unknown store name or missing ``REDIS_URL``.
    """
    kind = str(app.config.get("SESSION_STORE", "sql")).lower()
    log.info("Session store selected", extra={"reason": kind})
    if kind not in SESSION_STORES:
        raise RuntimeError(f"Unknown SESSION_STORE {kind!r}; expected one of {SESSION_STORES}.")

    if kind == "sql":
        from authcore.infra.sql import SQLAlchemySessionStore

        return SQLAlchemySessionStore()

    from authcore.infra.redis import RedisConnection, RedisSessionStore

    url = app.config.get("REDIS_URL")
    if not url:
        raise RuntimeError("SESSION_STORE=redis requires REDIS_URL.")
    conn = (
        RedisConnection(url)
        if redis_factory is None
        else RedisConnection(url, client_factory=redis_factory)
    )
    conn.connect()
    atexit.register(conn.close)
    app.extensions["redis_connection"] = conn
    return RedisSessionStore(
        r=conn.client,
        grace_seconds=int(
            app.config.get("REDIS_SESSION_GRACE_SECONDS", DEFAULT_REDIS_SESSION_GRACE_SECONDS)
        ),
    )


def build_auth_service(
    app: Flask,
    *,
    sessions: SessionStore | None = None,
    on_registered: RegisteredHook | None = None,
) -> AuthService:
    """Compose :class:`AuthService` from the application's configuration."""
    from authcore.infra.jwt import PyJWTTokenSigner
    from authcore.infra.security import WerkzeugCredentialVerifier
    from authcore.infra.sql import SQLAlchemyAccountDirectory

    cfg = app.config
    signer = PyJWTTokenSigner(
        access_secret=str(cfg["JWT_ACCESS_SECRET"]),
        refresh_secret=str(cfg["JWT_REFRESH_SECRET"]),
        access_ttl=parse_duration(cfg["JWT_ACCESS_EXPIRES"]),
        refresh_ttl=parse_duration(cfg["JWT_REFRESH_EXPIRES"]),
        algorithm=str(cfg.get("JWT_ALGORITHM", "HS256")),
    )
    return AuthService(
        directory=SQLAlchemyAccountDirectory(),
        sessions=sessions if sessions is not None else build_session_store(app),
        signer=signer,
        verifier=WerkzeugCredentialVerifier(method=str(cfg["PASSWORD_HASH_METHOD"])),
        on_registered=on_registered,
    )


def create_app(
    config: str | type[BaseConfig] | object | None = None,
    *,
    sessions: SessionStore | None = None,
    on_registered: RegisteredHook | None = None,
    instance_relative_config: bool = True,
    instance_config_filename: str = "config.py",
) -> Flask:
    """Build and configure the Flask application.

    :param config: Config object, class or import string. Defaults to the
        class selected by ``APP_ENV``.
    :param sessions: Override the session store (tests).
    :param on_registered: Callback run after each local registration.
    """

    app = Flask(__name__, instance_relative_config=instance_relative_config)

    app.config.from_object(get_config() if config is None else config)
    if instance_relative_config and instance_config_filename:
        app.config.from_pyfile(instance_config_filename, silent=True)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))
    validate_secrets(app.config)

    from authcore.core import extensions

    extensions.init_app(app)

    init_logging(app)

    app.extensions["auth_service"] = build_auth_service(
        app, sessions=sessions, on_registered=on_registered
    )

    from authcore.api import init_app as init_api

    init_api(app)

    from authcore.core import errors

    errors.init_app(app)

    from authcore import cli as app_cli

    app_cli.init_app(app)

    return app
