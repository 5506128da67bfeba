"""Application settings with environment-based simple classes."""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from datetime import timedelta
from typing import Final

from dotenv import load_dotenv

# Public selector env var (keep neutral name to avoid collisions)
ENV_VAR: Final[str] = "APP_ENV"  # 'development' | 'testing' | 'production'

DEV_ACCESS_SECRET: Final[str] = "access_secret_key"
DEV_REFRESH_SECRET: Final[str] = "refresh_secret_key"
DEFAULT_REDIS_SESSION_GRACE_SECONDS: Final[int] = 3600

_DURATION_RE = re.compile(r"^\s*(\d+)\s*([smhd])\s*$", re.IGNORECASE)
_DURATION_UNITS: Final[Mapping[str, str]] = {
    "s": "seconds",
    "m": "minutes",
    "h": "hours",
    "d": "days",
}

# Load .env in development (no-op when the file is missing)
load_dotenv()


def env_bool(name: str, default: bool = False) -> bool:
    """Parse a boolean flag from an environment variable.

    Parameters
    ----------
    name: str
        Environment variable to inspect.
    default: bool, optional
        Value returned when the variable is unset. Defaults to ``False``.

    Returns
    -------
    bool
        ``True`` if the value resembles ``{"1", "true", "yes", "y", "on"}``
        ignoring case; otherwise ``False`` or ``default`` when missing.
    """
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "y", "on"}


def parse_duration(value: str | int | timedelta) -> timedelta:
    """Convert a compact duration such as ``"15m"`` or ``"7d"`` to a timedelta.

    Parameters
    ----------
    value: str | int | timedelta
        ``<int><unit>`` with unit one of ``s``, ``m``, ``h``, ``d``. Integers
        are read as seconds; timedeltas pass through unchanged.

    Returns
    -------
    datetime.timedelta
        Positive duration.

    Raises
    ------
    ValueError
        If the value is malformed or not strictly positive.
    """
    if isinstance(value, timedelta):
        delta = value
    elif isinstance(value, int):
        delta = timedelta(seconds=value)
    else:
        match = _DURATION_RE.match(str(value))
        if not match:
            raise ValueError(f"Invalid duration {value!r}; expected e.g. '15m' or '7d'.")
        amount, unit = match.groups()
        delta = timedelta(**{_DURATION_UNITS[unit.lower()]: int(amount)})
    if delta <= timedelta(0):
        raise ValueError(f"Duration must be positive, got {value!r}.")
    return delta


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    APP_ENV: str
        Environment name taken from ``APP_ENV``.
    API_BASE_PREFIX: str
        Root path for registering API blueprints.
    SECRET_KEY: str
        Flask secret. Unused for tokens, which have their own keys.
    JWT_ACCESS_SECRET: str
        HMAC key for access tokens.
    JWT_REFRESH_SECRET: str
        HMAC key for refresh tokens. Must differ from the access key.
    JWT_ACCESS_EXPIRES: str
        Access-token lifetime (``"15m"`` by default).
    JWT_REFRESH_EXPIRES: str
        Refresh-token lifetime (``"7d"`` by default).
    JWT_ALGORITHM: str
        Signing algorithm passed to PyJWT.
    SESSION_STORE: str
        ``"sql"`` (default) or ``"redis"``.
    REDIS_URL: str | None
        Connection URL used when ``SESSION_STORE == "redis"``.
    REDIS_SESSION_GRACE_SECONDS: int
        Extra key TTL past ``expires_at`` so expiry stays observable.
    PASSWORD_HASH_METHOD: str
        Method string for :func:`werkzeug.security.generate_password_hash`.
    SQLALCHEMY_DATABASE_URI: str
        Database connection string consumed by SQLAlchemy.
    LOG_LEVEL: str
        Root logging verbosity (``INFO`` by default).

    Notes
    -----
    Values are primarily sourced from environment variables, enabling
    configuration without code changes. Secret defaults exist only for local
    convenience and are rejected in production.
    """

    APP_ENV = os.getenv(ENV_VAR, "development")
    API_BASE_PREFIX = "/api"

    # Secrets
    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")
    JWT_ACCESS_SECRET = os.getenv("JWT_ACCESS_SECRET", DEV_ACCESS_SECRET)
    JWT_REFRESH_SECRET = os.getenv("JWT_REFRESH_SECRET", DEV_REFRESH_SECRET)

    # Token lifetimes
    JWT_ACCESS_EXPIRES = os.getenv("JWT_ACCESS_EXPIRES", "15m")
    JWT_REFRESH_EXPIRES = os.getenv("JWT_REFRESH_EXPIRES", "7d")
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")

    # Session store backend
    SESSION_STORE = os.getenv("SESSION_STORE", "sql")
    REDIS_URL = os.getenv("REDIS_URL")
    REDIS_SESSION_GRACE_SECONDS = int(
        os.getenv("REDIS_SESSION_GRACE_SECONDS", DEFAULT_REDIS_SESSION_GRACE_SECONDS)
    )

    PASSWORD_HASH_METHOD = os.getenv("PASSWORD_HASH_METHOD", "scrypt")

    # DB
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./dev.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)

    # Flask & JSON
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development."""

    DEBUG = env_bool("FLASK_DEBUG", True)
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Uses an in-memory SQLite database unless ``TEST_DATABASE_URL`` is set.
    - Uses a cheap password hash so the suite stays fast.
    """

    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    PASSWORD_HASH_METHOD = "pbkdf2:sha256:1000"
    PROPAGATE_EXCEPTIONS = True


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments."""

    DEBUG = False
    SQLALCHEMY_ECHO = False
    PROPAGATE_EXCEPTIONS = False


# Map names -> classes (simple, explicit)
CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Return the configuration class inferred from ``APP_ENV``.

    Falls back to :class:`DevelopmentConfig` when ``APP_ENV`` is unset or
    unknown.
    """
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)


def validate_secrets(config: Mapping[str, object]) -> None:
    """Reject unsafe signing secrets outside development and testing.

    :param config: Loaded Flask configuration mapping.
    :raises RuntimeError: If production runs with default or shared secrets.
    """
    if config.get("DEBUG") or config.get("TESTING"):
        return
    access = config.get("JWT_ACCESS_SECRET")
    refresh = config.get("JWT_REFRESH_SECRET")
    if not access or not refresh:
        raise RuntimeError("JWT_ACCESS_SECRET and JWT_REFRESH_SECRET must be set.")
    if access == DEV_ACCESS_SECRET or refresh == DEV_REFRESH_SECRET:
        raise RuntimeError("Development signing secrets are not allowed in production.")
    if access == refresh:
        raise RuntimeError("Access and refresh tokens must use distinct signing secrets.")
