"""Configuration helpers: durations, env selection and secret guard."""

from __future__ import annotations

from datetime import timedelta

import pytest

from authcore.core.config import (
    DEV_ACCESS_SECRET,
    DEV_REFRESH_SECRET,
    DevelopmentConfig,
    ProductionConfig,
    TestingConfig,
    get_config,
    parse_duration,
    validate_secrets,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("15m", timedelta(minutes=15)),
        ("7d", timedelta(days=7)),
        ("30s", timedelta(seconds=30)),
        ("2H", timedelta(hours=2)),
        (90, timedelta(seconds=90)),
        (timedelta(minutes=1), timedelta(minutes=1)),
    ],
)
def test_parse_duration(raw, expected):
    assert parse_duration(raw) == expected


@pytest.mark.parametrize("raw", ["", "15", "m15", "1w", "-5m", "0s", 0])
def test_parse_duration_rejects_bad_values(raw):
    with pytest.raises(ValueError):
        parse_duration(raw)


@pytest.mark.parametrize(
    ("env", "expected"),
    [
        ("production", ProductionConfig),
        ("testing", TestingConfig),
        ("development", DevelopmentConfig),
        ("unknown", DevelopmentConfig),
    ],
)
def test_get_config_follows_app_env(monkeypatch, env, expected):
    monkeypatch.setenv("APP_ENV", env)
    assert get_config() is expected


def _prod(access, refresh) -> dict:
    return {
        "DEBUG": False,
        "TESTING": False,
        "JWT_ACCESS_SECRET": access,
        "JWT_REFRESH_SECRET": refresh,
    }


def test_validate_secrets_accepts_distinct_custom_secrets():
    validate_secrets(_prod("a" * 32, "b" * 32))


@pytest.mark.parametrize(
    ("access", "refresh", "message"),
    [
        (DEV_ACCESS_SECRET, "b" * 32, "Development"),
        ("a" * 32, DEV_REFRESH_SECRET, "Development"),
        ("same", "same", "distinct"),
        ("", "b" * 32, "must be set"),
    ],
)
def test_validate_secrets_rejects_unsafe_production(access, refresh, message):
    with pytest.raises(RuntimeError, match=message):
        validate_secrets(_prod(access, refresh))


def test_validate_secrets_skipped_for_testing():
    validate_secrets({"TESTING": True, "JWT_ACCESS_SECRET": "x", "JWT_REFRESH_SECRET": "x"})
