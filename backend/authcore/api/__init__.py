"""HTTP surface: versioned blueprints mounted under ``API_BASE_PREFIX``."""

from __future__ import annotations

from collections.abc import Iterable

from flask import Blueprint, Flask


def _join(*parts: str) -> str:
    return "/" + "/".join(p.strip("/") for p in parts if p.strip("/"))


def register_blueprint_group(
    app: Flask,
    *,
    base_prefix: str,
    entries: Iterable[tuple[Blueprint, str]],
) -> None:
    """Mount each ``(blueprint, relative_prefix)`` pair under ``base_prefix``."""
    for bp, rel_prefix in entries:
        app.register_blueprint(bp, url_prefix=_join(base_prefix, rel_prefix))


def init_app(app: Flask) -> None:
    """Mount API v1 (``/api/v1/health``, ``/api/v1/auth/...``)."""
    from authcore.api.v1 import API_VERSION, REGISTRY

    base = _join(app.config.get("API_BASE_PREFIX", "/api"), API_VERSION)
    register_blueprint_group(app, base_prefix=base, entries=REGISTRY)


__all__ = ["init_app", "register_blueprint_group"]
