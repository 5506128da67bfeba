"""authcore: token-based authentication service (Flask)."""

from __future__ import annotations

from .factory import create_app

__all__ = ["create_app"]
