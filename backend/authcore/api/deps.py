"""Request helpers shared by the v1 routes: service lookup and bearer auth."""

from __future__ import annotations

import functools
from collections.abc import Callable
from typing import Any, TypeVar, cast

from flask import Response, current_app, g, jsonify, request

from authcore.core.errors import Forbidden, Unauthorized
from authcore.services._shared.base import TOKEN_MESSAGE
from authcore.services._shared.dto import Role
from authcore.services.auth import AuthService, VerifyIn, VerifyOut

F = TypeVar("F", bound=Callable[..., Any])

AUTH_SERVICE_KEY = "auth_service"


def get_auth_service() -> AuthService:
    """Return the :class:`AuthService` wired by the application factory."""

    service = current_app.extensions.get(AUTH_SERVICE_KEY)
    if service is None:
        raise RuntimeError("AuthService is not configured. Use create_app().")
    return cast(AuthService, service)


def _bearer_token() -> str | None:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def current_identity() -> VerifyOut:
    """Return the identity verified by :func:`require_role` for this request."""

    return cast(VerifyOut, g.auth)


def require_role(*roles: Role) -> Callable[[F], F]:
    """Ensure the request carries a valid access token with an allowed role.

    With no ``roles`` any authenticated account is accepted. The verified
    identity is exposed through :func:`current_identity`.
    """

    allowed = frozenset(roles)

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any):
            token = _bearer_token()
            if token is None:
                raise Unauthorized("Missing bearer token")
            result = get_auth_service().verify_access(VerifyIn(token=token))
            if not result.valid:
                raise Unauthorized(TOKEN_MESSAGE, code="invalid_token")
            if allowed and result.role not in allowed:
                raise Forbidden("Insufficient role")
            g.auth = result
            return func(*args, **kwargs)

        return wrapper  # type: ignore[return-value]

    return decorator


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response
