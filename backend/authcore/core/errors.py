"""RFC 7807 problem responses for the auth API.

Every failure leaves the service as ``application/problem+json`` with a
stable ``code`` and the request's correlation id. Service outcomes are
translated by :meth:`BaseService.translate_exceptions`; storage faults map
to ``503`` without leaking driver messages.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any

from flask import Flask, Response, has_request_context, jsonify, request
from marshmallow import ValidationError
from redis.exceptions import RedisError  # type: ignore[import-untyped]
from sqlalchemy.exc import IntegrityError, OperationalError
from werkzeug.exceptions import HTTPException

from authcore.core.logger import ensure_request_id

log = logging.getLogger(__name__)

PROBLEM_MIMETYPE = "application/problem+json"

STATUS_CODES: dict[int, str] = {
    400: "bad_request",
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
    409: "conflict",
    415: "unsupported_media_type",
    422: "validation_error",
    500: "internal_server_error",
    503: "service_unavailable",
}


@dataclass(slots=True)
class Problem:
    """One problem+json document.

    :param status: HTTP status code.
    :param code: Stable machine-readable code.
    :param detail: Client-safe summary.
    :param details: Optional structured payload (validation messages).
    """

    status: int
    code: str
    detail: str
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            "type": "about:blank",
            "title": HTTPStatus(self.status).phrase,
            "status": self.status,
            "detail": self.detail,
            "instance": request.path if has_request_context() else None,
            "code": self.code,
        }
        if self.details:
            body["details"] = self.details
        body["request_id"] = ensure_request_id()
        return body

    def response(self) -> tuple[Response, int]:
        resp = jsonify(self.to_dict())
        resp.mimetype = PROBLEM_MIMETYPE
        return resp, self.status


class APIError(Exception):
    """
    An error that renders directly as a problem response.

    Parameters
    ----------
    message : str
        Client-safe description.
    status_code : int, optional
        HTTP status. Defaults to ``400``.
    code : str, optional
        Machine-readable code. Defaults to ``"bad_request"``.
    details : dict[str, Any] | None, optional
        Extra structured payload.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 400,
        code: str = "bad_request",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = int(status_code)
        self.code = code
        self.details = details or {}

    def to_problem(self) -> Problem:
        return Problem(self.status_code, self.code, self.message, self.details)


class Conflict(APIError):
    """409: the account already exists."""

    def __init__(self, message: str = "Conflict") -> None:
        super().__init__(message, status_code=HTTPStatus.CONFLICT, code="conflict")


class Unauthorized(APIError):
    """401: credentials or token rejected."""

    def __init__(self, message: str = "Unauthorized", code: str = "unauthorized") -> None:
        super().__init__(message, status_code=HTTPStatus.UNAUTHORIZED, code=code)


class Forbidden(APIError):
    """403: authenticated, but the role is not allowed."""

    def __init__(self, message: str = "Forbidden") -> None:
        super().__init__(message, status_code=HTTPStatus.FORBIDDEN, code="forbidden")


def _render(problem: Problem, *, fault: bool = False) -> tuple[Response, int]:
    extra = {"status": int(problem.status), "reason": problem.code}
    if fault or problem.status >= 500:
        log.error("Request failed", extra=extra, exc_info=fault)
    else:
        log.warning("Request rejected", extra=extra)
    return problem.response()


def init_app(app: Flask) -> None:
    """
    Register the problem+json handlers on ``app``.

    Notes
    -----
    - Rejections (4xx) log a warning without a traceback.
    - Storage faults and unexpected errors log with ``exc_info``; clients
      only see a generic message.
    """
    from authcore.services._shared.base import BaseService
    from authcore.services._shared.errors import ServiceError

    @app.errorhandler(APIError)
    def handle_api_error(err: APIError):
        return _render(err.to_problem())

    @app.errorhandler(ServiceError)
    def handle_service_error(err: ServiceError):
        translated = BaseService.translate_exceptions(err)
        if not isinstance(translated, APIError):  # pragma: no cover
            raise translated
        return _render(translated.to_problem())

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = int(err.code or HTTPStatus.INTERNAL_SERVER_ERROR)
        code = STATUS_CODES.get(status, "error")
        if status == HTTPStatus.NOT_FOUND:
            detail = f"Route '{request.path}' not found"
        else:
            detail = (err.description or HTTPStatus(status).phrase).strip()
        return _render(Problem(status, code, detail))

    @app.errorhandler(ValidationError)
    def handle_validation_error(err: ValidationError):
        return _render(
            Problem(
                HTTPStatus.UNPROCESSABLE_ENTITY,
                "validation_error",
                "Validation failed",
                {"errors": err.messages},
            )
        )

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        # Directory adapters translate known constraints; anything here is unexpected.
        return _render(Problem(HTTPStatus.CONFLICT, "conflict", "Resource conflict"), fault=True)

    @app.errorhandler(OperationalError)
    @app.errorhandler(RedisError)
    def handle_storage_unavailable(err: Exception):
        return _render(
            Problem(
                HTTPStatus.SERVICE_UNAVAILABLE,
                "service_unavailable",
                "Service temporarily unavailable",
            ),
            fault=True,
        )

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception):
        return _render(
            Problem(HTTPStatus.INTERNAL_SERVER_ERROR, "internal_server_error", "Unexpected error"),
            fault=True,
        )
