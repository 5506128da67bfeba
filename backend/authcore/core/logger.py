"""JSON logging for the auth service, correlated by request id.

Every record leaving the root handler is a single JSON object. A small,
fixed set of structured fields passed through ``extra=`` is promoted to
top-level keys; anything else stays out of the output so tokens, hashes and
passwords can never be logged by accident through ``extra``.
"""

from __future__ import annotations

import json
import logging
import sys
import time
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from flask import Flask, Response, g, has_request_context, request

REQUEST_ID_HEADER = "X-Request-ID"
INCOMING_ID_HEADERS = (REQUEST_ID_HEADER, "X-Correlation-ID")

# ``extra=`` attributes allowed into the JSON payload
EXTRA_KEYS = (
    "endpoint",
    "status",
    "elapsed_ms",
    "account_id",
    "session_id",
    "reason",
    "role",
    "removed",
)

_HANDLER_MARK = "_authcore_json"


class JSONFormatter(logging.Formatter):
    """Render a log record as one JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "time": datetime.fromtimestamp(record.created, UTC).isoformat(
                timespec="milliseconds"
            ),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", None),
        }
        payload.update(
            (key, getattr(record, key)) for key in EXTRA_KEYS if hasattr(record, key)
        )
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class RequestIdFilter(logging.Filter):
    """Stamp ``request_id`` on records emitted while serving a request."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = ensure_request_id() if has_request_context() else None
        return True


def ensure_request_id() -> str:
    """Return this request's correlation id, adopting or minting it once.

    An id supplied by the caller in ``X-Request-ID`` or ``X-Correlation-ID``
    is reused; otherwise a UUID4 is generated. Outside a request context a
    fresh UUID4 is returned on every call.
    """
    if not has_request_context():
        return str(uuid4())
    request_id = g.get("request_id")
    if request_id is None:
        incoming = (request.headers.get(h) for h in INCOMING_ID_HEADERS)
        request_id = next((v for v in incoming if v), None) or str(uuid4())
        g.request_id = request_id
    return request_id


def configure_logging(level: str | int = "INFO") -> None:
    """Install the JSON stdout handler on the root logger.

    Calling it again swaps the previously installed JSON handler and updates
    the level; handlers installed by other code (pytest's capture handler,
    for example) are left in place.
    """
    root = logging.getLogger()
    for existing in [h for h in root.handlers if getattr(h, _HANDLER_MARK, False)]:
        root.removeHandler(existing)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())
    handler.addFilter(RequestIdFilter())
    setattr(handler, _HANDLER_MARK, True)
    root.addHandler(handler)
    root.setLevel(level.upper() if isinstance(level, str) else level)


def init_app(app: Flask) -> None:
    """Seed the request id, echo it back and log request timings."""

    app.logger.addFilter(RequestIdFilter())
    access_log = logging.getLogger("authcore.access")

    @app.before_request
    def _start_request() -> None:
        # ``g`` lives on the app context, which may outlive a single request.
        g.pop("request_id", None)
        g.pop("request_started", None)
        ensure_request_id()
        g.request_started = time.perf_counter()

    @app.after_request
    def _finish_request(response: Response) -> Response:
        response.headers.setdefault(REQUEST_ID_HEADER, ensure_request_id())
        started = g.get("request_started")
        if started is not None:
            access_log.debug(
                "Request completed",
                extra={
                    "endpoint": request.endpoint,
                    "status": response.status_code,
                    "elapsed_ms": round((time.perf_counter() - started) * 1000, 2),
                },
            )
        return response


__all__ = ["JSONFormatter", "configure_logging", "ensure_request_id", "init_app"]
