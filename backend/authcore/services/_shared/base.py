# authcore/services/_shared/base.py
from __future__ import annotations

from datetime import UTC, datetime

from authcore.core import errors as api_errors
from authcore.services._shared.errors import (
    AccountExists,
    AccountNotFound,
    DuplicateEmail,
    DuplicateExternalId,
    InvalidCredentials,
    InvalidToken,
    ServiceError,
    TokenExpired,
    TokenNotFoundOrAlreadyRotated,
)

# Client-facing messages are deliberately vague: no account enumeration,
# no hint about which token check failed.
CREDENTIALS_MESSAGE = "Invalid credentials"
TOKEN_MESSAGE = "Invalid token"


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Provide a single UTC clock seam (:meth:`now_utc`) tests can patch.
    * Centralize translation of service errors to API errors.

    Notes
    -----
    Services depend on ports only; transactions live inside the adapters.
    """

    def now_utc(self) -> datetime:
        """Return the current aware UTC instant."""
        return datetime.now(UTC)

    # -------------------------- Error handling ------------------------------

    @staticmethod
    def translate_exceptions(exc: Exception) -> Exception:
        """
        Map service-level errors to API-level (HTTP) errors.

        :param exc: Exception raised within the service.
        :type exc: Exception
        :returns: Translated exception ready to be re-raised.
        :rtype: Exception
        """
        if isinstance(exc, AccountExists | DuplicateEmail | DuplicateExternalId):
            # → 409 Conflict
            return api_errors.Conflict(str(exc))

        if isinstance(exc, AccountNotFound | InvalidCredentials):
            # → 401, same body whether the email exists or not
            return api_errors.Unauthorized(CREDENTIALS_MESSAGE, code="invalid_credentials")

        if isinstance(exc, InvalidToken | TokenNotFoundOrAlreadyRotated | TokenExpired):
            # → 401, same body for every refresh rejection
            return api_errors.Unauthorized(TOKEN_MESSAGE, code="invalid_token")

        if isinstance(exc, ServiceError):
            return api_errors.APIError(message=str(exc), status_code=400, code="bad_request")

        # Fallback: return untouched (will bubble up to the Flask handler)
        return exc
