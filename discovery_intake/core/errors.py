# discovery_intake/core/errors.py
from typing import Any, Dict, Optional, Tuple

from starlette.exceptions import HTTPException as StarletteHTTPException

GENERIC_ERROR_MESSAGE = "An error occurred. Please try again or contact us directly."
CONFIGURATION_ERROR_MESSAGE = "Server configuration error. Please contact support."
VALIDATION_ERROR_MESSAGE = "Please provide your name and a valid email address."
METHOD_NOT_ALLOWED_MESSAGE = "Method not allowed"
RATE_LIMITED_MESSAGE = "Too many requests. Please try again later."


class IntakeError(Exception):
    """Basis voor alle fouten in de intake flow."""

    status_code: int = 500
    public_message: str = GENERIC_ERROR_MESSAGE

    def __init__(self, detail: str = "", *, upstream_status: Optional[int] = None):
        super().__init__(detail or self.__class__.__name__)
        self.detail = detail
        self.upstream_status = upstream_status


class ConfigurationError(IntakeError):
    """Missing HubSpot credential. Fatal for the request, no retry."""

    public_message = CONFIGURATION_ERROR_MESSAGE


class ConflictUnresolvedError(IntakeError):
    """409 from HubSpot without a parseable existing contact id."""


class UpstreamWriteError(IntakeError):
    """Contact create/update failed (non-2xx, timeout, transport error)."""


class AttachmentError(IntakeError):
    """Photo upload or note creation failed. Recoverable: logged and skipped."""


class SubmissionValidationError(IntakeError):
    status_code = 400
    public_message = VALIDATION_ERROR_MESSAGE


def error_response(exc: Exception) -> Tuple[int, Dict[str, Any]]:
    """Map an exception to (status, body). Detail never leaves the server."""
    if isinstance(exc, IntakeError):
        status, message = exc.status_code, exc.public_message
    elif isinstance(exc, StarletteHTTPException):
        # Framework fouten (routing, form parsing) krijgen dezelfde body
        status = exc.status_code
        if status == 405:
            message = METHOD_NOT_ALLOWED_MESSAGE
        elif status == 429:
            message = RATE_LIMITED_MESSAGE
        elif status in (400, 413, 415, 422):
            message = VALIDATION_ERROR_MESSAGE
        else:
            message = GENERIC_ERROR_MESSAGE
    else:
        status, message = 500, GENERIC_ERROR_MESSAGE
    return status, {"success": False, "message": message}
