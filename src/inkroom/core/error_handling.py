"""Exception handlers for inkroom.

Every error leaves the API as a JSON body carrying a machine-readable code and
the request's correlation ID.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import structlog
from litestar import Response
from litestar.status_codes import (
    HTTP_400_BAD_REQUEST,
    HTTP_401_UNAUTHORIZED,
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

if TYPE_CHECKING:
    from litestar import Request
    from litestar.exceptions import HTTPException, ValidationException

    from inkroom.exceptions import (
        AuthenticationError,
        DrawingNotFoundError,
        InvalidDrawingError,
        MissingCredentialsError,
        UserExistsError,
    )

logger = structlog.get_logger(__name__)

HTTP_ERROR_CODES = {
    400: "bad_request",
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
    409: "conflict",
    429: "rate_limited",
    500: "internal_error",
    503: "service_unavailable",
}


@dataclass
class ErrorDetail:
    """Details about a specific error."""

    field: str | None = None
    message: str = ""
    code: str = "error"


@dataclass
class ErrorResponse:
    """Structured error response format."""

    status: str = "error"
    message: str = ""
    code: str = "internal_error"
    correlation_id: str | None = None
    details: list[ErrorDetail] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON response."""
        result: dict[str, Any] = {
            "status": self.status,
            "message": self.message,
            "code": self.code,
        }
        if self.correlation_id:
            result["correlation_id"] = self.correlation_id
        if self.details:
            result["details"] = [{"field": d.field, "message": d.message, "code": d.code} for d in self.details]
        return result

    def to_response(self, status_code: int) -> Response[dict[str, Any]]:
        """Wrap the body in a JSON response."""
        return Response(content=self.to_dict(), status_code=status_code, media_type="application/json")


def get_correlation_id(request: Request) -> str | None:
    """Extract correlation ID from request state or headers."""
    correlation_id = request.scope.get("state", {}).get("correlation_id")
    if correlation_id:
        return correlation_id
    return request.headers.get("X-Correlation-ID") or request.headers.get("X-Request-ID")


def validation_exception_handler(request: Request, exc: ValidationException) -> Response[dict[str, Any]]:
    """Handle request body validation errors with per-field details."""
    details: list[ErrorDetail] = []
    for error in exc.extra or []:
        if isinstance(error, dict):
            details.append(
                ErrorDetail(
                    field=error.get("key") or None,
                    message=str(error.get("message", error)),
                    code="validation_error",
                )
            )
        else:
            details.append(ErrorDetail(message=str(error), code="validation_error"))
    if not details:
        details.append(ErrorDetail(message=str(exc.detail), code="validation_error"))

    correlation_id = get_correlation_id(request)
    logger.warning(
        "Validation error",
        correlation_id=correlation_id,
        path=request.url.path,
        method=request.method,
        error_count=len(details),
    )
    return ErrorResponse(
        message="Invalid payload",
        code="invalid_payload",
        correlation_id=correlation_id,
        details=details,
    ).to_response(HTTP_400_BAD_REQUEST)


def invalid_drawing_handler(request: Request, exc: InvalidDrawingError) -> Response[dict[str, Any]]:
    """Handle drawing payloads that decode but break a domain rule."""
    correlation_id = get_correlation_id(request)
    logger.warning("Invalid drawing payload", correlation_id=correlation_id, issues=exc.issues)
    return ErrorResponse(
        message="Invalid payload",
        code="invalid_payload",
        correlation_id=correlation_id,
        details=[ErrorDetail(field=name, message=message, code="validation_error") for name, message in exc.issues],
    ).to_response(HTTP_400_BAD_REQUEST)


def http_exception_handler(request: Request, exc: HTTPException) -> Response[dict[str, Any]]:
    """Handle HTTP exceptions, including unrouted paths, with structured JSON."""
    correlation_id = get_correlation_id(request)
    error_code = HTTP_ERROR_CODES.get(exc.status_code, "error")
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    if exc.status_code == HTTP_404_NOT_FOUND and message == "Not Found":
        message = "Route not found"

    log_level = "warning" if exc.status_code < 500 else "error"
    getattr(logger, log_level)(
        "HTTP exception",
        correlation_id=correlation_id,
        path=request.url.path,
        method=request.method,
        status_code=exc.status_code,
        error_code=error_code,
    )
    return ErrorResponse(message=message, code=error_code, correlation_id=correlation_id).to_response(
        exc.status_code
    )


def drawing_not_found_handler(request: Request, exc: DrawingNotFoundError) -> Response[dict[str, Any]]:
    """Handle DrawingNotFoundError exceptions."""
    correlation_id = get_correlation_id(request)
    logger.warning("Drawing not found", correlation_id=correlation_id, drawing_id=str(exc.drawing_id))
    return ErrorResponse(
        message="Not found",
        code="drawing_not_found",
        correlation_id=correlation_id,
        details=[ErrorDetail(field="id", message=str(exc), code="not_found")],
    ).to_response(HTTP_404_NOT_FOUND)


def authentication_error_handler(request: Request, exc: AuthenticationError) -> Response[dict[str, Any]]:
    """Handle missing sessions and bad credentials."""
    correlation_id = get_correlation_id(request)
    logger.info("Authentication failed", correlation_id=correlation_id, path=request.url.path)
    return ErrorResponse(
        message=str(exc) or "Auth required",
        code="unauthorized",
        correlation_id=correlation_id,
    ).to_response(HTTP_401_UNAUTHORIZED)


def missing_credentials_handler(request: Request, exc: MissingCredentialsError) -> Response[dict[str, Any]]:
    """Handle registrations without a username or password."""
    return ErrorResponse(
        message=str(exc),
        code="invalid_payload",
        correlation_id=get_correlation_id(request),
    ).to_response(HTTP_400_BAD_REQUEST)


def user_exists_handler(request: Request, exc: UserExistsError) -> Response[dict[str, Any]]:
    """Handle duplicate registrations."""
    return ErrorResponse(
        message="User exists",
        code="user_exists",
        correlation_id=get_correlation_id(request),
        details=[ErrorDetail(field="username", message=str(exc), code="conflict")],
    ).to_response(HTTP_409_CONFLICT)


def generic_exception_handler(request: Request, exc: Exception) -> Response[dict[str, Any]]:
    """Handle unexpected exceptions with a generic error response.

    Logs the full exception but returns a safe message to the client.
    """
    correlation_id = get_correlation_id(request)
    logger.exception(
        "Unhandled exception",
        correlation_id=correlation_id,
        path=request.url.path,
        method=request.method,
        exc_info=exc,
    )
    return ErrorResponse(
        message="Server error",
        code="internal_error",
        correlation_id=correlation_id,
    ).to_response(HTTP_500_INTERNAL_SERVER_ERROR)


def get_exception_handlers() -> dict:
    """Get all exception handlers for the application.

    Returns:
        Dictionary mapping exception types to handler functions.
    """
    from litestar.exceptions import HTTPException, ValidationException

    from inkroom.exceptions import (
        AuthenticationError,
        DrawingNotFoundError,
        InvalidDrawingError,
        MissingCredentialsError,
        UserExistsError,
    )

    return {
        ValidationException: validation_exception_handler,
        HTTPException: http_exception_handler,
        InvalidDrawingError: invalid_drawing_handler,
        DrawingNotFoundError: drawing_not_found_handler,
        AuthenticationError: authentication_error_handler,
        MissingCredentialsError: missing_credentials_handler,
        UserExistsError: user_exists_handler,
        Exception: generic_exception_handler,
    }
