"""
Secure Error Handling

Service error taxonomy plus the FastAPI exception handlers that turn every
error into a JSON body of the form {"message": "..."}. Storage and unexpected
failures are logged in full server-side and returned to the client with a
sanitized message and a correlation id.
"""

import logging
import uuid
from typing import Mapping, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    """Base class for errors that map onto an HTTP status code."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ServiceError):
    """Client payload violates required-field or shape rules."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, violations: list[str]):
        self.violations = list(violations)
        super().__init__(
            "Invalid or missing required field(s): " + ", ".join(self.violations)
        )


class NotFoundError(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(ServiceError):
    """Path id and body id disagree."""

    status_code = status.HTTP_400_BAD_REQUEST


class StorageError(ServiceError):
    """Underlying store unavailable or the operation failed."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def log_and_sanitize_error(
    error: Exception,
    context: str,
    user_message: Optional[str] = None
) -> tuple[str, str]:
    """
    Log full error details server-side and return sanitized message for client.

    Args:
        error: The exception that occurred
        context: Description of what operation failed (e.g., "Create post")
        user_message: Optional custom message to show user. If None, uses generic message.

    Returns:
        Tuple of (sanitized_message, error_id) for client response
    """
    # Generate unique error ID for correlation
    error_id = str(uuid.uuid4())[:8]

    # Log full error server-side, including the chained storage exception
    logger.error(
        f"{context} failed [{error_id}]: {type(error).__name__}: {str(error)}",
        exc_info=error,
    )

    if user_message:
        sanitized = f"{user_message} (Error ID: {error_id})"
    else:
        sanitized = f"{context} failed. Please try again later. (Error ID: {error_id})"

    return sanitized, error_id


def error_response(
    message: str, status_code: int, headers: Optional[Mapping[str, str]] = None
) -> JSONResponse:
    """Consistent error payloads across the API."""
    return JSONResponse(
        status_code=status_code, content={"message": message}, headers=headers
    )


def _describe_request_errors(exc: RequestValidationError) -> list[str]:
    violations = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        msg = err.get("msg", "invalid")
        violations.append(f"{loc} ({msg})" if loc else msg)
    return violations or ["body"]


def register_exception_handlers(
    app: FastAPI, headers: Optional[Mapping[str, str]] = None
) -> None:
    """
    Install the handlers that map every error onto {"message": ...}.

    headers are attached to the catch-all 500 response, which is built by the
    server error middleware outside the app's own middleware stack.
    """

    @app.exception_handler(StorageError)
    async def storage_exception_handler(request: Request, exc: StorageError):
        message, _ = log_and_sanitize_error(
            exc, f"{request.method} {request.url.path}", user_message=exc.message
        )
        return error_response(message, exc.status_code)

    @app.exception_handler(ServiceError)
    async def service_exception_handler(request: Request, exc: ServiceError):
        logger.info(
            "%s %s rejected (%d): %s",
            request.method, request.url.path, exc.status_code, exc.message,
        )
        return error_response(exc.message, exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        violations = _describe_request_errors(exc)
        return error_response(
            "Invalid request body: " + ", ".join(violations),
            status.HTTP_400_BAD_REQUEST,
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        detail = exc.detail
        message = (
            detail.get("message") if isinstance(detail, dict) else str(detail)
        ) or "Request failed."
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": message},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unexpected_exception_handler(request: Request, exc: Exception):
        message, _ = log_and_sanitize_error(
            exc,
            f"{request.method} {request.url.path}",
            user_message="An unexpected server error occurred. Please try again later.",
        )
        return error_response(message, status.HTTP_500_INTERNAL_SERVER_ERROR, headers)
