"""
Service Errors

Typed errors raised by module services and translated to HTTP responses
by the routers. Every error carries a stable machine-readable code.
"""

import logging
from typing import NoReturn

from fastapi import HTTPException, status
from pydantic import ValidationError

logger = logging.getLogger(__name__)


class PortalServiceError(Exception):
    """Base exception for service errors."""

    def __init__(self, message: str, error_code: str, status_code: int = 400):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(message)


class NotFoundError(PortalServiceError):
    """Raised when a record does not exist."""

    def __init__(self, resource: str, identifier: object | None = None):
        message = f"{resource} {identifier} not found" if identifier else f"{resource} not found"
        super().__init__(
            message=message,
            error_code=f"{resource.upper().replace(' ', '_')}_NOT_FOUND",
            status_code=status.HTTP_404_NOT_FOUND,
        )


class ConflictError(PortalServiceError):
    """Raised when an operation conflicts with existing data or state."""

    def __init__(self, message: str, error_code: str = "CONFLICT"):
        super().__init__(message=message, error_code=error_code, status_code=409)


class ValidationFailedError(PortalServiceError):
    """Raised when input passes schema parsing but fails a business rule."""

    def __init__(self, message: str, errors: dict[str, str] | None = None):
        self.errors = errors or {}
        super().__init__(
            message=message,
            error_code="VALIDATION_FAILED",
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        )


class PermissionDeniedError(PortalServiceError):
    """Raised when the caller may not act on a record."""

    def __init__(self, message: str = "You do not have access to this resource."):
        super().__init__(
            message=message,
            error_code="PERMISSION_DENIED",
            status_code=status.HTTP_403_FORBIDDEN,
        )


class StorageFailureError(PortalServiceError):
    """Raised when object storage rejects an upload or delete."""

    def __init__(self, message: str = "File storage failed. Please try again."):
        super().__init__(
            message=message,
            error_code="STORAGE_FAILURE",
            status_code=status.HTTP_502_BAD_GATEWAY,
        )


def raise_http_error(e: PortalServiceError) -> NoReturn:
    """Convert a service error to an HTTPException."""
    detail: dict[str, object] = {"error": e.error_code, "message": e.message}
    if isinstance(e, ValidationFailedError) and e.errors:
        detail["errors"] = e.errors
    raise HTTPException(status_code=e.status_code, detail=detail) from e


def raise_internal_error(e: Exception, context: str) -> NoReturn:
    """Log an unexpected error and raise a generic 500."""
    logger.exception(f"Error {context}: {e}")
    raise HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={
            "error": "INTERNAL_ERROR",
            "message": "An unexpected error occurred.",
        },
    ) from e


def form_validation_error(e: ValidationError, message: str) -> ValidationFailedError:
    """Wrap a pydantic error raised while parsing multipart form fields."""
    errors = {".".join(str(p) for p in err["loc"]) or "form": err["msg"] for err in e.errors()}
    return ValidationFailedError(message, errors=errors)
