"""
Shared building blocks for portal modules.
"""

from school_portal.modules.shared.exceptions import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    PortalServiceError,
    StorageFailureError,
    ValidationFailedError,
    form_validation_error,
    raise_http_error,
    raise_internal_error,
)
from school_portal.modules.shared.models import BaseModel, pg_enum

__all__ = [
    "BaseModel",
    "pg_enum",
    "PortalServiceError",
    "NotFoundError",
    "ConflictError",
    "ValidationFailedError",
    "PermissionDeniedError",
    "StorageFailureError",
    "raise_http_error",
    "raise_internal_error",
    "form_validation_error",
]
