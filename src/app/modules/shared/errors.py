"""
Service Errors

Base exception hierarchy raised by the service layer. Routers convert these
into structured HTTP errors of the form ``{"error": CODE, "message": text}``.
"""

from fastapi import HTTPException


class ServiceError(Exception):
    """Base exception for service errors."""

    def __init__(self, message: str, error_code: str, status_code: int = 400):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(message)


class NotFoundError(ServiceError):
    """Raised when a requested record does not exist."""

    def __init__(self, message: str, error_code: str = "NOT_FOUND"):
        super().__init__(message=message, error_code=error_code, status_code=404)


class ValidationError(ServiceError):
    """Raised when input fails a business validation rule."""

    def __init__(self, message: str, error_code: str = "VALIDATION_ERROR"):
        super().__init__(message=message, error_code=error_code, status_code=422)


class ConflictError(ServiceError):
    """Raised when an operation conflicts with existing state."""

    def __init__(self, message: str, error_code: str = "CONFLICT"):
        super().__init__(message=message, error_code=error_code, status_code=409)


class ForbiddenError(ServiceError):
    """Raised when the caller may not act on a record."""

    def __init__(self, message: str = "You do not have access to this resource."):
        super().__init__(message=message, error_code="FORBIDDEN", status_code=403)


class PersistenceError(ServiceError):
    """Raised when the database rejects a write. The transaction has been rolled back."""

    def __init__(self, message: str = "Failed to persist changes."):
        super().__init__(message=message, error_code="PERSISTENCE_ERROR", status_code=500)


def handle_service_error(e: ServiceError) -> None:
    """Convert a service error to an HTTPException."""
    raise HTTPException(
        status_code=e.status_code,
        detail={
            "error": e.error_code,
            "message": e.message,
        },
    ) from e


def internal_error() -> HTTPException:
    """Build the generic 500 response for unexpected failures."""
    return HTTPException(
        status_code=500,
        detail={
            "error": "INTERNAL_ERROR",
            "message": "An unexpected error occurred.",
        },
    )
