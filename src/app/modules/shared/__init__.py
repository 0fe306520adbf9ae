"""
Shared module - Base model and service errors used across modules.
"""

from app.modules.shared.errors import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    PersistenceError,
    ServiceError,
    ValidationError,
    handle_service_error,
    internal_error,
)
from app.modules.shared.models import BaseModel, utcnow

__all__ = [
    "BaseModel",
    "utcnow",
    "ServiceError",
    "NotFoundError",
    "ValidationError",
    "ConflictError",
    "ForbiddenError",
    "PersistenceError",
    "handle_service_error",
    "internal_error",
]
