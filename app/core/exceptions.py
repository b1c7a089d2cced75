"""Domain exceptions raised by the RBAC core."""

from typing import Any, Dict, Optional


class RBACError(Exception):
    """Base exception for the RBAC core."""

    error_code = "RBAC_ERROR"

    def __init__(self, message: str = "An error occurred", details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details
        super().__init__(self.message)


class NotFoundError(RBACError):
    """Raised when a role, permission, menu or grant does not resolve to an active record."""
    error_code = "NOT_FOUND"


class ConflictError(RBACError):
    """Raised when a slug is already owned by another active record."""
    error_code = "CONFLICT"


class ValidationError(RBACError):
    """Raised for malformed input such as a self-parented menu or unresolved ids."""
    error_code = "VALIDATION_FAILED"


class StorageError(RBACError):
    """Raised when the persistence layer fails for a reason not classified above."""
    error_code = "INTERNAL_SERVER_ERROR"
