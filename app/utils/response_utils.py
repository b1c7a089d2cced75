from typing import Any, Dict, Optional
from fastapi import HTTPException, status
from fastapi.encoders import jsonable_encoder
from app.schemas.base import create_success_response, create_error_response
from app.core.exceptions import (
    ConflictError,
    NotFoundError,
    RBACError,
    StorageError,
    ValidationError,
)
from app.core.logging_config import get_logger

logger = get_logger(__name__)

ERROR_STATUS = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ConflictError: status.HTTP_409_CONFLICT,
    ValidationError: status.HTTP_400_BAD_REQUEST,
    StorageError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class ResponseWrapper:
    """Utility class for wrapping responses in standard format"""

    @staticmethod
    def success(data: Any = None, message: str = "Success") -> Dict[str, Any]:
        return jsonable_encoder(create_success_response(data, message))

    @staticmethod
    def error(
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """Wrap error response and make it JSON-safe"""
        return jsonable_encoder(create_error_response(message, error_code, details))

    @staticmethod
    def created(data: Any = None, message: str = "Resource created successfully") -> Dict[str, Any]:
        return ResponseWrapper.success(data, message)

    @staticmethod
    def deleted(message: str = "Resource deleted successfully") -> Dict[str, Any]:
        return ResponseWrapper.success(None, message)


def handle_rbac_error(error: RBACError) -> HTTPException:
    """Convert a domain error into an HTTPException carrying the error envelope"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    for error_type, code in ERROR_STATUS.items():
        if isinstance(error, error_type):
            status_code = code
            break

    if status_code >= 500:
        logger.error(f"RBAC storage failure: {error.message}")

    detail = ResponseWrapper.error(
        message=error.message,
        error_code=error.error_code,
        details=error.details,
    )
    return HTTPException(status_code=status_code, detail=detail)
