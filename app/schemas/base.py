from typing import Any, Dict, Generic, Optional, TypeVar
from pydantic import BaseModel, Field, ConfigDict
from datetime import datetime, timezone

# Generic type for data payload
DataType = TypeVar('DataType')


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")


class BaseResponse(BaseModel, Generic[DataType]):
    """
    Base response schema for all API endpoints
    """
    success: bool = Field(True, description="Indicates if the request was successful")
    message: str = Field("Success", description="Human readable message")
    data: Optional[DataType] = Field(None, description="Response data payload")
    timestamp: str = Field(default_factory=utc_timestamp, description="Response timestamp in UTC")

    model_config = ConfigDict()


class ErrorResponse(BaseModel):
    """
    Error response schema for failed requests
    """
    success: bool = Field(False, description="Always false for error responses")
    message: str = Field(..., description="Error message")
    error_code: Optional[str] = Field(None, description="Specific error code")
    details: Optional[Dict[str, Any]] = Field(None, description="Additional error details")
    timestamp: str = Field(default_factory=utc_timestamp, description="Error timestamp in UTC")

    model_config = ConfigDict()


# Utility functions for creating consistent responses
def create_success_response(data: Any = None, message: str = "Success") -> Dict[str, Any]:
    return BaseResponse[Any](message=message, data=data).model_dump()


def create_error_response(message: str, error_code: Optional[str] = None, details: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    return ErrorResponse(message=message, error_code=error_code, details=details).model_dump()
