from __future__ import annotations

from datetime import datetime
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """Base schema: snake_case attributes, camelCase JSON, readable from ORM objects."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# PUBLIC_INTERFACE
class ApiResponse(CamelModel, Generic[T]):
    """Standard success envelope."""
    success: bool = Field(True, description="Whether the request succeeded")
    message: str = Field("Success", description="Human readable message")
    data: Optional[T] = Field(default=None, description="Response payload")


# PUBLIC_INTERFACE
def ok(data: Any = None, message: str = "Success") -> ApiResponse:
    """Wrap a payload in the success envelope."""
    return ApiResponse(success=True, message=message, data=data)


class ErrorInfo(BaseModel):
    """Structured error description."""
    type: str = Field(..., description="Machine-readable error type code")
    details: Optional[Any] = Field(default=None, description="Optional error details (e.g., validation issues)")


# PUBLIC_INTERFACE
class ErrorResponse(CamelModel):
    """Error envelope returned by the exception handlers; success is always false."""
    success: bool = Field(False)
    message: str = Field(..., description="Human-readable error message")
    data: None = Field(default=None)
    error: ErrorInfo = Field(..., description="Error details")
    correlation_id: Optional[str] = Field(default=None, description="Request correlation ID")
    path: Optional[str] = Field(default=None, description="Request path")
    timestamp: datetime = Field(..., description="Error timestamp (UTC)")
