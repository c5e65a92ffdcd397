"""
Standard API Response Wrappers
Every callable returns ``{success, message, data}``; failures carry a typed error.
"""

from typing import Any, Dict, Generic, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Standard API response wrapper."""

    success: bool = Field(description="Whether the operation was successful")
    message: str = Field(default="", description="Response message")
    data: Optional[T] = Field(default=None, description="Response data")

    @classmethod
    def success_response(cls, data: Optional[T] = None, message: str = "Success") -> "ApiResponse[T]":
        """Create a successful response."""
        return cls(success=True, data=data, message=message)


class ErrorBody(BaseModel):
    """Typed callable error."""

    code: str = Field(description="Callable error code, e.g. permission-denied")
    message: str = Field(description="Error message")
    details: Dict[str, Any] = Field(default_factory=dict, description="Additional error details")


class ErrorResponse(BaseModel):
    """Error envelope."""

    success: bool = False
    message: str
    error: ErrorBody
