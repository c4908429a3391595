"""
Envelope models shared by every API route.

Successful calls return ``{"success": true, "data": ...}``; service errors are
rendered as ``ErrorResponse`` by the exception handler in ``app.py``.
"""

from typing import Any

from pydantic import BaseModel, Field

from shared.errors import ServiceError


class APIResponse(BaseModel):
    """Success envelope."""

    success: bool = Field(default=True, description="Always true for successful calls")
    message: str | None = Field(default=None, description="Optional human readable note")
    data: Any = Field(None, description="Operation result")


class ErrorResponse(BaseModel):
    """Error envelope for ``ServiceError`` subclasses."""

    success: bool = Field(default=False, description="Always false for errors")
    message: str = Field(..., description="Error message")
    error_code: str | None = Field(None, description="Stable code for programmatic handling")
    details: dict[str, Any] | None = Field(None, description="Additional error context")

    @classmethod
    def from_error(cls, error: ServiceError) -> "ErrorResponse":
        return cls(message=error.message, error_code=error.error_code, details=error.details or None)


class HealthResponse(BaseModel):
    status: str
    message: str
    version: str | None = None
