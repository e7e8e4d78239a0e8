"""Common response schemas used across the API."""

from datetime import UTC, datetime

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """Detailed error information for a specific field or issue.

    Attributes:
        field: The field name that caused the error (None for general errors)
        message: Human-readable error description
    """

    field: str | None = Field(None, description="Field that caused the error")
    message: str = Field(..., description="Error message")


class ErrorResponse(BaseModel):
    """Standard error response format for API errors.

    Attributes:
        error: Error code (e.g., 'NotFound', 'ValidationError')
        message: Human-readable error message
        details: Additional error details (e.g., validation errors per field)
        timestamp: When the error occurred
        path: Request path that caused the error
    """

    error: str = Field(..., description="Error code (e.g., 'NotFound', 'ValidationError')")
    message: str = Field(..., description="Human-readable error message")
    details: list[ErrorDetail] | None = Field(None, description="Additional error details")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    path: str | None = Field(None, description="Request path that caused the error")


class MessageResponse(BaseModel):
    """Simple message response for operations that return only a message."""

    message: str
