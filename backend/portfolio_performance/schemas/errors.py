# backend/portfolio_performance/schemas/errors.py
"""
Pydantic schemas for error responses.

Every error leaves the API in the same shape. Used by the global exception
handlers in main.py.
"""

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """Standard error response format."""

    error: str = Field(
        ...,
        description="Error type (e.g., 'InsufficientDataError')"
    )
    message: str = Field(
        ...,
        description="Human-readable error message, including operation and period"
    )
    details: dict | None = Field(
        default=None,
        description="Operation, period and error-specific fields"
    )


class ValidationErrorDetail(BaseModel):
    """Request validation failures (422 from FastAPI's parameter parsing)."""

    error: str = Field(default="ValidationError")
    message: str = Field(default="Request validation failed")
    details: list[dict] = Field(
        ...,
        description="List of validation errors"
    )
