"""
Parking API — Shared Schemas
=============================

What:  Error response bodies, the health response, and the UTC datetime type
       every response model uses for timestamps.
"""

from datetime import datetime
from typing import Annotated, Any, List, Optional

from pydantic import AfterValidator, BaseModel, Field

from parking_api.timeutils import as_utc

# Serialized with an explicit +00:00 offset regardless of the database backend
UTCDateTime = Annotated[datetime, AfterValidator(as_utc)]


class FieldError(BaseModel):
    field: Optional[str] = Field(default=None, description="Offending parameter name (null for cross-field rules)")
    message: str = Field(description="What is wrong and how to fix it")


class ValidationErrorResponse(BaseModel):
    """
    What:  Body of every 400 response.
    Why:   Lists ALL violated constraints, never just the first one.

    Example:
        {
            "errors": [
                {"field": "startDate", "message": "Start date is required"},
                {"field": "endDate", "message": "End date is required"}
            ],
            "request_id": "a1b2c3d4"
        }
    """
    errors: List[FieldError]
    request_id: Optional[str] = None


class ErrorResponse(BaseModel):
    """
    What:  Body of 401/403/404/409/500 responses.

    Fields:
        error:      machine-readable code (e.g. "authentication_error")
        message:    human-readable description, safe to show to users
        request_id: correlation ID for tracing this error in server logs
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[Any] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
