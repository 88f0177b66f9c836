"""
Parking API — Custom Exception Hierarchy
=========================================

What:  Defines application-specific exceptions for different error scenarios.
Why:   Custom exceptions enable targeted error handling with appropriate HTTP
       status codes and safe messages, without leaking internal details.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with correct HTTP status codes.
Who:   Raised by dependencies and services; caught by global handlers.

Exception Hierarchy:
    ParkingAPIError (base)
    ├── ValidationError       → 400 Bad Request  ({"errors": [...]})
    ├── AuthenticationError   → 401 Unauthorized (missing/invalid/expired token)
    ├── AuthorizationError    → 403 Forbidden    (role check failed)
    ├── NotFoundError         → 404 Not Found
    ├── ConflictError         → 409 Conflict     (duplicate, lot full, already parked)
    └── PersistenceError      → 500 Internal Server Error (opaque to caller)
"""

from typing import Any, Dict, List, Optional


class ParkingAPIError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(ParkingAPIError):
    """
    Raised when client input fails validation.

    Carries every violated constraint, not just the first one, so a client
    can fix all of them in a single round trip.

    Example response:
        {
            "errors": [
                {"field": "startDate", "message": "Start date is required"},
                {"field": "endDate", "message": "End date is required"}
            ]
        }
    """

    def __init__(
        self,
        errors: Optional[List[Dict[str, Any]]] = None,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        if errors is None:
            errors = [{"field": field, "message": message}]
        ctx = context or {}
        ctx["fields"] = [e.get("field") for e in errors]
        super().__init__(message=message, context=ctx)
        self.errors = errors


class AuthenticationError(ParkingAPIError):
    """
    Raised when a request carries no usable bearer token.

    HTTP: 401 Unauthorized, with `WWW-Authenticate: Bearer`.
    The message never says which check failed beyond missing vs invalid vs
    expired; signature details stay in the logs.
    """

    def __init__(
        self,
        message: str = "Authentication required",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class AuthorizationError(ParkingAPIError):
    """Raised when an authenticated identity lacks the required role. HTTP 403."""

    def __init__(
        self,
        message: str = "You do not have permission to perform this action",
        required_role: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if required_role:
            ctx["required_role"] = required_role
        super().__init__(message=message, context=ctx)


class NotFoundError(ParkingAPIError):
    """
    Raised when a requested resource does not exist.

    SQLAlchemy returns None for missing records; services convert that into
    NotFoundError so routes stay free of status-code logic.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class ConflictError(ParkingAPIError):
    """
    Raised when a request collides with current state.

    When: duplicate plate/email/lot name, car already parked, lot at
    capacity, exit on a session that is already closed. HTTP 409.
    """

    def __init__(
        self,
        message: str = "The request conflicts with the current state",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class PersistenceError(ParkingAPIError):
    """
    Raised when database operations fail unexpectedly.

    The message returned to the client is always generic. The original
    exception type and operation are kept in `context` and logged
    server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
