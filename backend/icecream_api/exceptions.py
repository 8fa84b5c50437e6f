"""
Acme Ice Cream API: Custom Exception Hierarchy
===============================================

What:  Application-specific exceptions for the three error classes the API
       reports: bad client input, missing rows, and infrastructure failures.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return `{"error": ...}` JSON bodies with the matching status code.
Who:   Raised by route handlers and services; caught by global handlers.

Exception Hierarchy:
    IceCreamAPIError (base)
    ├── ValidationError   → 400 Bad Request
    ├── NotFoundError     → 404 Not Found
    └── DatabaseError     → 500 Internal Server Error (message never returned)
"""

from typing import Any, Dict, Optional


class IceCreamAPIError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  Error description
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


class ValidationError(IceCreamAPIError):
    """
    Raised when client input fails validation.

    When:    Missing `name` on create/update, malformed path id or body.
    HTTP:    400 Bad Request

    Example response:
        {"error": "Name is required"}
    """

    def __init__(
        self,
        message: str = "Invalid request",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(IceCreamAPIError):
    """
    Raised when a requested resource does not exist.

    When:    PUT or DELETE /api/flavors/{id} with an id that matches no row.
    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "Resource",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=f"{resource} not found", context=ctx)


class DatabaseError(IceCreamAPIError):
    """
    Raised when a database statement fails.

    When:    Connection lost, constraint violation, bad SQL, etc.
    HTTP:    500 Internal Server Error

    Security Note:
        The response body is always the generic "Internal Server Error".
        The message and context (operation, driver error type) are logged
        server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
