"""
Portfolio API — Custom Exception Hierarchy
===========================================

What:  Application-specific exceptions, one per failure class.
How:   Each exception carries a user-facing message and an optional context
       dict. Global handlers registered in main.py map each type to an HTTP
       status code and a JSON error body that always includes `message`.
Who:   Raised by services; caught by the handlers in main.py.

Exception Hierarchy:
    PortfolioError (base)        → 500
    ├── ValidationError          → 400 Bad Request
    ├── NotFoundError            → 404 Not Found
    ├── FileStorageError         → 500 Internal Server Error
    └── DatabaseError            → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class PortfolioError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, returned only for 4xx errors)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(PortfolioError):
    """
    Raised when client input fails validation.

    When:    Malformed record id, unknown update field, value of the wrong
             type, unsupported or oversized upload, unsafe image name.
    HTTP:    400 Bad Request

    Example response:
        {
            "error": "validation_error",
            "message": "Unknown piece field 'price'",
            "details": {"field": "key", "allowed": ["name", "title", ...]}
        }
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(PortfolioError):
    """
    Raised when the target of a mutation does not exist.

    Read lookups return null instead; only updates and deletes use this.
    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class FileStorageError(PortfolioError):
    """
    Raised when file system operations fail (disk full, permission denied).

    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "File storage operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(PortfolioError):
    """
    Raised when the store is unreachable or a query fails.

    The client only ever sees the generic message; the underlying driver
    error is logged server-side.
    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
