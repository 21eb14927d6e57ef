"""
TaskNest Backend — Custom Exception Hierarchy
===============================================

What:  Application-specific exceptions for the error scenarios of the API.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return `{"error": <message>, "code": ..., "request_id": ...}` bodies
       with the matching HTTP status code.
Who:   Raised by services; caught by global handlers.

Exception Hierarchy:
    TaskNestError (base)
    ├── ValidationError              → 400 Bad Request
    │   └── ShareRequestProcessedError → 400 (request no longer pending)
    ├── AuthenticationError          → 401 Unauthorized
    ├── NotFoundError                → 404 Not Found
    ├── ConflictError                → 409 Conflict
    └── DatabaseError                → 500 Internal Server Error
"""

from typing import Any, Dict, Optional

from sqlalchemy.exc import IntegrityError

# SQLSTATE for unique_violation (PostgreSQL)
UNIQUE_VIOLATION = "23505"


class TaskNestError(Exception):
    """
    Base exception for all TaskNest application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    status_code = 500
    code = "server_error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(TaskNestError):
    """
    Raised when client input fails validation.

    When:    Missing required field, invalid action, parent task in another checklist.
    HTTP:    400 Bad Request
    """

    status_code = 400
    code = "validation_error"

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


class ShareRequestProcessedError(ValidationError):
    """A share request was answered after it already left the pending state."""

    def __init__(self, request_id: Optional[str] = None, status: Optional[str] = None):
        ctx: Dict[str, Any] = {}
        if request_id:
            ctx["request_id"] = request_id
        if status:
            ctx["status"] = status
        super().__init__(message="Request already processed", context=ctx)


class AuthenticationError(TaskNestError):
    """
    Raised when a password does not match the stored hash.

    HTTP:    401 Unauthorized
    """

    status_code = 401
    code = "authentication_error"

    def __init__(
        self,
        message: str = "Invalid password",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(TaskNestError):
    """
    Raised when a requested resource does not exist.

    SQLAlchemy returns None for missing records; services convert that into
    this exception so the handler can answer 404.
    """

    status_code = 404
    code = "not_found"

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource.capitalize()} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource = resource


class ConflictError(TaskNestError):
    """
    Raised when a write collides with a unique constraint.

    When:    Creating or renaming a profile to a name that is already taken.
    HTTP:    409 Conflict
    """

    status_code = 409
    code = "conflict"

    def __init__(
        self,
        message: str = "Resource already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(TaskNestError):
    """
    Raised when database operations fail unexpectedly.

    The message returned to the client is always generic; the original
    error is kept in `context` and logged server-side only.
    """

    status_code = 500
    code = "server_error"

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


def is_unique_violation(exc: IntegrityError) -> bool:
    """
    True when `exc` was caused by a unique constraint.

    asyncpg exposes the SQLSTATE as `sqlstate`, psycopg as `pgcode`;
    SQLite only reports it in the message text.
    """
    orig = getattr(exc, "orig", None)
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if code == UNIQUE_VIOLATION:
        return True
    return "UNIQUE constraint failed" in str(orig)
