"""Error taxonomy shared by the Record Access Layer and the Route Layer.

Each error carries a stable ``code`` and the HTTP status the API answers with.
"""

from typing import Any, Optional


class ServiceError(Exception):
    """Base for all errors that cross the access layer boundary."""

    code = "SERVICE_ERROR"
    http_status = 500

    def __init__(
        self,
        message: str,
        *,
        original: Optional[BaseException] = None,
        details: Any = None,
    ):
        super().__init__(message)
        self.message = message
        self.original = original
        self.details = details

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r})"


class ValidationError(ServiceError):
    """Bad input shape or range."""
    code = "VALIDATION_ERROR"
    http_status = 400


class UnauthorizedError(ServiceError):
    """No valid caller identity."""
    code = "UNAUTHORIZED"
    http_status = 401


class ForbiddenError(ServiceError):
    """Caller is known but not allowed to do this."""
    code = "FORBIDDEN"
    http_status = 403


class NotFoundError(ServiceError):
    """Entity not found."""
    code = "NOT_FOUND"
    http_status = 404


class DatabaseError(ServiceError):
    """Store operation failed."""
    code = "DATABASE_ERROR"
    http_status = 500


class IntegrityError(DatabaseError):
    """Unique, foreign key or check constraint violation."""
    code = "DB_CONSTRAINT_VIOLATION"
    http_status = 400


class UnexpectedError(ServiceError):
    """Anything not covered above."""
    code = "UNEXPECTED_ERROR"
    http_status = 500
