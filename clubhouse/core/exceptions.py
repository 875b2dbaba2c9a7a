# clubhouse/core/exceptions.py
"""
Exception hierarchy for the clubhouse service.

Every error a user action can end in is a ClubError carrying a category,
an HTTP status and a human-readable message that is shown to the member
verbatim. The API layer converts them in one place (core/error_handler.py).
"""

from typing import Optional


class ErrorCategory:
    """Error categories for structured error responses"""

    VALIDATION = "validation_error"
    CONFLICT = "conflict_error"
    NOT_FOUND = "not_found_error"
    AUTHORIZATION = "authorization_error"
    STORE = "store_error"
    SCHEMA = "schema_error"


class ClubError(Exception):
    """Base exception for all clubhouse errors."""

    def __init__(
        self,
        message: str,
        category: str,
        status_code: int,
        details: Optional[dict] = None,
    ):
        self.message = message
        self.category = category
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(ClubError):
    """Input rejected before any storage call."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(
            message=message,
            category=ErrorCategory.VALIDATION,
            status_code=400,
            details={"field": field} if field else None,
        )


class ConflictError(ClubError):
    """A unique key (slug, alias) is already owned by someone else."""

    def __init__(self, message: str, key: Optional[str] = None):
        super().__init__(
            message=message,
            category=ErrorCategory.CONFLICT,
            status_code=409,
            details={"key": key} if key else None,
        )


class NotFoundError(ClubError):
    def __init__(self, message: str):
        super().__init__(
            message=message, category=ErrorCategory.NOT_FOUND, status_code=404
        )


class AuthorizationError(ClubError):
    """Acting user lacks the role or ownership the action needs."""

    def __init__(self, message: str = "You do not have permission to do that."):
        super().__init__(
            message=message, category=ErrorCategory.AUTHORIZATION, status_code=403
        )


class TransientStoreError(ClubError):
    """The document store failed; the member has to re-invoke the action."""

    def __init__(self, message: str):
        super().__init__(
            message=message, category=ErrorCategory.STORE, status_code=503
        )


class SchemaError(ClubError):
    """A stored document does not match the schema this service understands."""

    def __init__(self, message: str, collection: str, key: str):
        super().__init__(
            message=message,
            category=ErrorCategory.SCHEMA,
            status_code=500,
            details={"collection": collection, "key": key},
        )
