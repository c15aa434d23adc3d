"""
Custom exception classes for the application.

Every error carries a machine-readable code, a human-readable message
and the HTTP status the routes answer with.
"""

from typing import Optional, Any, TYPE_CHECKING
from datetime import datetime

if TYPE_CHECKING:
    from models.sample_mapping import RegisterMappingResponse


class AppError(Exception):
    """
    Base exception for all application errors.

    All custom exceptions inherit from this.

    Attributes:
        code: Error code (e.g., "MAPPING_NOT_FOUND")
        message: Human-readable message
        status_code: HTTP status code
        details: Additional context
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.utcnow().isoformat()
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to API response format."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
                "timestamp": self.timestamp
            }
        }


class NotFoundError(AppError):
    """Resource not found (404)."""

    def __init__(
        self,
        resource: str,
        identifier: str,
        code: Optional[str] = None,
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code or f"{resource.upper()}_NOT_FOUND",
            message=f"{resource} not found",
            status_code=404,
            details={"id": identifier, **(details or {})}
        )


class ValidationError(AppError):
    """Validation failed (422 unless told otherwise)."""

    def __init__(
        self,
        message: str,
        code: str = "VALIDATION_ERROR",
        details: Optional[dict] = None,
        status_code: int = 422
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=status_code,
            details=details
        )


class DatabaseError(AppError):
    """Database operation failed (500)."""

    def __init__(
        self,
        operation: str,
        message: str,
        details: Optional[dict] = None
    ):
        super().__init__(
            code="DATABASE_ERROR",
            message=f"Database {operation} failed: {message}",
            status_code=500,
            details={"operation": operation, **(details or {})}
        )


# ===================
# SAMPLE MAPPING ERRORS
# ===================

class InvalidArgumentError(ValidationError):
    """Request fields missing or empty (400)."""

    def __init__(self, fields: list[str], received: Optional[dict] = None):
        super().__init__(
            code="INVALID_ARGUMENT",
            message=f"Invalid arguments: {', '.join(fields)}",
            details={"fields": fields, "received": received or {}},
            status_code=400
        )
        self.fields = fields


class MappingNotFoundError(NotFoundError):
    """No mapping for the item id overlaps the requested segments."""

    def __init__(self, item_id: str, clm_segments: list[str]):
        super().__init__(
            resource="Mapping",
            identifier=item_id,
            code="MAPPING_NOT_FOUND",
            details={"clm_segments": clm_segments}
        )


class MappingFetchError(AppError):
    """Resolve query failed for a reason other than absence (500)."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(
            code="INTERNAL",
            message=f"Failed to fetch mapping from database: {message}",
            status_code=500,
            details=details
        )


class MappingRegistrationError(DatabaseError):
    """
    Insert of a new mapping failed.

    Carries the structured failure result alongside the error so the
    caller gets both the {success: false, message} payload and the error.
    The storage error is chained as __cause__.
    """

    def __init__(
        self,
        result: "RegisterMappingResponse",
        message: str,
        details: Optional[dict] = None
    ):
        super().__init__(
            operation="insert",
            message=message,
            details=details
        )
        self.result = result

    def to_dict(self) -> dict:
        return {**self.result.model_dump(), **super().to_dict()}


class SchemaBootstrapError(DatabaseError):
    """Startup schema creation failed."""

    def __init__(self, message: str):
        super().__init__(
            operation="schema bootstrap",
            message=message
        )
