"""Error Hierarchy — typed, categorized exceptions mapped onto the response envelope.

Invariants:
    - Every error has a status (ResponseStatus), category (ErrorCategory), severity (ErrorSeverity)
    - Client errors (400-level) are raised before any persistence is attempted
    - to_response() produces the same {status, message, data} envelope as successful responses

Design Decisions:
    - Single hierarchy with MetalApiError base: the FastAPI global handler catches all
    - ErrorContext as dataclass: observability fields without coupling to the logging framework
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ResponseStatus(str, Enum):
    """Value of the envelope's "status" key."""
    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"
    BAD_REQUEST = "BAD_REQUEST"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    RECORD_NOT_FOUND = "RECORD_NOT_FOUND"
    UNAUTHORIZED = "UNAUTHORIZED"


class ErrorSeverity(str, Enum):
    """Error severity for observability."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    BAD_REQUEST = "bad_request"
    RESOURCE_NOT_FOUND = "resource_not_found"
    AUTHENTICATION = "authentication"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Context attached to an error for logging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    entity: str | None = None
    operation: str | None = None
    debug_info: dict[str, Any] | None = None


class MetalApiError(Exception):
    """Base exception for all Metal API errors."""

    def __init__(
        self,
        message: str,
        status: ResponseStatus,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.status = status
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    @property
    def code(self) -> str:
        return self.status.value

    def to_response(self) -> dict:
        """Convert to the standard response envelope."""
        return {
            "status": self.status.value,
            "message": self.message,
            "data": None,
        }


# ─── Client Errors (400-level) ──────────────────────────────────

class PayloadValidationError(MetalApiError):
    """Request payload or identifier failed validation."""
    def __init__(
        self,
        message: str = "Invalid Data, Validation Failed.",
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, ResponseStatus.VALIDATION_ERROR, ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 422,
        )


class BadRequestError(MetalApiError):
    """Required request parameters are missing or malformed."""
    def __init__(
        self,
        message: str = "Request parameters are invalid or missing.",
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, ResponseStatus.BAD_REQUEST, ErrorCategory.BAD_REQUEST,
            ErrorSeverity.WARNING, context, 400,
        )


class RecordNotFoundError(MetalApiError):
    """No record matched the request criteria."""
    def __init__(
        self,
        message: str = "Record(s) not found with specified criteria.",
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, ResponseStatus.RECORD_NOT_FOUND,
            ErrorCategory.RESOURCE_NOT_FOUND, ErrorSeverity.INFO, context, 404,
        )


class AuthenticationError(MetalApiError):
    """Missing or unknown bearer token."""
    def __init__(
        self,
        message: str = "You are not authorized to access the request",
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, ResponseStatus.UNAUTHORIZED, ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(MetalApiError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.operation = ctx.operation or operation
        super().__init__(
            f"Database {operation} failed: {message}",
            ResponseStatus.FAILURE, ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, ctx, 500,
        )
        self.operation = operation
