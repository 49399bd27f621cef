"""Error Hierarchy — typed, categorized exceptions for all SentinelNav failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are raised before any store mutation
    - Store errors (500-level) are never converted into success responses
    - to_response() produces the REST envelope; no internal details leaked

Design Decisions:
    - Single hierarchy with SentinelError base: one FastAPI handler catches all
    - Probe failures are not errors: the prober reports them as the offline status
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    AUTHENTICATION = "authentication"
    STORE = "store"
    CONFLICT = "conflict"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Context attached to an error for logs and the response envelope."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    resource_id: str | None = None
    backend: str | None = None
    debug_info: dict[str, Any] | None = None


class SentinelError(Exception):
    """Base exception for all SentinelNav errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "resource_id": self.context.resource_id,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class ValidationError(SentinelError):
    """Required field missing or malformed."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field = field


class CategoryDeleteRejectedError(SentinelError):
    """Category is unknown, protected, or the last one remaining."""
    def __init__(self, category_id: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.resource_id = category_id
        super().__init__(
            "Cannot delete the default or last category, or category not found",
            "CATEGORY_DELETE_REJECTED", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, ctx, 400,
        )


class InvalidTokenError(SentinelError):
    """Token failed format, signature, expiry or answer checks.

    The message never says which check failed.
    """
    def __init__(
        self, code: str = "INVALID_TOKEN", message: str = "Invalid token",
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, code, ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 400,
        )


class UnauthorizedError(SentinelError):
    """Write attempted without a valid session token."""
    def __init__(self, message: str = "Unauthorized", context: ErrorContext | None = None):
        super().__init__(
            message, "UNAUTHORIZED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class NotFoundError(SentinelError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.resource_id = resource_id
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, ctx, 404,
        )


# ─── Store Errors (500-level) ───────────────────────────────────

class StoreUnavailableError(SentinelError):
    """Backend IO failed (disk, network, remote store)."""
    def __init__(
        self, message: str, operation: str, backend: str | None = None,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.backend = backend
        super().__init__(
            f"Store {operation} failed: {message}",
            "STORE_UNAVAILABLE", ErrorCategory.STORE,
            ErrorSeverity.CRITICAL, ctx, 503,
        )
        self.operation = operation


class StoreConflictError(StoreUnavailableError):
    """Conditional write lost against a concurrent writer."""
    def __init__(
        self, message: str, operation: str, backend: str | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(message, operation, backend, context)
        self.code = "STORE_CONFLICT"
        self.category = ErrorCategory.CONFLICT
        self.severity = ErrorSeverity.ERROR
        self.http_status = 409
