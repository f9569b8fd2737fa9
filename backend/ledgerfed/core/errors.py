"""Error Hierarchy — typed, categorized exceptions for all federation failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Caller errors (400-level) propagate to the HTTP layer untouched
    - Store errors (DatabaseError family) never escape the tier executor
    - to_response() produces the REST envelope; no internal details leaked

Design Decisions:
    - Single hierarchy with FederationError base: FastAPI global handler catches all
    - ErrorContext as dataclass: rich observability without coupling to logging framework
    - Unresolved references are not errors: the field is set to None
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    INTERNAL = "internal"
    TIMEOUT = "timeout"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    kind: str | None = None
    tier: str | None = None
    field: str | None = None
    debug_info: dict[str, Any] | None = None


class FederationError(Exception):
    """Base exception for all federation errors."""

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
                    "kind": self.context.kind,
                    "tier": self.context.tier,
                    "field": self.context.field,
                },
            }
        }


# ─── Caller Errors (400-level) ──────────────────────────────────

class InvalidFilterError(FederationError):
    """Filter references an unknown field, operator, or unparsable value."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.field = field
        super().__init__(
            message, "INVALID_FILTER", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, ctx, 400,
        )
        self.field = field


class AmbiguousDateBoundError(FederationError):
    """Both an inclusive and an exclusive operator supplied for one bound."""
    def __init__(self, field: str, ops: list[str], context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.field = field
        super().__init__(
            f"Conflicting bounds on '{field}': {', '.join(ops)}",
            "AMBIGUOUS_DATE_BOUND", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, ctx, 400,
        )
        self.field = field
        self.ops = ops


class InvalidSortFieldError(FederationError):
    """Sort requested on a field the ledger kind does not allow."""
    def __init__(self, field: str, kind: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.kind = kind
        ctx.field = field
        super().__init__(
            f"Cannot sort {kind} ledger by '{field}'",
            "INVALID_SORT_FIELD", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, ctx, 400,
        )
        self.field = field


class InvalidQueryError(FederationError):
    """Pagination or reference-path options are out of range."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_QUERY", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )


class UnknownKindError(FederationError):
    """Requested ledger kind does not exist."""
    def __init__(self, kind: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.kind = kind
        super().__init__(
            f"Ledger kind '{kind}' not found",
            "UNKNOWN_KIND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, ctx, 404,
        )
        self.kind = kind


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(FederationError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class TierUnavailableError(DatabaseError):
    """A tier is not configured or did not answer in time."""
    def __init__(self, tier: str, reason: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.tier = tier
        super().__init__(reason, "connect", ctx)
        self.code = "TIER_UNAVAILABLE"
        self.tier = tier
