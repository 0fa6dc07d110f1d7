"""Error Hierarchy — typed, categorized exceptions for every throwres failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - ResponseSignal is NOT part of this hierarchy: a signal is a response, not a failure
    - Construction-time errors also subclass the matching builtin (ValueError, TypeError)
    - to_response() produces the REST envelope; no internal details leaked

Design Decisions:
    - Single hierarchy with ThrowResError base: one FastAPI handler catches all
      (ADR: uniform error shape)
    - ErrorContext as dataclass: rich observability without coupling to logging framework
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
    SERIALIZATION = "serialization"
    RESPONSE_STATE = "response_state"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    path: str | None = None
    signal_kind: str | None = None
    status_code: int | None = None
    debug_info: dict[str, Any] | None = None


class ThrowResError(Exception):
    """Base exception for all throwres errors."""

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
                    "path": self.context.path,
                    "signal_kind": self.context.signal_kind,
                    "status_code": self.context.status_code,
                },
            }
        }


# ─── Construction-time Errors ───────────────────────────────────

class InvalidRedirectStatusError(ThrowResError, ValueError):
    """RedirectSignal built with a code outside {301, 302, 303, 307, 308}."""
    def __init__(self, status_code: object, context: ErrorContext | None = None):
        super().__init__(
            f"Invalid redirect status code: {status_code!r}. "
            "Expected one of 301, 302, 303, 307, 308.",
            "INVALID_REDIRECT_STATUS", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 500,
        )
        self.status_code = status_code


class InvalidStatusCodeError(ThrowResError, TypeError):
    """Status code is not an integer."""
    def __init__(self, status_code: object, context: ErrorContext | None = None):
        super().__init__(
            f"HTTP status code must be an int, got {type(status_code).__name__}",
            "INVALID_STATUS_CODE", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 500,
        )
        self.status_code = status_code


# ─── Execution-time Errors ──────────────────────────────────────

class PayloadSerializationError(ThrowResError):
    """JSON payload could not be serialized (cycle, NaN, unsupported type)."""
    def __init__(self, reason: str, context: ErrorContext | None = None):
        super().__init__(
            f"JSON payload is not serializable: {reason}",
            "PAYLOAD_NOT_SERIALIZABLE", ErrorCategory.SERIALIZATION,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.reason = reason


class ResponseAlreadyResolvedError(ThrowResError):
    """A write was attempted on a response that is already resolved."""
    def __init__(self, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Cannot {operation}: response already resolved",
            "RESPONSE_ALREADY_RESOLVED", ErrorCategory.RESPONSE_STATE,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.operation = operation


class UnresolvedResponseError(ThrowResError):
    """A terminal action returned without resolving the response."""
    def __init__(self, signal_message: str, context: ErrorContext | None = None):
        super().__init__(
            f"Terminal action did not resolve the response ({signal_message})",
            "RESPONSE_UNRESOLVED", ErrorCategory.RESPONSE_STATE,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.signal_message = signal_message
