"""Error Hierarchy — typed, categorized exceptions for every fetch failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - TransportError is published as controller state, never raised to the host
    - CancellationSignal is never published and never logged as a failure
    - ConfigurationError is raised synchronously (setup bug, not runtime condition)

Design Decisions:
    - Single hierarchy with FetchViewError base: hosts can catch one type
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and host handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories."""
    TRANSPORT = "transport"
    CANCELLED = "cancelled"
    CONFIGURATION = "configuration"
    INVALID_RESPONSE = "invalid_response"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    request_id: str | None = None
    endpoint: str | None = None
    controller: str | None = None
    debug_info: dict[str, Any] | None = None


class FetchViewError(Exception):
    """Base exception for all fetchview errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()

    def to_dict(self) -> dict:
        """Convert to a serializable error envelope."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "request_id": self.context.request_id,
                    "endpoint": self.context.endpoint,
                    "controller": self.context.controller,
                },
            }
        }


# ─── Runtime Errors (published as state) ────────────────────────

class TransportError(FetchViewError):
    """Network or HTTP failure reported by the transport."""
    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "TRANSPORT_ERROR", ErrorCategory.TRANSPORT,
            ErrorSeverity.ERROR, context,
        )
        self.status_code = status_code


class InvalidResponseError(FetchViewError):
    """Fetch function returned a value that does not match the expected shape."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_RESPONSE", ErrorCategory.INVALID_RESPONSE,
            ErrorSeverity.ERROR, context,
        )


# ─── Control-flow Signals ───────────────────────────────────────

class CancellationSignal(FetchViewError):
    """Request was cancelled. Distinguished outcome, never an error transition."""
    def __init__(
        self, message: str = "Request cancelled", context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "CANCELLED", ErrorCategory.CANCELLED,
            ErrorSeverity.INFO, context,
        )


# ─── Setup Errors (raised synchronously) ────────────────────────

class ConfigurationError(FetchViewError):
    """Controller cannot run: no transport or fetch function bound, bad settings."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CONFIGURATION_ERROR", ErrorCategory.CONFIGURATION,
            ErrorSeverity.CRITICAL, context,
        )
