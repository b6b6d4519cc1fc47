"""Exception hierarchy for the departure board.

Every error carries a severity for logging and the HTTP status the web
layer answers with.
"""

from enum import Enum
from typing import Any


class ErrorSeverity(Enum):
    """Error severity levels for monitoring and logging."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class BoardError(Exception):
    """Base exception for all departure board errors.

    Attributes:
        message: Human-readable error message
        details: Extra context (stop id, status code, ...)
        cause: Underlying exception, if any
        severity: Error severity level
        http_status: Status code used when the error reaches the API
    """

    severity: ErrorSeverity = ErrorSeverity.ERROR
    http_status: int = 500

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = dict(details or {})
        self.cause = cause

    def __str__(self) -> str:
        if not self.details:
            return self.message
        context = ", ".join(f"{key}={value}" for key, value in self.details.items())
        return f"{self.message} ({context})"

    def to_dict(self) -> dict[str, Any]:
        """Serializable form for structured logs."""
        return {
            "error_type": type(self).__name__,
            "message": self.message,
            "severity": self.severity.value,
            "details": self.details,
        }


class ConfigurationError(BoardError):
    """The YAML config cannot be read or fails validation."""

    severity = ErrorSeverity.CRITICAL


class ValidationError(BoardError):
    """Bad caller input, e.g. a malformed stop id."""

    severity = ErrorSeverity.WARNING
    http_status = 400


class TransitError(BoardError):
    """Base for failures talking to FUTÁR."""

    http_status = 502


class NetworkError(TransitError):
    """Connection failure or timeout; retried with backoff."""

    http_status = 504


class RateLimitError(TransitError):
    """HTTP 429 from FUTÁR.

    ``retry_after`` (seconds) overrides the backoff delay when present.
    """

    http_status = 429

    def __init__(self, message: str, retry_after: int | None = None) -> None:
        details = {"retry_after": retry_after} if retry_after is not None else None
        super().__init__(message, details)
        self.retry_after = retry_after


class APIError(TransitError):
    """FUTÁR answered with an error status, a bad key or an unreadable body."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        details = dict(details or {})
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(message, details, cause)
        self.status_code = status_code
