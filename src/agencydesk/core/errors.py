"""
Error hierarchy for agency-desk.

Every error raised by the store, LLM and configuration layers extends
:class:`AgencyDeskError` so callers get a consistent *category*, a
*retryable* flag and the original exception chained as *cause*.

The ops layer never lets these escape: it converts them to
``OperationResult.fail(...)`` envelopes (see :mod:`agencydesk.ops.result`).

Hierarchy::

    AgencyDeskError
    ├── TransientError          (retryable)
    │   ├── NetworkError
    │   └── RateLimitError
    ├── StoreError              hosted database rejected or failed a query
    ├── UpstreamError           third-party API (LLM gateway) returned non-2xx
    ├── ParseError              response body could not be decoded
    ├── ValidationError         caller input is invalid
    ├── ConfigError
    │   └── MissingConfigError
    └── AuthError
        └── AuthenticationError

Tags:
    errors, exceptions, retry-logic, error-category

Doc-Types:
    api-reference
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Error categories used for routing log alerts and retry decisions."""

    NETWORK = "NETWORK"
    DATABASE = "DATABASE"
    UPSTREAM = "UPSTREAM"
    PARSE = "PARSE"
    VALIDATION = "VALIDATION"
    CONFIG = "CONFIG"
    AUTH = "AUTH"
    INTERNAL = "INTERNAL"
    UNKNOWN = "UNKNOWN"


class AgencyDeskError(Exception):
    """Base exception for all agency-desk errors.

    Subclasses set ``default_category`` / ``default_retryable``; both can
    be overridden per instance.

    Example:
        >>> err = AgencyDeskError("boom", category=ErrorCategory.DATABASE)
        >>> err.to_dict()["category"]
        'DATABASE'
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL
    default_retryable: bool = False

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        retryable: bool | None = None,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.retryable = retryable if retryable is not None else self.default_retryable
        self.details = details or {}
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
            "retryable": self.retryable,
        }
        if self.details:
            result["details"] = self.details
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# TRANSIENT ERRORS
# =============================================================================


class TransientError(AgencyDeskError):
    """Temporary failure that may succeed if the caller tries again."""

    default_category = ErrorCategory.NETWORK
    default_retryable = True


class NetworkError(TransientError):
    """Connection refused, DNS failure, timeout talking to a remote service."""


class RateLimitError(TransientError):
    """Remote service answered 429."""

    def __init__(self, message: str, *, retry_after: int | None = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.retry_after = retry_after


# =============================================================================
# PERMANENT ERRORS
# =============================================================================


class StoreError(AgencyDeskError):
    """The hosted database rejected or failed a read/write."""

    default_category = ErrorCategory.DATABASE


class UpstreamError(AgencyDeskError):
    """A third-party API (LLM gateway) answered with an error status."""

    default_category = ErrorCategory.UPSTREAM

    def __init__(self, message: str, *, status_code: int | None = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.status_code = status_code


class ParseError(AgencyDeskError):
    """A response body could not be decoded into the expected shape."""

    default_category = ErrorCategory.PARSE


class ValidationError(AgencyDeskError):
    """Caller supplied invalid input."""

    default_category = ErrorCategory.VALIDATION


class ConfigError(AgencyDeskError):
    """Settings are invalid for the requested component."""

    default_category = ErrorCategory.CONFIG


class MissingConfigError(ConfigError):
    """A required setting (URL, key) is not configured."""

    def __init__(self, setting: str, **kwargs: Any):
        super().__init__(f"{setting} is not configured", **kwargs)
        self.setting = setting


class AuthError(AgencyDeskError):
    default_category = ErrorCategory.AUTH


class AuthenticationError(AuthError):
    """Bearer credential missing, expired or rejected."""


# =============================================================================
# HELPERS
# =============================================================================


def is_retryable(error: Exception) -> bool:
    """Return the retryable flag for agency-desk errors, ``False`` otherwise."""
    if isinstance(error, AgencyDeskError):
        return error.retryable
    return False


def categorize_error(error: Exception) -> ErrorCategory:
    """Best-effort category for any exception."""
    if isinstance(error, AgencyDeskError):
        return error.category
    if isinstance(error, (ConnectionError, TimeoutError)):
        return ErrorCategory.NETWORK
    if isinstance(error, ValueError):
        return ErrorCategory.VALIDATION
    return ErrorCategory.UNKNOWN
