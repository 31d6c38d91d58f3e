"""
Core exception hierarchy for SweetSpot.

Provides standardized exception types with categorization for retry logic.
Provider errors carry a ProviderErrorKind so the discovery pipeline can
record them as partial failures without inspecting the concrete class.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any, Optional, Sequence

if TYPE_CHECKING:
    from sweetspot.models.schemas import PartialFailure


# =============================================================================
# Base Exceptions
# =============================================================================


class SweetSpotError(Exception):
    """Base exception for all SweetSpot errors."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class RetryableError(SweetSpotError):
    """
    Transient errors that may succeed when retried.

    Examples: Rate limits, timeouts.
    """

    pass


class PermanentError(SweetSpotError):
    """
    Errors that won't be fixed by retrying.

    Examples: Invalid input, missing configuration, malformed payloads.
    """

    pass


# =============================================================================
# Request / Configuration Errors
# =============================================================================


class ValidationError(PermanentError):
    """Raised when a search request is malformed. No I/O has been attempted."""

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        details = {"field": field} if field else None
        super().__init__(message, details)


class ConfigurationError(PermanentError):
    """Raised when configuration is invalid or missing."""

    def __init__(self, message: str, config_key: Optional[str] = None):
        self.config_key = config_key
        details = {"config_key": config_key} if config_key else None
        super().__init__(message, details)


class InitializationError(PermanentError):
    """Raised when a component fails to initialize."""

    def __init__(self, component: str, message: str, details: Optional[dict[str, Any]] = None):
        self.component = component
        super().__init__(f"[{component}] {message}", details)


# =============================================================================
# Provider Errors
# =============================================================================


class ProviderErrorKind(str, Enum):
    """Classification of a failed place-search call."""

    TIMEOUT = "timeout"
    RATE_LIMITED = "rate_limited"
    TRANSPORT = "transport"
    MALFORMED = "malformed"
    CANCELLED = "cancelled"


class ProviderError(SweetSpotError):
    """Base exception for place-search provider errors.

    Scoped to a single keyword search; the coordinator recovers from it
    as a partial failure.
    """

    kind: ProviderErrorKind = ProviderErrorKind.TRANSPORT

    def __init__(
        self,
        provider: str,
        message: str,
        details: Optional[dict[str, Any]] = None,
    ):
        self.provider = provider
        super().__init__(f"[{provider}] {message}", details)


class ProviderTimeoutError(ProviderError, RetryableError):
    """Raised when a provider call exceeds its timeout."""

    kind = ProviderErrorKind.TIMEOUT


class ProviderRateLimitError(ProviderError, RetryableError):
    """Raised when the provider rejects a call due to quota or rate limits."""

    kind = ProviderErrorKind.RATE_LIMITED


class ProviderTransportError(ProviderError):
    """Raised on network failures and non-successful provider responses."""

    kind = ProviderErrorKind.TRANSPORT


class ProviderMalformedResponseError(ProviderError, PermanentError):
    """Raised when the provider payload cannot be parsed."""

    kind = ProviderErrorKind.MALFORMED


class ProviderCancelledError(ProviderError):
    """Recorded for keyword searches abandoned by a deadline or cancellation."""

    kind = ProviderErrorKind.CANCELLED


# =============================================================================
# Discovery Errors
# =============================================================================


class AllProvidersFailedError(SweetSpotError):
    """Raised when every keyword search of a discovery call failed."""

    def __init__(self, failures: Sequence["PartialFailure"]):
        self.failures = tuple(failures)
        super().__init__(
            f"All {len(self.failures)} keyword searches failed",
            {
                "keywords": [failure.keyword for failure in self.failures],
                "kinds": [failure.error.kind.value for failure in self.failures],
            },
        )

    @property
    def errors(self) -> tuple[ProviderError, ...]:
        """Underlying provider errors, in keyword order."""
        return tuple(failure.error for failure in self.failures)
