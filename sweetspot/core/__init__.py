"""
Core infrastructure modules for SweetSpot.

- exceptions: Standardized exception hierarchy
- logging: structlog configuration
- container: Dependency container owning the pipeline's services
"""

from sweetspot.core.exceptions import (
    AllProvidersFailedError,
    ConfigurationError,
    InitializationError,
    PermanentError,
    ProviderCancelledError,
    ProviderError,
    ProviderErrorKind,
    ProviderMalformedResponseError,
    ProviderRateLimitError,
    ProviderTimeoutError,
    ProviderTransportError,
    RetryableError,
    SweetSpotError,
    ValidationError,
)
from sweetspot.core.logging import configure_logging

__all__ = [
    # Exceptions
    "SweetSpotError",
    "RetryableError",
    "PermanentError",
    "ValidationError",
    "ConfigurationError",
    "InitializationError",
    "ProviderErrorKind",
    "ProviderError",
    "ProviderTimeoutError",
    "ProviderRateLimitError",
    "ProviderTransportError",
    "ProviderMalformedResponseError",
    "ProviderCancelledError",
    "AllProvidersFailedError",
    # Logging
    "configure_logging",
]
