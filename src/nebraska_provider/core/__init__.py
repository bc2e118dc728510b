"""
Core functionality for the Nebraska provider.

This package provides configuration management, error types,
authentication setup and paginated lookups.
"""

from nebraska_provider.core.config import (
    AUTH_MODES,
    ConfigLoader,
    ProviderConfig,
    SSLConfig,
    load_config,
)
from nebraska_provider.core.errors import (
    ApiRequestError,
    ApiResponseError,
    ConfigurationError,
    Diagnostic,
    InvalidAttributeError,
    NotFoundError,
    ProviderError,
    Severity,
)

__all__ = [
    "AUTH_MODES",
    "ApiRequestError",
    "ApiResponseError",
    "ConfigLoader",
    "ConfigurationError",
    "Diagnostic",
    "InvalidAttributeError",
    "NotFoundError",
    "ProviderConfig",
    "ProviderError",
    "SSLConfig",
    "Severity",
    "load_config",
]
