"""
Shared utilities module

Domain-agnostic helpers used across the application.
"""

from .cache import CacheStats, MemoryCache
from .logger import (
    ContextLogger,
    JSONFormatter,
    configure_logging,
    configure_logging_from_settings,
    get_audit_logger,
    get_logger,
)

__all__ = [
    # Cache
    "MemoryCache",
    "CacheStats",
    # Logging
    "ContextLogger",
    "JSONFormatter",
    "configure_logging",
    "configure_logging_from_settings",
    "get_logger",
    "get_audit_logger",
]
