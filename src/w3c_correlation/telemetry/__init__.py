"""Telemetry module for structured logging.

This module provides:
- Structured logging via structlog
- Semantic event constants
"""

from w3c_correlation.telemetry.events import (
    APP_CONFIG_LOAD_FAILED,
    APP_CONFIG_LOADED,
    APP_CONFIG_LOADING,
    CORRELATION_REENTRANCY_GUARD_HIT,
    CORRELATION_RESOLVED,
    CORRELATION_SKIPPED_NO_CONTEXT,
    ENV_FILES_LOADED,
    LEGACY_CONTEXT_BRIDGED,
    NO_ENV_FILES_FOUND,
    SQL_DEPENDENCY_EXEMPTED,
)
from w3c_correlation.telemetry.logger import configure_logging, get_logger

__all__ = [
    # Core exports
    "get_logger",
    "configure_logging",
    # Event constants
    "CORRELATION_RESOLVED",
    "CORRELATION_SKIPPED_NO_CONTEXT",
    "CORRELATION_REENTRANCY_GUARD_HIT",
    "SQL_DEPENDENCY_EXEMPTED",
    "LEGACY_CONTEXT_BRIDGED",
    "APP_CONFIG_LOADING",
    "APP_CONFIG_LOADED",
    "APP_CONFIG_LOAD_FAILED",
    "ENV_FILES_LOADED",
    "NO_ENV_FILES_FOUND",
]
