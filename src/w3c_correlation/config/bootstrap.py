"""Bootstrap configuration helpers (pre-settings).

Logging needs its level and format before the full Pydantic settings can be
loaded, since loading settings itself logs.

Constraints:
- Keep this module dependency-light (no telemetry imports) to avoid circular imports.
- Validate values using the shared config validators.
"""

from __future__ import annotations

import os
from pathlib import Path

from w3c_correlation.config.validators import (
    resolve_path,
    validate_log_format,
    validate_log_level,
)


def get_bootstrap_log_level(default: str = "INFO") -> str:
    """Get logging level from environment without importing settings.

    Args:
        default: Default log level if not set or invalid.

    Returns:
        Uppercased, validated log level string.
    """
    value = os.getenv("CORRELATION_LOG_LEVEL", default)
    try:
        return validate_log_level(value)
    except ValueError:
        return validate_log_level(default)


def get_bootstrap_log_format(default: str = "console") -> str:
    """Get console log format from environment without importing settings.

    Args:
        default: Default format if not set or invalid.

    Returns:
        "json" or "console".
    """
    value = os.getenv("CORRELATION_LOG_FORMAT", default)
    try:
        return validate_log_format(value)
    except ValueError:
        return validate_log_format(default)


def get_bootstrap_log_dir(default: str = "telemetry/logs") -> Path:
    """Get log directory from environment without importing settings.

    Args:
        default: Directory used when CORRELATION_LOG_DIR is not set.

    Returns:
        Absolute log directory path.
    """
    return resolve_path(os.getenv("CORRELATION_LOG_DIR") or default)
