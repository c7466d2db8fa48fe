"""Unified configuration management.

This module provides a single source of truth for configuration,
integrating environment variables, .env files, and defaults.
"""

from w3c_correlation.config.env_loader import Environment, get_environment, load_env_files
from w3c_correlation.config.settings import (
    AppConfig,
    get_settings,
    load_app_config,
    reset_settings,
)

__all__ = [
    "AppConfig",
    "get_settings",
    "load_app_config",
    "reset_settings",
    "Environment",
    "get_environment",
    "load_env_files",
]
