"""Semantic event constants for structured logging.

All log events should use these constants rather than magic strings to ensure
consistency and enable reliable querying and analysis.
"""

# Correlation resolution events
CORRELATION_RESOLVED = "correlation_resolved"
CORRELATION_SKIPPED_NO_CONTEXT = "correlation_skipped_no_context"
CORRELATION_REENTRANCY_GUARD_HIT = "correlation_reentrancy_guard_hit"
SQL_DEPENDENCY_EXEMPTED = "sql_dependency_exempted"

# Trace context events
LEGACY_CONTEXT_BRIDGED = "legacy_context_bridged"

# Configuration events
APP_CONFIG_LOADING = "loading_app_config"
APP_CONFIG_LOADED = "app_config_loaded"
APP_CONFIG_LOAD_FAILED = "app_config_load_failed"
ENV_FILES_LOADED = "env_files_loaded"
NO_ENV_FILES_FOUND = "no_env_files_found"
