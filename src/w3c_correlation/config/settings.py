"""Application configuration settings.

This module provides the AppConfig class and settings singleton.
"""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from w3c_correlation.config.env_loader import Environment, get_environment, load_env_files
from w3c_correlation.config.validators import (
    resolve_path,
    validate_log_format,
    validate_log_level,
    validate_source_prefix,
)
from w3c_correlation.correlation.constants import (
    RDD_DIAGNOSTIC_SOURCE_PREFIX,
    SQL_DEPENDENCY_TYPE,
)
from w3c_correlation.telemetry import (
    APP_CONFIG_LOAD_FAILED,
    APP_CONFIG_LOADED,
    APP_CONFIG_LOADING,
    get_logger,
)

log = get_logger(__name__)


class AppConfig(BaseSettings):
    """Unified application configuration.

    Loads configuration from environment variables (prefix ``CORRELATION_``),
    .env files and defaults. Validates all values using Pydantic.
    """

    model_config = SettingsConfigDict(
        # .env files are loaded via env_loader to support per-environment files
        env_prefix="CORRELATION_",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    environment: Environment = Field(
        default_factory=get_environment, description="Current environment"
    )

    # Telemetry
    log_dir: Path = Field(default=Path("telemetry/logs"), description="Log directory path")
    log_level: str = Field(
        default="INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    log_format: str = Field(default="console", description="Console log format (json or console)")

    # Correlation
    enable_legacy_reentrancy_guard: bool = Field(
        default=False,
        description=(
            "Skip re-resolving operation records whose id is already a valid legacy "
            "encoding of their operation id. Only for runtimes whose ambient context "
            "propagation can re-run resolution after an id was force-set."
        ),
    )
    sql_dependency_type: str = Field(
        default=SQL_DEPENDENCY_TYPE,
        min_length=1,
        description="Dependency type that keeps its instrumentation-assigned id",
    )
    sql_diagnostic_source_prefix: str = Field(
        default=RDD_DIAGNOSTIC_SOURCE_PREFIX,
        description="sdk version prefix of the instrumentation that stamps SQL dependency ids",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        return validate_log_level(v)

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format."""
        return validate_log_format(v)

    @field_validator("sql_diagnostic_source_prefix")
    @classmethod
    def validate_source_prefix(cls, v: str) -> str:
        """Validate the instrumentation prefix is non-empty."""
        return validate_source_prefix(v)

    @field_validator("log_dir", mode="before")
    @classmethod
    def resolve_paths(cls, v: Path | str) -> Path:
        """Resolve relative paths to absolute."""
        return resolve_path(v)


_settings: AppConfig | None = None


def load_app_config() -> AppConfig:
    """Load and validate application configuration.

    This function:
    1. Loads .env files in priority order (via env_loader)
    2. Creates AppConfig instance (reads from environment variables)
    3. Validates all values using Pydantic
    4. Logs configuration loading using structlog

    Returns:
        Validated AppConfig instance.

    Raises:
        ValidationError: If configuration validation fails.
    """
    log.info(APP_CONFIG_LOADING, environment=get_environment().value)

    load_env_files()

    try:
        config = AppConfig()
        log.info(
            APP_CONFIG_LOADED,
            environment=config.environment.value,
            log_level=config.log_level,
            enable_legacy_reentrancy_guard=config.enable_legacy_reentrancy_guard,
        )
        return config
    except Exception as e:
        log.error(APP_CONFIG_LOAD_FAILED, error=str(e), error_type=type(e).__name__)
        raise


def get_settings() -> AppConfig:
    """Get the application settings singleton.

    Returns:
        AppConfig instance (singleton pattern).
    """
    global _settings
    if _settings is None:
        _settings = load_app_config()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next get_settings() reloads them."""
    global _settings
    _settings = None
