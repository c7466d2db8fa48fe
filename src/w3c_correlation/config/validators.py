"""Custom Pydantic validators for configuration."""

from pathlib import Path


def validate_log_level(value: str) -> str:
    """Validate log level is one of the standard levels.

    Args:
        value: Log level string.

    Returns:
        Validated log level.

    Raises:
        ValueError: If log level is not valid.
    """
    valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
    if value.upper() not in valid_levels:
        raise ValueError(f"log_level must be one of {valid_levels}, got {value}")
    return value.upper()


def validate_log_format(value: str) -> str:
    """Validate log format is 'json' or 'console'.

    Args:
        value: Log format string.

    Returns:
        Validated log format.

    Raises:
        ValueError: If log format is not valid.
    """
    valid_formats = {"json", "console"}
    if value.lower() not in valid_formats:
        raise ValueError(f"log_format must be one of {valid_formats}, got {value}")
    return value.lower()


def validate_source_prefix(value: str) -> str:
    """Reject an empty instrumentation prefix.

    An empty prefix would match every sdk version and exempt all SQL
    dependencies, not just the diagnostic-source ones.

    Raises:
        ValueError: If the prefix is empty or whitespace.
    """
    if not value.strip():
        raise ValueError("sql_diagnostic_source_prefix must not be empty")
    return value


def resolve_path(value: Path | str) -> Path:
    """Resolve relative paths against the project root.

    Args:
        value: Path value (can be string or Path).

    Returns:
        Resolved Path object.
    """
    path = Path(value) if isinstance(value, str) else value

    if not path.is_absolute():
        # src/w3c_correlation/config -> project root
        project_root = Path(__file__).parent.parent.parent.parent
        path = (project_root / path).resolve()
    else:
        path = path.resolve()

    return path
