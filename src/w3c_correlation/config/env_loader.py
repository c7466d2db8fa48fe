"""Environment variable file loader with priority-based loading."""

from enum import Enum
from pathlib import Path

from dotenv import load_dotenv

from w3c_correlation.telemetry import ENV_FILES_LOADED, NO_ENV_FILES_FOUND, get_logger

log = get_logger(__name__)


class Environment(str, Enum):
    """Application environment types."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TEST = "test"


def get_environment() -> Environment:
    """Detect current environment from APP_ENV environment variable.

    Returns:
        Environment enum value.

    Environment variable mapping:
    - "production" or "prod" → Environment.PRODUCTION
    - "staging" or "stage" → Environment.STAGING
    - "test" → Environment.TEST
    - Default → Environment.DEVELOPMENT
    """
    import os  # noqa: PLC0415

    app_env = os.getenv("APP_ENV", "").lower()

    if app_env in ("production", "prod"):
        return Environment.PRODUCTION
    elif app_env in ("staging", "stage"):
        return Environment.STAGING
    elif app_env == "test":
        return Environment.TEST
    else:
        return Environment.DEVELOPMENT


def load_env_files(project_root: Path | None = None) -> list[str]:
    """Load .env files in priority order.

    Priority order (highest to lowest):
    1. `.env.{environment}.local`
    2. `.env.{environment}`
    3. `.env.local`
    4. `.env`

    Explicit environment variables always win over values from files.

    Args:
        project_root: Directory holding the .env files. If None, detects the
            project root from this file's location.

    Returns:
        Loaded file names, relative to project_root.
    """
    if project_root is None:
        # src/w3c_correlation/config -> project root
        project_root = Path(__file__).parent.parent.parent.parent

    env_name = get_environment().value

    # Highest priority first: with override=False the first file to set a key wins
    env_files = [
        project_root / f".env.{env_name}.local",
        project_root / f".env.{env_name}",
        project_root / ".env.local",
        project_root / ".env",
    ]

    loaded_files = []
    for env_file in env_files:
        if env_file.exists():
            load_dotenv(env_file, override=False)
            loaded_files.append(str(env_file.relative_to(project_root)))

    if loaded_files:
        log.info(
            ENV_FILES_LOADED,
            environment=env_name,
            files=loaded_files,
            project_root=str(project_root),
        )
    else:
        log.debug(NO_ENV_FILES_FOUND, environment=env_name, project_root=str(project_root))

    return loaded_files
