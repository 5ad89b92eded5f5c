"""Environment variable loading and validation."""

import os
from pathlib import Path
from typing import Optional

from .exceptions import ConfigurationError

DEFAULT_DATABASE_URL = "sqlite:///./data/workbench.db"
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class EnvironmentConfig:
    """Environment variable configuration holder."""

    def __init__(
        self,
        database_url: Optional[str] = None,
        log_level: Optional[str] = None,
        skills_file: Optional[Path] = None,
    ):
        self.database_url = database_url or DEFAULT_DATABASE_URL
        self.log_level = log_level
        self.skills_file = skills_file


def load_environment_config() -> EnvironmentConfig:
    """Load and validate environment variables.

    All variables are optional:
    - DATABASE_URL: SQLAlchemy URL (default: sqlite:///./data/workbench.db)
    - LOG_LEVEL: DEBUG, INFO, WARNING, ERROR or CRITICAL
    - WORKBENCH_SKILLS_FILE: YAML skill vocabulary overriding the configured one

    Returns:
        EnvironmentConfig with validated values

    Raises:
        ConfigurationError: If a variable is set to an invalid value
    """
    errors = []

    database_url = os.getenv("DATABASE_URL") or None
    log_level = os.getenv("LOG_LEVEL") or None
    skills_file_str = os.getenv("WORKBENCH_SKILLS_FILE") or None

    if log_level and log_level.upper() not in VALID_LOG_LEVELS:
        errors.append(
            f"Invalid LOG_LEVEL: '{log_level}'. Must be one of: {', '.join(VALID_LOG_LEVELS)}"
        )

    skills_file = None
    if skills_file_str:
        skills_file = Path(skills_file_str)
        if not skills_file.is_file():
            errors.append(f"WORKBENCH_SKILLS_FILE does not point to a file: {skills_file_str}")

    if database_url and "://" not in database_url:
        errors.append(f"Invalid DATABASE_URL: '{database_url}'. Expected a URL such as sqlite:///path.db")

    if errors:
        raise ConfigurationError(
            "Environment variable validation failed",
            errors=errors,
            suggestions=[
                "Check the values in your .env file",
                "Unset variables you do not need; all of them are optional",
            ],
        )

    return EnvironmentConfig(
        database_url=database_url,
        log_level=log_level.upper() if log_level else None,
        skills_file=skills_file,
    )
