"""Configuration management for the recruitment workbench."""

from .environment import EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError
from .loader import load_config, validate_config_file
from .models import (
    AppConfig,
    ExtractionConfig,
    LogFormat,
    LogLevel,
    LoggingConfig,
    MatchingConfig,
    ParsingConfig,
)

__all__ = [
    # Main loader functions
    "load_config",
    "validate_config_file",
    "load_environment_config",
    # Configuration models
    "AppConfig",
    "ExtractionConfig",
    "ParsingConfig",
    "MatchingConfig",
    "LoggingConfig",
    "EnvironmentConfig",
    # Enums
    "LogLevel",
    "LogFormat",
    # Exceptions
    "ConfigurationError",
]
