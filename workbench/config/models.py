"""Configuration schema models using Pydantic."""

from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator

# Hard upper bound for plain-text résumés
MAX_TEXT_BYTES = 10 * 1024 * 1024


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


class ExtractionConfig(BaseModel):
    """Settings for the document text extractors."""

    max_text_bytes: int = Field(
        MAX_TEXT_BYTES,
        ge=1,
        le=MAX_TEXT_BYTES,
        description="Largest plain-text file accepted, in bytes",
    )


class ParsingConfig(BaseModel):
    """Settings for the résumé parser."""

    skills_file: Optional[Path] = Field(
        None, description="YAML file with a replacement skill vocabulary"
    )

    @field_validator("skills_file", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        """Treat empty strings as 'not configured'."""
        if isinstance(v, str) and not v.strip():
            return None
        return v


class MatchingConfig(BaseModel):
    """Defaults for batch ranking commands."""

    default_top_k: int = Field(10, ge=0, description="Results per ranking (0 = all)")
    min_score: float = Field(0.0, ge=0.0, le=100.0, description="Score threshold for listings")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(
        LogFormat.KEY_VALUE, description="Log output format (json or key-value)"
    )

    model_config = {"use_enum_values": True, "validate_default": True}


class AppConfig(BaseModel):
    """Root configuration object for the recruitment workbench.

    Every section has defaults, so an empty mapping is a valid configuration.
    """

    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)
    parsing: ParsingConfig = Field(default_factory=ParsingConfig)
    matching: MatchingConfig = Field(default_factory=MatchingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"extra": "forbid"}
