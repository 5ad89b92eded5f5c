"""Unit tests for configuration loading and validation."""

from pathlib import Path

import pytest

from workbench.config import (
    AppConfig,
    ConfigurationError,
    LogFormat,
    LogLevel,
    load_config,
    load_environment_config,
    validate_config_file,
)
from workbench.config.environment import DEFAULT_DATABASE_URL
from workbench.config.models import MAX_TEXT_BYTES
from workbench.config.validators import check_for_warnings

VALID_CONFIG = """
extraction:
  max_text_bytes: 2048
parsing:
  skills_file: ""
matching:
  default_top_k: 5
  min_score: 40
logging:
  level: DEBUG
  format: json
"""


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch, tmp_path):
    """Run every test in an empty directory without workbench variables."""
    for name in ("DATABASE_URL", "LOG_LEVEL", "WORKBENCH_SKILLS_FILE"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


def write_config(directory: Path, content: str, name: str = "workbench.yaml") -> Path:
    path = directory / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


class TestAppConfigModel:
    """Tests for the configuration schema."""

    def test_defaults(self):
        config = AppConfig()

        assert config.extraction.max_text_bytes == MAX_TEXT_BYTES
        assert config.parsing.skills_file is None
        assert config.matching.default_top_k == 10
        assert config.matching.min_score == 0.0
        assert config.logging.level == LogLevel.INFO.value
        assert config.logging.format == LogFormat.KEY_VALUE.value

    def test_default_logging_values_are_plain_strings(self):
        logging_config = AppConfig().logging

        assert type(logging_config.level) is str
        assert type(logging_config.format) is str
        assert logging_config.level == "INFO"

    def test_unknown_section_rejected(self):
        with pytest.raises(ValueError):
            AppConfig.model_validate({"scheduler": {}})

    @pytest.mark.parametrize("value", [0, MAX_TEXT_BYTES + 1])
    def test_max_text_bytes_bounds(self, value):
        with pytest.raises(ValueError):
            AppConfig.model_validate({"extraction": {"max_text_bytes": value}})

    @pytest.mark.parametrize("value", [-1, 100.5])
    def test_min_score_bounds(self, value):
        with pytest.raises(ValueError):
            AppConfig.model_validate({"matching": {"min_score": value}})


class TestLoadConfig:
    """Tests for load_config."""

    def test_defaults_without_file(self):
        app_config, env_config = load_config()

        assert app_config == AppConfig()
        assert env_config.database_url == DEFAULT_DATABASE_URL
        assert env_config.log_level is None

    def test_explicit_file(self, tmp_path):
        path = write_config(tmp_path, VALID_CONFIG, name="custom.yaml")

        app_config, _ = load_config(path)

        assert app_config.extraction.max_text_bytes == 2048
        assert app_config.parsing.skills_file is None
        assert app_config.matching.default_top_k == 5
        assert app_config.matching.min_score == 40
        assert app_config.logging.level == "DEBUG"
        assert app_config.logging.format == "json"

    def test_default_location_in_working_directory(self, tmp_path):
        write_config(tmp_path, "matching:\n  default_top_k: 3\n")

        app_config, _ = load_config()

        assert app_config.matching.default_top_k == 3

    def test_config_subdirectory_location(self, tmp_path):
        write_config(tmp_path / "config", "matching:\n  default_top_k: 4\n")

        app_config, _ = load_config()

        assert app_config.matching.default_top_k == 4

    def test_empty_file_uses_defaults(self, tmp_path):
        path = write_config(tmp_path, "")

        app_config, _ = load_config(path)

        assert app_config == AppConfig()

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            load_config(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = write_config(tmp_path, "matching: [unclosed\n")

        with pytest.raises(ConfigurationError, match="Failed to parse YAML"):
            load_config(path)

    def test_top_level_must_be_mapping(self, tmp_path):
        path = write_config(tmp_path, "- one\n- two\n")

        with pytest.raises(ConfigurationError, match="mapping"):
            load_config(path)

    def test_validation_errors_are_collected(self, tmp_path):
        path = write_config(
            tmp_path,
            "unknown: 1\n"
            "extraction:\n  max_text_bytes: lots\n"
            "logging:\n  level: LOUD\n",
        )

        with pytest.raises(ConfigurationError) as exc_info:
            load_config(path)

        errors = exc_info.value.errors
        assert "Unknown setting: unknown" in errors
        assert any("extraction -> max_text_bytes" in error for error in errors)
        assert any("logging -> level" in error for error in errors)
        assert "Suggestions:" in str(exc_info.value)

    def test_skills_file_from_environment(self, tmp_path, monkeypatch):
        skills = tmp_path / "skills.yaml"
        skills.write_text("- COBOL\n")
        monkeypatch.setenv("WORKBENCH_SKILLS_FILE", str(skills))

        app_config, env_config = load_config()

        assert app_config.parsing.skills_file == skills
        assert env_config.skills_file == skills

    def test_high_min_score_warns(self, tmp_path):
        path = write_config(tmp_path, "matching:\n  min_score: 95\n")

        with pytest.warns(UserWarning, match="min_score"):
            load_config(path)


class TestEnvironmentConfig:
    """Tests for load_environment_config."""

    def test_all_optional(self):
        env_config = load_environment_config()

        assert env_config.database_url == DEFAULT_DATABASE_URL
        assert env_config.log_level is None
        assert env_config.skills_file is None

    def test_values_are_read(self, monkeypatch, tmp_path):
        monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'x.db'}")
        monkeypatch.setenv("LOG_LEVEL", "warning")

        env_config = load_environment_config()

        assert env_config.database_url.endswith("x.db")
        assert env_config.log_level == "WARNING"

    def test_invalid_values_reported_together(self, monkeypatch, tmp_path):
        monkeypatch.setenv("LOG_LEVEL", "chatty")
        monkeypatch.setenv("DATABASE_URL", "workbench.db")
        monkeypatch.setenv("WORKBENCH_SKILLS_FILE", str(tmp_path / "absent.yaml"))

        with pytest.raises(ConfigurationError) as exc_info:
            load_environment_config()

        assert len(exc_info.value.errors) == 3


class TestConfigWarnings:
    """Tests for check_for_warnings."""

    def test_no_warnings_for_defaults(self):
        assert check_for_warnings({}) == []

    def test_warning_messages(self):
        warnings = check_for_warnings(
            {
                "matching": {"min_score": 90, "default_top_k": 5000},
                "extraction": {"max_text_bytes": 100},
            }
        )

        assert len(warnings) == 3


class TestValidateConfigFile:
    """Tests for validate_config_file."""

    def test_valid_file(self, tmp_path, capsys):
        path = write_config(tmp_path, VALID_CONFIG)

        assert validate_config_file(path) is True
        assert "is valid" in capsys.readouterr().out

    def test_invalid_file(self, tmp_path, capsys):
        path = write_config(tmp_path, "matching:\n  default_top_k: -1\n")

        assert validate_config_file(path) is False
        assert "validation failed" in capsys.readouterr().out
