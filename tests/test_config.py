"""
Tests for configuration loading.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from gcalslots.config import AppConfig, DefaultsConfig, load_config


class TestDefaultsConfig:
    """Tests for search defaults."""

    def test_defaults(self):
        defaults = DefaultsConfig()

        assert defaults.duration_minutes == 30
        assert defaults.search_days == 7
        assert (defaults.start_hour, defaults.end_hour) == (9, 17)

    def test_end_hour_may_be_midnight(self):
        assert DefaultsConfig(start_hour=18, end_hour=24).end_hour == 24

    @pytest.mark.parametrize(
        "values",
        [
            {"duration_minutes": 10},
            {"search_days": 15},
            {"start_hour": 24},
            {"end_hour": 0},
            {"start_hour": 17, "end_hour": 9},
        ],
    )
    def test_invalid_values(self, values):
        with pytest.raises(ValidationError):
            DefaultsConfig(**values)


class TestAppConfig:
    """Tests for the application configuration."""

    def test_load_from_yaml(self, tmp_path):
        config_path = tmp_path / "config.yaml"
        config_path.write_text(
            "timezone: America/New_York\n"
            "calendar_id: team@example.com\n"
            "exclude_days: [6, 5, 6]\n"
            "defaults:\n"
            "  duration_minutes: 45\n"
            "  end_hour: 18\n",
            encoding="utf-8",
        )

        config = AppConfig.load_from_yaml(config_path)

        assert config.timezone == "America/New_York"
        assert config.calendar_id == "team@example.com"
        assert config.exclude_days == [6, 5]
        assert config.defaults.duration_minutes == 45
        assert config.defaults.end_hour == 18
        assert config.pending_invite_days == 30

    def test_invalid_exclude_days(self):
        with pytest.raises(ValidationError, match="exclude_days"):
            AppConfig(exclude_days=[7])

    def test_token_file_expands_home(self):
        config = AppConfig(token_file="~/token.json")

        assert config.token_file == Path.home() / "token.json"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            AppConfig.load_from_yaml(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        config_path = tmp_path / "config.yaml"
        config_path.write_text("defaults: [unclosed", encoding="utf-8")

        with pytest.raises(ValueError, match="Invalid YAML"):
            AppConfig.load_from_yaml(config_path)

    def test_non_mapping_root(self, tmp_path):
        config_path = tmp_path / "config.yaml"
        config_path.write_text("- just\n- a list\n", encoding="utf-8")

        with pytest.raises(ValueError, match="mapping"):
            AppConfig.load_from_yaml(config_path)


class TestLoadConfig:
    """Tests for config discovery."""

    def test_defaults_without_config_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        config = load_config()

        assert config == AppConfig(credentials_dir=config.credentials_dir)
        assert config.timezone == "Europe/Berlin"

    def test_config_in_working_directory(self, tmp_path, monkeypatch):
        (tmp_path / "config.yaml").write_text("timezone: Asia/Tokyo\n", encoding="utf-8")
        monkeypatch.chdir(tmp_path)

        assert load_config().timezone == "Asia/Tokyo"

    def test_explicit_path_must_exist(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yaml")
