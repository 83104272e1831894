"""
Configuration management using Pydantic models loaded from YAML.
"""

from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator


class DefaultsConfig(BaseModel):
    """Default settings for slot search."""
    duration_minutes: int = 30
    search_days: int = 7
    start_hour: int = 9
    end_hour: int = 17

    @field_validator("duration_minutes")
    @classmethod
    def validate_duration(cls, value: int) -> int:
        """Ensure meeting duration is within the searchable range."""
        if not 15 <= value <= 480:
            raise ValueError(f"duration_minutes must be between 15 and 480, got {value}")
        return value

    @field_validator("search_days")
    @classmethod
    def validate_search_days(cls, value: int) -> int:
        if not 1 <= value <= 14:
            raise ValueError(f"search_days must be between 1 and 14, got {value}")
        return value

    @field_validator("start_hour")
    @classmethod
    def validate_start_hour(cls, v: int) -> int:
        """Validate hour is between 0 and 23."""
        if not 0 <= v <= 23:
            raise ValueError(f"Hour must be between 0 and 23, got {v}")
        return v

    @field_validator("end_hour")
    @classmethod
    def validate_end_hour(cls, v: int) -> int:
        """Validate hour is between 1 and 24."""
        if not 1 <= v <= 24:
            raise ValueError(f"Hour must be between 1 and 24, got {v}")
        return v

    @model_validator(mode="after")
    def validate_hours_order(self) -> "DefaultsConfig":
        """Ensure the configured window opens before it closes."""
        if self.end_hour <= self.start_hour:
            raise ValueError("end_hour must be later than start_hour")
        return self


class AppConfig(BaseModel):
    """Application configuration."""
    timezone: str = "Europe/Berlin"
    calendar_id: str = "primary"
    client_secrets_file: Optional[Path] = None
    credentials_dir: Path = Field(default_factory=Path.cwd)
    token_file: Path = Field(default_factory=lambda: Path.home() / ".gcalslots_token.json")
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
    exclude_days: List[int] = Field(default_factory=lambda: [5, 6])  # Saturday, Sunday
    pending_invite_days: int = Field(default=30, ge=1)

    @field_validator("exclude_days")
    @classmethod
    def validate_exclude_days(cls, value: List[int]) -> List[int]:
        """Ensure weekdays are in valid range and deduplicated."""
        invalid_days = [day for day in value if day not in range(7)]
        if invalid_days:
            raise ValueError(f"exclude_days must be between 0 and 6, got {invalid_days}")
        # Preserve order while removing duplicates
        seen: set[int] = set()
        deduped: List[int] = []
        for day in value:
            if day not in seen:
                deduped.append(day)
                seen.add(day)
        return deduped

    @field_validator("client_secrets_file", "credentials_dir", "token_file")
    @classmethod
    def expand_user(cls, value: Optional[Path]) -> Optional[Path]:
        return value.expanduser() if value is not None else None

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        return cls(**data)


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """
    Load the configuration, falling back to built-in defaults.

    An explicitly given path must exist; when no path is given and no
    config.yaml can be found, the defaults are used.
    """
    if config_path is not None:
        return AppConfig.load_from_yaml(config_path)

    default_path = get_default_config_path()
    if default_path.exists():
        return AppConfig.load_from_yaml(default_path)

    return AppConfig()
