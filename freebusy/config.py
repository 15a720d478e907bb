"""
Configuration management using Pydantic models loaded from YAML.
"""

from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.timezones import is_supported_viewer_time_zone, resolve_viewer_time_zone


class GridConfig(BaseModel):
    """Calendar grid defaults."""
    default_start_hour: int = 8
    default_end_hour: int = 18
    cell_height: float = 48

    @field_validator("default_start_hour", "default_end_hour")
    @classmethod
    def validate_hour(cls, v: int) -> int:
        """Validate hour is between 0 and 24."""
        if not 0 <= v <= 24:
            raise ValueError(f"Hour must be between 0 and 24, got {v}")
        return v

    @field_validator("cell_height")
    @classmethod
    def validate_cell_height(cls, value: float) -> float:
        """Ensure cells have a visible height."""
        if value <= 0:
            raise ValueError("cell_height must be greater than zero")
        return value

    @model_validator(mode="after")
    def validate_hours_order(self) -> "GridConfig":
        """Ensure the default window opens before it closes."""
        if self.default_end_hour <= self.default_start_hour:
            raise ValueError("default_end_hour must be later than default_start_hour")
        return self


class FeedConfig(BaseModel):
    """Where the free/busy snapshot comes from."""
    path: Optional[Path] = None
    url: Optional[str] = None
    timeout_seconds: float = 30
    refresh_interval_minutes: int = 5

    @field_validator("timeout_seconds")
    @classmethod
    def validate_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("timeout_seconds must be greater than zero")
        return value

    @field_validator("refresh_interval_minutes")
    @classmethod
    def validate_refresh_interval(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("refresh_interval_minutes must be greater than zero")
        return value

    @model_validator(mode="after")
    def validate_single_source(self) -> "FeedConfig":
        """A feed is either a local file or a URL, not both."""
        if self.path is not None and self.url:
            raise ValueError("Configure either feed.path or feed.url, not both")
        return self


class AppConfig(BaseModel):
    """Application configuration."""
    viewer_timezone: Optional[str] = None  # None: the owner zone when supported, else the default
    grid: GridConfig = Field(default_factory=GridConfig)
    feed: FeedConfig = Field(default_factory=FeedConfig)

    @field_validator("viewer_timezone")
    @classmethod
    def validate_viewer_timezone(cls, value: Optional[str]) -> Optional[str]:
        """Only the zones offered in the viewer picker are accepted."""
        if value is not None and not is_supported_viewer_time_zone(value):
            raise ValueError(f"Unsupported viewer time zone: {value}")
        return value

    def viewer_zone_for(self, owner_zone: Optional[str]) -> str:
        """Zone to display in for a calendar owned in ``owner_zone``."""
        return resolve_viewer_time_zone(self.viewer_timezone, owner_zone)

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
    config_path = Path.cwd() / "config.yaml"

    if not config_path.exists():
        # Fall back to the project root
        config_path = Path(__file__).parent.parent / "config.yaml"

    return config_path
