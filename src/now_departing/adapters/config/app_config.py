"""12-factor configuration adapter using environment variables and TOML config."""

import logging
from pathlib import Path
from typing import Any

try:
    import tomllib  # Python 3.11+
except ImportError:
    import tomli as tomllib  # type: ignore[no-redef]  # Fallback for older Python

from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from now_departing.domain.models.poll_interval_policy import PollIntervalPolicy


def _require_positive(name: str, value: float) -> float:
    if value <= 0:
        raise ValueError(f"{name} must be greater than 0")
    return value


def _require_not_negative(name: str, value: float) -> float:
    if value < 0:
        raise ValueError(f"{name} must not be negative")
    return value


class AppConfig(BaseSettings):
    """Application configuration following 12-factor principles."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Transit API configuration
    api_base_url: str = Field(
        default="http://localhost:8080",
        description="Base URL of the transit arrivals API",
    )
    api_timeout_seconds: float = Field(
        default=10.0, description="Timeout for a single arrivals request in seconds"
    )

    # Polling configuration
    foreground_interval_seconds: float = Field(
        default=30.0,
        description="Seconds between fetches while the favorites list is in the foreground",
    )
    background_interval_seconds: float = Field(
        default=120.0,
        description="Seconds between fetches in the background (0 suspends background polling)",
    )
    stagger_seconds: float = Field(
        default=0.5,
        description="Delay between the first fetches of consecutive favorites",
    )

    # Favorites file
    favorites_file: str | None = Field(
        default="favorites.toml",
        description="Path to TOML file with [[favorites]] and optional [polling] settings",
    )

    log_level: str = Field(default="INFO", description="Logging level for the runner")

    @classmethod
    def for_testing(cls, **overrides: Any) -> "AppConfig":
        """Build a config that ignores any .env file in the working directory."""
        return cls(_env_file=None, **overrides)  # type: ignore[call-arg]

    @field_validator("foreground_interval_seconds")
    @classmethod
    def validate_foreground_interval(cls, v: float) -> float:
        """Validate the foreground interval is positive."""
        return _require_positive("foreground_interval_seconds", v)

    @field_validator("background_interval_seconds", "stagger_seconds", "api_timeout_seconds")
    @classmethod
    def validate_not_negative(cls, v: float, info: ValidationInfo) -> float:
        """Validate durations are not negative."""
        return _require_not_negative(info.field_name or "duration", v)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a standard logging level name."""
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"log_level must be a logging level name, got '{v}'")
        return level

    def poll_interval_policy(self) -> PollIntervalPolicy:
        return PollIntervalPolicy(
            foreground_interval_seconds=self.foreground_interval_seconds,
            background_interval_seconds=self.background_interval_seconds,
        )

    def load_toml_data(self) -> dict[str, Any]:
        """Load and parse the TOML file, applying [polling] overrides.

        Raises:
            ValueError: If favorites_file is not set or a polling value is invalid.
            FileNotFoundError: If the file does not exist.
        """
        if not self.favorites_file:
            raise ValueError("favorites_file must be set to load favorites")

        config_path = Path(self.favorites_file)
        if not config_path.exists():
            raise FileNotFoundError(f"Favorites file not found: {config_path}")

        with open(config_path, "rb") as f:
            toml_data = tomllib.load(f)

        polling = toml_data.get("polling", {})
        if not isinstance(polling, dict):
            raise ValueError("TOML config 'polling' must be a table")
        if "foreground_interval_seconds" in polling:
            self.foreground_interval_seconds = _require_positive(
                "foreground_interval_seconds", float(polling["foreground_interval_seconds"])
            )
        if "background_interval_seconds" in polling:
            self.background_interval_seconds = _require_not_negative(
                "background_interval_seconds", float(polling["background_interval_seconds"])
            )
        if "stagger_seconds" in polling:
            self.stagger_seconds = _require_not_negative(
                "stagger_seconds", float(polling["stagger_seconds"])
            )

        return toml_data
