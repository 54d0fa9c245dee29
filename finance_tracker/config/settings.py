"""
Configuration Management for Finance Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Stores receive their settings by injection, so tests can pass explicit
values instead of touching the environment.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Document store and persistence configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FINANCE_TRACKER_STORAGE_",
        extra="ignore"
    )

    backend: str = Field(
        default="file",
        pattern="^(file|memory)$",
        description="Document store backend"
    )
    data_dir: str = Field(
        default="~/.finance_tracker",
        description="Directory holding one JSON document per store key"
    )

    # Write retry policy
    write_retry_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts per snapshot write before giving up"
    )
    write_retry_multiplier: float = Field(
        default=0.5,
        ge=0.0,
        description="Exponential back-off multiplier in seconds"
    )
    write_retry_min_wait: float = Field(
        default=0.5,
        ge=0.0,
        description="Minimum wait between write attempts in seconds"
    )
    write_retry_max_wait: float = Field(
        default=5.0,
        ge=0.0,
        description="Maximum wait between write attempts in seconds"
    )

    @field_validator('data_dir')
    @classmethod
    def validate_data_dir(cls, v: str) -> str:
        """Reject an empty data directory."""
        if not v.strip():
            raise ValueError("data_dir must not be empty")
        return v

    @model_validator(mode='after')
    def validate_wait_bounds(self) -> 'StorageSettings':
        if self.write_retry_max_wait < self.write_retry_min_wait:
            raise ValueError("write_retry_max_wait cannot be below write_retry_min_wait")
        return self

    @property
    def data_path(self) -> Path:
        """Get the data directory with the user home expanded."""
        return Path(self.data_dir).expanduser()


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    log_level: str = Field(
        default="info",
        pattern="^(debug|info|warning|error|critical)$",
        description="Minimum level for local structured logs"
    )

    # Store event history kept in memory by the audit logger
    event_history_size: int = Field(
        default=500,
        ge=0,
        le=100000,
        description="How many store events to keep for inspection"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    try:
        _ = settings.storage
        results["storage"] = True
    except Exception as e:
        results["storage"] = False
        results["storage_error"] = str(e)

    try:
        _ = settings.app
        results["app"] = True
    except Exception as e:
        results["app"] = False
        results["app_error"] = str(e)

    return results
