"""
Configuration Management for Expense Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The tracker has no external services, so the only things worth configuring
are where the local storage file lives and a few presentation defaults.
"""

import os
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    Every variable is prefixed with EXPENSE_TRACKER_.
    """

    model_config = SettingsConfigDict(
        env_prefix="EXPENSE_TRACKER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        description="Minimum level for audit log lines"
    )

    # Local key-value storage
    storage_path: Path = Field(
        default=Path("data") / "local_storage.json",
        description="JSON file backing the local key-value storage"
    )

    # Presentation
    default_theme: str = Field(
        default="dark",
        pattern="^(dark|light)$",
        description="Theme used when no preference has been persisted"
    )
    currency_symbol: str = Field(
        default="$",
        min_length=1,
        max_length=3,
        description="Prefix used when displaying amounts"
    )

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


class Settings(BaseSettings):
    """
    Root settings container.

    Kept as a separate object so more setting groups can be added
    without touching callers.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, with an extra
    `<name>_error` entry describing each failure.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    try:
        app_settings = settings.app
        results["app"] = True
    except Exception as e:
        results["app"] = False
        results["app_error"] = str(e)
        return results

    # The storage file may not exist yet; its nearest existing parent must be writable
    directory = app_settings.storage_path.resolve().parent
    while not directory.exists() and directory != directory.parent:
        directory = directory.parent
    if os.access(directory, os.W_OK):
        results["storage"] = True
    else:
        results["storage"] = False
        results["storage_error"] = f"Cannot write to {directory}"

    return results
