"""Configuration package."""

from src.config.settings import (
    AppSettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
