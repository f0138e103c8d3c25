"""Configuration management using pydantic-settings.

Provides environment-based configuration with type safety and validation.
"""

from .settings import (
    FallibleSettings,
    LoggingSettings,
    NormalizeSettings,
    TaskSettings,
    clear_settings_cache,
    get_settings,
    get_settings_or_defaults,
)

__all__ = [
    "FallibleSettings",
    "LoggingSettings",
    "NormalizeSettings",
    "TaskSettings",
    "clear_settings_cache",
    "get_settings",
    "get_settings_or_defaults",
]
