"""Environment-based configuration using pydantic-settings.

Provides type-safe, validated configuration from environment variables
with sensible defaults. Supports .env files and nested configuration.

Example:
    >>> from fallible.foundation.config import get_settings
    >>> settings = get_settings()
    >>> settings.task.trace
    False
    >>> settings.logging.level
    'INFO'

    # Or with environment variables:
    # FALLIBLE_TASK_TRACE=true
    # FALLIBLE_LOG_LEVEL=DEBUG
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, ValidationError, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FALLIBLE_LOG_",
        extra="ignore",
    )

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["console", "json", "none"] = "console"

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v


class NormalizeSettings(BaseSettings):
    """Failure normalization options."""

    model_config = SettingsConfigDict(
        env_prefix="FALLIBLE_NORMALIZE_",
        extra="ignore",
    )

    capture_traceback: bool = Field(
        default=True,
        description="Keep the formatted traceback of exception causes in NormalizedError.details",
    )


class TaskSettings(BaseSettings):
    """Task execution options."""

    model_config = SettingsConfigDict(
        env_prefix="FALLIBLE_TASK_",
        extra="ignore",
    )

    trace: bool = Field(default=False, description="Log every settled Task step at debug level")


class FallibleSettings(BaseSettings):
    """Root settings.

    Loads configuration from environment variables with FALLIBLE_ prefix.

    Example environment variables:
        FALLIBLE_DEBUG=true
        FALLIBLE_LOG_FORMAT=json
        FALLIBLE_NORMALIZE_CAPTURE_TRACEBACK=false
        FALLIBLE_TASK_TRACE=true
    """

    model_config = SettingsConfigDict(
        env_prefix="FALLIBLE_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    debug: bool = Field(default=False, description="Enable debug mode")
    environment: Literal["development", "staging", "production"] = "development"

    # Nested settings (loaded with FALLIBLE_LOG_, FALLIBLE_TASK_, etc.)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    normalize: NormalizeSettings = Field(default_factory=NormalizeSettings)
    task: TaskSettings = Field(default_factory=TaskSettings)

    @field_validator("environment", mode="before")
    @classmethod
    def _normalize_env(cls, v: str) -> str:
        """Normalize environment name to lowercase."""
        return v.lower() if isinstance(v, str) else v

    @computed_field
    @property
    def is_production(self) -> bool:
        return self.environment == "production"


@lru_cache(maxsize=1)
def get_settings() -> FallibleSettings:
    """Get the global settings instance (cached)."""
    return FallibleSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing).

    After calling this, the next get_settings() call will
    reload configuration from environment.
    """
    get_settings.cache_clear()
    _default_settings.cache_clear()


def get_settings_or_defaults() -> FallibleSettings:
    """Like get_settings(), but falls back to defaults when the environment is invalid.

    Read by normalize() and Task.run(). The validation error is logged once
    per distinct message.
    """
    try:
        return get_settings()
    except ValidationError as e:
        return _default_settings(str(e))


@lru_cache(maxsize=8)
def _default_settings(reason: str) -> FallibleSettings:
    from ...observability import get_logger

    get_logger("fallible.config").warning("invalid settings, using defaults", reason=reason)
    return FallibleSettings.model_construct(
        logging=LoggingSettings.model_construct(),
        normalize=NormalizeSettings.model_construct(),
        task=TaskSettings.model_construct(),
    )
