"""Tests for environment-based settings."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from fallible.foundation.config import (
    FallibleSettings,
    clear_settings_cache,
    get_settings,
    get_settings_or_defaults,
)


def test_defaults() -> None:
    settings = get_settings()

    assert settings.debug is False
    assert settings.environment == "development"
    assert settings.is_production is False
    assert settings.logging.level == "INFO"
    assert settings.logging.format == "console"
    assert settings.normalize.capture_traceback is True
    assert settings.task.trace is False


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FALLIBLE_DEBUG", "true")
    monkeypatch.setenv("FALLIBLE_ENVIRONMENT", "PRODUCTION")
    monkeypatch.setenv("FALLIBLE_LOG_LEVEL", "debug")
    monkeypatch.setenv("FALLIBLE_LOG_FORMAT", "json")
    monkeypatch.setenv("FALLIBLE_TASK_TRACE", "1")

    settings = FallibleSettings()

    assert settings.debug is True
    assert settings.environment == "production"
    assert settings.is_production is True
    assert settings.logging.level == "DEBUG"
    assert settings.logging.format == "json"
    assert settings.task.trace is True


def test_settings_are_cached_until_cleared(monkeypatch: pytest.MonkeyPatch) -> None:
    first = get_settings()
    assert get_settings() is first

    monkeypatch.setenv("FALLIBLE_TASK_TRACE", "true")
    assert get_settings().task.trace is False

    clear_settings_cache()
    assert get_settings() is not first
    assert get_settings().task.trace is True


def test_invalid_values_are_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FALLIBLE_LOG_FORMAT", "xml")
    with pytest.raises(ValidationError):
        FallibleSettings()


def test_invalid_environment_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FALLIBLE_ENVIRONMENT", "moon")
    with pytest.raises(ValidationError):
        FallibleSettings()


def test_defaults_used_when_environment_is_invalid(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FALLIBLE_LOG_LEVEL", "verbose")
    monkeypatch.setenv("FALLIBLE_TASK_TRACE", "true")

    with pytest.raises(ValidationError):
        get_settings()

    fallback = get_settings_or_defaults()
    assert fallback.logging.level == "INFO"
    assert fallback.task.trace is False
    assert fallback.normalize.capture_traceback is True
    assert get_settings_or_defaults() is fallback


def test_valid_environment_is_used_by_guarded_reader(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FALLIBLE_TASK_TRACE", "true")
    assert get_settings_or_defaults() is get_settings()
    assert get_settings_or_defaults().task.trace is True
