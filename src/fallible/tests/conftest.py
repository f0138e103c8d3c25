"""Shared fixtures: isolate settings and logging state between tests."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator

import pytest

from fallible.foundation.config import clear_settings_cache
from fallible.observability import NoOpRenderer, logger


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Drop FALLIBLE_* variables and the cached settings before each test."""
    for key in list(os.environ):
        if key.startswith("FALLIBLE_"):
            monkeypatch.delenv(key)
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture(autouse=True)
def silent_logging() -> Iterator[None]:
    """Install a silent renderer so tests never write to stderr unless they opt in."""
    renderer_token = logger._renderer.set(NoOpRenderer())
    level_token = logger._default_level.set(logging.INFO)
    yield
    logger._default_level.reset(level_token)
    logger._renderer.reset(renderer_token)


@pytest.fixture
def trace_tasks(monkeypatch: pytest.MonkeyPatch) -> None:
    """Enable Task run tracing through the environment."""
    monkeypatch.setenv("FALLIBLE_TASK_TRACE", "true")
    clear_settings_cache()
