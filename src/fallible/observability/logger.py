"""Key=value logging for Task run tracing.

Each entry merges three layers of context: the scope of the current run
(`run_id`, set through `log_context`), the fields bound to the logger
(`logger`, `step`) and the call-site fields (`outcome`, `duration_ms`,
`error`). Renderers turn entries into console lines or JSON lines.

Quick Start:
    >>> from fallible.observability import configure_logging
    >>> configure_logging(format="console", level="DEBUG")
    >>> # with FALLIBLE_TASK_TRACE=1 every settled step prints a line like
    >>> # 10:30:45.120 [debug] task settled run_id="3f2a9c1d04b7" step="map" outcome="success" duration_ms=0.41 logger="fallible.task"
"""

from __future__ import annotations

import logging
import sys
import time
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, Protocol, TextIO

import orjson

if TYPE_CHECKING:
    from ..foundation.config import LoggingSettings

LogContext = dict[str, Any]

# Trace fields lead a console line, in this order
TRACE_FIELDS = ("run_id", "step", "outcome", "duration_ms")

_scope: ContextVar[LogContext] = ContextVar("log_scope", default={})
_renderer: ContextVar[LogRenderer | None] = ContextVar("log_renderer", default=None)
_default_level: ContextVar[int] = ContextVar("log_level", default=logging.INFO)


@dataclass(frozen=True, slots=True)
class LogEntry:
    timestamp: float
    level: str
    event: str
    context: LogContext

    @property
    def clock(self) -> str:
        """HH:MM:SS.mmm (UTC)"""
        return datetime.fromtimestamp(self.timestamp, tz=UTC).strftime("%H:%M:%S.%f")[:-3]


class LogRenderer(Protocol):
    def render(self, entry: LogEntry) -> None: ...


@dataclass(frozen=True, slots=True)
class BoundLogger:
    """Logger carrying fixed context. bind() returns a new logger.

    Example:
        >>> log = get_logger("fallible.task", step="chain")
        >>> log.debug("task settled", outcome="failure", duration_ms=1.5)
    """

    context: LogContext = field(default_factory=dict)

    def bind(self, **kw: Any) -> BoundLogger:
        return BoundLogger({**self.context, **kw})

    def debug(self, event: str, **kw: Any) -> None: self._log(logging.DEBUG, event, kw)
    def info(self, event: str, **kw: Any) -> None: self._log(logging.INFO, event, kw)
    def warning(self, event: str, **kw: Any) -> None: self._log(logging.WARNING, event, kw)
    def error(self, event: str, **kw: Any) -> None: self._log(logging.ERROR, event, kw)

    def _log(self, level: int, event: str, fields: LogContext) -> None:
        if level < _default_level.get():
            return
        context = {**_scope.get(), **self.context, **fields}
        entry = LogEntry(time.time(), logging.getLevelName(level).lower(), event, context)
        _current_renderer().render(entry)


# ─────────────────────────────────────────────────────────────────────────────
# Renderers
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(slots=True)
class ConsoleRenderer:
    """`clock [level] event` then trace fields, then remaining fields sorted."""

    output: TextIO = field(default_factory=lambda: sys.stderr)
    show_timestamp: bool = True

    def render(self, entry: LogEntry) -> None:
        ctx = entry.context
        keys = [k for k in TRACE_FIELDS if k in ctx] + sorted(k for k in ctx if k not in TRACE_FIELDS)
        head = [entry.clock] if self.show_timestamp else []
        line = " ".join([*head, f"[{entry.level}]", entry.event, *(f"{k}={_format_value(ctx[k])}" for k in keys)])
        print(line, file=self.output)


@dataclass(slots=True)
class JsonRenderer:
    """One JSON object per line."""

    output: TextIO = field(default_factory=lambda: sys.stdout)

    def render(self, entry: LogEntry) -> None:
        record = {"timestamp": entry.timestamp, "level": entry.level, "event": entry.event, **entry.context}
        print(orjson.dumps(record, default=repr).decode(), file=self.output)


class NoOpRenderer:
    def render(self, entry: LogEntry) -> None:
        pass


# ─────────────────────────────────────────────────────────────────────────────
# Configuration
# ─────────────────────────────────────────────────────────────────────────────


def configure_logging(format: str = "console", level: str = "INFO", *, output: TextIO | None = None) -> LogRenderer:  # noqa: A002
    """Install a renderer for the current context: "console", "json" or "none"."""
    match format:
        case "console":
            renderer: LogRenderer = ConsoleRenderer(output=output or sys.stderr)
        case "json":
            renderer = JsonRenderer(output=output or sys.stdout)
        case "none":
            renderer = NoOpRenderer()
        case _:
            raise ValueError(f"Unknown format: {format}. Use 'console', 'json', or 'none'")
    _default_level.set(logging.getLevelNamesMapping().get(level.upper(), logging.INFO))
    _renderer.set(renderer)
    return renderer


def configure_from_settings(settings: LoggingSettings | None = None, *, output: TextIO | None = None) -> LogRenderer:
    """Configure logging from FALLIBLE_LOG_* settings."""
    if settings is None:
        from ..foundation.config import get_settings
        settings = get_settings().logging
    return configure_logging(format=settings.format, level=settings.level, output=output)


def get_logger(name: str | None = None, **context: Any) -> BoundLogger:
    """Logger with `name` bound as the 'logger' field."""
    return BoundLogger({**context, "logger": name} if name else context)


@contextmanager
def log_context(**fields: Any) -> Iterator[None]:
    """Add fields to every entry logged inside the block, across awaits."""
    token = _scope.set({**_scope.get(), **fields})
    try:
        yield
    finally:
        _scope.reset(token)


def _current_renderer() -> LogRenderer:
    if (renderer := _renderer.get()) is None:
        _renderer.set(renderer := ConsoleRenderer())
    return renderer


def _format_value(v: object) -> str:
    match v:
        case str():
            return f'"{v}"'
        case bool():
            return str(v).lower()
        case int() | float():
            return str(v)
        case _:
            return repr(v)
