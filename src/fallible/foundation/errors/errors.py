"""Normalized failure representation.

Every failure that crosses a Result or Task boundary is collapsed into a single
shape: a NormalizedError carrying a human-readable message and, where one
exists, the original raised value. Uses Pydantic for immutability and
serialization, orjson for rendering structured failure payloads.
"""

from __future__ import annotations

import dataclasses
import numbers
import traceback
from enum import StrEnum
from typing import Any, Self

import orjson
from pydantic import BaseModel, ConfigDict, Field


UNKNOWN_MESSAGE = "An unknown error occurred."
UNSUPPORTED_MESSAGE = "Unsupported error type: {type_name}"
SERIALIZATION_MESSAGE = "An error occurred while serializing the object: {reason}"


class ErrorKind(StrEnum):
    """How a raised value was classified during normalization."""
    EXCEPTION = "exception"
    TEXT = "text"
    STRUCTURED = "structured"
    SERIALIZATION = "serialization"
    UNSUPPORTED = "unsupported"
    UNKNOWN = "unknown"


class NormalizedError(BaseModel):
    """Canonical failure: message plus the original cause.

    Built by `normalize()` from anything that can be raised or rejected.
    Frozen, so a failure payload can be shared freely between Results.

    Example:
        >>> err = NormalizedError.from_any(ValueError("bad input"))
        >>> err.message
        'bad input'
        >>> NormalizedError.from_any(err) is err
        True
    """

    model_config = ConfigDict(
        frozen=True, extra="forbid", arbitrary_types_allowed=True,
        revalidate_instances="never",
        json_schema_extra={"title": "Normalized Error"},
    )

    message: str
    cause: Any = Field(default=None, repr=False, exclude=True)
    kind: ErrorKind = ErrorKind.UNKNOWN
    details: str | None = Field(default=None, repr=False)

    @classmethod
    def from_any(cls, value: object) -> NormalizedError:
        """Alias for `normalize()`."""
        return normalize(value)

    @classmethod
    def create(cls, message: str, *, kind: ErrorKind = ErrorKind.TEXT, cause: object = None) -> Self:
        """Factory method for cleaner construction."""
        return cls.model_construct(message=message, cause=cause, kind=kind, details=None)

    def to_exception(self) -> NormalizedException:
        """Wrap in a raisable exception."""
        return NormalizedException(self)

    def render(self) -> str:
        """Message, prefixed with the exception class when the cause was one."""
        if self.kind is ErrorKind.EXCEPTION and isinstance(self.cause, BaseException):
            return f"{type(self.cause).__name__}: {self.message}"
        return self.message

    def __str__(self) -> str:
        return self.render()

    def __hash__(self) -> int:
        return hash((self.kind, self.message))


class NormalizedException(Exception):
    """Exception that wraps a NormalizedError for raising."""

    __slots__ = ("error",)

    def __init__(self, error: NormalizedError) -> None:
        self.error = error
        super().__init__(error.message)


# ─────────────────────────────────────────────────────────────────────────────
# Normalization
# ─────────────────────────────────────────────────────────────────────────────


def normalize(value: object) -> NormalizedError:
    """Convert any raised or rejected value into a NormalizedError.

    Total: never raises, whatever the input. Idempotent: an existing
    NormalizedError is returned as-is.
    """
    try:
        return _classify(value)
    except Exception:  # noqa: BLE001 - classification of hostile objects must not escape
        return NormalizedError.create(UNKNOWN_MESSAGE, kind=ErrorKind.UNKNOWN)


def _classify(value: object) -> NormalizedError:
    match value:
        case NormalizedError():
            return value
        case NormalizedException():
            return value.error
        case BaseException():
            return _from_exception(value)
        case str():
            return NormalizedError.create(value, kind=ErrorKind.TEXT)
        case None:
            return NormalizedError.create(UNKNOWN_MESSAGE, kind=ErrorKind.UNKNOWN)
    if _is_unsupported(value):
        return NormalizedError.create(
            UNSUPPORTED_MESSAGE.format(type_name=type(value).__name__),
            kind=ErrorKind.UNSUPPORTED, cause=value,
        )
    return _from_structured(value)


def _from_exception(exc: BaseException) -> NormalizedError:
    try:
        message = str(exc) or type(exc).__name__
    except Exception:  # noqa: BLE001
        message = f"Unprintable {type(exc).__name__}"
    return NormalizedError.model_construct(
        message=message, cause=exc, kind=ErrorKind.EXCEPTION, details=_format_traceback(exc),
    )


def _format_traceback(exc: BaseException) -> str | None:
    from ..config import get_settings_or_defaults

    if exc.__traceback__ is None or not get_settings_or_defaults().normalize.capture_traceback:
        return None
    return "".join(traceback.format_exception(exc))


def _is_unsupported(value: object) -> bool:
    """Scalars and callables carry no structure worth serializing."""
    return isinstance(value, (numbers.Number, bytes, bytearray, memoryview)) or callable(value)


def _from_structured(value: object) -> NormalizedError:
    try:
        text = orjson.dumps(value, default=_json_default, option=orjson.OPT_NON_STR_KEYS).decode()
    except Exception as e:  # noqa: BLE001
        return NormalizedError.create(
            SERIALIZATION_MESSAGE.format(reason=e), kind=ErrorKind.SERIALIZATION, cause=value,
        )
    return NormalizedError.create(text, kind=ErrorKind.STRUCTURED, cause=value)


def _json_default(obj: object) -> object:
    """orjson fallback for values it cannot encode natively."""
    if isinstance(obj, BaseModel):
        return obj.model_dump(mode="json")
    if isinstance(obj, (set, frozenset)):
        return list(obj)
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return dataclasses.asdict(obj)
    if hasattr(obj, "__dict__"):
        return vars(obj)
    if slots := getattr(type(obj), "__slots__", None):
        names = (slots,) if isinstance(slots, str) else slots
        return {name: getattr(obj, name) for name in names if hasattr(obj, name)}
    raise TypeError(f"Type is not JSON serializable: {type(obj).__name__}")
