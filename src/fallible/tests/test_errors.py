"""Tests for failure normalization.

Validates:
- Every classification rule of normalize()
- Totality (hostile inputs never escape)
- Idempotence
- NormalizedException round trip
"""

from __future__ import annotations

from dataclasses import dataclass

import pytest
from pydantic import BaseModel

from fallible import ErrorKind, NormalizedError, NormalizedException, normalize
from fallible.foundation.config import clear_settings_cache


def raised(exc: BaseException) -> BaseException:
    """Return `exc` after raising it, so it carries a traceback."""
    try:
        raise exc
    except BaseException as e:  # noqa: BLE001
        return e


# ═════════════════════════════════════════════════════════════════════════════
# Classification
# ═════════════════════════════════════════════════════════════════════════════


def test_exception_keeps_message_and_cause() -> None:
    exc = ValueError("bad input")
    err = normalize(exc)

    assert err.message == "bad input"
    assert err.cause is exc
    assert err.kind is ErrorKind.EXCEPTION


def test_exception_without_message_uses_class_name() -> None:
    assert normalize(KeyboardInterrupt()).message == "KeyboardInterrupt"
    assert normalize(RuntimeError()).message == "RuntimeError"


def test_exception_with_broken_str() -> None:
    class Hostile(Exception):
        def __str__(self) -> str:
            raise RuntimeError("no")

    err = normalize(Hostile())
    assert err.message == "Unprintable Hostile"
    assert err.kind is ErrorKind.EXCEPTION


def test_text_becomes_message_without_cause() -> None:
    err = normalize("boom")

    assert err.message == "boom"
    assert err.cause is None
    assert err.kind is ErrorKind.TEXT


def test_none_is_unknown() -> None:
    err = normalize(None)

    assert err.message == "An unknown error occurred."
    assert err.kind is ErrorKind.UNKNOWN


@pytest.mark.parametrize(
    ("value", "type_name"),
    [
        (True, "bool"),
        (42, "int"),
        (1.5, "float"),
        (b"raw", "bytes"),
        (len, "builtin_function_or_method"),
        (lambda: None, "function"),
        (int, "type"),
    ],
)
def test_unsupported_primitives(value: object, type_name: str) -> None:
    err = normalize(value)

    assert err.message == f"Unsupported error type: {type_name}"
    assert err.kind is ErrorKind.UNSUPPORTED
    assert err.cause is value


def test_mapping_is_serialized() -> None:
    payload = {"error": "Throw inside map", "code": 7}
    err = normalize(payload)

    assert err.message == '{"error":"Throw inside map","code":7}'
    assert err.kind is ErrorKind.STRUCTURED
    assert err.cause is payload


def test_sequences_and_sets_are_serialized() -> None:
    assert normalize([1, "two"]).message == '[1,"two"]'
    assert normalize({3}).message == "[3]"


def test_models_and_plain_objects_are_serialized() -> None:
    class Problem(BaseModel):
        status: int
        title: str

    @dataclass
    class Rejection:
        reason: str

    class Legacy:
        def __init__(self) -> None:
            self.code = "E42"

    assert normalize(Problem(status=404, title="Not Found")).message == '{"status":404,"title":"Not Found"}'
    assert normalize(Rejection(reason="quota")).message == '{"reason":"quota"}'
    assert normalize(Legacy()).message == '{"code":"E42"}'


def test_serialization_failure_is_reported() -> None:
    circular: dict[str, object] = {}
    circular["self"] = circular

    err = normalize(circular)
    assert err.message.startswith("An error occurred while serializing the object: ")
    assert err.kind is ErrorKind.SERIALIZATION


def test_object_without_state_fails_serialization() -> None:
    err = normalize(object())

    assert err.kind is ErrorKind.SERIALIZATION
    assert "object" in err.message


# ═════════════════════════════════════════════════════════════════════════════
# Totality & Idempotence
# ═════════════════════════════════════════════════════════════════════════════


def test_hostile_object_never_escapes() -> None:
    class Hostile:
        @property
        def __dict__(self) -> dict[str, object]:  # type: ignore[override]
            raise RuntimeError("no state for you")

    err = normalize(Hostile())
    assert isinstance(err, NormalizedError)


@pytest.mark.parametrize(
    "value",
    [ValueError("x"), "x", None, 3, {"a": 1}, [1], object(), lambda: 1],
)
def test_normalize_is_idempotent(value: object) -> None:
    once = normalize(value)
    assert normalize(once) is once
    assert NormalizedError.from_any(once) is once


def test_normalized_exception_unwraps() -> None:
    err = normalize("wrapped")
    exc = err.to_exception()

    assert isinstance(exc, NormalizedException)
    assert str(exc) == "wrapped"
    assert normalize(exc) is err
    with pytest.raises(NormalizedException):
        raise exc


# ═════════════════════════════════════════════════════════════════════════════
# Rendering & Details
# ═════════════════════════════════════════════════════════════════════════════


def test_render_prefixes_exception_class() -> None:
    assert str(normalize(ValueError("bad"))) == "ValueError: bad"
    assert str(normalize("bad")) == "bad"


def test_traceback_captured_by_default() -> None:
    err = normalize(raised(ValueError("tb")))

    assert err.details is not None
    assert "ValueError: tb" in err.details


def test_traceback_capture_can_be_disabled(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FALLIBLE_NORMALIZE_CAPTURE_TRACEBACK", "false")
    clear_settings_cache()

    assert normalize(raised(ValueError("tb"))).details is None


def test_normalized_error_is_frozen_and_hashable() -> None:
    err = normalize({"unhashable": ["cause"]})

    with pytest.raises(Exception):
        err.message = "changed"  # type: ignore[misc]
    assert hash(err) == hash(NormalizedError.create(err.message, kind=ErrorKind.STRUCTURED))


def test_invalid_settings_do_not_hide_the_message(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FALLIBLE_LOG_LEVEL", "verbose")
    clear_settings_cache()

    err = normalize(raised(ValueError("invalid literal")))

    assert err.message == "invalid literal"
    assert err.kind is ErrorKind.EXCEPTION
    assert err.details is not None
