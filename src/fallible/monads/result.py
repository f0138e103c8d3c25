"""Result: synchronous disjoint union of failure and success.

Implements a discriminated union with the operators needed to compose
fallible computations:
- Functor: map, map_safe, map_failure
- Applicative: apply
- Monad: chain, chain_safe
- Consumption: fold, get_or_else

Failure always short-circuits: every operator returns a Failure unchanged
and never calls the supplied function.
"""

from __future__ import annotations

from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Generic,
    Literal,
    TypeVar,
    cast,
)

from ..foundation.errors import NormalizedError, normalize

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

# Type variables for generic Result
T = TypeVar("T")  # Success type
E = TypeVar("E")  # Failure type
U = TypeVar("U")  # Mapped success type
F = TypeVar("F")  # Mapped failure type
A = TypeVar("A")  # Applied argument type

Tag = Literal["failure", "success"]


class Result(Generic[T, E]):
    """Immutable value holding exactly one of a failure or a success.

    Examples:
        >>> Result.of_success(5).map(lambda x: x * 2).get_or_else(0)
        10

        >>> Result.of_failure("nope").map(lambda x: x * 2).get_or_else(0)
        0

        >>> Result.of_attempt(lambda: int("x")).fold(lambda e: e.message, str)
        "invalid literal for int() with base 10: 'x'"

    Notes:
        - Uses __slots__; every operator returns a new Result
        - `map`/`chain`/`apply` let exceptions from the supplied function
          propagate; `map_safe`/`chain_safe` capture them as NormalizedError
    """

    __slots__ = ("_value", "_is_success")
    __match_args__ = ("value",)

    def __init__(self, value: T | E, is_success: bool) -> None:
        """Private constructor. Use Success()/Failure() or the of_* classmethods."""
        self._value: T | E = value
        self._is_success: bool = is_success

    # ─────────────────────────────────────────────────────────────────
    # Construction
    # ─────────────────────────────────────────────────────────────────

    @staticmethod
    def of_success(value: U) -> Result[U, Any]:
        return Result(value, is_success=True)

    @staticmethod
    def of_failure(error: F) -> Result[Any, F]:
        return Result(error, is_success=False)

    @staticmethod
    def of_attempt(fn: Callable[[], U]) -> Result[U, NormalizedError]:
        """Run `fn` now; an exception becomes a normalized Failure."""
        try:
            return Result(fn(), is_success=True)
        except Exception as e:
            return Result(normalize(e), is_success=False)

    # ─────────────────────────────────────────────────────────────────
    # Inspection
    # ─────────────────────────────────────────────────────────────────

    def is_success(self) -> bool:
        return self._is_success

    def is_failure(self) -> bool:
        return not self._is_success

    @property
    def tag(self) -> Tag:
        return "success" if self._is_success else "failure"

    @property
    def value(self) -> T | E:
        """Raw payload of whichever side is active."""
        return self._value

    def unwrap(self) -> T:
        """Extract Success value.

        Raises:
            RuntimeError: If Result is a Failure
        """
        if self._is_success:
            return cast(T, self._value)
        raise RuntimeError(f"Called unwrap() on Failure value: {self._value}")

    def unwrap_failure(self) -> E:
        """Extract Failure value.

        Raises:
            RuntimeError: If Result is a Success
        """
        if not self._is_success:
            return cast(E, self._value)
        raise RuntimeError(f"Called unwrap_failure() on Success value: {self._value}")

    def success(self) -> T | None:
        return cast(T, self._value) if self._is_success else None

    def failure(self) -> E | None:
        return cast(E, self._value) if not self._is_success else None

    def get_or_else(self, default: U) -> T | U:
        """Success payload, or `default` for a Failure."""
        return cast(T, self._value) if self._is_success else default

    # ─────────────────────────────────────────────────────────────────
    # Functor Operations
    # ─────────────────────────────────────────────────────────────────

    def map(self, fn: Callable[[T], U]) -> Result[U, E]:
        """Apply `fn` to a Success payload. `fn` is assumed not to raise.

        Type signature: Result[T, E] -> (T -> U) -> Result[U, E]
        """
        if self._is_success:
            return Result(fn(cast(T, self._value)), is_success=True)
        return cast("Result[U, E]", self)

    def map_safe(self, fn: Callable[[T], U]) -> Result[U, E | NormalizedError]:
        """Like map, but an exception from `fn` becomes a NormalizedError Failure."""
        if self._is_success:
            return Result.of_attempt(lambda: fn(cast(T, self._value)))
        return cast("Result[U, E | NormalizedError]", self)

    def map_failure(self, fn: Callable[[E], F]) -> Result[T, F]:
        """Transform a Failure payload; Success passes through."""
        if not self._is_success:
            return Result(fn(cast(E, self._value)), is_success=False)
        return cast("Result[T, F]", self)

    # ─────────────────────────────────────────────────────────────────
    # Monad Operations
    # ─────────────────────────────────────────────────────────────────

    def chain(self, fn: Callable[[T], Result[U, F]]) -> Result[U, E | F]:
        """Monadic bind: `fn` returns a Result, which is returned as-is.

        Type signature: Result[T, E] -> (T -> Result[U, F]) -> Result[U, E | F]

        Example:
            >>> def parse_int(s: str) -> Result[int, str]:
            ...     return Success(int(s)) if s.isdigit() else Failure(f"invalid int: {s}")
            >>> Success("42").chain(parse_int).unwrap()
            42
        """
        if self._is_success:
            return fn(cast(T, self._value))
        return cast("Result[U, E | F]", self)

    def chain_safe(self, fn: Callable[[T], Result[U, F]]) -> Result[U, E | F | NormalizedError]:
        """Like chain, but an exception from `fn` becomes a NormalizedError Failure."""
        if not self._is_success:
            return cast("Result[U, E | F | NormalizedError]", self)
        try:
            return fn(cast(T, self._value))
        except Exception as e:
            return Result(normalize(e), is_success=False)

    # ─────────────────────────────────────────────────────────────────
    # Applicative Operations
    # ─────────────────────────────────────────────────────────────────

    def apply(self: Result[Callable[[A], U], E], value: Result[A, F]) -> Result[U, E | F]:
        """Apply the wrapped function to the wrapped value (Applicative).

        `self` holds the function. The function-side Failure takes
        precedence, then the value-side Failure. Chain calls to feed a
        curried function one argument at a time.

        Example:
            >>> add = lambda x: lambda y: x + y
            >>> Success(add).apply(Success(1)).apply(Success(2))
            Success(3)
        """
        if not self._is_success:
            return cast("Result[U, E | F]", self)
        if not value._is_success:
            return cast("Result[U, E | F]", value)
        return Result(cast("Callable[[A], U]", self._value)(cast(A, value._value)), is_success=True)

    # ─────────────────────────────────────────────────────────────────
    # Consumption
    # ─────────────────────────────────────────────────────────────────

    def fold(self, on_failure: Callable[[E], U], on_success: Callable[[T], U]) -> U:
        """Invoke exactly one callback with the payload and return its result."""
        if self._is_success:
            return on_success(cast(T, self._value))
        return on_failure(cast(E, self._value))

    # ─────────────────────────────────────────────────────────────────
    # Dunder Methods
    # ─────────────────────────────────────────────────────────────────

    def __bool__(self) -> bool:
        """True if Success."""
        return self._is_success

    def __repr__(self) -> str:
        variant = "Success" if self._is_success else "Failure"
        return f"{variant}({self._value!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Result):
            return NotImplemented
        return self._is_success == other._is_success and self._value == other._value

    def __hash__(self) -> int:
        return hash((self._is_success, self._value))

    def __iter__(self) -> Iterator[T]:
        """Yield the Success payload, or nothing."""
        if self._is_success:
            yield cast(T, self._value)


# ═════════════════════════════════════════════════════════════════════════════
# Constructor Functions
# ═════════════════════════════════════════════════════════════════════════════


def Success(value: T) -> Result[T, Any]:  # noqa: N802
    """Construct Success variant."""
    return Result(value, is_success=True)


def Failure(error: E) -> Result[Any, E]:  # noqa: N802
    """Construct Failure variant."""
    return Result(error, is_success=False)


# ═════════════════════════════════════════════════════════════════════════════
# Collection Operations
# ═════════════════════════════════════════════════════════════════════════════


def sequence(results: Iterable[Result[T, E]]) -> Result[list[T], E]:
    """Convert Results to a Result of list, failing fast on the first Failure.

    Example:
        >>> sequence([Success(1), Success(2)]).unwrap()
        [1, 2]
        >>> sequence([Success(1), Failure("e"), Failure("f")]).unwrap_failure()
        'e'
    """
    values: list[T] = []
    for result in results:
        if result.is_failure():
            return cast("Result[list[T], E]", result)
        values.append(result.unwrap())
    return Success(values)


def traverse(items: Iterable[T], fn: Callable[[T], Result[U, E]]) -> Result[list[U], E]:
    """Map a Result-returning function over items; stops at the first Failure."""
    values: list[U] = []
    for item in items:
        result = fn(item)
        if result.is_failure():
            return cast("Result[list[U], E]", result)
        values.append(result.unwrap())
    return Success(values)


def collect_results(results: Iterable[Result[T, E]]) -> Result[list[T], list[E]]:
    """Collect all Results, accumulating every Failure instead of stopping at the first."""
    values: list[T] = []
    errors: list[E] = []
    for result in results:
        if result.is_success():
            values.append(result.unwrap())
        else:
            errors.append(result.unwrap_failure())
    return Success(values) if not errors else Failure(errors)
