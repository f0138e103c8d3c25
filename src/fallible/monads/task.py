"""Task: deferred, asynchronous Result.

A Task wraps a zero-argument operation that is not started until the Task is
run. Running settles to a Result; the chain never raises, because every
exception from the operation or from a transform is normalized into the
failure channel.

Key Features:
    - Lazy: constructing or composing a Task performs no work
    - Not cached: every run()/fold() re-executes the whole chain
    - chain: strictly sequential, skipped entirely after a Failure
    - ap/gather: operands are started together and awaited concurrently

Example:
    >>> async def fetch_user(user_id: int) -> dict: ...
    >>> async def fetch_posts(user: dict) -> list: ...
    >>>
    >>> posts = (
    ...     Task.of(lambda: fetch_user(1))
    ...     .chain(lambda user: Task.of(lambda: fetch_posts(user)))
    ...     .map(len)
    ... )
    >>> await posts.fold(lambda e: f"Error: {e.message}", lambda n: f"{n} posts")
"""

from __future__ import annotations

import asyncio
import inspect
import time
import uuid
from collections.abc import Awaitable
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any, Callable, Generic, TypeVar, cast

from ..foundation.config import get_settings_or_defaults
from ..foundation.errors import NormalizedError, normalize
from ..observability import get_logger, log_context
from .result import Failure, Result, Success, sequence

if TYPE_CHECKING:
    from collections.abc import Generator

T = TypeVar("T")  # Success type
E = TypeVar("E")  # Failure type
U = TypeVar("U")
F = TypeVar("F")
A = TypeVar("A")

Thunk = Callable[[], Awaitable[Result[T, E]]]

# Correlates trace entries of one top-level run (inherited by ap/gather children)
_run_id: ContextVar[str | None] = ContextVar("task_run_id", default=None)


class Task(Generic[T, E]):
    """Deferred operation that settles to a Result when run.

    Build with `Task.of(operation)`; compose with map/chain/ap; consume with
    `await task.fold(on_failure, on_success)` or `await task.run()`.

    Each combinator returns a new Task whose thunk closes over the previous
    one, so a chain is a linked list of deferred steps (a tree through ap).
    """

    __slots__ = ("_thunk", "_step")

    def __init__(self, thunk: Thunk[T, E], step: str = "task") -> None:
        """Private constructor. Use Task.of() or the other classmethods."""
        self._thunk = thunk
        self._step = step

    # ─────────────────────────────────────────────────────────────────
    # Construction
    # ─────────────────────────────────────────────────────────────────

    @classmethod
    def of(cls, operation: Callable[[], Awaitable[U] | U]) -> Task[U, NormalizedError]:
        """Wrap a fallible operation without calling it.

        On run, `operation()` is called and awaited if it returns an
        awaitable. Any exception, raised while calling or while awaiting,
        settles as a normalized Failure. Returning a Task is rejected the
        same way; compose Tasks with chain().
        """
        async def settle() -> Result[U, NormalizedError]:
            try:
                value = operation()
                if isinstance(value, Task):
                    raise TypeError("Task.of() operation returned a Task; use chain() to sequence Tasks")
                if inspect.isawaitable(value):
                    value = await value
            except Exception as e:
                return Failure(normalize(e))
            return Success(cast(U, value))

        return cast("Task[U, NormalizedError]", cls(settle, "of"))

    @classmethod
    def of_success(cls, value: U) -> Task[U, Any]:
        async def settle() -> Result[U, Any]:
            return Success(value)
        return cls(settle, "of_success")

    @classmethod
    def of_failure(cls, error: F) -> Task[Any, F]:
        async def settle() -> Result[Any, F]:
            return Failure(error)
        return cls(settle, "of_failure")

    @classmethod
    def from_result(cls, result: Result[U, F]) -> Task[U, F]:
        async def settle() -> Result[U, F]:
            return result
        return cls(settle, "from_result")

    # ─────────────────────────────────────────────────────────────────
    # Composition
    # ─────────────────────────────────────────────────────────────────

    def map(self, fn: Callable[[T], U]) -> Task[U, E | NormalizedError]:
        """Transform the Success payload with a synchronous function.

        A Failure propagates unchanged and `fn` is not called. An exception
        from `fn` becomes a normalized Failure.
        """
        async def settle() -> Result[U, E | NormalizedError]:
            result = await _settle(self)
            if result.is_failure():
                return cast("Result[U, E]", result)
            try:
                return Success(fn(result.unwrap()))
            except Exception as e:
                return Failure(normalize(e))

        return Task(settle, "map")

    def map_failure(self, fn: Callable[[E], F]) -> Task[T, F | NormalizedError]:
        """Transform the Failure payload; Success passes through."""
        async def settle() -> Result[T, F | NormalizedError]:
            result = await _settle(self)
            if result.is_success():
                return cast("Result[T, F]", result)
            try:
                return Failure(fn(result.unwrap_failure()))
            except Exception as e:
                return Failure(normalize(e))

        return Task(settle, "map_failure")

    def chain(self, fn: Callable[[T], Task[U, F]]) -> Task[U, E | F | NormalizedError]:
        """Run a dependent Task built from the Success payload.

        The next Task is not even constructed until this one settles as a
        Success; after a Failure `fn` is never called.
        """
        async def settle() -> Result[U, E | F | NormalizedError]:
            result = await _settle(self)
            if result.is_failure():
                return cast("Result[U, E]", result)
            try:
                next_task = fn(result.unwrap())
            except Exception as e:
                return Failure(normalize(e))
            if not isinstance(next_task, Task):
                return Failure(normalize(
                    TypeError(f"chain() callback must return a Task, got {type(next_task).__name__}")
                ))
            return await _settle(next_task)

        return Task(settle, "chain")

    def ap(self: Task[Callable[[A], U], E], other: Task[A, F]) -> Task[U, E | F | NormalizedError]:
        """Apply the function produced by this Task to the value produced by `other`.

        Both Tasks are started before either is awaited to completion. Once
        both settle, the function-side Failure wins over the value-side one.

        Example:
            >>> add = lambda x: lambda y: x + y
            >>> total = Task.of_success(add).ap(Task.of(fetch_a)).ap(Task.of(fetch_b))
        """
        async def settle() -> Result[U, E | F | NormalizedError]:
            fn_result, value_result = await _run_concurrently(self, other)
            if fn_result.is_failure():
                return cast("Result[U, E]", fn_result)
            if value_result.is_failure():
                return cast("Result[U, F]", value_result)
            try:
                return Success(fn_result.unwrap()(value_result.unwrap()))
            except Exception as e:
                return Failure(normalize(e))

        return Task(settle, "ap")

    # ─────────────────────────────────────────────────────────────────
    # Consumption
    # ─────────────────────────────────────────────────────────────────

    async def run(self) -> Result[T, E]:
        """Execute the whole chain and return its Result. Never cached."""
        if not get_settings_or_defaults().task.trace:
            return await self._thunk()
        if _run_id.get() is not None:
            return await self._run_traced()
        run_id = uuid.uuid4().hex[:12]
        token = _run_id.set(run_id)
        try:
            with log_context(run_id=run_id):
                return await self._run_traced()
        finally:
            _run_id.reset(token)

    async def fold(self, on_failure: Callable[[E], Any], on_success: Callable[[T], Any]) -> Any:
        """Run, then invoke exactly one callback and return its (awaited) result.

        An exception escaping the run itself is normalized and handed to
        `on_failure`. Exceptions raised by the callbacks propagate.
        """
        result = await _settle(self)
        outcome = result.fold(on_failure, on_success)
        if inspect.isawaitable(outcome):
            return await outcome
        return outcome

    def __await__(self) -> Generator[Any, None, Result[T, E]]:
        return self.run().__await__()

    def __repr__(self) -> str:
        return f"Task<{self._step}>"

    async def _run_traced(self) -> Result[T, E]:
        log = get_logger("fallible.task", step=self._step)
        start = time.perf_counter()
        result = await self._thunk()
        duration_ms = round((time.perf_counter() - start) * 1000, 2)
        if result.is_success():
            log.debug("task settled", outcome=result.tag, duration_ms=duration_ms)
        else:
            log.debug("task settled", outcome=result.tag, duration_ms=duration_ms,
                      error=normalize(result.value).message)
        return result


# ═════════════════════════════════════════════════════════════════════════════
# Concurrent Combination
# ═════════════════════════════════════════════════════════════════════════════


def gather(*tasks: Task[T, E]) -> Task[list[T], E | NormalizedError]:
    """Run Tasks concurrently and collect their values in argument order.

    The leftmost Failure wins once every Task has settled.
    """
    async def settle() -> Result[list[T], E | NormalizedError]:
        return sequence(await _run_concurrently(*tasks))

    return Task(settle, "gather")


async def _run_concurrently(*tasks: Task[Any, Any]) -> list[Result[Any, Any]]:
    """Start every Task in order, then wait for all of them to settle."""
    outcomes = await asyncio.gather(*(task.run() for task in tasks), return_exceptions=True)
    results: list[Result[Any, Any]] = []
    for outcome in outcomes:
        if isinstance(outcome, Result):
            results.append(outcome)
        elif isinstance(outcome, Exception):
            results.append(Failure(normalize(outcome)))
        else:
            raise outcome
    return results


async def _settle(task: Task[T, E]) -> Result[T, E | NormalizedError]:
    """Run a Task, normalizing anything that escapes its thunk."""
    try:
        return await task.run()
    except Exception as e:
        return Failure(normalize(e))
