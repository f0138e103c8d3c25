"""Internal helpers for monadic composition.

Not part of the core operators, but re-exported because applicative
combination (`Result.apply`, `Task.ap`) expects one-argument functions.
"""

from __future__ import annotations

import functools
import inspect
from typing import Any, Callable, TypeVar

T = TypeVar("T")


def identity(x: T) -> T:
    """Identity function: returns its argument unchanged."""
    return x


def curry(fn: Callable[..., Any], arity: int | None = None) -> Callable[..., Any]:
    """Turn an n-argument function into a chain of one-argument functions.

    Arity defaults to the number of required positional parameters.

    Example:
        >>> add3 = curry(lambda x, y, z: x + y + z)
        >>> add3(1)(2)(3)
        6
    """
    if arity is None:
        arity = sum(
            1 for p in inspect.signature(fn).parameters.values()
            if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD) and p.default is p.empty
        )
    if arity <= 1:
        return fn

    def collect(args: tuple[Any, ...]) -> Callable[[Any], Any]:
        @functools.wraps(fn)
        def step(arg: Any) -> Any:
            collected = (*args, arg)
            return fn(*collected) if len(collected) == arity else collect(collected)
        return step

    return collect(())
