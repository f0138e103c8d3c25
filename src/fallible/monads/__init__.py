"""Monadic composition of fallible computations.

Provides Result (synchronous) and Task (deferred, asynchronous) with:
- Strict short-circuiting: a Failure skips every later map/chain
- Exception capture into NormalizedError at every Task boundary
- Applicative combination, concurrent for Tasks

Example:
    >>> from fallible.monads import Task
    >>>
    >>> async def fetch(x: int) -> int:
    ...     return x
    >>>
    >>> task = Task.of(lambda: fetch(5)).chain(lambda x: Task.of(lambda: fetch(x * 2)))
    >>> await task.fold(lambda e: f"Error:{e.message}", lambda r: f"Success:{r}")
    'Success:10'
"""

from ._helpers import curry, identity
from .result import (
    Failure,
    Result,
    Success,
    collect_results,
    sequence,
    traverse,
)
from .task import Task, gather

__all__ = [
    # Core types
    "Result",
    "Success",
    "Failure",
    "Task",
    # Collection operations
    "sequence",
    "traverse",
    "collect_results",
    "gather",
    # Helpers
    "curry",
    "identity",
]
