"""fallible - deferred, composable computations that never raise.

A Task wraps an asynchronous operation that settles to either a normalized
failure or a success value. Every exception raised inside the chain is
captured as a NormalizedError, so failures travel through the failure
channel until a final fold.

Quick Start:
    >>> import asyncio
    >>> from fallible import Task
    >>>
    >>> async def load(x: int) -> int:
    ...     await asyncio.sleep(0)
    ...     return x
    >>>
    >>> task = (
    ...     Task.of(lambda: load(5))
    ...     .chain(lambda x: Task.of(lambda: load(x * 2)))
    ... )
    >>> asyncio.run(task.fold(lambda e: f"Error:{e.message}", lambda r: f"Success:{r}"))
    'Success:10'

Synchronous pipelines:
    >>> from fallible import Result
    >>> Result.of_attempt(lambda: int("7")).map(lambda x: x + 1).get_or_else(0)
    8

Failure normalization:
    >>> from fallible import normalize
    >>> normalize("boom").message
    'boom'
"""

from __future__ import annotations

__version__ = "0.1.0"

# Errors
from .foundation.errors import ErrorKind, NormalizedError, NormalizedException, normalize

# Config
from .foundation.config import FallibleSettings, clear_settings_cache, get_settings

# Monads
from .monads import (
    Failure,
    Result,
    Success,
    Task,
    collect_results,
    curry,
    gather,
    sequence,
    traverse,
)

# Logging
from .observability import configure_from_settings, configure_logging, get_logger

__all__ = [
    "__version__",
    # Errors
    "ErrorKind",
    "NormalizedError",
    "NormalizedException",
    "normalize",
    # Config
    "FallibleSettings",
    "get_settings",
    "clear_settings_cache",
    # Monads
    "Result",
    "Success",
    "Failure",
    "Task",
    "sequence",
    "traverse",
    "collect_results",
    "gather",
    "curry",
    # Logging
    "configure_logging",
    "configure_from_settings",
    "get_logger",
]
