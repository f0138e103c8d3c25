"""Examples of composing fallible computations with Result and Task.

Demonstrates:
- Railway-oriented Result pipelines
- Applicative validation with curried functions
- Lazy dependent async lookups with Task.chain
- Concurrent lookups with Task.ap

Run with `python -m fallible.monads.examples`.
"""

from __future__ import annotations

import asyncio
import inspect

from pydantic import BaseModel

from ..foundation.errors import NormalizedError
from ..observability import configure_logging, get_logger
from ._helpers import curry
from .result import Failure, Result, Success, traverse
from .task import Task


# ═════════════════════════════════════════════════════════════════════════════
# Example 1: Basic Result Usage
# ═════════════════════════════════════════════════════════════════════════════


def parse_int(s: str) -> Result[int, NormalizedError]:
    """Parse string to integer, capturing the ValueError."""
    return Result.of_attempt(lambda: int(s))


def validate_positive(n: int) -> Result[int, str]:
    return Success(n) if n > 0 else Failure(f"Must be positive, got {n}")


def example_basic_railway() -> None:
    """Demonstrate railway-oriented programming."""
    result = parse_int("42").chain(validate_positive).map(lambda x: x * 2)
    assert result.unwrap() == 84

    # Parse fails: chain and map are skipped
    result = parse_int("not_a_number").chain(validate_positive).map(lambda x: x * 2)
    assert "invalid literal" in result.fold(str, str)

    # Validation fails
    result = parse_int("-5").chain(validate_positive).map(lambda x: x * 2)
    assert result.unwrap_failure() == "Must be positive, got -5"

    assert traverse(["1", "2", "3"], parse_int).unwrap() == [1, 2, 3]


# ═════════════════════════════════════════════════════════════════════════════
# Example 2: Applicative Validation
# ═════════════════════════════════════════════════════════════════════════════


class Signup(BaseModel):
    name: str
    age: int
    email: str


def validate_name(name: str) -> Result[str, str]:
    return Success(name.strip()) if name.strip() else Failure("Name is required")


def validate_age(age: int) -> Result[int, str]:
    return Success(age) if 0 < age < 150 else Failure(f"Implausible age: {age}")


def validate_email(email: str) -> Result[str, str]:
    return Success(email.lower()) if "@" in email else Failure(f"Invalid email: {email}")


def example_applicative_validation() -> None:
    """Lift a three-argument constructor over independently validated fields."""
    make_signup = curry(lambda name, age, email: Signup(name=name, age=age, email=email))

    signup = (
        Success(make_signup)
        .apply(validate_name(" Ada "))
        .apply(validate_age(36))
        .apply(validate_email("ADA@example.com"))
    )
    assert signup.unwrap() == Signup(name="Ada", age=36, email="ada@example.com")

    rejected = (
        Success(make_signup)
        .apply(validate_name("Ada"))
        .apply(validate_age(-1))
        .apply(validate_email("nope"))
    )
    assert rejected.unwrap_failure() == "Implausible age: -1"


# ═════════════════════════════════════════════════════════════════════════════
# Example 3: Lazy Dependent Lookups
# ═════════════════════════════════════════════════════════════════════════════


class User(BaseModel):
    id: int
    name: str


class Post(BaseModel):
    id: int
    title: str


class Comment(BaseModel):
    id: int
    comment: str


async def fetch_user_by_id(user_id: int) -> User:
    await asyncio.sleep(0)
    if user_id != 1:
        raise LookupError("User not found")
    return User(id=1, name="John Doe")


async def fetch_posts_by_user(user_id: int) -> list[Post]:
    await asyncio.sleep(0)
    if user_id != 1:
        raise LookupError("Posts not found")
    return [Post(id=1, title="First Post"), Post(id=2, title="Second Post")]


async def fetch_comments_by_post(post_id: int) -> list[Comment]:
    await asyncio.sleep(0)
    if post_id != 1:
        raise LookupError("Comments not found")
    return [Comment(id=1, comment="Nice post!")]


def first_post_comments(user_id: int) -> Task[list[Comment], NormalizedError]:
    """Build (but do not run) user -> posts -> comments of the first post."""
    return (
        Task.of(lambda: fetch_user_by_id(user_id))
        .chain(lambda user: Task.of(lambda: fetch_posts_by_user(user.id)))
        .chain(lambda posts: Task.of(lambda: fetch_comments_by_post(posts[0].id)))
    )


async def example_lazy_chain() -> None:
    found = await first_post_comments(1).fold(
        lambda e: f"Error: {e.message}",
        lambda comments: f"Fetched: {comments[0].comment}",
    )
    assert found == "Fetched: Nice post!"

    missing = await first_post_comments(2).fold(
        lambda e: f"Error: {e.message}",
        lambda comments: f"Fetched: {comments[0].comment}",
    )
    assert missing == "Error: User not found"


# ═════════════════════════════════════════════════════════════════════════════
# Example 4: Concurrent Lookups
# ═════════════════════════════════════════════════════════════════════════════


async def fetch_price(sku: str, delay: float) -> float:
    await asyncio.sleep(delay)
    return {"apple": 0.5, "pear": 0.75}[sku]


async def example_concurrent_ap() -> None:
    """Both prices are fetched at the same time; total time is the slower one."""
    add = curry(lambda a, b: a + b)
    total = (
        Task.of_success(add)
        .ap(Task.of(lambda: fetch_price("apple", 0.02)))
        .ap(Task.of(lambda: fetch_price("pear", 0.01)))
    )
    assert (await total.run()).unwrap() == 1.25

    unknown = Task.of_success(add).ap(Task.of(lambda: fetch_price("kiwi", 0))).ap(Task.of_success(1.0))
    assert (await unknown.run()).unwrap_failure().message == "'kiwi'"


# ═════════════════════════════════════════════════════════════════════════════
# Running Examples
# ═════════════════════════════════════════════════════════════════════════════


EXAMPLES = (
    example_basic_railway,
    example_applicative_validation,
    example_lazy_chain,
    example_concurrent_ap,
)


async def run_all_examples() -> list[str]:
    """Run every example in order; a failing one raises AssertionError."""
    log = get_logger("fallible.examples")
    passed: list[str] = []
    for example in EXAMPLES:
        outcome = example()
        if inspect.isawaitable(outcome):
            await outcome
        log.info("example passed", example=example.__name__)
        passed.append(example.__name__)
    return passed


if __name__ == "__main__":
    configure_logging(format="console")
    asyncio.run(run_all_examples())
