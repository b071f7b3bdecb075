"""
Result type for fallible operations.

Every operation that can fail (persistence queries, provider calls,
orchestration steps) returns either a ``Success`` carrying the value or a
``Failure`` carrying a typed error. Callers branch on ``is_success()`` /
``is_error()`` before touching the payload; a ``Failure`` has no ``value``
attribute at all.
"""
from dataclasses import dataclass
from typing import Callable, Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")
U = TypeVar("U")
F = TypeVar("F")


@dataclass(frozen=True)
class Success(Generic[T]):
    """Successful outcome holding a value."""
    value: T

    def is_success(self) -> bool:
        return True

    def is_error(self) -> bool:
        return False

    def map(self, fn: Callable[[T], U]) -> "Success[U]":
        return Success(fn(self.value))

    def map_error(self, fn: Callable) -> "Success[T]":
        return self


@dataclass(frozen=True)
class Failure(Generic[E]):
    """Failed outcome holding an error."""
    error: E

    def is_success(self) -> bool:
        return False

    def is_error(self) -> bool:
        return True

    def map(self, fn: Callable) -> "Failure[E]":
        return self

    def map_error(self, fn: Callable[[E], F]) -> "Failure[F]":
        return Failure(fn(self.error))


Result = Union[Success[T], Failure[E]]


def success(value: T) -> Success[T]:
    """Wrap a value as a successful result."""
    return Success(value)


def failure(error: E) -> Failure[E]:
    """Wrap an error as a failed result."""
    return Failure(error)
