"""
Explicit success-or-error values.

Operations whose failure must not abort the run (fetching one article,
rendering one image) expose a ``try_*`` variant returning an
:class:`Outcome` instead of raising, so the caller has to look at the
result before using it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar

from .errors import MigrationError

T = TypeVar("T")


@dataclass(frozen=True)
class Outcome(Generic[T]):
    value: Optional[T] = None
    error: Optional[MigrationError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: MigrationError) -> "Outcome[T]":
        return cls(error=error)

    def unwrap(self) -> T:
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]


def attempt(fn: Callable[[], T]) -> Outcome[T]:
    """Run ``fn`` and capture a :class:`MigrationError` as a failed outcome."""
    try:
        return Outcome.success(fn())
    except MigrationError as exc:
        return Outcome.failure(exc)
