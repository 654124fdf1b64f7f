"""Outcome of one controller action."""

from dataclasses import dataclass, replace
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Either a value or a user-facing failure message.

    Controller actions settle into exactly one Outcome, which is then handed
    to the state merge and to the notifier. A stale outcome was overtaken by
    a newer call on the same channel and reached neither.
    """

    ok: bool
    value: T | None = None
    message: str | None = None
    cause: Exception | None = None
    stale: bool = False

    @classmethod
    def success(cls, value: T | None = None, message: str | None = None) -> "Outcome[T]":
        return cls(ok=True, value=value, message=message)

    @classmethod
    def failure(cls, message: str, cause: Exception | None = None) -> "Outcome[T]":
        return cls(ok=False, message=message, cause=cause)

    def discarded(self) -> "Outcome[T]":
        """Copy of this outcome marked as overtaken."""
        return replace(self, stale=True)

    @property
    def applied_value(self) -> T | None:
        """The value if it succeeded and was merged into state, else None."""
        return self.value if self.ok and not self.stale else None
