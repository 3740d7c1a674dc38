"""Explicit success-or-empty results for calls that never raise.

The gateway absorbs every failure, but callers and tests still need to
tell "the repository has no such text" apart from "the repository was
unreachable". Both read as a miss through ``found``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from torahcite.constants import OutcomeStatus
from torahcite.resilience.errors import ErrorClass

T = TypeVar("T")
D = TypeVar("D")


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Value plus how it was obtained."""

    status: OutcomeStatus
    value: T | None = None
    error_class: ErrorClass | None = None

    @classmethod
    def ok(cls, value: T) -> Outcome[T]:
        return cls(status=OutcomeStatus.OK, value=value)

    @classmethod
    def empty(cls) -> Outcome[T]:
        return cls(status=OutcomeStatus.EMPTY)

    @classmethod
    def failed(cls, error_class: ErrorClass) -> Outcome[T]:
        return cls(status=OutcomeStatus.FAILED, error_class=error_class)

    @property
    def found(self) -> bool:
        return self.status == OutcomeStatus.OK and self.value is not None

    @property
    def failed_upstream(self) -> bool:
        return self.status == OutcomeStatus.FAILED

    def unwrap_or(self, default: D) -> T | D:
        """The value when found, otherwise ``default``."""
        if self.found:
            return self.value  # type: ignore[return-value]
        return default
