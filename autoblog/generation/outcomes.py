"""Tagged outcomes for external calls.

Every step that talks to a provider reports one of three states:
- SUCCESS: the value is usable as-is
- DEGRADED: the step failed but the pipeline continues (fallback or empty value)
- FATAL: a gate tripped; the run must stop
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")

SUCCESS = "success"
DEGRADED = "degraded"
FATAL = "fatal"


@dataclass(frozen=True)
class Outcome(Generic[T]):
    status: str
    value: Optional[T] = None
    reason: str = ""
    source: str = ""

    @property
    def ok(self) -> bool:
        return self.status == SUCCESS

    @property
    def fatal(self) -> bool:
        return self.status == FATAL

    @classmethod
    def success(cls, value: T, *, source: str = "") -> "Outcome[T]":
        return cls(status=SUCCESS, value=value, source=source)

    @classmethod
    def degraded(cls, reason: str, *, value: Optional[T] = None, source: str = "") -> "Outcome[T]":
        return cls(status=DEGRADED, value=value, reason=reason, source=source)

    @classmethod
    def fatal_error(cls, reason: str, *, value: Optional[T] = None, source: str = "") -> "Outcome[T]":
        return cls(status=FATAL, value=value, reason=reason, source=source)
