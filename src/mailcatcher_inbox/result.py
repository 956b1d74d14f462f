"""Error-return contract used at the client boundary.

Client operations never raise for server or inbox failures. They return a
``Result`` and leave it to the caller (a test harness, the assertion helpers,
the CLI) to decide how a failure is surfaced.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from mailcatcher_inbox.exceptions import MailCatcherError

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of a client operation: a value or an error, never both."""

    value: Optional[T] = None
    error: Optional[MailCatcherError] = None

    @classmethod
    def success(cls, value: T) -> Result[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: MailCatcherError) -> Result[T]:
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def message(self) -> str:
        """Failure message, empty on success."""
        return "" if self.error is None else str(self.error)

    def unwrap(self) -> T:
        """Return the value, raising the carried error on failure."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]
