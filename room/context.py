"""Execution contexts bounding a single dispatch.

A context builder is a strategy with one operation, `build()`, returning a
fresh `Context`. The timeout window starts when `build()` is called, i.e. at
dispatch time, not when the builder is configured.
"""

import time
from datetime import UTC, datetime, timedelta
from typing import Protocol, runtime_checkable

import httpx

from room.exceptions import RoomConfigError

DEFAULT_CONTEXT_TIMEOUT = 30.0

CONTEXT_CANCELED = "context canceled"
CONTEXT_DEADLINE_EXCEEDED = "context deadline exceeded"


class Context:
    """Deadline-bound scope for one dispatch attempt.

    Once cancelled or expired a context stays done; build a new one for the
    next dispatch.
    """

    def __init__(self, timeout: float) -> None:
        self._timeout = timeout
        self._deadline = time.monotonic() + timeout
        self._cancelled = False

    @property
    def deadline(self) -> float:
        """Deadline on the `time.monotonic()` clock."""
        return self._deadline

    def remaining(self) -> float:
        """Seconds left before the deadline, never negative."""
        return max(0.0, self._deadline - time.monotonic())

    @property
    def expired(self) -> bool:
        return time.monotonic() >= self._deadline

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def done(self) -> bool:
        return self._cancelled or self.expired

    def cancel(self) -> None:
        self._cancelled = True

    def error(self) -> str | None:
        """Why the context is done, or None while it is still live."""
        if self._cancelled:
            return CONTEXT_CANCELED
        if self.expired:
            return CONTEXT_DEADLINE_EXCEEDED
        return None

    def timeout(self) -> httpx.Timeout:
        """Transport timeout covering the rest of the window."""
        return httpx.Timeout(self.remaining())

    def __repr__(self) -> str:
        return f"Context(remaining={self.remaining():.3f}, cancelled={self._cancelled})"


@runtime_checkable
class ContextBuilder(Protocol):
    """Strategy producing a fresh Context per dispatch."""

    def build(self) -> Context: ...


class TimeoutContextBuilder:
    """Contexts that expire a fixed duration after `build()`."""

    def __init__(self, timeout: float | timedelta = DEFAULT_CONTEXT_TIMEOUT) -> None:
        seconds = timeout.total_seconds() if isinstance(timeout, timedelta) else float(timeout)
        if seconds <= 0:
            raise RoomConfigError(f"timeout must be positive, got {seconds}")
        self._timeout = seconds

    @property
    def timeout(self) -> float:
        return self._timeout

    def build(self) -> Context:
        return Context(self._timeout)

    def __repr__(self) -> str:
        return f"TimeoutContextBuilder({self._timeout!r})"


class DeadlineContextBuilder:
    """Contexts that expire at a wall-clock instant.

    Naive datetimes are taken as UTC. A deadline already in the past builds
    a context that is done immediately.
    """

    def __init__(self, deadline: datetime) -> None:
        if deadline.tzinfo is None:
            deadline = deadline.replace(tzinfo=UTC)
        self._deadline = deadline

    @property
    def deadline(self) -> datetime:
        return self._deadline

    def build(self) -> Context:
        remaining = (self._deadline - datetime.now(UTC)).total_seconds()
        return Context(max(0.0, remaining))


def default_context_builder() -> TimeoutContextBuilder:
    """Builder used when a request has none configured (30 seconds)."""
    return TimeoutContextBuilder(DEFAULT_CONTEXT_TIMEOUT)
