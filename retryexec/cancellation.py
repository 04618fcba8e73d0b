"""Cooperative cancellation signals.

The executor only polls a signal between attempts; it never subscribes
to it. Anything exposing ``cancelled`` and ``cause`` works as a signal.
"""

from __future__ import annotations

import threading
import time
from typing import Callable, Protocol


class Cancelled(Exception):
    """Default cause recorded when a token is cancelled without one."""

    def __init__(self, message: str = "cancelled") -> None:
        super().__init__(message)


class DeadlineExceeded(Cancelled):
    """Cause recorded when a token's deadline passes."""

    def __init__(self) -> None:
        super().__init__("deadline exceeded")


class CancelSignal(Protocol):
    @property
    def cancelled(self) -> bool: ...

    @property
    def cause(self) -> BaseException | None: ...


class CancellationToken:
    """Thread-safe cancellation signal, optionally bound to a deadline."""

    def __init__(
        self,
        deadline: float | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._cause: BaseException | None = None
        self._deadline = deadline
        self._clock = clock or time.monotonic

    @classmethod
    def with_deadline(
        cls,
        seconds: float,
        clock: Callable[[], float] | None = None,
    ) -> CancellationToken:
        """Create a token that cancels itself once `seconds` have passed."""
        clock = clock or time.monotonic
        return cls(deadline=clock() + seconds, clock=clock)

    def cancel(self, cause: BaseException | None = None) -> None:
        """Request cancellation. The first recorded cause wins."""
        with self._lock:
            if self._event.is_set():
                return
            self._cause = cause if cause is not None else Cancelled()
            self._event.set()

    @property
    def cancelled(self) -> bool:
        if self._event.is_set():
            return True
        if self._deadline is not None and self._clock() >= self._deadline:
            self.cancel(DeadlineExceeded())
            return True
        return False

    @property
    def cause(self) -> BaseException | None:
        if not self.cancelled:
            return None
        return self._cause

    @property
    def deadline(self) -> float | None:
        return self._deadline

    def wait(self, timeout: float | None = None) -> bool:
        """Block until cancelled or until timeout elapses.

        Returns:
            True if the token is cancelled when the wait ends.
        """
        if self._deadline is not None:
            remaining = max(0.0, self._deadline - self._clock())
            timeout = remaining if timeout is None else min(timeout, remaining)
        self._event.wait(timeout)
        return self.cancelled


class _NeverCancelled:
    """Signal that is never cancelled, used when the caller passes none."""

    @property
    def cancelled(self) -> bool:
        return False

    @property
    def cause(self) -> BaseException | None:
        return None


NEVER_CANCELLED: CancelSignal = _NeverCancelled()
