"""Sequential retry loop driven by a RetryPolicy.

Each failed attempt is reported to the policy's observer, then checked
against the attempt budget and the delay budget, in that order. The
delay budget compares delay already consumed, before adding the delay
about to be applied, so one more attempt can follow a delay that
overshoots the budget.

Cancellation is polled at the top of every iteration, the first one
included. A cancellation raised during a sleep is seen only when the
sleep returns.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import random
import time
from typing import Any, Awaitable, Callable, TypeVar

from retryexec.backoff import grow, next_delay
from retryexec.cancellation import NEVER_CANCELLED, CancelSignal
from retryexec.errors import AttemptsExhaustedFailure, CancelledFailure, TimeoutFailure
from retryexec.policy import RetryPolicy

logger = logging.getLogger(__name__)

T = TypeVar("T")


class _RetryRun:
    """Loop state for one call. Never shared between calls."""

    def __init__(
        self,
        cancel_signal: CancelSignal | None,
        policy: RetryPolicy | None,
        rand: Callable[[], float],
    ) -> None:
        self.policy = (policy if policy is not None else RetryPolicy()).with_defaults()
        self.cancel_signal = cancel_signal if cancel_signal is not None else NEVER_CANCELLED
        self._rand = rand
        self.attempts = 0
        self.total_delay = 0.0
        self.delay = self.policy.initial_delay

    def start_attempt(self) -> None:
        self.attempts += 1
        if self.cancel_signal.cancelled:
            cause = self.cancel_signal.cause
            raise CancelledFailure(self.attempts - 1, cause) from cause

    def succeeded(self) -> None:
        if self.attempts > 1:
            logger.info("Attempt succeeded after %d attempt(s)", self.attempts)

    def failed(self, err: Exception) -> float:
        """Record a failure and return the delay to sleep before retrying."""
        policy = self.policy
        if policy.on_retry is not None:
            policy.on_retry(self.attempts, self.total_delay, err)

        if self.attempts >= policy.max_attempts:
            raise AttemptsExhaustedFailure(self.attempts, self.total_delay, err) from err
        if self.total_delay >= policy.timeout_budget:
            raise TimeoutFailure(policy.timeout_budget, self.attempts, err) from err

        applied = next_delay(self.delay, use_jitter=policy.use_jitter, rand=self._rand)
        self.total_delay += applied
        return applied

    def slept(self, applied: float) -> None:
        # Jittered delays become the new baseline.
        self.delay = grow(applied, use_exponential=self.policy.use_exponential)


class RetryExecutor:
    """Runs fallible operations under a retry policy.

    An operation fails by raising any ``Exception``; returning normally,
    with any value, is success. Exceptions outside ``Exception``
    (KeyboardInterrupt, SystemExit) are never retried.
    """

    def __init__(
        self,
        sleep_func: Callable[[float], None] | None = None,
        rand: Callable[[], float] | None = None,
    ) -> None:
        self._sleep = sleep_func or time.sleep
        self._rand = rand or random.random

    def execute(
        self,
        cancel_signal: CancelSignal | None,
        operation: Callable[[], T],
        policy: RetryPolicy | None = None,
    ) -> T:
        """Invoke operation until it succeeds or a stopping condition hits.

        Args:
            cancel_signal: Polled before every attempt. None never cancels.
            operation: Zero-argument callable to retry.
            policy: Retry policy. Uses defaults if None.

        Returns:
            The return value of the successful invocation.

        Raises:
            CancelledFailure: Cancellation was requested before an attempt.
            AttemptsExhaustedFailure: The last permitted attempt failed.
            TimeoutFailure: Delay consumed reached the timeout budget.
        """
        run = _RetryRun(cancel_signal, policy, self._rand)
        while True:
            run.start_attempt()
            try:
                result = operation()
            except Exception as err:
                delay = run.failed(err)
            else:
                run.succeeded()
                return result
            self._sleep(delay)
            run.slept(delay)


_default_executor = RetryExecutor()


def execute(
    cancel_signal: CancelSignal | None,
    operation: Callable[[], T],
    policy: RetryPolicy | None = None,
) -> T:
    """Run operation with the default executor (real sleep, real randomness)."""
    return _default_executor.execute(cancel_signal, operation, policy)


async def execute_async(
    cancel_signal: CancelSignal | None,
    operation: Callable[[], Awaitable[T]],
    policy: RetryPolicy | None = None,
    *,
    sleep_func: Callable[[float], Awaitable[Any]] | None = None,
    rand: Callable[[], float] | None = None,
) -> T:
    """Coroutine counterpart of ``execute`` for async operations.

    Sleeps with ``asyncio.sleep`` unless sleep_func is given. Cancelling
    the surrounding task propagates ``asyncio.CancelledError`` as usual.
    An operation that returns something other than an awaitable raises
    ``TypeError`` at once and is not retried.
    """
    do_sleep = sleep_func or asyncio.sleep
    run = _RetryRun(cancel_signal, policy, rand or random.random)
    while True:
        run.start_attempt()
        pending = operation()
        if not inspect.isawaitable(pending):
            raise TypeError(
                f"operation must return an awaitable, got {type(pending).__name__}"
            )
        try:
            result = await pending
        except Exception as err:
            delay = run.failed(err)
        else:
            run.succeeded()
            return result
        await do_sleep(delay)
        run.slept(delay)
