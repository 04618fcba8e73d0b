"""Terminal failures raised by the retry executor.

Each call ends in success or exactly one of these.
"""

from __future__ import annotations


class RetryFailure(Exception):
    """Base class for every way a retry run can give up."""

    def __init__(self, message: str, attempts: int) -> None:
        self.attempts = attempts
        super().__init__(message)


class CancelledFailure(RetryFailure):
    """Cancellation was observed before the next attempt began.

    ``attempts`` counts the invocations actually performed; the attempt
    that was about to start is not included.
    """

    def __init__(self, attempts: int, cause: BaseException | None) -> None:
        self.cause = cause
        super().__init__(
            f"retry cancelled at attempt {attempts + 1} "
            f"after {attempts} attempt(s): {cause}",
            attempts,
        )


class AttemptsExhaustedFailure(RetryFailure):
    """The operation failed on its final permitted attempt."""

    def __init__(self, attempts: int, total_delay: float, last_error: Exception) -> None:
        self.total_delay = total_delay
        self.last_error = last_error
        super().__init__(
            f"retry failed after {attempts} attempt(s) with total delay: {total_delay:f}s",
            attempts,
        )


class TimeoutFailure(RetryFailure):
    """Delay already consumed reached the timeout budget."""

    def __init__(self, timeout_budget: float, attempts: int, last_error: Exception) -> None:
        self.timeout_budget = timeout_budget
        self.last_error = last_error
        super().__init__(
            f"retry failed after reach timeout({timeout_budget:f}s) with {attempts} attempt(s)",
            attempts,
        )
