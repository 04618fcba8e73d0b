"""retry-executor: policy-driven retries for fallible operations.

Runs an operation repeatedly under an attempt budget, a cumulative
delay budget and cooperative cancellation, with fixed, exponential or
jittered delays between attempts.
"""

__version__ = "0.1.0"

from retryexec.cancellation import (
    CancelSignal,
    Cancelled,
    CancellationToken,
    DeadlineExceeded,
    NEVER_CANCELLED,
)
from retryexec.errors import (
    AttemptsExhaustedFailure,
    CancelledFailure,
    RetryFailure,
    TimeoutFailure,
)
from retryexec.executor import RetryExecutor, execute, execute_async
from retryexec.policy import RetryPolicy
from retryexec.config import load_policy

__all__ = [
    "RetryExecutor",
    "execute",
    "execute_async",
    "RetryPolicy",
    "CancelSignal",
    "Cancelled",
    "CancellationToken",
    "DeadlineExceeded",
    "NEVER_CANCELLED",
    "RetryFailure",
    "CancelledFailure",
    "AttemptsExhaustedFailure",
    "TimeoutFailure",
    "load_policy",
]
