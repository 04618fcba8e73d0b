"""Retry policy: attempt budget, delay budget and backoff switches.

Unset or non-positive numeric fields fall back to the module defaults
when the policy is resolved with ``with_defaults()``.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Callable

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_INITIAL_DELAY = 1.0
DEFAULT_TIMEOUT_BUDGET = 5.0

OnRetry = Callable[[int, float, Exception], None]


@dataclass(frozen=True)
class RetryPolicy:
    """Configuration for a single retry run. Durations are in seconds."""
    max_attempts: int = 0
    initial_delay: float = 0.0
    timeout_budget: float = 0.0
    use_exponential: bool = False
    use_jitter: bool = False
    on_retry: OnRetry | None = None

    def with_defaults(self) -> RetryPolicy:
        """Return a copy with every unset field replaced by its default."""
        return dataclasses.replace(
            self,
            max_attempts=self.max_attempts if self.max_attempts > 0 else DEFAULT_MAX_ATTEMPTS,
            initial_delay=self.initial_delay if self.initial_delay > 0 else DEFAULT_INITIAL_DELAY,
            timeout_budget=self.timeout_budget if self.timeout_budget > 0 else DEFAULT_TIMEOUT_BUDGET,
        )
