"""Delay computation between attempts.

Pure functions: the executor owns the running delay and feeds it
through ``next_delay`` before sleeping and ``grow`` afterwards.

There is no cap on exponential growth. A float baseline only overflows
to ``inf`` after roughly a thousand doublings, and the delay budget ends
the loop long before that.
"""

from __future__ import annotations

from typing import Callable

JITTER_MIN = 0.5
JITTER_SPAN = 1.0


def apply_jitter(delay: float, rand: Callable[[], float]) -> float:
    """Scale delay by a factor drawn uniformly from [0.5, 1.5)."""
    return delay * (JITTER_MIN + rand() * JITTER_SPAN)


def next_delay(delay: float, *, use_jitter: bool, rand: Callable[[], float]) -> float:
    """Delay to apply for the current iteration."""
    if use_jitter:
        return apply_jitter(delay, rand)
    return delay


def grow(delay: float, *, use_exponential: bool) -> float:
    """Baseline delay for the next iteration."""
    if use_exponential:
        return delay * 2
    return delay
