"""Configuration loader for retry policies.

Loads the ``retry:`` section of a YAML file with environment variable
overrides. All env vars use the RETRYEXEC_ prefix.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Callable, TypeVar

import yaml

from retryexec.policy import RetryPolicy

ENV_PREFIX = "RETRYEXEC_"

V = TypeVar("V")


def load_policy(path: Path | None = None) -> RetryPolicy:
    """Load a RetryPolicy from YAML with env var overrides.

    Env vars override YAML values. Mapping:
      RETRYEXEC_MAX_ATTEMPTS → retry.max_attempts
      RETRYEXEC_INITIAL_DELAY → retry.initial_delay
      RETRYEXEC_TIMEOUT_BUDGET → retry.timeout_budget
      RETRYEXEC_USE_EXPONENTIAL → retry.use_exponential
      RETRYEXEC_USE_JITTER → retry.use_jitter

    Unset values stay unset on the returned policy; the executor fills
    in defaults when it runs.
    """
    raw: dict[str, Any] = {}
    if path and path.exists():
        raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}

    section = raw.get("retry", {}) if isinstance(raw, dict) else {}
    if not isinstance(section, dict):
        section = {}

    return RetryPolicy(
        max_attempts=_env_or("MAX_ATTEMPTS", section.get("max_attempts", 0), _whole_int),
        initial_delay=_env_or("INITIAL_DELAY", section.get("initial_delay", 0.0), float),
        timeout_budget=_env_or("TIMEOUT_BUDGET", section.get("timeout_budget", 0.0), float),
        use_exponential=_env_bool("USE_EXPONENTIAL", _as_bool(section.get("use_exponential", False))),
        use_jitter=_env_bool("USE_JITTER", _as_bool(section.get("use_jitter", False))),
    )


def _env_or(suffix: str, default: Any, convert: Callable[[Any], V]) -> V:
    val = os.environ.get(f"{ENV_PREFIX}{suffix}", default)
    try:
        return convert(val)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid value for {suffix.lower()}: {val!r}") from exc


def _env_bool(suffix: str, default: bool) -> bool:
    val = os.environ.get(f"{ENV_PREFIX}{suffix}")
    if val is None:
        return default
    return _as_bool(val)


def _as_bool(val: Any) -> bool:
    if isinstance(val, str):
        return val.lower() in ("true", "1", "yes")
    return bool(val)


def _whole_int(val: Any) -> int:
    if isinstance(val, float) and not val.is_integer():
        raise ValueError(f"not a whole number: {val}")
    return int(val)
