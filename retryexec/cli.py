"""CLI entry point for retry-executor.

Usage:
    retryexec [--config FILE] [--max-attempts N] [--delay S] [--timeout S]
              [--exponential] [--jitter] [--verbose] -- COMMAND [ARGS...]
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import subprocess
import sys
from pathlib import Path
from typing import Callable

from retryexec.config import load_policy
from retryexec.errors import RetryFailure
from retryexec.executor import RetryExecutor
from retryexec.policy import RetryPolicy


class CommandFailed(Exception):
    """Raised by the wrapped command when it exits non-zero."""

    def __init__(self, returncode: int) -> None:
        self.returncode = returncode
        super().__init__(f"command exited with status {returncode}")


def build_policy(args: argparse.Namespace) -> RetryPolicy:
    policy = load_policy(args.config)
    overrides: dict[str, object] = {}
    if args.max_attempts is not None:
        overrides["max_attempts"] = args.max_attempts
    if args.delay is not None:
        overrides["initial_delay"] = args.delay
    if args.timeout is not None:
        overrides["timeout_budget"] = args.timeout
    if args.exponential:
        overrides["use_exponential"] = True
    if args.jitter:
        overrides["use_jitter"] = True
    return dataclasses.replace(policy, on_retry=_report_retry, **overrides)


def _report_retry(attempt: int, total_delay: float, err: Exception) -> None:
    print(f"attempt {attempt} failed (total delay {total_delay:.2f}s): {err}", file=sys.stderr)


def run_command(command: list[str]) -> Callable[[], None]:
    def operation() -> None:
        proc = subprocess.run(command)
        if proc.returncode != 0:
            raise CommandFailed(proc.returncode)
    return operation


def main(argv: list[str] | None = None, executor: RetryExecutor | None = None) -> int:
    parser = argparse.ArgumentParser(prog="retryexec", description="Retry a command under a retry policy")
    parser.add_argument("--config", type=Path, default=None, help="Config YAML file")
    parser.add_argument("--max-attempts", type=int, default=None)
    parser.add_argument("--delay", type=float, default=None, help="Initial delay in seconds")
    parser.add_argument("--timeout", type=float, default=None, help="Delay budget in seconds")
    parser.add_argument("--exponential", action="store_true", help="Double the delay after each attempt")
    parser.add_argument("--jitter", action="store_true", help="Randomize each delay by 0.5x-1.5x")
    parser.add_argument("--verbose", action="store_true")
    parser.add_argument("command", nargs=argparse.REMAINDER)

    args = parser.parse_args(argv)
    command = args.command[1:] if args.command[:1] == ["--"] else args.command
    if not command:
        parser.print_help()
        return 2

    level = logging.INFO if args.verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    # basicConfig is a no-op when the root logger already has handlers.
    logging.getLogger().setLevel(level)

    executor = executor or RetryExecutor()
    try:
        executor.execute(None, run_command(command), build_policy(args))
    except RetryFailure as exc:
        print(f"retryexec: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("retryexec: interrupted", file=sys.stderr)
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
