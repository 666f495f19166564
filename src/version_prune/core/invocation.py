# version_prune/core/invocation.py
"""
Validation of operator-supplied run arguments.

Only two arguments affect a run: ``run`` (``yes``, ``dry`` or ``fast``,
required) and ``keep`` (optional version count).
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from version_prune.contracts.run import InvocationMode, RetentionPolicy, RunMode
from version_prune.core.exceptions import ConfigurationError

RUN_ARGUMENT_HELP = (
    "Please provide the 'run' argument with either 'yes', 'dry', or 'fast'"
)


@dataclass(frozen=True)
class Invocation:
    mode: InvocationMode
    policy: RetentionPolicy

    @property
    def run_mode(self) -> RunMode:
        return self.mode.run_mode

    @property
    def fast(self) -> bool:
        return self.mode.fast


def parse_run_mode(value: Any) -> InvocationMode:
    if isinstance(value, InvocationMode):
        return value
    if not isinstance(value, str):
        raise ConfigurationError(RUN_ARGUMENT_HELP)
    try:
        return InvocationMode(value.strip().lower())
    except ValueError:
        raise ConfigurationError(f"{RUN_ARGUMENT_HELP} (got {value!r})") from None


def parse_keep(value: Any, default: int) -> int:
    """Parse ``keep``; empty, zero or negative values fall back to ``default``."""
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        raise ConfigurationError(f"'keep' must be an integer, got {value!r}")
    try:
        keep = int(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"'keep' must be an integer, got {value!r}") from None
    return keep if keep > 0 else default


def parse_invocation(run: Any, keep: Any = None, *, default_keep: int) -> Invocation:
    mode = parse_run_mode(run)
    return Invocation(
        mode=mode,
        policy=RetentionPolicy(
            keep_versions=parse_keep(keep, default_keep),
            default_keep_versions=default_keep,
        ),
    )
