# version_prune/core/loader.py
"""
YAML loading and environment substitution for catalog configuration.
"""
from __future__ import annotations

import logging
import os
import re
from glob import glob
from pathlib import Path
from typing import Any, Iterable

import yaml

from version_prune.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# ${VAR} or ${VAR:-default}
ENV_VAR_PATTERN = re.compile(r"\$\{([^}:]+)(?::-([^}]*))?\}")


def substitute_env_vars(value: Any) -> Any:
    """
    Recursively substitute environment variables in configuration values.

    Strings may reference ``${VAR}`` (required) or ``${VAR:-default}``.
    Dicts and lists are walked; every other type is returned unchanged.

    Raises:
        ConfigurationError: If a required variable is not set.
    """
    if isinstance(value, str):
        return ENV_VAR_PATTERN.sub(_env_replacer, value)
    if isinstance(value, dict):
        return {k: substitute_env_vars(v) for k, v in value.items()}
    if isinstance(value, list):
        return [substitute_env_vars(item) for item in value]
    return value


def _env_replacer(match: re.Match) -> str:
    var_name, default = match.group(1), match.group(2)
    env_value = os.environ.get(var_name)
    if env_value is not None:
        return env_value
    if default is not None:
        return default
    raise ConfigurationError(
        f"Environment variable '{var_name}' is not set and no default provided"
    )


def resolve_patterns(patterns: Iterable[str]) -> list[Path]:
    """Expand glob patterns into a sorted, de-duplicated list of files."""
    files: set[Path] = set()
    for pattern in patterns:
        files.update(Path(m).resolve() for m in glob(pattern))
    return sorted(files)


def load_yaml_files(patterns: Iterable[str]) -> list[dict[str, Any]]:
    """
    Load every YAML file matching ``patterns``.

    Files are returned in sorted path order so callers can let later
    files override earlier ones.
    """
    patterns = list(patterns)
    files = resolve_patterns(patterns)

    if not files:
        logger.warning("No config files found matching patterns: %s", patterns)
        return []

    logger.info("Loading config files: %s", [str(f) for f in files])

    out: list[dict[str, Any]] = []
    for f in files:
        try:
            with f.open("r", encoding="utf-8") as fh:
                content = yaml.safe_load(fh) or {}
        except (OSError, yaml.YAMLError) as exc:
            logger.error("Failed to load YAML file '%s': %s", f, exc)
            raise ConfigurationError(f"Cannot read config file '{f}': {exc}") from exc

        if not isinstance(content, dict):
            raise ConfigurationError(
                f"Config file '{f}' must contain a mapping, got {type(content).__name__}"
            )
        out.append(content)

    return out
