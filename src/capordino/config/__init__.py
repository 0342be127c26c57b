"""
capordino.config - Configuration loading and defaults

Configuration is read from .capordino.toml (searched upward from the
working directory), deep-merged over DEFAULT_CONFIG, then overridden by
CAPORDINO_<SECTION>_<KEY> environment variables.
"""

from __future__ import annotations

import copy
import json
import os
from pathlib import Path
from typing import Any

import tomlkit

from capordino.config.defaults import DEFAULT_CONFIG

CONFIG_FILE_NAME = ".capordino.toml"
ENV_PREFIX = "CAPORDINO_"


def find_config_file(start: Path) -> Path | None:
    """Find .capordino.toml in start or any parent directory.

    Args:
        start: Directory to start searching from.

    Returns:
        Path to the config file, or None if not found.
    """
    current = start.resolve()
    while True:
        candidate = current / CONFIG_FILE_NAME
        if candidate.is_file():
            return candidate
        if current == current.parent:
            return None
        current = current.parent


def merge_configs(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep-merge override into a copy of base.

    Nested dicts are merged key by key; any other value in override
    replaces the value in base.
    """
    result = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = copy.deepcopy(value)
    return result


def load_config(config_path: Path) -> dict[str, Any]:
    """Load a TOML config file merged over the defaults.

    Args:
        config_path: Path to the TOML file.

    Returns:
        Merged configuration dict.
    """
    content = config_path.read_text(encoding="utf-8")
    user_config = tomlkit.parse(content).unwrap()
    return merge_configs(DEFAULT_CONFIG, user_config)


def _try_parse_env_value(value: str) -> Any:
    """Parse an environment value into a typed value.

    JSON arrays and objects are decoded, "true"/"false" become booleans,
    integers become ints; anything else (including malformed JSON) is
    returned as the original string.
    """
    lowered = value.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    if value.startswith(("[", "{")):
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            return value
    if value.isdigit():
        return int(value)
    return value


def _apply_env_overrides(config: dict[str, Any]) -> dict[str, Any]:
    """Apply CAPORDINO_<SECTION>_<KEY> environment variables to config.

    The section is the first word after the prefix; the rest, lowercased,
    is the key. ``CAPORDINO_CONVERSION_STRICT_LEAF_REFERENCES=true`` sets
    ``config["conversion"]["strict_leaf_references"] = True``.
    """
    for name, raw in os.environ.items():
        if not name.startswith(ENV_PREFIX):
            continue
        remainder = name[len(ENV_PREFIX) :]
        if "_" not in remainder:
            continue
        section, key = remainder.split("_", 1)
        section = section.lower()
        key = key.lower()
        target = config.setdefault(section, {})
        if isinstance(target, dict):
            target[key] = _try_parse_env_value(raw)
    return config


def get_config(config_path: Path | None = None, start: Path | None = None) -> dict[str, Any]:
    """Resolve the effective configuration.

    Args:
        config_path: Explicit config file; searched for if None.
        start: Directory to search from (defaults to cwd).

    Returns:
        Configuration dict with defaults and environment overrides applied.
    """
    if config_path is None:
        config_path = find_config_file(start or Path.cwd())

    if config_path is not None:
        config = load_config(config_path)
    else:
        config = copy.deepcopy(DEFAULT_CONFIG)

    return _apply_env_overrides(config)


__all__ = [
    "CONFIG_FILE_NAME",
    "DEFAULT_CONFIG",
    "find_config_file",
    "get_config",
    "load_config",
    "merge_configs",
]
