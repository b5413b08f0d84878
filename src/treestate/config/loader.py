"""
treestate.config.loader - Configuration file discovery and loading
"""

from __future__ import annotations

import copy
import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import tomlkit
from tomlkit.exceptions import ParseError

from treestate.config.defaults import CONFIG_FILENAME, DEFAULT_CONFIG, ENV_PREFIX

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Raised when a configuration file cannot be parsed or is invalid."""


def find_config_file(start: Path | None = None) -> Path | None:
    """Find the nearest config file, walking up from ``start``.

    Args:
        start: Directory to start from (defaults to the working directory).

    Returns:
        Path to the config file, or None if there is none.
    """
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def merge_configs(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Deep-merge ``override`` into a copy of ``base``.

    Nested tables are merged key by key; any other value in ``override``
    replaces the one in ``base``.
    """
    merged = copy.deepcopy(dict(base))
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), dict):
            merged[key] = merge_configs(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def _try_parse_env_value(raw: str) -> Any:
    """Parse an environment value into a typed config value.

    JSON arrays and objects are decoded (malformed JSON stays a string),
    ``true``/``false`` become booleans, integers become ints, anything else
    is returned unchanged.
    """
    value = raw.strip()
    if value.startswith(("[", "{")):
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            return raw
    if value.lower() == "true":
        return True
    if value.lower() == "false":
        return False
    try:
        return int(value)
    except ValueError:
        return raw


def apply_env_overrides(
    config: dict[str, Any], environ: Mapping[str, str] | None = None
) -> dict[str, Any]:
    """Apply ``TREESTATE_<SECTION>_<KEY>`` environment overrides in place.

    Only sections that exist in the config are considered; the key part is
    lower-cased and may itself contain underscores.
    """
    env = os.environ if environ is None else environ
    for name, raw in env.items():
        if not name.startswith(ENV_PREFIX):
            continue
        rest = name[len(ENV_PREFIX):].lower()
        for section in config:
            if isinstance(config[section], dict) and rest.startswith(f"{section}_"):
                key = rest[len(section) + 1:]
                config[section][key] = _try_parse_env_value(raw)
                logger.debug(f"Config override from {name}: [{section}] {key}")
                break
    return config


def validate_config(config: Mapping[str, Any]) -> None:
    """Check the ``[state]`` defaults applied to new nodes.

    Raises:
        ConfigError: If a flag is not a boolean, or ``selected`` is enabled.
            At most one node may be selected, so it cannot be a default.
    """
    state = config.get("state", {})
    if not isinstance(state, Mapping):
        raise ConfigError("[state] must be a table")
    for key in ("collapsed", "hidden", "selected"):
        if key in state and not isinstance(state[key], bool):
            raise ConfigError(f"[state] {key} must be a boolean, got {state[key]!r}")
    if state.get("selected"):
        raise ConfigError("[state] selected cannot default to true; select nodes explicitly")


def load_config(path: Path) -> dict[str, Any]:
    """Load a config file and merge it over the defaults.

    Raises:
        ConfigError: If the file is not valid TOML.
    """
    try:
        document = tomlkit.parse(path.read_text(encoding="utf-8"))
    except ParseError as e:
        raise ConfigError(f"Invalid config file {path}: {e}") from e
    return merge_configs(DEFAULT_CONFIG, document.unwrap())


def get_config(
    config_path: Path | None = None,
    start: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> dict[str, Any]:
    """Resolve the effective configuration.

    Uses ``config_path`` when given, otherwise the nearest config file from
    ``start``, otherwise the defaults. Environment overrides apply last.

    Raises:
        ConfigError: If the file is not valid TOML or the result fails
            ``validate_config``.
    """
    path = config_path or find_config_file(start)
    if path is not None:
        logger.debug(f"Using config file {path}")
        config = load_config(path)
    else:
        config = copy.deepcopy(DEFAULT_CONFIG)
    apply_env_overrides(config, environ)
    validate_config(config)
    return config
