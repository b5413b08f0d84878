"""
treestate.config - Configuration loading and defaults
"""

from treestate.config.defaults import CONFIG_FILENAME, DEFAULT_CONFIG
from treestate.config.loader import (
    ConfigError,
    _try_parse_env_value,
    apply_env_overrides,
    find_config_file,
    get_config,
    load_config,
    merge_configs,
    validate_config,
)

__all__ = [
    "load_config",
    "find_config_file",
    "merge_configs",
    "get_config",
    "apply_env_overrides",
    "validate_config",
    "_try_parse_env_value",
    "ConfigError",
    "CONFIG_FILENAME",
    "DEFAULT_CONFIG",
]
