"""
treestate.config.defaults - Default configuration values
"""

from typing import Any

CONFIG_FILENAME = ".treestate.toml"
ENV_PREFIX = "TREESTATE_"

DEFAULT_CONFIG: dict[str, Any] = {
    "state": {
        "collapsed": True,
        "hidden": False,
    },
    "ids": {
        "prefix": "",
    },
    "render": {
        "indent": 2,
        "label_field": "text",
        "show_hidden": False,
    },
    "events": {
        "history": True,
    },
    "logging": {
        "level": "WARNING",
    },
}
