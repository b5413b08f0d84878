"""
treestate - Tree-state model manager

Owns a hierarchy of nodes, gives each a stable identity, tracks per-node
UI state (collapsed, hidden, selected), merges incoming data without
duplicating identities, and answers traversal queries for renderers and
other consumers.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("treestate")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"  # Not installed
__license__ = "MIT"

from treestate.tree import (
    EventEmitter,
    EventName,
    MalformedNodeError,
    NodeNotFoundError,
    NodeState,
    StateFlag,
    TreeModel,
    TreeNode,
    TreeState,
)

__all__ = [
    "__version__",
    "EventEmitter",
    "EventName",
    "MalformedNodeError",
    "NodeNotFoundError",
    "NodeState",
    "StateFlag",
    "TreeModel",
    "TreeNode",
    "TreeState",
]
