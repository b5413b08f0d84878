"""Tree module - Core tree-state data structures.

Exports:
- StateFlag, NodeState, TreeNode, NodeDraft: node representation
- TreeModel: arena container of the tree
- TreeState: the manager owning a model and its UI state
- EventName, EventEmitter, EventLog, EventRecord: lifecycle events
- RenderGate: counting render batch gate
- Resolved, Deferred: tagged load sources
- MalformedNodeError, NodeNotFoundError: errors
"""

from treestate.tree.events import (
    EventEmitter,
    EventLog,
    EventName,
    EventNotifier,
    EventRecord,
    Renderer,
)
from treestate.tree.gate import RenderGate
from treestate.tree.identity import MalformedNodeError, generate_id, normalize, normalize_many
from treestate.tree.loader import Deferred, Resolved
from treestate.tree.model import TreeModel
from treestate.tree.serialize import NullRenderer, TextRenderer, serialize_model, to_text
from treestate.tree.state import NodeNotFoundError, TreeState
from treestate.tree.TreeNode import NodeDraft, NodeState, StateFlag, TreeNode

__all__ = [
    "StateFlag",
    "NodeState",
    "TreeNode",
    "NodeDraft",
    "TreeModel",
    "TreeState",
    "EventName",
    "EventEmitter",
    "EventLog",
    "EventRecord",
    "EventNotifier",
    "Renderer",
    "RenderGate",
    "Resolved",
    "Deferred",
    "MalformedNodeError",
    "NodeNotFoundError",
    "generate_id",
    "normalize",
    "normalize_many",
    "NullRenderer",
    "TextRenderer",
    "serialize_model",
    "to_text",
]
