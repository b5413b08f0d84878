"""TreeNode - Node representation for the tree-state model.

This module provides the core data structures of the tree:
- StateFlag: Enum of per-node UI state flags
- NodeState: The three boolean flags every node carries
- TreeNode: A node stored in the model arena
- NodeDraft: A normalized, not-yet-merged node with its pending children
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator


class StateFlag(Enum):
    """UI state flags tracked for every node."""

    COLLAPSED = "collapsed"
    HIDDEN = "hidden"
    SELECTED = "selected"

    @classmethod
    def coerce(cls, flag: StateFlag | str) -> StateFlag:
        """Return the StateFlag for ``flag``.

        Raises:
            ValueError: If ``flag`` names no known state flag.
        """
        if isinstance(flag, cls):
            return flag
        try:
            return cls(flag)
        except ValueError:
            known = ", ".join(f.value for f in cls)
            raise ValueError(f"Unknown state flag: {flag!r} (expected one of {known})") from None


@dataclass
class NodeState:
    """Per-node UI state.

    Attributes:
        collapsed: Children are not shown (default True).
        hidden: The node itself is not shown (default False).
        selected: The node is the current selection (default False).
    """

    collapsed: bool = True
    hidden: bool = False
    selected: bool = False

    def get(self, flag: StateFlag | str) -> bool:
        """Return the value of a flag."""
        return getattr(self, StateFlag.coerce(flag).value)

    def set(self, flag: StateFlag | str, value: bool) -> None:
        """Set the value of a flag."""
        setattr(self, StateFlag.coerce(flag).value, bool(value))

    def copy(self) -> NodeState:
        return NodeState(self.collapsed, self.hidden, self.selected)

    def as_dict(self) -> dict[str, bool]:
        return {f.value: self.get(f) for f in StateFlag}


@dataclass(eq=False)
class TreeNode:
    """A node in the tree model.

    Nodes live in a flat arena owned by a TreeModel. Structure is expressed
    with ids only, so a node never holds a reference to another node.

    Attributes:
        id: Unique identifier, stable once assigned.
        fields: Caller-supplied data, preserved verbatim.
        state: UI state flags.
        parent_id: Id of the owning node, None for roots.
        child_ids: Ordered child ids, None when the node has no children container.
    """

    id: str
    fields: dict[str, Any] = field(default_factory=dict)
    state: NodeState = field(default_factory=NodeState)
    parent_id: str | None = None
    child_ids: list[str] | None = None

    # Field accessors
    def get_field(self, key: str, default: Any = None) -> Any:
        """Get a caller-supplied field."""
        return self.fields.get(key, default)

    def set_field(self, key: str, value: Any) -> None:
        """Set a caller-supplied field."""
        self.fields[key] = value

    def __getitem__(self, key: str) -> Any:
        return self.fields[key]

    def __contains__(self, key: object) -> bool:
        return key in self.fields

    # Structure checks
    @property
    def is_root(self) -> bool:
        """True if this node has no parent."""
        return self.parent_id is None

    @property
    def is_leaf(self) -> bool:
        """True if this node has no children."""
        return not self.child_ids

    @property
    def has_children_container(self) -> bool:
        return self.child_ids is not None

    def child_count(self) -> int:
        """Return number of children."""
        return len(self.child_ids) if self.child_ids else 0

    def iter_child_ids(self) -> Iterator[str]:
        """Iterate over child ids."""
        if self.child_ids:
            yield from self.child_ids

    def ensure_children(self) -> list[str]:
        """Install an empty children container if missing and return it."""
        if self.child_ids is None:
            self.child_ids = []
        return self.child_ids

    def __repr__(self) -> str:
        flags = ",".join(f.value for f in StateFlag if self.state.get(f))
        return f"TreeNode(id={self.id!r}, children={self.child_count()}, state=[{flags}])"


@dataclass(eq=False)
class NodeDraft:
    """A normalized node whose children have not been merged into a model.

    Attributes:
        node: The normalized node (``child_ids`` still unset).
        children: Drafts for the raw children, None when the raw node had no
            children container.
    """

    node: TreeNode
    children: list[NodeDraft] | None = None

    @property
    def id(self) -> str:
        return self.node.id

    def iter_children(self) -> Iterator[NodeDraft]:
        if self.children:
            yield from self.children

    def walk(self) -> Iterator[NodeDraft]:
        """Pre-order traversal of this draft and its pending descendants."""
        yield self
        for child in self.iter_children():
            yield from child.walk()


__all__ = ["StateFlag", "NodeState", "TreeNode", "NodeDraft"]
