"""Identity & normalization of raw input nodes.

Raw nodes are plain mappings: an optional ``id``, an optional ``children``
sequence, an optional partial ``state`` mapping and any other fields. They
are turned into NodeDraft trees that the merge engine can insert into a
model. Nothing here touches a model.
"""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping, Sequence
from typing import Any, Callable
from uuid import uuid4

from treestate.tree.TreeNode import NodeDraft, NodeState, StateFlag, TreeNode

# Keys with meaning to the tree; everything else is copied into ``fields``.
RESERVED_KEYS = frozenset({"id", "children", "state", "parent"})

IdFactory = Callable[[], str]


class MalformedNodeError(ValueError):
    """Raised when raw input cannot be normalized into a node."""

    def __init__(self, message: str, path: tuple[int, ...] = ()) -> None:
        self.path = path
        if path:
            message = f"{message} (at children path {'/'.join(str(p) for p in path)})"
        super().__init__(message)


def generate_id(prefix: str = "") -> str:
    """Generate a collision-resistant node id."""
    return f"{prefix}{uuid4().hex}"


def _state_from_raw(raw_state: Any, defaults: NodeState, path: tuple[int, ...]) -> NodeState:
    state = defaults.copy()
    # Nodes always enter unselected; TreeState.select_node is the only way in.
    state.selected = False
    if raw_state is None:
        return state
    if not isinstance(raw_state, Mapping):
        raise MalformedNodeError(f"state must be a mapping, got {type(raw_state).__name__}", path)
    for key, value in raw_state.items():
        try:
            flag = StateFlag.coerce(key)
        except ValueError as e:
            raise MalformedNodeError(str(e), path) from None
        if not isinstance(value, bool):
            raise MalformedNodeError(f"state flag {key!r} must be a boolean", path)
        if flag is not StateFlag.SELECTED:
            state.set(flag, value)
    return state


def normalize(
    raw: Mapping[str, Any],
    parent_id: str | None = None,
    defaults: NodeState | None = None,
    id_factory: IdFactory | None = None,
) -> NodeDraft:
    """Normalize a raw node (and its children) into a NodeDraft.

    A missing or empty ``id`` is generated and written back into ``raw``
    when it is mutable, so normalizing the same raw node again keeps the id.
    A raw ``selected`` flag is validated but never installed: selection is
    exclusive and only ``TreeState.select_node`` sets it.

    Args:
        raw: Raw node mapping.
        parent_id: Id of the node that will own this one.
        defaults: Default state for nodes without a (complete) ``state``.
        id_factory: Id generator, defaults to ``generate_id``.

    Returns:
        The normalized draft.

    Raises:
        MalformedNodeError: If the input is not a well-formed node tree.
    """
    return _normalize(
        raw,
        parent_id,
        defaults or NodeState(),
        id_factory or generate_id,
        active=set(),
        path=(),
    )


def _normalize(
    raw: Any,
    parent_id: str | None,
    defaults: NodeState,
    id_factory: IdFactory,
    active: set[int],
    path: tuple[int, ...],
) -> NodeDraft:
    if not isinstance(raw, Mapping):
        raise MalformedNodeError(f"node must be a mapping, got {type(raw).__name__}", path)
    if id(raw) in active:
        raise MalformedNodeError("node contains itself through its children", path)

    node_id = raw.get("id")
    if node_id is None or node_id == "":
        node_id = id_factory()
        if isinstance(raw, MutableMapping):
            raw["id"] = node_id
    elif not isinstance(node_id, str):
        raise MalformedNodeError(f"id must be a string, got {type(node_id).__name__}", path)

    raw_children = raw.get("children")
    if raw_children is not None and (
        isinstance(raw_children, (str, bytes)) or not isinstance(raw_children, Sequence)
    ):
        raise MalformedNodeError(
            f"children must be a list, got {type(raw_children).__name__}", path
        )

    node = TreeNode(
        id=node_id,
        fields={k: v for k, v in raw.items() if k not in RESERVED_KEYS},
        state=_state_from_raw(raw.get("state"), defaults, path),
        parent_id=parent_id,
    )

    children: list[NodeDraft] | None = None
    if raw_children is not None:
        active.add(id(raw))
        children = [
            _normalize(child, node_id, defaults, id_factory, active, path + (i,))
            for i, child in enumerate(raw_children)
        ]
        active.discard(id(raw))

    return NodeDraft(node=node, children=children)


def normalize_many(
    raws: Sequence[Mapping[str, Any]],
    parent_id: str | None = None,
    defaults: NodeState | None = None,
    id_factory: IdFactory | None = None,
) -> list[NodeDraft]:
    """Normalize a sequence of raw nodes.

    Raises:
        MalformedNodeError: If ``raws`` is not a sequence or any node is malformed.
    """
    if isinstance(raws, (str, bytes, Mapping)) or not isinstance(raws, Sequence):
        raise MalformedNodeError(f"expected a list of nodes, got {type(raws).__name__}")
    drafts = []
    for i, raw in enumerate(raws):
        try:
            drafts.append(normalize(raw, parent_id, defaults, id_factory))
        except MalformedNodeError as e:
            raise MalformedNodeError(f"node {i}: {e}") from e
    return drafts


__all__ = [
    "MalformedNodeError",
    "RESERVED_KEYS",
    "generate_id",
    "normalize",
    "normalize_many",
]
