"""Traversal and queries over a TreeModel.

- recurse: in-place recursive map over nested lists
- find_node_by_id: id lookup, globally or within a subtree
- flatten: collect nodes whose state flag is set
- get_selected: the selected subset, flat (live nodes) or hierarchical (clones)
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Callable, TypeVar

from treestate.tree.model import TreeModel
from treestate.tree.serialize import serialize_node
from treestate.tree.TreeNode import StateFlag, TreeNode

T = TypeVar("T")


def _dict_children(item: Any) -> list[Any] | None:
    return item.get("children") if isinstance(item, dict) else None


def recurse(
    items: list[T],
    iteratee: Callable[[T, int], T],
    children: Callable[[T], list[T] | None] = _dict_children,
) -> list[T]:
    """Apply ``iteratee`` to every item and, recursively, to their children.

    Each position of ``items`` is rewritten in place with the iteratee's
    result. Children are looked up on the original item with ``children``
    (plain ``dict`` nodes by default); when the accessor returns a list that
    list is rewritten in place too.

    Args:
        items: Items to transform.
        iteratee: Called as ``iteratee(item, index)``.
        children: Returns the mutable child list of an item, or None.

    Returns:
        ``items``.
    """
    for i, item in enumerate(items):
        items[i] = iteratee(item, i)
        kids = children(item)
        if kids:
            recurse(kids, iteratee, children)
    return items


def find_node_by_id(
    model: TreeModel, node_id: str, nodes: Iterable[TreeNode] | None = None
) -> TreeNode | None:
    """Find a node by id.

    Args:
        model: The model to search.
        node_id: Id to find.
        nodes: Restrict the search to these subtrees (depth-first).

    Returns:
        The first matching node, or None.
    """
    if nodes is None:
        return model.find_by_id(node_id)
    for node in nodes:
        if node.id == node_id:
            return node
        if not node.is_leaf:
            found = find_node_by_id(model, node_id, model.children_of(node))
            if found is not None:
                return found
    return None


def flatten(
    model: TreeModel,
    nodes: Iterable[TreeNode] | None = None,
    flag: StateFlag | str = StateFlag.SELECTED,
) -> list[TreeNode]:
    """Collect nodes whose ``flag`` is set, in depth-first pre-order.

    A matching node's descendants are not examined; non-matching nodes are
    always descended.

    Args:
        model: The model owning the nodes.
        nodes: Nodes to start from (model roots by default).
        flag: State flag to filter by.

    Raises:
        ValueError: If ``flag`` is not a state flag.
    """
    flag = StateFlag.coerce(flag)
    flat: list[TreeNode] = []
    for node in model.iter_roots() if nodes is None else nodes:
        if node.state.get(flag):
            flat.append(node)
        elif not node.is_leaf:
            flat.extend(flatten(model, model.children_of(node), flag))
    return flat


def _strip_internal(item: dict[str, Any], index: int) -> dict[str, Any]:
    item.pop("state", None)
    return item


def get_selected(
    model: TreeModel,
    nodes: Iterable[TreeNode] | None = None,
    hierarchy: bool = False,
) -> list[Any]:
    """Return the selected subset.

    Flat mode returns live selected nodes (see ``flatten``). Hierarchical
    mode returns independent dict clones: a selected node with its whole
    subtree, and each unselected ancestor of a selected node with its
    ``children`` narrowed to the selected branches. Clones never carry
    ``state`` or a parent reference.

    Args:
        model: The model to read.
        nodes: Nodes to start from (model roots by default).
        hierarchy: Return the hierarchical clone structure.
    """
    source = list(model.iter_roots()) if nodes is None else list(nodes)
    if not hierarchy:
        return flatten(model, source, StateFlag.SELECTED)

    selected: list[dict[str, Any]] = []
    for node in source:
        clone: dict[str, Any] | None = None
        if node.state.selected:
            clone = serialize_node(model, node)
        elif not node.is_leaf:
            children = get_selected(model, model.children_of(node), hierarchy=True)
            if children:
                clone = serialize_node(model, node, include_children=False)
                clone["children"] = children

        if clone is not None:
            _strip_internal(clone, len(selected))
            recurse(clone.get("children") or [], _strip_internal)
            selected.append(clone)
    return selected


__all__ = ["recurse", "find_node_by_id", "flatten", "get_selected"]
