"""Tree Serialization - Export a TreeModel to plain data and text.

This module provides functions to serialize nodes and models to
JSON-compatible dicts, and to render the visible tree as indented text.
"""

from __future__ import annotations

import copy
import sys
from typing import TYPE_CHECKING, Any, TextIO

if TYPE_CHECKING:
    from treestate.tree.model import TreeModel
    from treestate.tree.TreeNode import TreeNode

EXPANDED_MARKER = "▾ "
COLLAPSED_MARKER = "▸ "
LEAF_MARKER = "  "
SELECTED_MARKER = " *"


def serialize_node(
    model: TreeModel,
    node: TreeNode,
    include_state: bool = True,
    include_children: bool = True,
) -> dict[str, Any]:
    """Serialize a node and its subtree to a JSON-compatible dict.

    The result shares nothing with the live model. Parent references are
    never included.

    Args:
        model: The model owning ``node``.
        node: The subtree root to serialize.
        include_state: Whether to include the ``state`` flags.
        include_children: Whether to serialize the subtree below ``node``.

    Returns:
        Dict with ``id``, the node fields, optionally ``state`` and, when the
        node has a children container, ``children``.
    """
    result: dict[str, Any] = {"id": node.id}
    result.update(copy.deepcopy(node.fields))
    if include_state:
        result["state"] = node.state.as_dict()
    if include_children and node.has_children_container:
        result["children"] = [
            serialize_node(model, child, include_state) for child in model.children_of(node)
        ]
    return result


def serialize_model(model: TreeModel, include_state: bool = True) -> list[dict[str, Any]]:
    """Serialize every root of the model."""
    return [serialize_node(model, root, include_state) for root in model.iter_roots()]


def node_label(node: TreeNode, label_field: str = "text") -> str:
    """Return the display label for a node, falling back to its id."""
    for key in (label_field, "text", "name"):
        value = node.get_field(key)
        if value not in (None, ""):
            return str(value)
    return node.id


def to_text(
    model: TreeModel,
    indent: int = 2,
    label_field: str = "text",
    show_hidden: bool = False,
) -> str:
    """Render the visible tree as indented text.

    Children are shown only under expanded nodes. Hidden nodes (and their
    subtrees) are skipped unless ``show_hidden`` is set.

    Args:
        model: The model to render.
        indent: Spaces per depth level.
        label_field: Field used as node label.
        show_hidden: Render hidden nodes too.

    Returns:
        The rendered text, one node per line.
    """
    lines: list[str] = []

    def walk(nodes: list[TreeNode], depth: int) -> None:
        for node in nodes:
            if node.state.hidden and not show_hidden:
                continue
            if node.is_leaf:
                marker = LEAF_MARKER
            elif node.state.collapsed:
                marker = COLLAPSED_MARKER
            else:
                marker = EXPANDED_MARKER
            suffix = SELECTED_MARKER if node.state.selected else ""
            lines.append(f"{' ' * indent * depth}{marker}{node_label(node, label_field)}{suffix}")
            if not node.is_leaf and not node.state.collapsed:
                walk(model.children_of(node), depth + 1)

    walk(list(model.iter_roots()), 0)
    return "\n".join(lines)


class NullRenderer:
    """Renderer that draws nothing."""

    def render_nodes(self, model: TreeModel) -> None:
        pass


class TextRenderer:
    """Renderer that writes the text view to a stream on every render."""

    def __init__(
        self,
        stream: TextIO | None = None,
        indent: int = 2,
        label_field: str = "text",
        show_hidden: bool = False,
    ) -> None:
        self.stream = stream
        self.indent = indent
        self.label_field = label_field
        self.show_hidden = show_hidden

    def render_nodes(self, model: TreeModel) -> None:
        stream = self.stream or sys.stdout
        stream.write(
            to_text(
                model,
                indent=self.indent,
                label_field=self.label_field,
                show_hidden=self.show_hidden,
            )
        )
        stream.write("\n")


__all__ = [
    "serialize_node",
    "serialize_model",
    "node_label",
    "to_text",
    "NullRenderer",
    "TextRenderer",
]
