"""Merge engine - insert normalized drafts into a model without duplicating ids.

Merge policy:
- A draft whose id is new is attached where it was offered, then each of
  its children is merged beneath it.
- A draft whose id already exists anywhere in the model is discarded. The
  existing node is unhidden, gains a children container if it had none,
  and the draft's children are merged into it. The existing node's fields
  and other state flags always win over the draft's.

Only genuinely new top-level nodes are reported as added.
"""

from __future__ import annotations

import logging

from treestate.tree.model import TreeModel
from treestate.tree.TreeNode import NodeDraft, TreeNode

logger = logging.getLogger(__name__)


def merge_node(model: TreeModel, draft: NodeDraft, parent_id: str | None = None) -> list[TreeNode]:
    """Merge a draft into the model roots, or under ``parent_id``.

    Args:
        model: Target model.
        draft: Normalized node and its pending children.
        parent_id: Owner of the target context, None for the model roots.

    Returns:
        ``[node]`` if the draft was attached as a new node, else ``[]``.
    """
    existing = model.find_by_id(draft.id)
    if existing is not None:
        logger.debug(f"Merging {draft.id} into existing node")
        existing.state.hidden = False
        existing.ensure_children()
        for child in draft.iter_children():
            merge_node(model, child, existing.id)
        return []

    node = draft.node
    node.child_ids = None
    model.attach(node, parent_id)
    if draft.children is not None:
        node.ensure_children()
        for child in draft.children:
            merge_node(model, child, node.id)
    return [node]


def merge_all(model: TreeModel, drafts: list[NodeDraft]) -> list[TreeNode]:
    """Merge several drafts into the model roots, returning the new ones."""
    added: list[TreeNode] = []
    for draft in drafts:
        added.extend(merge_node(model, draft))
    return added


__all__ = ["merge_node", "merge_all"]
