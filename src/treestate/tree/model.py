"""TreeModel - Arena container for the tree.

Nodes are stored in a flat index keyed by id; structure is kept as ordered
id lists (the model roots and each node's ``child_ids``). Consumers see the
model as a read-only sequence of root nodes.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Iterator, overload

from treestate.tree.TreeNode import TreeNode


@dataclass
class TreeModel(Sequence):
    """Ordered sequence of root nodes backed by an id index.

    Provides indexed access to all nodes and iterator-based traversal.
    """

    _roots: list[str] = field(default_factory=list)
    _index: dict[str, TreeNode] = field(default_factory=dict, repr=False)

    # Sequence of roots
    @overload
    def __getitem__(self, position: int) -> TreeNode: ...

    @overload
    def __getitem__(self, position: slice) -> list[TreeNode]: ...

    def __getitem__(self, position):
        if isinstance(position, slice):
            return [self._index[i] for i in self._roots[position]]
        return self._index[self._roots[position]]

    def __len__(self) -> int:
        return len(self._roots)

    def __iter__(self) -> Iterator[TreeNode]:
        return self.iter_roots()

    def __contains__(self, item: object) -> bool:
        if isinstance(item, TreeNode):
            return self._index.get(item.id) is item
        return item in self._index

    def iter_roots(self) -> Iterator[TreeNode]:
        """Iterate root nodes in order."""
        for node_id in self._roots:
            yield self._index[node_id]

    def root_count(self) -> int:
        """Return number of root nodes."""
        return len(self._roots)

    def node_count(self) -> int:
        """Return total number of nodes in the model."""
        return len(self._index)

    def find_by_id(self, node_id: str) -> TreeNode | None:
        """Find node by ID.

        Args:
            node_id: The node ID to find.

        Returns:
            The matching TreeNode, or None if not found.
        """
        return self._index.get(node_id)

    def all_nodes(self) -> Iterator[TreeNode]:
        """Iterate all nodes in depth-first pre-order."""
        for root in self.iter_roots():
            yield from self.walk(root)

    # Structure
    def children_of(self, node: TreeNode) -> list[TreeNode]:
        """Return the children of ``node`` in order (a new list)."""
        return [self._index[child_id] for child_id in node.iter_child_ids()]

    def parent_of(self, node: TreeNode) -> TreeNode | None:
        """Return the parent of ``node``, or None for roots."""
        if node.parent_id is None:
            return None
        return self._index.get(node.parent_id)

    def ancestors(self, node: TreeNode) -> Iterator[TreeNode]:
        """Iterate ancestors of ``node``, nearest first."""
        parent = self.parent_of(node)
        while parent is not None:
            yield parent
            parent = self.parent_of(parent)

    def depth(self, node: TreeNode) -> int:
        """Return depth from the roots (0 for roots)."""
        return sum(1 for _ in self.ancestors(node))

    def walk(self, node: TreeNode, order: str = "pre") -> Iterator[TreeNode]:
        """Iterate over ``node`` and its descendants.

        Args:
            node: Subtree root.
            order: Traversal order:
                - "pre": Parent first (depth-first, pre-order)
                - "post": Children first (depth-first, post-order)
                - "level": Breadth-first (level order)
        """
        if order == "pre":
            yield node
            for child in self.children_of(node):
                yield from self.walk(child, "pre")
        elif order == "post":
            for child in self.children_of(node):
                yield from self.walk(child, "post")
            yield node
        elif order == "level":
            queue: deque[TreeNode] = deque([node])
            while queue:
                current = queue.popleft()
                yield current
                queue.extend(self.children_of(current))
        else:
            raise ValueError(f"Unknown traversal order: {order}")

    def attach(self, node: TreeNode, parent_id: str | None = None) -> TreeNode:
        """Insert a node not yet in the model, as a root or as last child.

        Raises:
            ValueError: If the id is already taken.
            KeyError: If ``parent_id`` is not in the model.
        """
        if node.id in self._index:
            raise ValueError(f"Duplicate node id: {node.id}")
        if parent_id is None:
            self._roots.append(node.id)
        else:
            self._index[parent_id].ensure_children().append(node.id)
        node.parent_id = parent_id
        self._index[node.id] = node
        return node


__all__ = ["TreeModel"]
