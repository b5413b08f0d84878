"""TreeState - Owner of the tree model and its UI state.

TreeState is the public entry point. It owns the model and a render gate,
and is the only place node state flags change. Every mutator is idempotent:
when the flag already has the target value nothing is emitted and nothing
is rendered. Otherwise the flag flips, one lifecycle event is emitted and a
render is requested through the gate.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Iterator, Mapping, Sequence
from concurrent.futures import Future
from contextlib import contextmanager
from functools import partial
from typing import Any

from treestate.config.loader import validate_config
from treestate.tree.events import EventEmitter, EventName, EventNotifier, Renderer
from treestate.tree.gate import RenderGate
from treestate.tree.identity import generate_id, normalize, normalize_many
from treestate.tree.loader import Deferred, Resolved, as_load_source
from treestate.tree.merge import merge_all, merge_node
from treestate.tree.model import TreeModel
from treestate.tree.query import find_node_by_id, flatten, get_selected, recurse
from treestate.tree.serialize import NullRenderer
from treestate.tree.TreeNode import NodeDraft, NodeState, StateFlag, TreeNode

logger = logging.getLogger(__name__)

NodeRef = TreeNode | str
RawNode = Mapping[str, Any]


class NodeNotFoundError(KeyError):
    """Raised when a mutator is given a node that is not part of the model."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


class TreeState:
    """Tree-state model manager.

    Args:
        renderer: Redraws the model after changes (nothing by default).
        notifier: Receives lifecycle events (an EventEmitter by default).
        defaults: Initial state for nodes without an explicit state
            (``selected`` is ignored; nodes always start unselected).
        id_prefix: Prefix for generated ids.
        id_factory: Custom id generator; overrides ``id_prefix``.
    """

    def __init__(
        self,
        renderer: Renderer | None = None,
        notifier: EventNotifier | None = None,
        defaults: NodeState | None = None,
        id_prefix: str = "",
        id_factory: Any = None,
    ) -> None:
        self._model = TreeModel()
        self.renderer: Renderer = renderer if renderer is not None else NullRenderer()
        self.events: EventNotifier = notifier if notifier is not None else EventEmitter()
        self.defaults = defaults or NodeState()
        self._id_factory = id_factory or partial(generate_id, id_prefix)
        self._gate = RenderGate(self._render)

    @classmethod
    def from_config(
        cls,
        config: Mapping[str, Any],
        renderer: Renderer | None = None,
        notifier: EventNotifier | None = None,
    ) -> TreeState:
        """Create a TreeState from a loaded configuration dict.

        Raises:
            ConfigError: If the ``[state]`` defaults are invalid.
        """
        validate_config(config)
        state_cfg = config.get("state", {})
        defaults = NodeState(
            collapsed=state_cfg.get("collapsed", True),
            hidden=state_cfg.get("hidden", False),
        )
        if notifier is None:
            notifier = EventEmitter(history=bool(config.get("events", {}).get("history", True)))
        return cls(
            renderer=renderer,
            notifier=notifier,
            defaults=defaults,
            id_prefix=str(config.get("ids", {}).get("prefix", "")),
        )

    @property
    def model(self) -> TreeModel:
        """The current model (replaced wholesale by load)."""
        return self._model

    # ─────────────────────────────────────────────────────────────────────
    # Rendering and events
    # ─────────────────────────────────────────────────────────────────────

    def _render(self) -> None:
        self.renderer.render_nodes(self._model)

    def _emit(self, event: EventName, node: TreeNode) -> None:
        self.events.emit(event.value, node)

    def batch(self) -> None:
        """Suppress renders until the matching ``end()``."""
        self._gate.batch()

    def end(self) -> None:
        """Close one batch level; the outermost close renders once."""
        self._gate.end()

    @contextmanager
    def batching(self) -> Iterator[TreeState]:
        """Run a block of changes with a single render at the end."""
        with self._gate.batching():
            yield self

    @property
    def is_batching(self) -> bool:
        return not self._gate.is_open

    # ─────────────────────────────────────────────────────────────────────
    # Adding nodes
    # ─────────────────────────────────────────────────────────────────────

    def add_node(self, raw: RawNode) -> TreeNode:
        """Normalize and merge one raw node into the model roots.

        A raw node whose id already exists is merged into the existing node
        (see ``treestate.tree.merge``). Only a genuinely new node emits
        ``node.added`` and triggers a render. New nodes start unselected.

        Returns:
            The canonical node: the new node, or the existing one it merged into.

        Raises:
            MalformedNodeError: If ``raw`` is malformed; the model is untouched.
        """
        draft = normalize(raw, defaults=self.defaults, id_factory=self._id_factory)
        return self._add_draft(draft)

    def add_nodes(self, raws: Sequence[RawNode]) -> Sequence[RawNode]:
        """Add several raw nodes with a single render.

        Every raw node is validated before any of them is merged.

        Returns:
            ``raws``, with generated ids written back into mutable nodes.

        Raises:
            MalformedNodeError: If any raw node is malformed; the model is untouched.
        """
        drafts = normalize_many(raws, defaults=self.defaults, id_factory=self._id_factory)
        with self._gate.batching():
            for draft in drafts:
                self._add_draft(draft)
        return raws

    def _add_draft(self, draft: NodeDraft) -> TreeNode:
        added = merge_node(self._model, draft)
        if added:
            node = added[0]
            logger.debug(f"Added node {node.id}")
            self._emit(EventName.ADDED, node)
            self._gate.request()
            return node
        return self._model.find_by_id(draft.id)

    # ─────────────────────────────────────────────────────────────────────
    # State mutators
    # ─────────────────────────────────────────────────────────────────────

    def _resolve(self, node: NodeRef) -> TreeNode:
        if isinstance(node, TreeNode):
            found = self._model.find_by_id(node.id)
            if found is node:
                return found
            raise NodeNotFoundError(f"Node {node.id} is not part of this model")
        found = self._model.find_by_id(node)
        if found is None:
            raise NodeNotFoundError(f"No node with id {node}")
        return found

    def _set_flag(self, node: NodeRef, flag: StateFlag, value: bool, event: EventName) -> TreeNode:
        target = self._resolve(node)
        if target.state.get(flag) != value:
            target.state.set(flag, value)
            self._emit(event, target)
            self._gate.request()
        return target

    def expand_node(self, node: NodeRef) -> TreeNode:
        return self._set_flag(node, StateFlag.COLLAPSED, False, EventName.EXPANDED)

    def collapse_node(self, node: NodeRef) -> TreeNode:
        return self._set_flag(node, StateFlag.COLLAPSED, True, EventName.COLLAPSED)

    def show_node(self, node: NodeRef) -> TreeNode:
        return self._set_flag(node, StateFlag.HIDDEN, False, EventName.SHOWN)

    def hide_node(self, node: NodeRef) -> TreeNode:
        return self._set_flag(node, StateFlag.HIDDEN, True, EventName.HIDDEN)

    def hide_nodes(self, nodes: Sequence[NodeRef]) -> Sequence[NodeRef]:
        """Hide several nodes with a single render."""
        with self._gate.batching():
            for node in nodes:
                self.hide_node(node)
        return nodes

    def deselect_node(self, node: NodeRef) -> TreeNode:
        return self._set_flag(node, StateFlag.SELECTED, False, EventName.DESELECTED)

    def deselect_all(self) -> None:
        """Deselect every node, emitting per node and rendering once."""
        with self._gate.batching():
            recurse(
                list(self._model.iter_roots()),
                lambda node, index: self.deselect_node(node),
                self._model.children_of,
            )

    def select_node(self, node: NodeRef) -> TreeNode:
        """Make ``node`` the only selected node.

        Deselects everything else first. The whole change renders once.
        """
        target = self._resolve(node)
        if not target.state.selected:
            with self._gate.batching():
                self.deselect_all()
                target.state.selected = True
                self._emit(EventName.SELECTED, target)
        return target

    # ─────────────────────────────────────────────────────────────────────
    # Queries
    # ─────────────────────────────────────────────────────────────────────

    def flatten(
        self,
        nodes: Sequence[TreeNode] | None = None,
        flag: StateFlag | str = StateFlag.SELECTED,
    ) -> list[TreeNode]:
        """Nodes whose ``flag`` is set; see ``treestate.tree.query.flatten``."""
        return flatten(self._model, nodes, flag)

    def get_selected(
        self, nodes: Sequence[TreeNode] | None = None, hierarchy: bool = False
    ) -> list[Any]:
        """Selected subset; see ``treestate.tree.query.get_selected``."""
        return get_selected(self._model, nodes, hierarchy)

    def get_node_by_id(
        self, node_id: str, nodes: Sequence[TreeNode] | None = None
    ) -> TreeNode | None:
        return find_node_by_id(self._model, node_id, nodes)

    # ─────────────────────────────────────────────────────────────────────
    # Loading
    # ─────────────────────────────────────────────────────────────────────

    def _build_model(self, data: Any) -> TreeModel:
        drafts = normalize_many(data, defaults=self.defaults, id_factory=self._id_factory)
        model = TreeModel()
        merge_all(model, drafts)
        return model

    def _replace_model(self, model: TreeModel) -> None:
        self._model = model
        logger.debug(f"Loaded {model.node_count()} nodes ({model.root_count()} roots)")

    def _finish_load(self, data: Any, completion: Future) -> None:
        try:
            model = self._build_model(data)
        except Exception as e:
            logger.debug(f"Load rejected: {e}")
            completion.set_exception(e)
            return
        self._replace_model(model)
        completion.set_result(model)
        self._gate.request()

    def load(self, source: Any) -> Future:
        """Replace the model with new data.

        Args:
            source: A list of raw nodes, a ``Resolved``/``Deferred`` source, or
                a future resolving to a list of raw nodes.

        Returns:
            A ``concurrent.futures.Future`` resolving to the new model, or
            rejecting with the source's error or a ``MalformedNodeError``.
            On rejection the previous model is left intact.

        Raises:
            TypeError: If ``source`` is not a supported load source.
        """
        tagged = as_load_source(source)
        completion: Future = Future()
        if isinstance(tagged, Resolved):
            self._finish_load(tagged.nodes, completion)
        else:
            tagged.when_settled(
                lambda data: self._finish_load(data, completion),
                completion.set_exception,
            )
        return completion

    async def load_async(self, source: Any) -> TreeModel:
        """Awaitable variant of ``load``.

        Accepts anything ``load`` accepts plus coroutines and other awaitables.

        Raises:
            MalformedNodeError: If the data is malformed (model untouched).
        """
        if isinstance(source, Resolved):
            data = source.nodes
        elif isinstance(source, Deferred):
            data = await _await_handle(source.handle)
        elif isinstance(source, (list, tuple)):
            data = source
        elif isinstance(source, Future):
            data = await asyncio.wrap_future(source)
        elif inspect.isawaitable(source):
            data = await source
        else:
            raise TypeError(
                f"Cannot load from {type(source).__name__}: expected a list of nodes or an awaitable"
            )
        model = self._build_model(data)
        self._replace_model(model)
        self._gate.request()
        return model


async def _await_handle(handle: Any) -> Any:
    if isinstance(handle, Future):
        return await asyncio.wrap_future(handle)
    return await handle


__all__ = ["TreeState", "NodeNotFoundError"]
