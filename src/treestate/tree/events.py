"""Lifecycle events and collaborator protocols.

This module provides:
- EventName: the fixed vocabulary of node lifecycle events
- EventRecord / EventLog: append-only history of emitted events
- EventEmitter: default notifier dispatching events to listeners
- Renderer / EventNotifier: protocols for external collaborators
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Callable, Protocol, runtime_checkable
from uuid import uuid4

if TYPE_CHECKING:
    from treestate.tree.model import TreeModel
    from treestate.tree.TreeNode import TreeNode

logger = logging.getLogger(__name__)


class EventName(Enum):
    """Node lifecycle events."""

    ADDED = "node.added"
    SELECTED = "node.selected"
    DESELECTED = "node.deselected"
    COLLAPSED = "node.collapsed"
    EXPANDED = "node.expanded"
    HIDDEN = "node.hidden"
    SHOWN = "node.shown"


@runtime_checkable
class Renderer(Protocol):
    """Consumes the current model and redraws it."""

    def render_nodes(self, model: TreeModel) -> None: ...


@runtime_checkable
class EventNotifier(Protocol):
    """Receives named lifecycle events. Purely advisory."""

    def emit(self, event: str, node: TreeNode) -> None: ...


Listener = Callable[[str, "TreeNode"], None]


@dataclass
class EventRecord:
    """Single emitted event.

    Attributes:
        event: Event name (e.g., "node.hidden").
        node_id: Id of the affected node.
        id: Unique record ID (UUID4 hex).
        timestamp: When the event was emitted.
    """

    event: str
    node_id: str
    id: str = field(default_factory=lambda: uuid4().hex)
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        """Human-readable representation."""
        return f"[{self.id[:8]}] {self.event}({self.node_id})"


class EventLog:
    """Append-only event history.

    Entries are stored in chronological order.

    Example:
        >>> log = EventLog()
        >>> log.append(EventRecord(event="node.hidden", node_id="a"))
        >>> [e.node_id for e in log.entries_for("node.hidden")]
        ['a']
    """

    def __init__(self) -> None:
        """Initialize an empty event log."""
        self._entries: list[EventRecord] = []

    def append(self, entry: EventRecord) -> None:
        """Append an event record to the log."""
        self._entries.append(entry)

    def iter_entries(self) -> Iterator[EventRecord]:
        """Iterate over all entries in chronological order."""
        yield from self._entries

    def entries_for(self, event: EventName | str) -> list[EventRecord]:
        """Return the entries of one event name, in order."""
        name = event.value if isinstance(event, EventName) else event
        return [e for e in self._entries if e.event == name]

    def __len__(self) -> int:
        """Return the number of entries in the log."""
        return len(self._entries)

    def last(self) -> EventRecord | None:
        """Return the most recent entry, or None if empty."""
        return self._entries[-1] if self._entries else None

    def clear(self) -> None:
        """Clear all entries from the log."""
        self._entries.clear()


class EventEmitter:
    """Dispatches node events to registered listeners.

    Listeners are called as ``listener(event, node)``. A listener that raises
    is logged and skipped; it never aborts the mutation that emitted the
    event. Listeners registered for ``"*"`` receive every event.

    Args:
        history: Keep an EventLog of emitted events.
    """

    WILDCARD = "*"

    def __init__(self, history: bool = True) -> None:
        self._listeners: dict[str, list[Listener]] = {}
        self.log: EventLog | None = EventLog() if history else None

    def on(self, event: EventName | str, listener: Listener) -> None:
        """Register ``listener`` for ``event``."""
        self._listeners.setdefault(_event_name(event), []).append(listener)

    def off(self, event: EventName | str, listener: Listener) -> None:
        """Unregister ``listener``; unknown listeners are ignored."""
        listeners = self._listeners.get(_event_name(event), [])
        if listener in listeners:
            listeners.remove(listener)

    def emit(self, event: EventName | str, node: TreeNode) -> None:
        name = _event_name(event)
        if self.log is not None:
            self.log.append(EventRecord(event=name, node_id=node.id))
        for listener in self._listeners.get(name, []) + self._listeners.get(self.WILDCARD, []):
            try:
                listener(name, node)
            except Exception as e:
                logger.warning(f"Listener for {name} failed on {node.id}: {e}")


def _event_name(event: EventName | str) -> str:
    return event.value if isinstance(event, EventName) else event


__all__ = [
    "EventName",
    "Renderer",
    "EventNotifier",
    "EventRecord",
    "EventLog",
    "EventEmitter",
]
