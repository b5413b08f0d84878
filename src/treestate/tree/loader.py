"""Load sources - tagged input for TreeState.load().

A load source is either:
- Resolved: raw node data that is already available
- Deferred: a future-like handle that will resolve to raw node data

``concurrent.futures.Future`` and ``asyncio.Future``/``Task`` both qualify
as deferred handles: they settle through ``add_done_callback`` and report
success with ``result()`` and failure with ``exception()``.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from concurrent.futures import CancelledError
from dataclasses import dataclass
from typing import Any, Callable, Protocol, Union, runtime_checkable


@runtime_checkable
class DeferredHandle(Protocol):
    """Anything that settles later and reports through done callbacks."""

    def add_done_callback(self, fn: Callable[[Any], object], /) -> None: ...

    def cancelled(self) -> bool: ...

    def exception(self) -> BaseException | None: ...

    def result(self) -> Any: ...


@dataclass(frozen=True)
class Resolved:
    """Raw nodes available now."""

    nodes: Sequence[Mapping[str, Any]]


@dataclass(frozen=True)
class Deferred:
    """Raw nodes delivered later by ``handle``."""

    handle: DeferredHandle

    def when_settled(
        self,
        on_success: Callable[[Any], None],
        on_failure: Callable[[BaseException], None],
    ) -> None:
        """Route the handle's outcome to one of the two callbacks."""

        def settled(handle: DeferredHandle) -> None:
            if handle.cancelled():
                on_failure(CancelledError("load source was cancelled"))
                return
            error = handle.exception()
            if error is not None:
                on_failure(error)
            else:
                on_success(handle.result())

        self.handle.add_done_callback(settled)


LoadSource = Union[Resolved, Deferred]


def as_load_source(source: Any) -> LoadSource:
    """Coerce ``source`` into a tagged load source.

    Lists and tuples become Resolved, future-like objects become Deferred,
    tagged sources pass through.

    Raises:
        TypeError: For any other input.
    """
    if isinstance(source, (Resolved, Deferred)):
        return source
    if isinstance(source, (list, tuple)):
        return Resolved(source)
    if isinstance(source, DeferredHandle):
        return Deferred(source)
    raise TypeError(
        f"Cannot load from {type(source).__name__}: expected a list of nodes or a future"
    )


__all__ = [
    "DeferredHandle",
    "Resolved",
    "Deferred",
    "LoadSource",
    "as_load_source",
]
