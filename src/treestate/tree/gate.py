"""Render gate - coalesces render requests during bulk operations."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Callable

logger = logging.getLogger(__name__)


class RenderGate:
    """Counting batch gate in front of a render callback.

    ``batch()`` opens a (possibly nested) batch; ``request()`` renders only
    while no batch is open; ``end()`` closes one level and, when the last
    level closes, renders exactly once.

    Args:
        render: Callback performing the actual render.
    """

    def __init__(self, render: Callable[[], None]) -> None:
        self._render = render
        self._depth = 0

    @property
    def depth(self) -> int:
        return self._depth

    @property
    def is_open(self) -> bool:
        """True when render requests pass through."""
        return self._depth == 0

    def batch(self) -> None:
        self._depth += 1
        logger.debug(f"Render batch opened (depth {self._depth})")

    def end(self) -> None:
        if self._depth == 0:
            logger.warning("end() called without a matching batch()")
        else:
            self._depth -= 1
            logger.debug(f"Render batch closed (depth {self._depth})")
        if self._depth == 0:
            self._render()

    def request(self) -> None:
        """Render now unless a batch is open."""
        if self._depth == 0:
            self._render()

    @contextmanager
    def batching(self) -> Iterator[RenderGate]:
        """Context manager wrapping ``batch()`` / ``end()``."""
        self.batch()
        try:
            yield self
        finally:
            self.end()


__all__ = ["RenderGate"]
