"""Cancellable single-slot delay for debounced actions."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)


class DebounceTimer:
    """Runs at most one pending action after a quiet period.

    Scheduling always supersedes the pending action instead of queueing
    alongside it. Must be used from a running asyncio loop.
    """

    def __init__(self) -> None:
        self._handle: asyncio.TimerHandle | None = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def schedule(self, action: Callable[[], None], delay: float) -> None:
        """Cancel any pending action and arm *action* after *delay* seconds."""
        self.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(max(0.0, delay), self._fire, action)

    def cancel(self) -> None:
        """Discard the pending action without running it."""
        # Atomic swap: clear the slot before cancelling the handle
        handle = self._handle
        self._handle = None
        if handle is not None:
            handle.cancel()

    def _fire(self, action: Callable[[], None]) -> None:
        self._handle = None
        try:
            action()
        except Exception:
            logger.exception("Debounced action failed")


__all__ = ["DebounceTimer"]
