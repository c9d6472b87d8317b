"""Match celebration window.

After a match the presentation layer shows a celebration for a fixed time
before offering the continuation choices.  The timer and an explicit user
choice (keep going / undo) race to resolve the same pending transition; a
single ``resolved`` flag decides the winner so a late timer is a no-op even
when both fire almost together.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Callable

logger = logging.getLogger(__name__)


class MatchCelebration:
    def __init__(self, on_expire: Callable[[], None], delay: float = 3.0) -> None:
        self._on_expire = on_expire
        self.delay = delay
        self._lock = threading.Lock()
        self._resolved = True
        self._handle: asyncio.TimerHandle | None = None

    @property
    def pending(self) -> bool:
        return not self._resolved

    def arm(self) -> None:
        """Open a new window, scheduling expiry when an event loop is running."""

        try:
            loop: asyncio.AbstractEventLoop | None = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running loop; celebration expires on explicit call")
            loop = None
        with self._lock:
            self._cancel_timer()
            self._resolved = False
            if loop is not None:
                self._handle = loop.call_later(self.delay, self.expire)

    def expire(self) -> bool:
        """Timer side of the race. Returns False if the window was already resolved."""

        if not self._claim():
            return False
        self._on_expire()
        return True

    def resolve(self) -> bool:
        """User side of the race. Returns False if the timer already won."""

        return self._claim()

    def _claim(self) -> bool:
        with self._lock:
            if self._resolved:
                return False
            self._resolved = True
            self._cancel_timer()
            return True

    def _cancel_timer(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
