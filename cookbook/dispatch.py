"""
UI-update queue for handing background results back to the UI thread.

Background work (the place search) must never touch observable state directly.
Instead it posts a closure with MainQueue.post(); the UI thread runs pending
closures with MainQueue.drain() before rendering.
"""

import logging
import queue
from typing import Any, Callable

logger = logging.getLogger(__name__)


class MainQueue:
    """Thread-safe FIFO of callables executed on whichever thread drains it."""

    def __init__(self) -> None:
        self._pending: "queue.SimpleQueue[Callable[[], Any]]" = queue.SimpleQueue()

    def post(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
        """Schedule `fn(*args, **kwargs)` to run on the next drain()."""
        self._pending.put(lambda: fn(*args, **kwargs))

    def drain(self) -> int:
        """
        Run every closure queued so far, in posting order.

        Closures posted while draining run in the same pass.

        Returns:
            Number of closures executed
        """
        count = 0
        while True:
            try:
                task = self._pending.get_nowait()
            except queue.Empty:
                break
            task()
            count += 1
        if count:
            logger.debug("Drained %d UI update(s)", count)
        return count

    def empty(self) -> bool:
        return self._pending.empty()
