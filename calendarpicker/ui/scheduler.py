"""Next-tick scheduling used for the deferred focus checks of the interaction controller.

A callback scheduled with ``call_soon`` runs after the handling of the current
input event has finished and before the next input event is dispatched.
"""

import asyncio
import logging
from collections import deque
from typing import Callable, Optional, Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class Scheduler(Protocol):
    """Anything that can run a callback on the next tick."""

    def call_soon(self, callback: Callable[[], None]) -> None: ...


class DeferredQueue:
    """Explicit FIFO of deferred callbacks, drained by the event source.

    The owner of the input loop calls ``run_pending`` after dispatching each
    event. Callbacks scheduled while draining run on the following drain.
    """

    def __init__(self) -> None:
        self._queue: deque[Callable[[], None]] = deque()

    def call_soon(self, callback: Callable[[], None]) -> None:
        self._queue.append(callback)

    def run_pending(self) -> int:
        """Run every callback queued before this call.

        Returns:
            Number of callbacks run
        """
        batch = list(self._queue)
        self._queue.clear()

        for callback in batch:
            try:
                callback()
            except Exception:
                logger.exception("Error in deferred callback")

        return len(batch)

    @property
    def pending(self) -> int:
        return len(self._queue)


class AsyncioScheduler:
    """Schedules deferred callbacks on the asyncio event loop."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    def call_soon(self, callback: Callable[[], None]) -> None:
        loop = self._loop or asyncio.get_running_loop()
        loop.call_soon(callback)
