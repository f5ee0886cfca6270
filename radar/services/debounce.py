"""
Asyncio debouncing.

Coalesces bursts of calls into one: a call runs only after no newer call
has been scheduled for ``delay`` seconds.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

logger = logging.getLogger(__name__)


class Debouncer:
    """Run the most recently scheduled callback after a quiet period."""

    def __init__(self, delay: float) -> None:
        self.delay = delay
        self._pending: asyncio.Task[None] | None = None
        self._running: set[asyncio.Task[None]] = set()

    @property
    def pending(self) -> bool:
        """True while a scheduled call is still waiting out the delay."""
        return self._pending is not None and not self._pending.done()

    def call(self, fn: Callable[[], Awaitable[Any]]) -> asyncio.Task[None]:
        """
        Schedule ``fn`` to run after the delay, replacing any waiting call.

        Calls that have already started are not cancelled.
        """
        self.cancel()
        task = asyncio.create_task(self._run(fn))
        self._pending = task
        self._running.add(task)
        task.add_done_callback(self._running.discard)
        return task

    def cancel(self) -> None:
        """Drop the waiting call, if any."""
        task, self._pending = self._pending, None
        if task is not None and not task.done():
            task.cancel()

    async def wait(self) -> None:
        """Wait until the waiting call (if any) and all started calls finish."""
        while True:
            tasks = [t for t in self._running if not t.done()]
            if not tasks:
                return
            await asyncio.gather(*tasks, return_exceptions=True)

    async def _run(self, fn: Callable[[], Awaitable[Any]]) -> None:
        await asyncio.sleep(self.delay)
        # Past the quiet period: detach so a newer call cannot cancel this one
        if self._pending is asyncio.current_task():
            self._pending = None
        try:
            await fn()
        except Exception as e:
            logger.error("Debounced call failed: %s", e, exc_info=True)
