"""Fixed-interval asyncio clock driving navigation playback."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional, Protocol

logger = logging.getLogger(__name__)


class Clock(Protocol):
    running: bool

    def start(self, callback: Callable[[], None]) -> None: ...

    def stop(self) -> None: ...


class IntervalClock:
    """Calls ``callback`` every ``interval_seconds`` from a single asyncio task.

    Must be started from inside a running event loop. Ticks never overlap
    because the callback is synchronous and runs on the loop thread.
    """

    def __init__(self, interval_seconds: float = 1.0) -> None:
        if interval_seconds <= 0:
            raise ValueError("Clock interval must be positive.")
        self.interval_seconds = interval_seconds
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self, callback: Callable[[], None]) -> None:
        if self.running:
            raise RuntimeError("Clock is already running.")
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._run(callback))

    def stop(self) -> None:
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()

    async def _run(self, callback: Callable[[], None]) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            try:
                callback()
            except Exception:
                logger.exception("Clock callback failed; stopping clock")
                return
