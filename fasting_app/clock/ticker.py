"""
Periodic tick source.

A tick only tells listeners to re-evaluate; it carries a counter, never a
timestamp. Anything that needs the current time samples the wall clock itself.
"""

import asyncio
from typing import Callable, Optional

from ..logging.config import get_scheduler_logger

TickListener = Callable[[int], None]

logger = get_scheduler_logger(__name__)


class Ticker:
    """
    Strictly periodic cooperative ticker on the asyncio event loop.

    Deadlines are anchored to the loop's monotonic clock at ``start + n *
    interval`` so slow listeners do not accumulate drift. There is no pause
    state; the ticker runs until ``stop()``.
    """

    def __init__(self, interval_seconds: float = 1.0):
        if interval_seconds <= 0:
            raise ValueError(f"Tick interval must be positive, got {interval_seconds}")
        self.interval_seconds = interval_seconds
        self.tick_count = 0
        self._listeners: list[TickListener] = []
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def subscribe(self, listener: TickListener) -> Callable[[], None]:
        """Register a listener; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def start(self) -> None:
        """Start ticking on the running event loop."""
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())
        logger.debug("Ticker started", interval_seconds=self.interval_seconds)

    async def stop(self) -> None:
        """Cancel the tick task and wait for it to finish."""
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.debug("Ticker stopped", ticks=self.tick_count)

    async def _run(self) -> None:
        loop = asyncio.get_running_loop()
        started_at = loop.time()
        tick = 0

        while True:
            tick += 1
            deadline = started_at + tick * self.interval_seconds
            await asyncio.sleep(max(0.0, deadline - loop.time()))
            self.tick_count = tick
            self._dispatch(tick)

    def _dispatch(self, tick: int) -> None:
        for listener in list(self._listeners):
            try:
                listener(tick)
            except Exception as e:
                logger.error("Tick listener failed", tick=tick, error=str(e), exc_info=True)
