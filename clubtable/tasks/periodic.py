"""Cancellable periodic task bound to the lifetime of a view"""

import asyncio
from typing import Any, Awaitable, Callable, Optional

import structlog

logger = structlog.get_logger()


class PeriodicTask:
    """Run ``callback`` now and then every ``interval`` seconds until stopped.

    A failing tick is logged and the loop keeps going. ``stop()`` cancels the
    sleep or an in-flight callback. Use as ``async with PeriodicTask(...)``
    to tie the loop to a block.
    """

    def __init__(
        self,
        callback: Callable[[], Awaitable[Any]],
        interval: float,
        name: str = "periodic",
    ):
        self.callback = callback
        self.interval = interval
        self.name = name
        self.runs = 0
        self.failures = 0
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name=self.name)
        logger.debug("Periodic task started", task=self.name, interval=self.interval)

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.debug("Periodic task stopped", task=self.name, runs=self.runs)

    async def _run(self) -> None:
        while True:
            try:
                await self.callback()
            except Exception as e:
                self.failures += 1
                logger.error("Periodic task tick failed", task=self.name, error=str(e))
            self.runs += 1
            await asyncio.sleep(self.interval)

    async def __aenter__(self):
        self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.stop()
