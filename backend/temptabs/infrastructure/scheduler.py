"""Periodic Trigger: fires an async callback on start and then on a fixed interval.

Invariants:
    - At most one loop task per trigger; start() on a running trigger is a no-op
    - A failing tick is logged and never stops the loop
    - stop() cancels and awaits the task, so shutdown leaves nothing running

Design Decisions:
    - asyncio task owned by the FastAPI lifespan instead of an external scheduler:
      single-process service, the tick is cheap and non-destructive
"""

import asyncio
import contextlib
import logging
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)


class PeriodicTrigger:
    """Timer driving periodic refresh."""

    def __init__(
        self,
        interval_seconds: float,
        callback: Callable[[], Awaitable[object]],
        *,
        fire_on_start: bool = True,
        name: str = "periodic-refresh",
    ):
        self.interval_seconds = interval_seconds
        self.callback = callback
        self.fire_on_start = fire_on_start
        self.name = name
        self.ticks = 0
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(
            self._run(), name=self.name,
        )

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None

    async def fire(self) -> None:
        """Run one tick now."""
        self.ticks += 1
        try:
            await self.callback()
        except Exception:
            logger.error(
                f"{self.name} tick failed",
                exc_info=True, extra={"operation": self.name},
            )

    async def _run(self) -> None:
        if self.fire_on_start:
            await self.fire()
        while True:
            await asyncio.sleep(self.interval_seconds)
            await self.fire()
