"""
Cancellable recurring task handle.

Each tick awaits its callback before sleeping, so ticks never overlap.
"""

import asyncio
from typing import Awaitable, Callable, Optional

import structlog

logger = structlog.get_logger(__name__)


class RecurringTask:
    """
    Runs an async callback on a fixed interval until cancelled.

    Owners keep at most one handle per concern and cancel it before
    starting a replacement.
    """

    def __init__(
        self,
        callback: Callable[[], Awaitable[None]],
        interval: float,
        name: str = "recurring-task",
        initial_delay: Optional[float] = None,
    ) -> None:
        self.callback = callback
        self.interval = interval
        self.name = name
        self.initial_delay = interval if initial_delay is None else initial_delay
        self._task: Optional[asyncio.Task] = None
        self._cancelled = False

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done() and not self._cancelled

    def start(self) -> "RecurringTask":
        if self._task is not None:
            raise RuntimeError(f"{self.name} already started")
        self._task = asyncio.get_running_loop().create_task(self._run(), name=self.name)
        return self

    async def _run(self) -> None:
        if self.initial_delay > 0:
            await asyncio.sleep(self.initial_delay)
        while not self._cancelled:
            try:
                await self.callback()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error(
                    "Recurring task tick failed",
                    task=self.name,
                    error=str(e),
                    exc_info=True,
                )
            if self._cancelled:
                break
            await asyncio.sleep(self.interval)

    def cancel(self) -> None:
        """Stop future ticks. Safe to call repeatedly and from the callback itself."""
        self._cancelled = True
        task = self._task
        if task is None or task.done():
            return
        try:
            current = asyncio.current_task()
        except RuntimeError:
            current = None
        if task is not current:
            task.cancel()

    async def wait_closed(self) -> None:
        """Wait for the underlying task to finish after cancel()."""
        if self._task is None or self._task is asyncio.current_task():
            return
        await asyncio.wait([self._task])
