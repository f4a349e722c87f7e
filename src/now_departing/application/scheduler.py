"""Scheduler running every timer and fetch completion on one asyncio event loop."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from now_departing.domain.contracts.scheduler import DeferredTaskProtocol, SchedulerProtocol

if TYPE_CHECKING:
    from collections.abc import Callable, Coroutine

logger = logging.getLogger(__name__)


class DeferredTask(DeferredTaskProtocol):
    """Cancellable one-shot action guarded by a liveness flag."""

    def __init__(self, action: Callable[[], None]) -> None:
        self._action = action
        self._alive = True
        self._handle: asyncio.TimerHandle | None = None

    @property
    def is_pending(self) -> bool:
        return self._alive

    def cancel(self) -> None:
        self._alive = False
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _run(self) -> None:
        if not self._alive:
            return
        self._alive = False
        self._handle = None
        self._action()


class LoopScheduler(SchedulerProtocol):
    """Schedules actions and coroutines on a single event loop.

    All state mutation in the engine happens in callbacks dispatched here, so
    no locking is needed even though fetches overlap across feeds.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        """Initialize the scheduler.

        Args:
            loop: Event loop to use. Defaults to the running loop at call time.
        """
        self._loop = loop
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop or asyncio.get_running_loop()

    def schedule(self, delay_seconds: float, action: Callable[[], None]) -> DeferredTask:
        task = DeferredTask(action)
        task._handle = self.loop.call_later(max(0.0, delay_seconds), task._run)
        return task

    def spawn(self, coro: Coroutine[Any, Any, None]) -> None:
        task = self.loop.create_task(coro)
        # Keep a strong reference until the task finishes
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def time(self) -> float:
        return self.loop.time()

    @property
    def pending_task_count(self) -> int:
        """Number of spawned coroutines that have not finished yet."""
        return len(self._tasks)

    async def shutdown(self) -> None:
        """Cancel and await every spawned coroutine still running."""
        tasks = list(self._tasks)
        if not tasks:
            return
        logger.info(f"Cancelling {len(tasks)} outstanding task(s)")
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
