"""
i2client/scheduler.py

Asyncio-based delayed task scheduler.

Each scheduled callback runs in its own task that sleeps on the injected
clock and then awaits the callback. Swapping SystemClock for ManualClock
makes every timer deterministic in tests.
"""

import asyncio
import itertools
import logging
import math
from datetime import datetime, timedelta, timezone
from typing import Awaitable, Callable, Dict, List, Optional, Tuple


class SystemClock:
    """Wall clock backed by datetime.now() and asyncio.sleep()."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)


class ManualClock:
    """
    Deterministic clock used for tests.

    Time advances only when advance() is awaited. Sleepers whose deadline
    falls inside the advanced window are released in deadline order, and
    the clock reads each sleeper's deadline while it runs.

    Args:
        start: Initial time (timezone-aware; defaults to 2025-01-01 UTC).
    """

    def __init__(self, start: Optional[datetime] = None):
        self._now = start or datetime(2025, 1, 1, tzinfo=timezone.utc)
        self._sleepers: List[Tuple[datetime, int, asyncio.Future]] = []
        self._seq = itertools.count()

    def now(self) -> datetime:
        return self._now

    async def sleep(self, seconds: float) -> None:
        if seconds <= 0:
            await asyncio.sleep(0)
            return
        future = asyncio.get_running_loop().create_future()
        deadline = self._now + timedelta(seconds=seconds)
        self._sleepers.append((deadline, next(self._seq), future))
        await future

    @property
    def sleeper_count(self) -> int:
        """Number of coroutines currently waiting on this clock."""
        return sum(1 for _, _, future in self._sleepers if not future.done())

    async def advance(self, seconds: float) -> datetime:
        """
        Move time forward, running everything that comes due.

        Args:
            seconds: Amount to advance (must be non-negative)

        Returns:
            The new current time
        """
        if seconds < 0:
            raise ValueError("seconds must be non-negative")

        target = self._now + timedelta(seconds=seconds)
        await self._settle()

        while True:
            due = [s for s in self._sleepers if s[0] <= target and not s[2].done()]
            if not due:
                break
            deadline, seq, future = min(due, key=lambda s: (s[0], s[1]))
            self._sleepers.remove((deadline, seq, future))
            self._now = deadline
            future.set_result(None)
            await self._settle()

        self._sleepers = [s for s in self._sleepers if not s[2].done()]
        self._now = target
        await self._settle()
        return self._now

    @staticmethod
    async def _settle(rounds: int = 20) -> None:
        # Let woken tasks run until they block again
        for _ in range(rounds):
            await asyncio.sleep(0)


class ScheduledTask:
    """
    Handle for a pending delayed callback.

    Attributes:
        name: Label used in log messages
        delay: Effective delay in seconds (after clamping)
        due_at: Clock time the callback is due
    """

    def __init__(self, name: str, delay: float, due_at: datetime):
        self.name = name
        self.delay = delay
        self.due_at = due_at
        self._task: Optional[asyncio.Task] = None

    @property
    def done(self) -> bool:
        return self._task is not None and self._task.done()

    @property
    def cancelled(self) -> bool:
        return self._task is not None and self._task.cancelled()

    def __repr__(self) -> str:
        return f"<ScheduledTask {self.name} delay={self.delay}s due={self.due_at}>"


class DelayedTaskScheduler:
    """
    Runs async callbacks after a delay.

    Delays follow timer semantics: negative delays run on the next loop
    iteration. Non-finite delays are logged and also run immediately.
    A failing callback is logged and never affects other callbacks.

    Args:
        clock: Clock providing now() and sleep(); defaults to SystemClock.
    """

    def __init__(self, clock=None):
        self.clock = clock or SystemClock()
        self._pending: Dict[int, ScheduledTask] = {}
        self._ids = itertools.count(1)
        self.logger = logging.getLogger(f"{__name__}.scheduler")

    def call_later(
        self,
        delay: float,
        callback: Callable[..., Awaitable[None]],
        *args,
        name: Optional[str] = None
    ) -> ScheduledTask:
        """
        Schedule an async callback.

        Must be called from a running event loop.

        Args:
            delay: Seconds to wait before calling.
            callback: Async function to call.
            *args: Positional arguments for the callback.
            name: Label for logging.

        Returns:
            ScheduledTask handle usable with cancel().
        """
        task_id = next(self._ids)
        name = name or getattr(callback, '__name__', 'task')

        if not isinstance(delay, (int, float)) or not math.isfinite(delay):
            self.logger.warning(f"Invalid delay {delay!r} for {name}, running immediately")
            delay = 0.0
        elif delay < 0:
            delay = 0.0

        handle = ScheduledTask(name, delay, self.clock.now() + timedelta(seconds=delay))
        handle._task = asyncio.create_task(self._run(handle, callback, args))
        handle._task.add_done_callback(lambda _: self._pending.pop(task_id, None))
        self._pending[task_id] = handle
        self.logger.debug(f"Scheduled {name} in {delay}s")
        return handle

    def cancel(self, handle: ScheduledTask) -> bool:
        """
        Cancel a pending callback.

        Returns:
            True if the callback was still pending, False otherwise.
        """
        if handle._task is None or handle._task.done():
            return False
        handle._task.cancel()
        self.logger.debug(f"Cancelled {handle.name}")
        return True

    @property
    def pending_count(self) -> int:
        """Number of callbacks that have not finished yet."""
        return len(self._pending)

    def get_pending(self) -> List[ScheduledTask]:
        return list(self._pending.values())

    async def wait_idle(self) -> None:
        """Wait until every scheduled callback, including ones scheduled meanwhile, has finished."""
        while self._pending:
            tasks = [h._task for h in self._pending.values()]
            await asyncio.gather(*tasks, return_exceptions=True)

    async def shutdown(self) -> None:
        """Cancel all pending callbacks and wait for them to unwind."""
        handles = list(self._pending.values())
        for handle in handles:
            handle._task.cancel()
        if handles:
            await asyncio.gather(*(h._task for h in handles), return_exceptions=True)
            self.logger.info(f"Scheduler shut down ({len(handles)} pending tasks cancelled)")

    async def _run(self, handle, callback, args) -> None:
        try:
            await self.clock.sleep(handle.delay)
            await callback(*args)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self.logger.exception(f"Error in scheduled task {handle.name}: {e}")
