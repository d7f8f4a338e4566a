"""Delayed triggers and their per-owner bookkeeping.

Architecture:
- Scheduler: the clock plus a ``call_later`` facility
    - AsyncioScheduler: wall clock, timers on the running event loop
    - VirtualScheduler: simulated clock driven by a priority queue
- TimerStore: one id -> handle table per owner (each action, the event manager)

A TimerStore never holds two live handles for the same id: arming an id
cancels whatever was armed under it before.
"""

import asyncio
import heapq
import inspect
import itertools
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Optional, Protocol, Set, Tuple

logger = logging.getLogger(__name__)

TimerCallback = Callable[[], Any]


class TimerHandle(Protocol):
    """Anything that can be cancelled before it fires."""

    def cancel(self) -> None: ...


class Scheduler(ABC):
    """Source of the current time and of delayed callbacks."""

    @abstractmethod
    def now(self) -> datetime:
        """Current wall-clock time."""

    @abstractmethod
    def call_later(self, delay: float, callback: TimerCallback) -> TimerHandle:
        """Run ``callback`` after ``delay`` seconds.

        The callback may return an awaitable; the scheduler awaits it.
        """


class AsyncioScheduler(Scheduler):
    """Scheduler backed by the running asyncio event loop."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop
        self._tasks: Set[asyncio.Task] = set()

    def now(self) -> datetime:
        return datetime.now()

    def call_later(self, delay: float, callback: TimerCallback) -> TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(max(delay, 0.0), self._run, callback)

    def _run(self, callback: TimerCallback) -> None:
        try:
            result = callback()
        except Exception:
            logger.exception("Timer callback failed")
            return

        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._tasks.add(task)
            task.add_done_callback(self._task_done)

    def _task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(f"Timer task failed: {error!r}")

    @property
    def running_tasks(self) -> int:
        return len(self._tasks)

    async def drain(self) -> None:
        """Wait for callbacks that are currently executing."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)


class VirtualTimerHandle:
    """Handle returned by VirtualScheduler."""

    def __init__(self, when: datetime):
        self.when = when
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True

    def __repr__(self) -> str:
        return f"VirtualTimerHandle(when={self.when!r}, cancelled={self.cancelled})"


class VirtualScheduler(Scheduler):
    """Simulated clock with a priority queue of timers.

    Time only moves when ``advance`` or ``run_until`` is awaited. Due timers
    fire in expiry order (ties in arming order) and timers armed by a firing
    callback are honored within the same advance when they fall inside it.
    """

    def __init__(self, start: Optional[datetime] = None):
        self._now = start or datetime.now().replace(microsecond=0)
        self._queue: List[Tuple[datetime, int, VirtualTimerHandle, TimerCallback]] = []
        self._counter = itertools.count()

    def now(self) -> datetime:
        return self._now

    def call_later(self, delay: float, callback: TimerCallback) -> VirtualTimerHandle:
        handle = VirtualTimerHandle(self._now + timedelta(seconds=max(delay, 0.0)))
        heapq.heappush(self._queue, (handle.when, next(self._counter), handle, callback))
        return handle

    @property
    def pending(self) -> int:
        """Number of armed, not yet cancelled timers."""
        return sum(1 for _, _, handle, _ in self._queue if not handle.cancelled)

    def next_deadline(self) -> Optional[datetime]:
        for when, _, handle, _ in sorted(self._queue):
            if not handle.cancelled:
                return when
        return None

    async def advance(self, seconds: float) -> None:
        await self.run_until(self._now + timedelta(seconds=seconds))

    async def run_until(self, moment: datetime) -> None:
        while self._queue and self._queue[0][0] <= moment:
            when, _, handle, callback = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self._now = max(self._now, when)
            handle.fired = True
            try:
                result = callback()
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception("Timer callback failed")
        self._now = max(self._now, moment)


class TimerStore:
    """Outstanding delayed triggers of one owner, keyed by id."""

    def __init__(self, scheduler: Scheduler, owner: str = ""):
        self._scheduler = scheduler
        self._owner = owner
        self._handles: Dict[str, TimerHandle] = {}

    def arm(self, key: str, delay: float, callback: TimerCallback) -> TimerHandle:
        """Schedule ``callback`` under ``key``, replacing any previous trigger."""
        if self.cancel(key):
            logger.debug(f"[{self._owner}] Replaced pending timer for {key}")

        def fire() -> Any:
            # Forget the handle before running so the callback may re-arm the key.
            if self._handles.get(key) is handle:
                del self._handles[key]
            return callback()

        handle = self._scheduler.call_later(delay, fire)
        self._handles[key] = handle
        return handle

    def cancel(self, key: str) -> bool:
        """Cancel the trigger for ``key``. Returns False when nothing was armed."""
        handle = self._handles.pop(key, None)
        if handle is None:
            return False
        handle.cancel()
        return True

    def cancel_all(self) -> int:
        count = len(self._handles)
        for handle in self._handles.values():
            handle.cancel()
        self._handles.clear()
        return count

    def has(self, key: str) -> bool:
        return key in self._handles

    def get(self, key: str) -> Optional[TimerHandle]:
        return self._handles.get(key)

    def keys(self) -> List[str]:
        return list(self._handles)

    def __contains__(self, key: object) -> bool:
        return key in self._handles

    def __len__(self) -> int:
        return len(self._handles)
