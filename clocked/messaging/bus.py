"""Notification bus between the scheduling core and its observers.

Observers subscribe to one notification kind, or to all of them with
``kind=None``. Delivery is fire-and-forget: a failing subscriber is logged
and never affects the emitter or the other subscribers. Coroutine
subscribers are scheduled on the running loop.
"""

import asyncio
import logging
import traceback
from collections import deque
from typing import Any, Callable, Deque, Dict, List, Optional, Set

from clocked.messaging.messages import AnyNotification, NotificationKind

logger = logging.getLogger(__name__)

Subscriber = Callable[[AnyNotification], Any]


class NotificationBus:
    def __init__(self, history: int = 100):
        self._subscribers: Dict[Optional[NotificationKind], List[Subscriber]] = {}
        self._history: Deque[AnyNotification] = deque(maxlen=history or None)
        self._keep_history = history > 0
        self._tasks: Set[asyncio.Task] = set()

    def subscribe(self, kind: Optional[NotificationKind], func: Subscriber) -> None:
        if not callable(func):
            raise TypeError(f"Subscriber must be callable, got {type(func)}")

        subscribers = self._subscribers.setdefault(kind, [])
        # Prevent duplicate registration of the same subscriber
        if func in subscribers:
            logger.debug(f"Subscriber {func!r} already registered for {kind}, skipping")
            return
        subscribers.append(func)
        logger.debug(f"Registered subscriber {func!r} for {kind}")

    def unsubscribe(self, kind: Optional[NotificationKind], func: Subscriber) -> bool:
        try:
            self._subscribers.get(kind, []).remove(func)
            return True
        except ValueError:
            return False

    def clear(self) -> None:
        self._subscribers.clear()

    def count_subscribers(self, kind: Optional[NotificationKind] = None) -> int:
        if kind is None:
            return sum(len(subs) for subs in self._subscribers.values())
        return len(self._subscribers.get(kind, []))

    @property
    def history(self) -> List[AnyNotification]:
        """Recent notifications, oldest first."""
        return list(self._history)

    def emit(self, notification: AnyNotification) -> None:
        if self._keep_history:
            self._history.append(notification)

        subscribers = self._subscribers.get(notification.kind, []) + self._subscribers.get(
            None, []
        )
        if not subscribers:
            logger.debug(f"No subscribers for {notification.kind.value}")
            return

        for func in subscribers:
            try:
                result = func(notification)
                if asyncio.iscoroutine(result):
                    self._schedule(result)
            except Exception as e:
                logger.error(
                    f"Subscriber {func!r} failed on {notification.kind.value}: {e}\n"
                    f"{traceback.format_exc()}"
                )

    def _schedule(self, coro) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No running loop - we're in a sync context, run it to completion
            asyncio.run(coro)
            return
        task = loop.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._task_done)

    def _task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error(f"Async subscriber failed: {task.exception()!r}")

    async def drain(self) -> None:
        """Wait until every pending async subscriber has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
