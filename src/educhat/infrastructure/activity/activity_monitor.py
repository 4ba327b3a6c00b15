"""Inactivity timers - one pending logout per user."""

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

DEFAULT_INACTIVITY_TIMEOUT = 10 * 60  # seconds

LogoutCallback = Callable[[], Awaitable[None] | None]


class ActivityMonitor:
    """Owns the per-process ``user_id -> timer`` map.

    Every reset cancels the pending timer before scheduling a new one, so a
    user has at most one live timer. Timers live on the running event loop;
    state is not shared between processes.
    """

    def __init__(self, timeout_seconds: float = DEFAULT_INACTIVITY_TIMEOUT) -> None:
        self._timeout = timeout_seconds
        self._timers: dict[int, asyncio.TimerHandle] = {}
        self._tasks: set[asyncio.Task] = set()

    @property
    def timeout_seconds(self) -> float:
        return self._timeout

    @property
    def pending_count(self) -> int:
        return len(self._timers)

    def has_timer(self, user_id: int) -> bool:
        return user_id in self._timers

    def reset_timer(self, user_id: int, logout_callback: LogoutCallback) -> None:
        """(Re)start the countdown for user; the previous callback is discarded."""
        self.clear_timer(user_id)
        loop = asyncio.get_running_loop()
        self._timers[user_id] = loop.call_later(
            self._timeout, self._expire, user_id, logout_callback
        )

    def clear_timer(self, user_id: int) -> None:
        timer = self._timers.pop(user_id, None)
        if timer is not None:
            timer.cancel()

    def clear_all(self) -> None:
        for timer in self._timers.values():
            timer.cancel()
        self._timers.clear()

    def _expire(self, user_id: int, logout_callback: LogoutCallback) -> None:
        self._timers.pop(user_id, None)
        logger.info("User %s logged out due to inactivity", user_id)
        try:
            result = logout_callback()
        except Exception:
            logger.exception("Logout callback failed for user=%s", user_id)
            return
        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._tasks.add(task)
            task.add_done_callback(self._task_done)

    def _task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("Logout callback failed", exc_info=task.exception())
