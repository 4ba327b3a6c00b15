"""Lifespan middleware - opens the pool on startup, releases resources on shutdown."""

from typing import Any

from psycopg_pool import AsyncConnectionPool

from educhat.infrastructure.activity.activity_monitor import ActivityMonitor


class PoolLifespanMiddleware:
    """Opens the connection pool on startup; on shutdown cancels pending
    inactivity timers and closes the pool."""

    def __init__(self, pool: AsyncConnectionPool, activity_monitor: ActivityMonitor | None = None) -> None:
        self._pool = pool
        self._monitor = activity_monitor

    async def process_startup(self, scope: dict[str, Any], event: dict[str, Any]) -> None:
        await self._pool.open()

    async def process_shutdown(self, scope: dict[str, Any], event: dict[str, Any]) -> None:
        if self._monitor is not None:
            self._monitor.clear_all()
        await self._pool.close()
