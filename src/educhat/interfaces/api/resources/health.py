"""Health check endpoints."""

import logging

import falcon.asgi

from educhat.infrastructure.activity.activity_monitor import ActivityMonitor

logger = logging.getLogger(__name__)


class HealthResource:
    """Health and readiness endpoints."""

    def __init__(
        self,
        unit_of_work_factory: type | None = None,
        activity_monitor: ActivityMonitor | None = None,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._monitor = activity_monitor

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """GET /api/health - liveness."""
        resp.media = {"status": "ok"}
        resp.status = falcon.HTTP_200

    async def on_get_ready(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """GET /api/health/ready - readiness (DB reachable)."""
        media: dict = {"status": "ready"}
        if self._monitor is not None:
            media["active_sessions"] = self._monitor.pending_count
        if self._uow_factory is not None:
            try:
                async with self._uow_factory() as uow:
                    await uow.roles.count_active()
            except Exception:
                logger.warning("Readiness check failed", exc_info=True)
                resp.media = {"status": "unavailable"}
                resp.status = falcon.HTTP_503
                return
        resp.media = media
        resp.status = falcon.HTTP_200
