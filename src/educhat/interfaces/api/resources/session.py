"""Session endpoints."""

import falcon
import falcon.asgi

from educhat.infrastructure.activity.activity_tracker import ActivityTracker
from educhat.interfaces.api.authorization import AccessGuard, client_ip
from educhat.interfaces.api.hooks import require_authenticated


@falcon.before(require_authenticated())
class LogoutResource:
    """POST /api/auth/logout - end the caller's session."""

    def __init__(self, access_guard: AccessGuard, activity_tracker: ActivityTracker) -> None:
        self.access_guard = access_guard
        self._tracker = activity_tracker

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        await self._tracker.end_session(req.context.user.id, client_ip(req), req.user_agent)
        resp.media = {"message": "Logout realizado com sucesso"}
        resp.status = falcon.HTTP_200
