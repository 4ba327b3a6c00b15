"""Activity middleware - inactivity timer and last-activity write per request."""

import falcon.asgi

from educhat.infrastructure.activity.activity_tracker import ActivityTracker


class ActivityMiddleware:
    """Resets the user's inactivity timer on every authenticated request.

    The ``last_activity_at`` write is scheduled with ``resp.schedule`` and runs
    after the response has been sent.
    """

    def __init__(self, activity_tracker: ActivityTracker) -> None:
        self._tracker = activity_tracker

    async def process_resource(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, resource, params
    ) -> None:
        user = getattr(req.context, "user", None)
        if user is None:
            return
        user_id = user.id
        self._tracker.record_activity(user_id)

        async def _touch() -> None:
            await self._tracker.touch(user_id)

        resp.schedule(_touch)
