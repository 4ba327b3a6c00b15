"""Admin dashboard statistics."""

import falcon
import falcon.asgi

from educhat.interfaces.api.authorization import AccessGuard
from educhat.interfaces.api.hooks import require_permission
from educhat.interfaces.api.resources.permissions import MANAGE_PERMISSIONS
from educhat.interfaces.api.serializers import audit_entry_to_dict


@falcon.before(require_permission(MANAGE_PERMISSIONS))
class StatsResource:
    """GET /api/admin/stats."""

    def __init__(self, access_guard: AccessGuard, unit_of_work_factory: type) -> None:
        self.access_guard = access_guard
        self._uow_factory = unit_of_work_factory

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        async with self._uow_factory() as uow:
            users = await uow.users.stats()
            roles = await uow.roles.count_active()
            permissions = await uow.permissions.count_active()
            recent = await uow.audit_logs.list_recent(10)
        resp.media = {
            "users": users,
            "roles": roles,
            "permissions": permissions,
            "recent_activity": [audit_entry_to_dict(e) for e in recent],
        }
        resp.status = falcon.HTTP_200
