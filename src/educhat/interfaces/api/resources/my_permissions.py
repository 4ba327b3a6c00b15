"""Effective permissions of the calling user."""

import falcon
import falcon.asgi

from educhat.domain.value_objects.roles import is_superuser
from educhat.interfaces.api.authorization import AccessGuard
from educhat.interfaces.api.hooks import require_authenticated
from educhat.interfaces.api.serializers import permission_to_dict


@falcon.before(require_authenticated())
class MyPermissionsResource:
    """GET /api/admin/my-permissions."""

    def __init__(self, access_guard: AccessGuard, unit_of_work_factory: type) -> None:
        self.access_guard = access_guard
        self._uow_factory = unit_of_work_factory

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        user = req.context.user
        async with self._uow_factory() as uow:
            role_permissions = (
                await uow.roles.list_granted_permissions(user.role_id) if user.role_id is not None else []
            )
            rules = await uow.custom_rules.list_active_for_user(user.id)

        custom = []
        for rule, permission in rules:
            item = permission_to_dict(permission)
            item["conditions"] = rule.conditions.to_dict() if rule.conditions else None
            custom.append(item)

        resp.media = {
            "is_admin": is_superuser(user.role),
            "role_permissions": [permission_to_dict(p) for p in role_permissions],
            "custom_permissions": custom,
            "user": {
                "id": user.id,
                "role": user.role,
                "data_key": user.data_key,
                "channels": user.channels,
                "macrosetores": user.macrosetores,
            },
        }
        resp.status = falcon.HTTP_200
