"""User management admin endpoints."""

import falcon
import falcon.asgi

from educhat.application.dto.user_dto import UserUpdateInput
from educhat.application.use_cases.user.update_user import UpdateUserUseCase
from educhat.domain.entities import User
from educhat.domain.value_objects.roles import in_data_key_scope, is_superuser
from educhat.interfaces.api.authorization import AccessGuard
from educhat.interfaces.api.hooks import apply_hierarchical_filter, require_permission
from educhat.interfaces.api.serializers import actor_from, read_body, user_to_dict


def visible_to(viewer_data_key: str | None, user: User) -> bool:
    return in_data_key_scope(viewer_data_key, user.data_key)


class UsersResource:
    """GET /api/admin/users - list users."""

    def __init__(self, access_guard: AccessGuard, unit_of_work_factory: type) -> None:
        self.access_guard = access_guard
        self._uow_factory = unit_of_work_factory

    @falcon.before(require_permission("usuario:ver"))
    @falcon.before(apply_hierarchical_filter())
    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """Non-admins only see users under their data-key prefix."""
        viewer = req.context.user
        scope = getattr(req.context, "hierarchical_filter", None)
        async with self._uow_factory() as uow:
            users = await uow.users.list_all(
                assigned_user_id=scope.assigned_user_id if scope else None
            )
        if not is_superuser(viewer.role):
            users = [u for u in users if visible_to(viewer.data_key, u)]
        resp.media = {"items": [user_to_dict(u) for u in users]}
        resp.status = falcon.HTTP_200


class UserResource:
    """PUT /api/admin/users/{user_id}."""

    def __init__(self, access_guard: AccessGuard, update_user: UpdateUserUseCase) -> None:
        self.access_guard = access_guard
        self._update_user = update_user

    @falcon.before(require_permission("usuario:editar"))
    async def on_put(self, req: falcon.asgi.Request, resp: falcon.asgi.Response, user_id: int) -> None:
        body = await read_body(req)
        user = await self._update_user.execute(
            actor_from(req), user_id, UserUpdateInput.from_body(body)
        )
        resp.media = user_to_dict(user)
        resp.status = falcon.HTTP_200
