"""Role and role-permission admin endpoints."""

import falcon
import falcon.asgi

from educhat.application.use_cases.role.create_role import CreateRoleUseCase
from educhat.application.use_cases.role.grant_role_permission import GrantRolePermissionUseCase
from educhat.application.use_cases.role.revoke_role_permission import RevokeRolePermissionUseCase
from educhat.application.use_cases.role.set_role_permissions import SetRolePermissionsUseCase
from educhat.application.use_cases.role.update_role import UpdateRoleUseCase
from educhat.domain.exceptions import NotFound
from educhat.interfaces.api.authorization import AccessGuard
from educhat.interfaces.api.errors import ApiError
from educhat.interfaces.api.hooks import require_permission
from educhat.interfaces.api.resources.permissions import MANAGE_PERMISSIONS
from educhat.interfaces.api.serializers import (
    actor_from,
    int_field,
    int_list,
    permission_to_dict,
    read_body,
    role_to_dict,
)


@falcon.before(require_permission(MANAGE_PERMISSIONS))
class RolesResource:
    """GET/POST /api/admin/roles."""

    def __init__(
        self, access_guard: AccessGuard, unit_of_work_factory: type, create_role: CreateRoleUseCase
    ) -> None:
        self.access_guard = access_guard
        self._uow_factory = unit_of_work_factory
        self._create_role = create_role

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """Active roles with their active permissions."""
        async with self._uow_factory() as uow:
            roles = await uow.roles.list_active()
            items = [
                role_to_dict(r, await uow.roles.list_granted_permissions(r.id)) for r in roles
            ]
        resp.media = {"items": items}
        resp.status = falcon.HTTP_200

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        body = await read_body(req)
        raw_ids = body.get("permission_ids", body.get("permissionIds"))
        role = await self._create_role.execute(
            actor_from(req),
            name=body.get("name") or "",
            description=body.get("description"),
            permission_ids=int_list(raw_ids, "permission_ids") if raw_ids is not None else None,
        )
        resp.media = role_to_dict(role)
        resp.status = falcon.HTTP_201


@falcon.before(require_permission(MANAGE_PERMISSIONS))
class RoleResource:
    """PUT /api/admin/roles/{role_id}."""

    def __init__(self, access_guard: AccessGuard, update_role: UpdateRoleUseCase) -> None:
        self.access_guard = access_guard
        self._update_role = update_role

    async def on_put(self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_id: int) -> None:
        body = await read_body(req)
        is_active = body.get("is_active", body.get("isActive"))
        role = await self._update_role.execute(
            actor_from(req),
            role_id,
            name=body.get("name"),
            description=body.get("description"),
            is_active=bool(is_active) if is_active is not None else None,
        )
        resp.media = role_to_dict(role)
        resp.status = falcon.HTTP_200


@falcon.before(require_permission(MANAGE_PERMISSIONS))
class RolePermissionSetResource:
    """PUT /api/admin/roles/{role_id}/permissions - replace the role's grants.

    Body carries either ``permission_ids`` or ``permissions`` (names).
    """

    def __init__(self, access_guard: AccessGuard, set_role_permissions: SetRolePermissionsUseCase) -> None:
        self.access_guard = access_guard
        self._set_role_permissions = set_role_permissions

    async def on_put(self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_id: int) -> None:
        body = await read_body(req)
        raw_ids = body.get("permission_ids", body.get("permissionIds"))
        names = body.get("permissions")
        if names is not None and (
            not isinstance(names, list) or not all(isinstance(n, str) for n in names)
        ):
            raise ApiError(400, "Campo inválido: permissions")
        granted = await self._set_role_permissions.execute(
            actor_from(req),
            role_id,
            permission_ids=int_list(raw_ids, "permission_ids") if raw_ids is not None else None,
            permission_names=names,
        )
        resp.media = {"role_id": role_id, "permissions": granted}
        resp.status = falcon.HTTP_200


@falcon.before(require_permission(MANAGE_PERMISSIONS))
class RolePermissionsResource:
    """GET /api/admin/role-permissions/{role_id} - active grants of a role."""

    def __init__(self, access_guard: AccessGuard, unit_of_work_factory: type) -> None:
        self.access_guard = access_guard
        self._uow_factory = unit_of_work_factory

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_id: int) -> None:
        async with self._uow_factory() as uow:
            if await uow.roles.get_by_id(role_id) is None:
                raise NotFound("Role", role_id)
            permissions = await uow.roles.list_granted_permissions(role_id)
        resp.media = {"items": [permission_to_dict(p) for p in permissions]}
        resp.status = falcon.HTTP_200


@falcon.before(require_permission(MANAGE_PERMISSIONS))
class RolePermissionGrantResource:
    """POST/DELETE /api/admin/role-permissions - grant or revoke one permission."""

    def __init__(
        self,
        access_guard: AccessGuard,
        grant_role_permission: GrantRolePermissionUseCase,
        revoke_role_permission: RevokeRolePermissionUseCase,
    ) -> None:
        self.access_guard = access_guard
        self._grant = grant_role_permission
        self._revoke = revoke_role_permission

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        body = await read_body(req)
        grant = await self._grant.execute(
            actor_from(req),
            int_field(body, "role_id", "roleId"),
            int_field(body, "permission_id", "permissionId"),
        )
        resp.media = {
            "role_id": grant.role_id,
            "permission_id": grant.permission_id,
            "is_active": grant.is_active,
        }
        resp.status = falcon.HTTP_201

    async def on_delete(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        body = await read_body(req)
        await self._revoke.execute(
            actor_from(req),
            int_field(body, "role_id", "roleId"),
            int_field(body, "permission_id", "permissionId"),
        )
        resp.status = falcon.HTTP_204
