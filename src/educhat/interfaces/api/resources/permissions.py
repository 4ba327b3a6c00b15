"""Permission catalogue admin endpoints."""

import falcon
import falcon.asgi

from educhat.application.dto.audit_dto import AuditLogInput
from educhat.application.ports import AuditLog
from educhat.application.use_cases.permission.create_permission import CreatePermissionUseCase
from educhat.application.use_cases.permission.update_permission import UpdatePermissionUseCase
from educhat.domain.value_objects import AuditAction
from educhat.interfaces.api.authorization import AccessGuard
from educhat.interfaces.api.hooks import require_permission
from educhat.interfaces.api.serializers import actor_from, permission_to_dict, read_body

MANAGE_PERMISSIONS = "permissao:gerenciar"


@falcon.before(require_permission(MANAGE_PERMISSIONS))
class PermissionsResource:
    """GET/POST /api/admin/permissions - list and create permissions."""

    def __init__(
        self,
        access_guard: AccessGuard,
        unit_of_work_factory: type,
        audit_log: AuditLog,
        create_permission: CreatePermissionUseCase,
    ) -> None:
        self.access_guard = access_guard
        self._uow_factory = unit_of_work_factory
        self._audit = audit_log
        self._create_permission = create_permission

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """List all permissions ordered by category, resource and action."""
        async with self._uow_factory() as uow:
            permissions = await uow.permissions.list_all()
        actor = actor_from(req)
        await self._audit.log_action(
            AuditLogInput(
                user_id=actor.user_id,
                action=AuditAction.VIEW,
                resource="permissions",
                ip_address=actor.ip_address,
                user_agent=actor.user_agent,
            )
        )
        resp.media = {"items": [permission_to_dict(p) for p in permissions]}
        resp.status = falcon.HTTP_200

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        body = await read_body(req)
        permission = await self._create_permission.execute(
            actor_from(req),
            name=(body.get("name") or "").strip(),
            resource=(body.get("resource") or "").strip(),
            action=(body.get("action") or "").strip(),
            description=body.get("description"),
            category=body.get("category"),
        )
        resp.media = permission_to_dict(permission)
        resp.status = falcon.HTTP_201


@falcon.before(require_permission(MANAGE_PERMISSIONS))
class PermissionResource:
    """PUT /api/admin/permissions/{permission_id}."""

    def __init__(self, access_guard: AccessGuard, update_permission: UpdatePermissionUseCase) -> None:
        self.access_guard = access_guard
        self._update_permission = update_permission

    async def on_put(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, permission_id: int
    ) -> None:
        body = await read_body(req)
        is_active = body.get("is_active", body.get("isActive"))
        permission = await self._update_permission.execute(
            actor_from(req),
            permission_id,
            description=body.get("description"),
            category=body.get("category"),
            is_active=bool(is_active) if is_active is not None else None,
        )
        resp.media = permission_to_dict(permission)
        resp.status = falcon.HTTP_200
