"""Grant one permission to a role."""

from educhat.application.dto.actor import Actor
from educhat.application.dto.audit_dto import AuditLogInput
from educhat.application.ports import AuditLog
from educhat.domain.entities import RolePermission
from educhat.domain.exceptions import NotFound
from educhat.domain.value_objects import AuditAction, ChangeDetails


class GrantRolePermissionUseCase:
    """Add (or reactivate) a role-permission grant."""

    def __init__(self, unit_of_work_factory: type, audit_log: AuditLog) -> None:
        self._uow_factory = unit_of_work_factory
        self._audit = audit_log

    async def execute(self, actor: Actor, role_id: int, permission_id: int) -> RolePermission:
        async with self._uow_factory() as uow:
            if await uow.roles.get_by_id(role_id) is None:
                raise NotFound("Role", role_id)
            permission = await uow.permissions.get_by_id(permission_id)
            if permission is None:
                raise NotFound("Permission", permission_id)
            grant = await uow.roles.activate_grant(role_id, permission_id)

        await self._audit.log_action(
            AuditLogInput(
                user_id=actor.user_id,
                action=AuditAction.CREATE,
                resource="role_permission",
                resource_id=f"{role_id}-{permission_id}",
                details=ChangeDetails(
                    after={"role_id": role_id, "permission_id": permission_id, "permission": permission.name}
                ),
                ip_address=actor.ip_address,
                user_agent=actor.user_agent,
            )
        )
        return grant
