"""Revoke one permission from a role."""

from educhat.application.dto.actor import Actor
from educhat.application.dto.audit_dto import AuditLogInput
from educhat.application.ports import AuditLog
from educhat.domain.exceptions import NotFound
from educhat.domain.value_objects import AuditAction, ChangeDetails


class RevokeRolePermissionUseCase:
    """Deactivate a grant. The row stays for the audit history."""

    def __init__(self, unit_of_work_factory: type, audit_log: AuditLog) -> None:
        self._uow_factory = unit_of_work_factory
        self._audit = audit_log

    async def execute(self, actor: Actor, role_id: int, permission_id: int) -> None:
        async with self._uow_factory() as uow:
            revoked = await uow.roles.deactivate_grant(role_id, permission_id)
            if not revoked:
                raise NotFound("RolePermission", f"{role_id}-{permission_id}")

        await self._audit.log_action(
            AuditLogInput(
                user_id=actor.user_id,
                action=AuditAction.DELETE,
                resource="role_permission",
                resource_id=f"{role_id}-{permission_id}",
                details=ChangeDetails(
                    before={"role_id": role_id, "permission_id": permission_id, "is_active": True},
                    after={"role_id": role_id, "permission_id": permission_id, "is_active": False},
                ),
                ip_address=actor.ip_address,
                user_agent=actor.user_agent,
            )
        )
