"""Replace the permission set of a role."""

from educhat.application.dto.actor import Actor
from educhat.application.dto.audit_dto import AuditLogInput
from educhat.application.ports import AuditLog
from educhat.domain.exceptions import NotFound, ValidationError
from educhat.domain.value_objects import AuditAction, ChangeDetails


class SetRolePermissionsUseCase:
    """Deactivate every current grant of the role, then activate the new set.

    Permissions may be given by id or by name; unknown or inactive names are
    skipped.
    """

    def __init__(self, unit_of_work_factory: type, audit_log: AuditLog) -> None:
        self._uow_factory = unit_of_work_factory
        self._audit = audit_log

    async def execute(
        self,
        actor: Actor,
        role_id: int,
        permission_ids: list[int] | None = None,
        permission_names: list[str] | None = None,
    ) -> list[str]:
        if permission_ids is None and permission_names is None:
            raise ValidationError("Lista de permissões é obrigatória")

        async with self._uow_factory() as uow:
            if await uow.roles.get_by_id(role_id) is None:
                raise NotFound("Role", role_id)
            before = [p.name for p in await uow.roles.list_granted_permissions(role_id)]

            if permission_names is not None:
                found = await uow.permissions.list_active_by_names(permission_names)
                ids = [p.id for p in found]
            else:
                ids = []
                for permission_id in permission_ids or []:
                    if await uow.permissions.get_by_id(permission_id) is None:
                        raise NotFound("Permission", permission_id)
                    ids.append(permission_id)

            await uow.roles.deactivate_all_grants(role_id)
            for permission_id in dict.fromkeys(ids):
                await uow.roles.activate_grant(role_id, permission_id)
            after = [p.name for p in await uow.roles.list_granted_permissions(role_id)]

        await self._audit.log_action(
            AuditLogInput(
                user_id=actor.user_id,
                action=AuditAction.UPDATE,
                resource="role_permissions",
                resource_id=str(role_id),
                details=ChangeDetails(
                    before={"permissions": before}, after={"permissions": after}
                ),
                ip_address=actor.ip_address,
                user_agent=actor.user_agent,
            )
        )
        return after
