"""Create role use case."""

from dataclasses import asdict

from educhat.application.dto.actor import Actor
from educhat.application.dto.audit_dto import AuditLogInput
from educhat.application.ports import AuditLog
from educhat.domain.entities import Role
from educhat.domain.exceptions import Conflict, NotFound, ValidationError
from educhat.domain.value_objects import AuditAction, ChangeDetails


class CreateRoleUseCase:
    """Create role, optionally granting an initial set of permissions."""

    def __init__(self, unit_of_work_factory: type, audit_log: AuditLog) -> None:
        self._uow_factory = unit_of_work_factory
        self._audit = audit_log

    async def execute(
        self,
        actor: Actor,
        name: str,
        description: str | None = None,
        permission_ids: list[int] | None = None,
    ) -> Role:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Nome da função é obrigatório")
        permission_ids = permission_ids or []

        async with self._uow_factory() as uow:
            if await uow.roles.get_by_name(name):
                raise Conflict(f"Função já existe: {name}")
            for permission_id in permission_ids:
                if await uow.permissions.get_by_id(permission_id) is None:
                    raise NotFound("Permission", permission_id)
            role = await uow.roles.create(Role(id=0, name=name, description=description))
            for permission_id in permission_ids:
                await uow.roles.activate_grant(role.id, permission_id)

        await self._audit.log_action(
            AuditLogInput(
                user_id=actor.user_id,
                action=AuditAction.CREATE,
                resource="role",
                resource_id=str(role.id),
                details=ChangeDetails(
                    after=asdict(role), extra={"permission_ids": permission_ids}
                ),
                ip_address=actor.ip_address,
                user_agent=actor.user_agent,
            )
        )
        return role
