"""Update role use case."""

from dataclasses import asdict, replace

from educhat.application.dto.actor import Actor
from educhat.application.dto.audit_dto import AuditLogInput
from educhat.application.ports import AuditLog
from educhat.domain.entities import Role
from educhat.domain.exceptions import Conflict, NotFound, ValidationError
from educhat.domain.value_objects import AuditAction, ChangeDetails


class UpdateRoleUseCase:
    """Rename, describe or (de)activate a role."""

    def __init__(self, unit_of_work_factory: type, audit_log: AuditLog) -> None:
        self._uow_factory = unit_of_work_factory
        self._audit = audit_log

    async def execute(
        self,
        actor: Actor,
        role_id: int,
        name: str | None = None,
        description: str | None = None,
        is_active: bool | None = None,
    ) -> Role:
        async with self._uow_factory() as uow:
            before = await uow.roles.get_by_id(role_id)
            if before is None:
                raise NotFound("Role", role_id)
            if name is not None:
                name = name.strip()
                if not name:
                    raise ValidationError("Nome da função é obrigatório")
                existing = await uow.roles.get_by_name(name)
                if existing and existing.id != role_id:
                    raise Conflict(f"Função já existe: {name}")
            after = replace(
                before,
                name=before.name if name is None else name,
                description=before.description if description is None else description,
                is_active=before.is_active if is_active is None else is_active,
            )
            await uow.roles.update(after)

        await self._audit.log_action(
            AuditLogInput(
                user_id=actor.user_id,
                action=AuditAction.UPDATE,
                resource="role",
                resource_id=str(role_id),
                details=ChangeDetails(before=asdict(before), after=asdict(after)),
                ip_address=actor.ip_address,
                user_agent=actor.user_agent,
            )
        )
        return after
