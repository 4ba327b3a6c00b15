"""Update permission use case."""

from dataclasses import asdict, replace

from educhat.application.dto.actor import Actor
from educhat.application.dto.audit_dto import AuditLogInput
from educhat.application.ports import AuditLog
from educhat.domain.entities import Permission
from educhat.domain.exceptions import NotFound
from educhat.domain.value_objects import AuditAction, ChangeDetails


class UpdatePermissionUseCase:
    """Edit description/category or (de)activate a permission. Name is immutable."""

    def __init__(self, unit_of_work_factory: type, audit_log: AuditLog) -> None:
        self._uow_factory = unit_of_work_factory
        self._audit = audit_log

    async def execute(
        self,
        actor: Actor,
        permission_id: int,
        description: str | None = None,
        category: str | None = None,
        is_active: bool | None = None,
    ) -> Permission:
        async with self._uow_factory() as uow:
            before = await uow.permissions.get_by_id(permission_id)
            if before is None:
                raise NotFound("Permission", permission_id)
            after = replace(
                before,
                description=before.description if description is None else description,
                category=before.category if category is None else category,
                is_active=before.is_active if is_active is None else is_active,
            )
            await uow.permissions.update(after)

        await self._audit.log_action(
            AuditLogInput(
                user_id=actor.user_id,
                action=AuditAction.UPDATE,
                resource="permission",
                resource_id=str(permission_id),
                details=ChangeDetails(before=asdict(before), after=asdict(after)),
                ip_address=actor.ip_address,
                user_agent=actor.user_agent,
            )
        )
        return after
