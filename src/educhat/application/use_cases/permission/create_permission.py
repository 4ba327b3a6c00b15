"""Create permission use case."""

from dataclasses import asdict

from educhat.application.dto.actor import Actor
from educhat.application.dto.audit_dto import AuditLogInput
from educhat.application.ports import AuditLog
from educhat.domain.entities import Permission
from educhat.domain.exceptions import Conflict, ValidationError
from educhat.domain.value_objects import AuditAction, ChangeDetails


class CreatePermissionUseCase:
    """Register a new ``resource:action`` permission."""

    def __init__(self, unit_of_work_factory: type, audit_log: AuditLog) -> None:
        self._uow_factory = unit_of_work_factory
        self._audit = audit_log

    async def execute(
        self,
        actor: Actor,
        name: str,
        resource: str,
        action: str,
        description: str | None = None,
        category: str | None = None,
    ) -> Permission:
        if not name or not resource or not action:
            raise ValidationError("Nome, recurso e ação são obrigatórios")
        if ":" not in name:
            raise ValidationError("Nome da permissão deve seguir o formato recurso:acao")

        async with self._uow_factory() as uow:
            if await uow.permissions.get_by_name(name):
                raise Conflict(f"Permissão já existe: {name}")
            permission = await uow.permissions.create(
                Permission(
                    id=0,
                    name=name,
                    resource=resource,
                    action=action,
                    description=description,
                    category=category or "general",
                )
            )

        await self._audit.log_action(
            AuditLogInput(
                user_id=actor.user_id,
                action=AuditAction.CREATE,
                resource="permission",
                resource_id=str(permission.id),
                details=ChangeDetails(after=asdict(permission)),
                ip_address=actor.ip_address,
                user_agent=actor.user_agent,
            )
        )
        return permission
