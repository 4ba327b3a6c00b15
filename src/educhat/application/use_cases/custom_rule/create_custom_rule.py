"""Create custom rule use case."""

from dataclasses import asdict
from typing import Any

from educhat.application.dto.actor import Actor
from educhat.application.dto.audit_dto import AuditLogInput
from educhat.application.ports import AuditLog
from educhat.domain.entities import CustomRule
from educhat.domain.exceptions import NotFound, ValidationError
from educhat.domain.value_objects import AuditAction, ChangeDetails, CustomRuleConditions


def _parse_conditions(raw: dict[str, Any] | None) -> CustomRuleConditions | None:
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise ValidationError("conditions deve ser um objeto")
    unknown = set(raw) - {"channels", "macrosetores"}
    if unknown:
        raise ValidationError(f"Condições desconhecidas: {', '.join(sorted(unknown))}")
    for key in ("channels", "macrosetores"):
        value = raw.get(key)
        if value is not None and (
            not isinstance(value, list) or not all(isinstance(v, str) for v in value)
        ):
            raise ValidationError(f"{key} deve ser uma lista de textos")
    return CustomRuleConditions.from_dict(raw)


class CreateCustomRuleUseCase:
    """Grant a permission to one user outside their role."""

    def __init__(self, unit_of_work_factory: type, audit_log: AuditLog) -> None:
        self._uow_factory = unit_of_work_factory
        self._audit = audit_log

    async def execute(
        self,
        actor: Actor,
        user_id: int,
        permission_id: int | None = None,
        permission_name: str | None = None,
        conditions: dict[str, Any] | None = None,
    ) -> CustomRule:
        if permission_id is None and not permission_name:
            raise ValidationError("Permissão é obrigatória")
        parsed = _parse_conditions(conditions)

        async with self._uow_factory() as uow:
            if await uow.users.get_by_id(user_id) is None:
                raise NotFound("User", user_id)
            if permission_id is not None:
                permission = await uow.permissions.get_by_id(permission_id)
            else:
                permission = await uow.permissions.get_by_name(permission_name)
            if permission is None:
                raise NotFound("Permission", permission_id or permission_name)
            rule = await uow.custom_rules.create(
                CustomRule(id=0, user_id=user_id, permission_id=permission.id, conditions=parsed)
            )

        await self._audit.log_action(
            AuditLogInput(
                user_id=actor.user_id,
                action=AuditAction.CREATE,
                resource="custom_rule",
                resource_id=str(rule.id),
                details=ChangeDetails(after=asdict(rule), extra={"permission": permission.name}),
                ip_address=actor.ip_address,
                user_agent=actor.user_agent,
            )
        )
        return rule
