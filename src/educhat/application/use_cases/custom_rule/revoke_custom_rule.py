"""Revoke custom rule use case."""

from dataclasses import asdict, replace

from educhat.application.dto.actor import Actor
from educhat.application.dto.audit_dto import AuditLogInput
from educhat.application.ports import AuditLog
from educhat.domain.exceptions import NotFound
from educhat.domain.value_objects import AuditAction, ChangeDetails


class RevokeCustomRuleUseCase:
    """Deactivate a custom rule; role data is untouched."""

    def __init__(self, unit_of_work_factory: type, audit_log: AuditLog) -> None:
        self._uow_factory = unit_of_work_factory
        self._audit = audit_log

    async def execute(self, actor: Actor, rule_id: int) -> None:
        async with self._uow_factory() as uow:
            rule = await uow.custom_rules.get_by_id(rule_id)
            if rule is None or not rule.is_active:
                raise NotFound("CustomRule", rule_id)
            await uow.custom_rules.deactivate(rule_id)

        await self._audit.log_action(
            AuditLogInput(
                user_id=actor.user_id,
                action=AuditAction.DELETE,
                resource="custom_rule",
                resource_id=str(rule_id),
                details=ChangeDetails(
                    before=asdict(rule), after=asdict(replace(rule, is_active=False))
                ),
                ip_address=actor.ip_address,
                user_agent=actor.user_agent,
            )
        )
