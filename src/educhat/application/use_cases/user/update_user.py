"""Update user use case."""

from dataclasses import asdict, replace

from educhat.application.dto.actor import Actor
from educhat.application.dto.audit_dto import AuditLogInput
from educhat.application.dto.user_dto import UserUpdateInput
from educhat.application.ports import AuditLog
from educhat.domain.entities import User
from educhat.domain.exceptions import NotFound, PermissionDenied, ValidationError
from educhat.domain.value_objects import AuditAction, ChangeDetails
from educhat.domain.value_objects.roles import in_data_key_scope, is_superuser

_STATUSES = ("active", "inactive")


def _string_list(value: object, field_name: str) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValidationError(f"{field_name} deve ser uma lista de textos")
    return list(value)


def _integer(value: object, field_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"Campo inválido: {field_name}")
    return value


def _validate(changes: dict) -> None:
    if "display_name" in changes and not isinstance(changes["display_name"], str):
        raise ValidationError("Campo inválido: display_name")
    if "role_id" in changes:
        changes["role_id"] = _integer(changes["role_id"], "role_id")
    if changes.get("team_id") is not None:
        changes["team_id"] = _integer(changes["team_id"], "team_id")
    if changes.get("data_key") is not None and not isinstance(changes["data_key"], str):
        raise ValidationError("Campo inválido: data_key")
    if "channels" in changes:
        changes["channels"] = _string_list(changes["channels"], "channels")
    if "macrosetores" in changes:
        changes["macrosetores"] = _string_list(changes["macrosetores"], "macrosetores")
    if "status" in changes:
        if changes["status"] not in _STATUSES:
            raise ValidationError(f"Status inválido: {changes['status']}")
        changes["is_active"] = changes["status"] == "active"


def _check_scope(actor: Actor, target: User, changes: dict) -> None:
    """Non-admins only edit non-admin users inside their own data-key subtree."""
    if "role_id" in changes:
        if not actor.is_admin:
            raise PermissionDenied("Apenas administradores podem alterar a função de um usuário")
        if target.id == actor.user_id:
            raise PermissionDenied("Não é permitido alterar a própria função")
    if actor.is_admin:
        return
    if is_superuser(target.role) or not in_data_key_scope(actor.data_key, target.data_key):
        raise PermissionDenied("Acesso negado - usuário fora do seu escopo")
    if "data_key" in changes and actor.data_key:
        new_key = changes["data_key"]
        if not new_key or not in_data_key_scope(actor.data_key, new_key):
            raise PermissionDenied("Acesso negado - chave de dados fora do seu escopo")


class UpdateUserUseCase:
    """Change role, team, data-key, channels, macro-sectors or status of a user.

    Users are never deleted; ``status`` drives the ``is_active`` flag. The
    role tag is taken from the assigned role, and only admins may reassign it.
    """

    def __init__(self, unit_of_work_factory: type, audit_log: AuditLog) -> None:
        self._uow_factory = unit_of_work_factory
        self._audit = audit_log

    async def execute(self, actor: Actor, user_id: int, data: UserUpdateInput) -> User:
        changes = data.changes()
        if not changes:
            raise ValidationError("Nenhum campo para atualizar")
        _validate(changes)

        async with self._uow_factory() as uow:
            before = await uow.users.get_by_id(user_id)
            if before is None:
                raise NotFound("User", user_id)
            _check_scope(actor, before, changes)
            if "role_id" in changes:
                role = await uow.roles.get_by_id(changes["role_id"])
                if role is None:
                    raise NotFound("Role", changes["role_id"])
                changes["role"] = role.name
            after = replace(before, **changes)
            await uow.users.update(after)

        await self._audit.log_action(
            AuditLogInput(
                user_id=actor.user_id,
                action=AuditAction.UPDATE,
                resource="user",
                resource_id=str(user_id),
                data_key=after.data_key,
                details=ChangeDetails(before=asdict(before), after=asdict(after)),
                ip_address=actor.ip_address,
                user_agent=actor.user_agent,
            )
        )
        return after
