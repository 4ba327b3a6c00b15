"""Permission resolver - role grants, custom rules and context scoping."""

import logging

from educhat.application.ports import OwnershipVerifier
from educhat.domain.entities import CustomRule, User
from educhat.domain.value_objects import PermissionContext
from educhat.domain.value_objects.roles import is_superuser, permission_resource

logger = logging.getLogger(__name__)


def _in_scope(value: str | None, allowed: list[str] | None) -> bool:
    """An empty or missing restriction set admits any value."""
    if value is None or not allowed:
        return True
    return value in allowed


def _role_context_allows(user: User, context: PermissionContext) -> bool:
    if not _in_scope(context.channel, user.channels):
        return False
    return _in_scope(context.macrosetor, user.macrosetores)


def _rule_context_allows(rule: CustomRule, context: PermissionContext) -> bool:
    conditions = rule.conditions
    if conditions is None:
        return True
    if conditions.channels is not None and context.channel is not None:
        if context.channel not in conditions.channels:
            return False
    if conditions.macrosetores is not None and context.macrosetor is not None:
        if context.macrosetor not in conditions.macrosetores:
            return False
    return True


class EduChatPermissionResolver:
    """Decides allow/deny for ``(user, permission, context)``.

    Resolution order, first match wins:

    1. unknown or inactive user: deny
    2. role tag ``admin``: allow, context is not checked (superuser bypass)
    3. active role grant on an active permission: allow if the context fits
       the user's channel and macro-sector membership
    4. active custom rule for the user: allow if the context fits the rule
       conditions (all present conditions must hold)
    5. deny

    Empty membership sets and absent rule conditions impose no restriction.
    Storage errors are logged and resolve to deny.
    """

    def __init__(
        self,
        unit_of_work_factory: type,
        ownership_verifier: OwnershipVerifier | None = None,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._ownership = ownership_verifier

    async def has_permission(
        self, user_id: int, permission_name: str, context: PermissionContext | None = None
    ) -> bool:
        """Check if user holds permission in context. Never raises."""
        if not permission_name:
            return False
        context = context or PermissionContext()
        try:
            return await self._resolve(user_id, permission_name, context)
        except Exception:
            logger.exception(
                "Permission check failed for user=%s permission=%s", user_id, permission_name
            )
            return False

    async def _resolve(self, user_id: int, permission_name: str, context: PermissionContext) -> bool:
        async with self._uow_factory() as uow:
            user = await uow.users.get_by_id(user_id)
            if user is None or not user.is_active:
                return False

            if is_superuser(user.role):
                return True

            if user.role_id is not None and await uow.roles.has_active_grant(
                user.role_id, permission_name
            ):
                if not _role_context_allows(user, context):
                    return False
                return await self._owns(user_id, permission_name, context)

            rule = await uow.custom_rules.get_active_for(user_id, permission_name)
            if rule is None:
                return False
            if not _rule_context_allows(rule, context):
                return False
            return await self._owns(user_id, permission_name, context)

    async def _owns(self, user_id: int, permission_name: str, context: PermissionContext) -> bool:
        if context.resource_id is None or self._ownership is None:
            return True
        return await self._ownership.verify(
            user_id, permission_resource(permission_name), context.resource_id
        )

    async def has_any_permission(
        self,
        user_id: int,
        permission_names: list[str],
        context: PermissionContext | None = None,
    ) -> bool:
        for name in permission_names:
            if await self.has_permission(user_id, name, context):
                return True
        return False

    async def has_all_permissions(
        self,
        user_id: int,
        permission_names: list[str],
        context: PermissionContext | None = None,
    ) -> bool:
        for name in permission_names:
            if not await self.has_permission(user_id, name, context):
                return False
        return True

    async def is_admin(self, user_id: int) -> bool:
        try:
            async with self._uow_factory() as uow:
                user = await uow.users.get_by_id(user_id)
                return user is not None and user.is_active and is_superuser(user.role)
        except Exception:
            logger.exception("Admin check failed for user=%s", user_id)
            return False

    async def get_user_permissions(self, user_id: int) -> list[str]:
        """Effective permission names; ``["*"]`` for admins."""
        try:
            async with self._uow_factory() as uow:
                user = await uow.users.get_by_id(user_id)
                if user is None or not user.is_active:
                    return []
                if is_superuser(user.role):
                    return ["*"]
                names: set[str] = set()
                if user.role_id is not None:
                    granted = await uow.roles.list_granted_permissions(user.role_id)
                    names.update(p.name for p in granted)
                rules = await uow.custom_rules.list_active_for_user(user_id)
                names.update(p.name for _, p in rules if p.is_active)
                return sorted(names)
        except Exception:
            logger.exception("Failed to list permissions for user=%s", user_id)
            return []
