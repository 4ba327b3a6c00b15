"""Permission resolver port - RBAC authorization decision."""

from typing import Protocol

from educhat.domain.value_objects import PermissionContext


class PermissionResolver(Protocol):
    """Port for deciding whether a user holds a permission in a context."""

    async def has_permission(
        self, user_id: int, permission_name: str, context: PermissionContext | None = None
    ) -> bool: ...

    async def has_any_permission(
        self,
        user_id: int,
        permission_names: list[str],
        context: PermissionContext | None = None,
    ) -> bool: ...
