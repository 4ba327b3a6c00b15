"""Role repository port."""

from typing import Protocol

from educhat.domain.entities import Permission, Role, RolePermission


class RoleRepository(Protocol):
    """Port for role and role-permission persistence."""

    async def get_by_id(self, role_id: int) -> Role | None: ...

    async def get_by_name(self, name: str) -> Role | None: ...

    async def list_active(self) -> list[Role]: ...

    async def create(self, role: Role) -> Role: ...

    async def update(self, role: Role) -> None: ...

    async def count_active(self) -> int: ...

    async def has_active_grant(self, role_id: int, permission_name: str) -> bool: ...

    async def list_granted_permissions(self, role_id: int) -> list[Permission]: ...

    async def get_grant(self, role_id: int, permission_id: int) -> RolePermission | None: ...

    async def activate_grant(self, role_id: int, permission_id: int) -> RolePermission: ...

    async def deactivate_grant(self, role_id: int, permission_id: int) -> bool: ...

    async def deactivate_all_grants(self, role_id: int) -> None: ...
