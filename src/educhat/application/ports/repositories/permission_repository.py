"""Permission repository port."""

from typing import Protocol

from educhat.domain.entities import Permission


class PermissionRepository(Protocol):
    """Port for permission persistence."""

    async def get_by_id(self, permission_id: int) -> Permission | None: ...

    async def get_by_name(self, name: str) -> Permission | None: ...

    async def list_all(self) -> list[Permission]: ...

    async def list_active_by_names(self, names: list[str]) -> list[Permission]: ...

    async def create(self, permission: Permission) -> Permission: ...

    async def update(self, permission: Permission) -> None: ...

    async def count_active(self) -> int: ...
