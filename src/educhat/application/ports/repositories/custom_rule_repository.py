"""Custom rule repository port."""

from typing import Protocol

from educhat.domain.entities import CustomRule, Permission


class CustomRuleRepository(Protocol):
    """Port for per-user custom rule persistence."""

    async def get_by_id(self, rule_id: int) -> CustomRule | None: ...

    async def get_active_for(self, user_id: int, permission_name: str) -> CustomRule | None: ...

    async def list_active_for_user(self, user_id: int) -> list[tuple[CustomRule, Permission]]: ...

    async def create(self, rule: CustomRule) -> CustomRule: ...

    async def deactivate(self, rule_id: int) -> None: ...
