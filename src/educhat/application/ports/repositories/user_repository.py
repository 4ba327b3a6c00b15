"""User repository port."""

from datetime import datetime
from typing import Any, Protocol

from educhat.domain.entities import User


class UserRepository(Protocol):
    """Port for user persistence."""

    async def get_by_id(self, user_id: int) -> User | None: ...

    async def get_by_email(self, email: str) -> User | None: ...

    async def list_all(self, assigned_user_id: int | None = None) -> list[User]: ...

    async def update(self, user: User) -> None: ...

    async def touch_last_activity(self, user_id: int, at: datetime) -> None:
        """Record activity; also marks the user online."""
        ...

    async def set_online(self, user_id: int, online: bool) -> None: ...

    async def stats(self) -> dict[str, Any]: ...
