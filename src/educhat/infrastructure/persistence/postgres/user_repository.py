"""PostgreSQL user repository implementation."""

from datetime import datetime
from typing import Any

from psycopg import AsyncConnection

from educhat.domain.entities import User

_COLUMNS = (
    "id, username, email, display_name, role, role_id, data_key, channels, macrosetores, "
    "team_id, is_active, status, is_online, last_login_at, last_activity_at, created_at"
)


def _row_to_user(r: tuple) -> User:
    return User(
        id=r[0],
        username=r[1],
        email=r[2],
        display_name=r[3],
        role=r[4],
        role_id=r[5],
        data_key=r[6],
        channels=list(r[7] or []),
        macrosetores=list(r[8] or []),
        team_id=r[9],
        is_active=r[10],
        status=r[11],
        is_online=r[12],
        last_login_at=r[13],
        last_activity_at=r[14],
        created_at=r[15],
    )


class PostgresUserRepository:
    """User repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_by_id(self, user_id: int) -> User | None:
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM user_account WHERE id = %s", (user_id,)
        )
        r = await cur.fetchone()
        return _row_to_user(r) if r else None

    async def get_by_email(self, email: str) -> User | None:
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM user_account WHERE lower(email) = lower(%s)", (email,)
        )
        r = await cur.fetchone()
        return _row_to_user(r) if r else None

    async def list_all(self, assigned_user_id: int | None = None) -> list[User]:
        """List users ordered by display name, optionally only one user."""
        if assigned_user_id is not None:
            cur = await self._conn.execute(
                f"SELECT {_COLUMNS} FROM user_account WHERE id = %s ORDER BY display_name",
                (assigned_user_id,),
            )
        else:
            cur = await self._conn.execute(
                f"SELECT {_COLUMNS} FROM user_account ORDER BY display_name"
            )
        rows = await cur.fetchall()
        return [_row_to_user(r) for r in rows]

    async def update(self, user: User) -> None:
        await self._conn.execute(
            "UPDATE user_account SET display_name=%s, role=%s, role_id=%s, team_id=%s, "
            "data_key=%s, channels=%s, macrosetores=%s, status=%s, is_active=%s, "
            "updated_at=now() WHERE id=%s",
            (
                user.display_name,
                user.role,
                user.role_id,
                user.team_id,
                user.data_key,
                user.channels,
                user.macrosetores,
                user.status,
                user.is_active,
                user.id,
            ),
        )

    async def touch_last_activity(self, user_id: int, at: datetime) -> None:
        await self._conn.execute(
            "UPDATE user_account SET last_activity_at=%s, is_online=true WHERE id=%s", (at, user_id)
        )

    async def set_online(self, user_id: int, online: bool) -> None:
        await self._conn.execute(
            "UPDATE user_account SET is_online=%s WHERE id=%s", (online, user_id)
        )

    async def stats(self) -> dict[str, Any]:
        cur = await self._conn.execute(
            "SELECT count(*), "
            "count(*) FILTER (WHERE status = 'active'), "
            "count(*) FILTER (WHERE is_online) "
            "FROM user_account"
        )
        r = await cur.fetchone()
        return {"total": r[0], "active": r[1], "online": r[2]}
