"""PostgreSQL permission repository implementation."""

from psycopg import AsyncConnection

from educhat.domain.entities import Permission

PERMISSION_COLUMNS = "id, name, resource, action, description, category, is_active, created_at"


def row_to_permission(r: tuple) -> Permission:
    return Permission(
        id=r[0],
        name=r[1],
        resource=r[2],
        action=r[3],
        description=r[4],
        category=r[5],
        is_active=r[6],
        created_at=r[7],
    )


class PostgresPermissionRepository:
    """Permission repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_by_id(self, permission_id: int) -> Permission | None:
        cur = await self._conn.execute(
            f"SELECT {PERMISSION_COLUMNS} FROM permission WHERE id = %s", (permission_id,)
        )
        r = await cur.fetchone()
        return row_to_permission(r) if r else None

    async def get_by_name(self, name: str) -> Permission | None:
        cur = await self._conn.execute(
            f"SELECT {PERMISSION_COLUMNS} FROM permission WHERE name = %s", (name,)
        )
        r = await cur.fetchone()
        return row_to_permission(r) if r else None

    async def list_all(self) -> list[Permission]:
        cur = await self._conn.execute(
            f"SELECT {PERMISSION_COLUMNS} FROM permission ORDER BY category, resource, action"
        )
        rows = await cur.fetchall()
        return [row_to_permission(r) for r in rows]

    async def list_active_by_names(self, names: list[str]) -> list[Permission]:
        if not names:
            return []
        cur = await self._conn.execute(
            f"SELECT {PERMISSION_COLUMNS} FROM permission WHERE is_active AND name = ANY(%s)",
            (names,),
        )
        rows = await cur.fetchall()
        return [row_to_permission(r) for r in rows]

    async def create(self, permission: Permission) -> Permission:
        cur = await self._conn.execute(
            "INSERT INTO permission (name, resource, action, description, category, is_active) "
            f"VALUES (%s, %s, %s, %s, %s, %s) RETURNING {PERMISSION_COLUMNS}",
            (
                permission.name,
                permission.resource,
                permission.action,
                permission.description,
                permission.category,
                permission.is_active,
            ),
        )
        return row_to_permission(await cur.fetchone())

    async def update(self, permission: Permission) -> None:
        await self._conn.execute(
            "UPDATE permission SET description=%s, category=%s, is_active=%s WHERE id=%s",
            (permission.description, permission.category, permission.is_active, permission.id),
        )

    async def count_active(self) -> int:
        cur = await self._conn.execute("SELECT count(*) FROM permission WHERE is_active")
        r = await cur.fetchone()
        return r[0]
