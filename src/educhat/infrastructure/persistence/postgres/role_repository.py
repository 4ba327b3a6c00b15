"""PostgreSQL role repository implementation."""

from psycopg import AsyncConnection

from educhat.domain.entities import Permission, Role, RolePermission
from educhat.infrastructure.persistence.postgres.permission_repository import (
    PERMISSION_COLUMNS,
    row_to_permission,
)


def _row_to_role(r: tuple) -> Role:
    return Role(id=r[0], name=r[1], description=r[2], is_active=r[3], created_at=r[4])


class PostgresRoleRepository:
    """Role and role-permission repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_by_id(self, role_id: int) -> Role | None:
        cur = await self._conn.execute(
            "SELECT id, name, description, is_active, created_at FROM role WHERE id = %s",
            (role_id,),
        )
        r = await cur.fetchone()
        return _row_to_role(r) if r else None

    async def get_by_name(self, name: str) -> Role | None:
        cur = await self._conn.execute(
            "SELECT id, name, description, is_active, created_at FROM role WHERE name = %s",
            (name,),
        )
        r = await cur.fetchone()
        return _row_to_role(r) if r else None

    async def list_active(self) -> list[Role]:
        cur = await self._conn.execute(
            "SELECT id, name, description, is_active, created_at FROM role "
            "WHERE is_active ORDER BY name"
        )
        rows = await cur.fetchall()
        return [_row_to_role(r) for r in rows]

    async def create(self, role: Role) -> Role:
        cur = await self._conn.execute(
            "INSERT INTO role (name, description, is_active) VALUES (%s, %s, %s) "
            "RETURNING id, name, description, is_active, created_at",
            (role.name, role.description, role.is_active),
        )
        return _row_to_role(await cur.fetchone())

    async def update(self, role: Role) -> None:
        await self._conn.execute(
            "UPDATE role SET name=%s, description=%s, is_active=%s WHERE id=%s",
            (role.name, role.description, role.is_active, role.id),
        )

    async def count_active(self) -> int:
        cur = await self._conn.execute("SELECT count(*) FROM role WHERE is_active")
        r = await cur.fetchone()
        return r[0]

    async def has_active_grant(self, role_id: int, permission_name: str) -> bool:
        """Active grant joined to an active permission of that name."""
        cur = await self._conn.execute(
            "SELECT 1 FROM role_permission rp "
            "JOIN permission p ON p.id = rp.permission_id "
            "WHERE rp.role_id = %s AND rp.is_active AND p.is_active AND p.name = %s "
            "LIMIT 1",
            (role_id, permission_name),
        )
        return await cur.fetchone() is not None

    async def list_granted_permissions(self, role_id: int) -> list[Permission]:
        cur = await self._conn.execute(
            f"SELECT {PERMISSION_COLUMNS} FROM permission "
            "WHERE is_active AND id IN ("
            "SELECT permission_id FROM role_permission WHERE role_id = %s AND is_active"
            ") ORDER BY category, resource, action",
            (role_id,),
        )
        rows = await cur.fetchall()
        return [row_to_permission(r) for r in rows]

    async def get_grant(self, role_id: int, permission_id: int) -> RolePermission | None:
        cur = await self._conn.execute(
            "SELECT role_id, permission_id, is_active, created_at FROM role_permission "
            "WHERE role_id = %s AND permission_id = %s",
            (role_id, permission_id),
        )
        r = await cur.fetchone()
        if not r:
            return None
        return RolePermission(role_id=r[0], permission_id=r[1], is_active=r[2], created_at=r[3])

    async def activate_grant(self, role_id: int, permission_id: int) -> RolePermission:
        """Insert the grant or reactivate a revoked one."""
        cur = await self._conn.execute(
            "INSERT INTO role_permission (role_id, permission_id, is_active) "
            "VALUES (%s, %s, true) "
            "ON CONFLICT (role_id, permission_id) DO UPDATE SET is_active = true "
            "RETURNING role_id, permission_id, is_active, created_at",
            (role_id, permission_id),
        )
        r = await cur.fetchone()
        return RolePermission(role_id=r[0], permission_id=r[1], is_active=r[2], created_at=r[3])

    async def deactivate_grant(self, role_id: int, permission_id: int) -> bool:
        cur = await self._conn.execute(
            "UPDATE role_permission SET is_active = false "
            "WHERE role_id = %s AND permission_id = %s AND is_active",
            (role_id, permission_id),
        )
        return cur.rowcount > 0

    async def deactivate_all_grants(self, role_id: int) -> None:
        await self._conn.execute(
            "UPDATE role_permission SET is_active = false WHERE role_id = %s AND is_active",
            (role_id,),
        )
