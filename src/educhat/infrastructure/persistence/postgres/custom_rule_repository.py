"""PostgreSQL custom rule repository implementation."""

from psycopg import AsyncConnection
from psycopg.types.json import Jsonb

from educhat.domain.entities import CustomRule, Permission
from educhat.domain.value_objects import CustomRuleConditions
from educhat.infrastructure.persistence.postgres.permission_repository import (
    row_to_permission,
)

_RULE_COLUMNS = "r.id, r.user_id, r.permission_id, r.conditions, r.is_active, r.created_at"


def _row_to_rule(r: tuple) -> CustomRule:
    return CustomRule(
        id=r[0],
        user_id=r[1],
        permission_id=r[2],
        conditions=CustomRuleConditions.from_dict(r[3]),
        is_active=r[4],
        created_at=r[5],
    )


class PostgresCustomRuleRepository:
    """Custom rule repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_by_id(self, rule_id: int) -> CustomRule | None:
        cur = await self._conn.execute(
            f"SELECT {_RULE_COLUMNS} FROM custom_rule r WHERE r.id = %s", (rule_id,)
        )
        r = await cur.fetchone()
        return _row_to_rule(r) if r else None

    async def get_active_for(self, user_id: int, permission_name: str) -> CustomRule | None:
        """Active rule for the user on an active permission of that name."""
        cur = await self._conn.execute(
            f"SELECT {_RULE_COLUMNS} FROM custom_rule r "
            "JOIN permission p ON p.id = r.permission_id "
            "WHERE r.user_id = %s AND r.is_active AND p.is_active AND p.name = %s "
            "ORDER BY r.id LIMIT 1",
            (user_id, permission_name),
        )
        r = await cur.fetchone()
        return _row_to_rule(r) if r else None

    async def list_active_for_user(self, user_id: int) -> list[tuple[CustomRule, Permission]]:
        cur = await self._conn.execute(
            f"SELECT {_RULE_COLUMNS}, p.id, p.name, p.resource, p.action, p.description, "
            "p.category, p.is_active, p.created_at "
            "FROM custom_rule r JOIN permission p ON p.id = r.permission_id "
            "WHERE r.user_id = %s AND r.is_active ORDER BY p.name",
            (user_id,),
        )
        rows = await cur.fetchall()
        return [(_row_to_rule(r[:6]), row_to_permission(r[6:])) for r in rows]

    async def create(self, rule: CustomRule) -> CustomRule:
        conditions = rule.conditions.to_dict() if rule.conditions else None
        cur = await self._conn.execute(
            "INSERT INTO custom_rule AS r (user_id, permission_id, conditions, is_active) "
            f"VALUES (%s, %s, %s, %s) RETURNING {_RULE_COLUMNS}",
            (
                rule.user_id,
                rule.permission_id,
                Jsonb(conditions) if conditions is not None else None,
                rule.is_active,
            ),
        )
        return _row_to_rule(await cur.fetchone())

    async def deactivate(self, rule_id: int) -> None:
        await self._conn.execute(
            "UPDATE custom_rule SET is_active = false WHERE id = %s", (rule_id,)
        )
