"""PostgreSQL audit log repository - append and query only."""

from typing import Any

from psycopg import AsyncConnection

from educhat.application.dto.audit_dto import AuditLogQuery, AuditLogView
from educhat.domain.entities import AuditLogEntry
from educhat.domain.value_objects import AuditResult

_COLUMNS = (
    "a.id, a.user_id, a.action, a.resource, a.result, a.created_at, a.resource_id, "
    "a.channel, a.macrosetor, a.data_key, a.details, a.ip_address, a.user_agent"
)


def _row_to_entry(r: tuple) -> AuditLogEntry:
    return AuditLogEntry(
        id=r[0],
        user_id=r[1],
        action=r[2],
        resource=r[3],
        result=AuditResult(r[4]),
        created_at=r[5],
        resource_id=r[6],
        channel=r[7],
        macrosetor=r[8],
        data_key=r[9],
        details=r[10],
        ip_address=r[11],
        user_agent=r[12],
    )


def _where(query: AuditLogQuery) -> tuple[str, list[Any]]:
    conditions = ["true"]
    params: list[Any] = []
    if query.user_id is not None:
        conditions.append("a.user_id = %s")
        params.append(query.user_id)
    if query.action:
        conditions.append("a.action = %s")
        params.append(query.action)
    if query.resource:
        conditions.append("a.resource = %s")
        params.append(query.resource)
    if query.start_date:
        conditions.append("a.created_at >= %s")
        params.append(query.start_date)
    if query.end_date:
        conditions.append("a.created_at <= %s")
        params.append(query.end_date)
    return " AND ".join(conditions), params


class PostgresAuditLogRepository:
    """Audit log repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def append(self, entry: AuditLogEntry) -> None:
        await self._conn.execute(
            "INSERT INTO audit_log (user_id, action, resource, resource_id, channel, "
            "macrosetor, data_key, details, ip_address, user_agent, result, created_at) "
            "VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)",
            (
                entry.user_id,
                entry.action,
                entry.resource,
                entry.resource_id,
                entry.channel,
                entry.macrosetor,
                entry.data_key,
                entry.details,
                entry.ip_address,
                entry.user_agent,
                entry.result.value,
                entry.created_at,
            ),
        )

    async def search(self, query: AuditLogQuery) -> list[AuditLogView]:
        where, params = _where(query)
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS}, u.display_name, u.email FROM audit_log a "
            f"LEFT JOIN user_account u ON u.id = a.user_id WHERE {where} "
            "ORDER BY a.created_at DESC LIMIT %s OFFSET %s",
            (*params, query.limit, query.offset),
        )
        rows = await cur.fetchall()
        return [
            AuditLogView(entry=_row_to_entry(r[:13]), user_name=r[13], user_email=r[14])
            for r in rows
        ]

    async def count(self, query: AuditLogQuery) -> int:
        where, params = _where(query)
        cur = await self._conn.execute(f"SELECT count(*) FROM audit_log a WHERE {where}", params)
        r = await cur.fetchone()
        return r[0]

    async def list_recent(self, limit: int = 10) -> list[AuditLogEntry]:
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM audit_log a ORDER BY a.created_at DESC LIMIT %s", (limit,)
        )
        rows = await cur.fetchall()
        return [_row_to_entry(r) for r in rows]
