"""Audit log repository port."""

from typing import Protocol

from educhat.application.dto.audit_dto import AuditLogQuery, AuditLogView
from educhat.domain.entities import AuditLogEntry


class AuditLogRepository(Protocol):
    """Port for the append-only audit table. No update or delete."""

    async def append(self, entry: AuditLogEntry) -> None: ...

    async def search(self, query: AuditLogQuery) -> list[AuditLogView]: ...

    async def count(self, query: AuditLogQuery) -> int: ...

    async def list_recent(self, limit: int = 10) -> list[AuditLogEntry]: ...
