"""Audit log port - append-only sink for decisions and admin actions."""

from typing import Protocol

from educhat.application.dto.audit_dto import AuditLogInput


class AuditLog(Protocol):
    """Port for recording audit entries. Implementations never raise."""

    async def log_action(self, entry: AuditLogInput) -> None: ...
