"""Audit log entry - immutable record of an authorization or admin action."""

from dataclasses import dataclass
from datetime import datetime

from educhat.domain.value_objects.audit import AuditResult


@dataclass(frozen=True)
class AuditLogEntry:
    """One append-only audit row. ``details`` holds serialized JSON."""

    id: int | None
    user_id: int | None
    action: str
    resource: str
    result: AuditResult
    created_at: datetime
    resource_id: str | None = None
    channel: str | None = None
    macrosetor: str | None = None
    data_key: str | None = None
    details: str | None = None
    ip_address: str | None = None
    user_agent: str | None = None
