"""Audit log DTOs."""

from dataclasses import dataclass
from datetime import datetime

from educhat.domain.entities import AuditLogEntry
from educhat.domain.value_objects import AuditDetails, AuditResult


@dataclass
class AuditLogInput:
    """What a caller hands to the audit sink. ``result`` defaults to success."""

    action: str
    resource: str
    user_id: int | None = None
    resource_id: str | None = None
    channel: str | None = None
    macrosetor: str | None = None
    data_key: str | None = None
    details: AuditDetails | None = None
    ip_address: str | None = None
    user_agent: str | None = None
    result: AuditResult = AuditResult.SUCCESS


@dataclass
class AuditLogQuery:
    """Filters and pagination for the audit log viewer."""

    page: int = 1
    limit: int = 50
    user_id: int | None = None
    action: str | None = None
    resource: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass
class AuditLogView:
    """Audit entry joined with the acting user's display name and email."""

    entry: AuditLogEntry
    user_name: str | None = None
    user_email: str | None = None
