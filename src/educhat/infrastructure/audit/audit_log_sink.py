"""Audit log sink - append-only, best-effort writer."""

import logging
from datetime import UTC, datetime

from educhat.application.dto.audit_dto import AuditLogInput
from educhat.domain.entities import AuditLogEntry
from educhat.domain.value_objects import AuditResult, serialize_details

logger = logging.getLogger(__name__)


class AuditLogSink:
    """Writes audit entries in their own unit of work.

    A failed write is reported to the operational log and dropped; callers
    are never interrupted by audit failures.
    """

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def log_action(self, entry: AuditLogInput) -> None:
        """Append one entry. Never raises."""
        try:
            record = AuditLogEntry(
                id=None,
                user_id=entry.user_id,
                action=str(entry.action),
                resource=entry.resource,
                resource_id=entry.resource_id,
                channel=entry.channel,
                macrosetor=entry.macrosetor,
                data_key=entry.data_key,
                details=serialize_details(entry.details),
                ip_address=entry.ip_address,
                user_agent=entry.user_agent,
                result=AuditResult(entry.result or AuditResult.SUCCESS),
                created_at=datetime.now(UTC),
            )
            async with self._uow_factory() as uow:
                await uow.audit_logs.append(record)
        except Exception:
            logger.exception(
                "Failed to write audit entry action=%s resource=%s user=%s",
                entry.action,
                entry.resource,
                entry.user_id,
            )
