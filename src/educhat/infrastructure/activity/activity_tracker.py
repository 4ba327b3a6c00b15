"""Last-activity bookkeeping and session expiry."""

import logging
from datetime import UTC, datetime

from educhat.application.dto.audit_dto import AuditLogInput
from educhat.application.ports import AuditLog
from educhat.domain.value_objects import AuditAction
from educhat.infrastructure.activity.activity_monitor import ActivityMonitor

logger = logging.getLogger(__name__)


class ActivityTracker:
    """Persists activity timestamps and ends sessions on timeout or logout."""

    def __init__(
        self,
        unit_of_work_factory: type,
        activity_monitor: ActivityMonitor,
        audit_log: AuditLog,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._monitor = activity_monitor
        self._audit = audit_log

    @property
    def monitor(self) -> ActivityMonitor:
        return self._monitor

    def record_activity(self, user_id: int) -> None:
        """Push the user's inactivity deadline out."""
        self._monitor.reset_timer(user_id, lambda: self.expire_session(user_id))

    async def touch(self, user_id: int) -> None:
        """Write ``last_activity_at`` and mark the user online. Best effort."""
        try:
            async with self._uow_factory() as uow:
                await uow.users.touch_last_activity(user_id, datetime.now(UTC))
        except Exception:
            logger.warning("Failed to update last activity for user=%s", user_id, exc_info=True)

    async def expire_session(self, user_id: int) -> None:
        """Inactivity logout: mark offline and audit."""
        await self._set_offline(user_id)
        await self._audit.log_action(
            AuditLogInput(
                user_id=user_id,
                action=AuditAction.SESSION_TIMEOUT,
                resource="session",
                details={"timeout_seconds": self._monitor.timeout_seconds},
            )
        )

    async def end_session(
        self, user_id: int, ip_address: str | None = None, user_agent: str | None = None
    ) -> None:
        """Explicit logout."""
        self._monitor.clear_timer(user_id)
        await self._set_offline(user_id)
        await self._audit.log_action(
            AuditLogInput(
                user_id=user_id,
                action=AuditAction.LOGOUT,
                resource="session",
                ip_address=ip_address,
                user_agent=user_agent,
            )
        )

    async def _set_offline(self, user_id: int) -> None:
        try:
            async with self._uow_factory() as uow:
                await uow.users.set_online(user_id, False)
        except Exception:
            logger.warning("Failed to mark user=%s offline", user_id, exc_info=True)
