"""Audit log viewer endpoint."""

from datetime import datetime

import falcon
import falcon.asgi

from educhat.application.dto.audit_dto import AuditLogQuery
from educhat.interfaces.api.authorization import AccessGuard
from educhat.interfaces.api.errors import ApiError
from educhat.interfaces.api.hooks import require_permission
from educhat.interfaces.api.resources.permissions import MANAGE_PERMISSIONS
from educhat.interfaces.api.serializers import audit_view_to_dict


def _parse_date(req: falcon.asgi.Request, name: str) -> datetime | None:
    raw = req.get_param(name)
    if not raw:
        return None
    try:
        return datetime.fromisoformat(raw)
    except ValueError:
        raise ApiError(400, f"Data inválida: {name}")


@falcon.before(require_permission(MANAGE_PERMISSIONS))
class AuditLogsResource:
    """GET /api/admin/audit-logs - filtered, paginated, newest first."""

    def __init__(self, access_guard: AccessGuard, unit_of_work_factory: type, max_page_size: int = 200) -> None:
        self.access_guard = access_guard
        self._uow_factory = unit_of_work_factory
        self._max_page_size = max_page_size

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        page = max(req.get_param_as_int("page") or 1, 1)
        limit = req.get_param_as_int("limit") or 50
        limit = min(max(limit, 1), self._max_page_size)

        query = AuditLogQuery(
            page=page,
            limit=limit,
            user_id=req.get_param_as_int("userId"),
            action=req.get_param("action") or None,
            resource=req.get_param("resource") or None,
            start_date=_parse_date(req, "startDate"),
            end_date=_parse_date(req, "endDate"),
        )
        async with self._uow_factory() as uow:
            views = await uow.audit_logs.search(query)
            total = await uow.audit_logs.count(query)

        resp.media = {
            "items": [audit_view_to_dict(v) for v in views],
            "page": page,
            "limit": limit,
            "total": total,
        }
        resp.status = falcon.HTTP_200
