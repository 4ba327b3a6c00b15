"""JSON shapes for API responses and request body helpers."""

from datetime import datetime
from typing import Any

import falcon
import falcon.asgi

from educhat.application.dto.actor import Actor
from educhat.application.dto.audit_dto import AuditLogView
from educhat.domain.entities import AuditLogEntry, CustomRule, Permission, Role, User
from educhat.domain.value_objects.roles import is_superuser
from educhat.interfaces.api.authorization import client_ip
from educhat.interfaces.api.errors import ApiError


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


async def read_body(req: falcon.asgi.Request) -> dict[str, Any]:
    """Return the JSON object body, or raise a 400."""
    try:
        body = await req.get_media()
    except (falcon.MediaNotFoundError, falcon.MediaMalformedError):
        raise ApiError(400, "Corpo da requisição inválido")
    if not isinstance(body, dict):
        raise ApiError(400, "Corpo da requisição inválido")
    return body


def actor_from(req: falcon.asgi.Request) -> Actor:
    user = req.context.user
    return Actor(
        user_id=user.id,
        ip_address=client_ip(req),
        user_agent=req.user_agent,
        is_admin=is_superuser(user.role),
        data_key=user.data_key,
    )


def permission_to_dict(p: Permission) -> dict[str, Any]:
    return {
        "id": p.id,
        "name": p.name,
        "resource": p.resource,
        "action": p.action,
        "description": p.description,
        "category": p.category,
        "is_active": p.is_active,
        "created_at": _iso(p.created_at),
    }


def role_to_dict(r: Role, permissions: list[Permission] | None = None) -> dict[str, Any]:
    data = {
        "id": r.id,
        "name": r.name,
        "description": r.description,
        "is_active": r.is_active,
        "created_at": _iso(r.created_at),
    }
    if permissions is not None:
        data["permissions"] = [permission_to_dict(p) for p in permissions]
    return data


def user_to_dict(u: User) -> dict[str, Any]:
    return {
        "id": u.id,
        "username": u.username,
        "email": u.email,
        "display_name": u.display_name,
        "role": u.role,
        "role_id": u.role_id,
        "team_id": u.team_id,
        "data_key": u.data_key,
        "channels": list(u.channels),
        "macrosetores": list(u.macrosetores),
        "is_active": u.is_active,
        "status": u.status,
        "is_online": u.is_online,
        "last_login_at": _iso(u.last_login_at),
        "last_activity_at": _iso(u.last_activity_at),
        "created_at": _iso(u.created_at),
    }


def custom_rule_to_dict(rule: CustomRule, permission: Permission | None = None) -> dict[str, Any]:
    data = {
        "id": rule.id,
        "user_id": rule.user_id,
        "permission_id": rule.permission_id,
        "conditions": rule.conditions.to_dict() if rule.conditions else None,
        "is_active": rule.is_active,
        "created_at": _iso(rule.created_at),
    }
    if permission is not None:
        data["permission"] = permission_to_dict(permission)
    return data


def audit_entry_to_dict(e: AuditLogEntry) -> dict[str, Any]:
    return {
        "id": e.id,
        "user_id": e.user_id,
        "action": e.action,
        "resource": e.resource,
        "resource_id": e.resource_id,
        "channel": e.channel,
        "macrosetor": e.macrosetor,
        "data_key": e.data_key,
        "details": e.details,
        "ip_address": e.ip_address,
        "user_agent": e.user_agent,
        "result": str(e.result),
        "created_at": _iso(e.created_at),
    }


def audit_view_to_dict(view: AuditLogView) -> dict[str, Any]:
    data = audit_entry_to_dict(view.entry)
    data["user_name"] = view.user_name
    data["user_email"] = view.user_email
    return data


def int_field(body: dict[str, Any], *keys: str) -> int:
    """First present key as an int; 400 when missing or not numeric."""
    for key in keys:
        value = body.get(key)
        if value is None:
            continue
        if isinstance(value, bool):
            break
        try:
            return int(value)
        except (TypeError, ValueError):
            break
    raise ApiError(400, f"Campo inválido: {keys[0]}")


def int_list(value: Any, name: str) -> list[int]:
    if not isinstance(value, list):
        raise ApiError(400, f"Campo inválido: {name}")
    try:
        return [int(v) for v in value]
    except (TypeError, ValueError):
        raise ApiError(400, f"Campo inválido: {name}")
