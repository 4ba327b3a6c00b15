"""Audit value objects: results, actions and typed detail payloads."""

import json
from collections.abc import Mapping
from dataclasses import asdict, dataclass, field, is_dataclass
from datetime import date, datetime
from enum import StrEnum
from typing import Any


class AuditResult(StrEnum):
    """Outcome recorded on an audit entry."""

    SUCCESS = "success"
    FAILURE = "failure"
    UNAUTHORIZED = "unauthorized"


class AuditAction(StrEnum):
    """Known audit actions."""

    ACCESS_GRANTED = "access_granted"
    ACCESS_DENIED = "access_denied"
    PERMISSION_DENIED = "permission_denied"
    ADMIN_ACCESS_DENIED = "admin_access_denied"
    VIEW = "view"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    LOGOUT = "logout"
    SESSION_TIMEOUT = "session_timeout"


@dataclass(frozen=True)
class AccessDetails:
    """Details of an authorization decision."""

    permission: str
    channel: str | None = None
    macrosetor: str | None = None
    resource_id: str | None = None
    method: str | None = None
    path: str | None = None


@dataclass(frozen=True)
class ChangeDetails:
    """Details of an admin mutation: created payload or before/after snapshot."""

    after: Mapping[str, Any] | None = None
    before: Mapping[str, Any] | None = None
    extra: Mapping[str, Any] = field(default_factory=dict)


AuditDetails = AccessDetails | ChangeDetails | Mapping[str, Any]


def _default(value: Any) -> Any:
    if isinstance(value, datetime | date):
        return value.isoformat()
    if isinstance(value, set | frozenset | tuple):
        return list(value)
    if is_dataclass(value) and not isinstance(value, type):
        return asdict(value)
    return str(value)


def serialize_details(details: AuditDetails | None) -> str | None:
    """Serialize a details payload to a JSON string with a ``kind`` tag."""
    if details is None:
        return None
    if isinstance(details, AccessDetails):
        payload: dict[str, Any] = {"kind": "access", **asdict(details)}
    elif isinstance(details, ChangeDetails):
        payload = {"kind": "change", **asdict(details)}
    else:
        payload = dict(details)
    return json.dumps(payload, default=_default, ensure_ascii=False, sort_keys=True)
