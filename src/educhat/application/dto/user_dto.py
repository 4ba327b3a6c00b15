"""User update DTO."""

from dataclasses import dataclass, fields
from typing import Any

_UNSET: Any = object()


@dataclass
class UserUpdateInput:
    """Fields an admin may change on a user. Unset fields are left untouched.

    The role tag is not accepted directly; it follows ``role_id``.
    """

    display_name: Any = _UNSET
    role_id: Any = _UNSET
    team_id: Any = _UNSET
    data_key: Any = _UNSET
    channels: Any = _UNSET
    macrosetores: Any = _UNSET
    status: Any = _UNSET

    @classmethod
    def from_body(cls, body: dict[str, Any]) -> "UserUpdateInput":
        names = {f.name for f in fields(cls)}
        camel = {"displayName": "display_name", "roleId": "role_id", "teamId": "team_id", "dataKey": "data_key"}
        values: dict[str, Any] = {}
        for key, value in body.items():
            name = camel.get(key, key)
            if name in names:
                values[name] = value
        return cls(**values)

    def changes(self) -> dict[str, Any]:
        """Only the fields that were provided."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not _UNSET
        }
