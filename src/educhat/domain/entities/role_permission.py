"""Role-permission grant."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class RolePermission:
    """Grant of a permission to a role. Revoked grants keep the row, inactive."""

    role_id: int
    permission_id: int
    is_active: bool = True
    created_at: datetime | None = None
