"""Role entity for RBAC."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Role:
    """Role - named bundle of permissions (gerente, atendente, ...)."""

    id: int
    name: str
    description: str | None = None
    is_active: bool = True
    created_at: datetime | None = None
