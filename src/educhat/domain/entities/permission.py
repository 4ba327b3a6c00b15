"""Permission entity - named ``resource:action`` capability."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Permission:
    """Permission - e.g. ``conversa:ver``, ``permissao:gerenciar``."""

    id: int
    name: str
    resource: str
    action: str
    description: str | None = None
    category: str = "general"
    is_active: bool = True
    created_at: datetime | None = None
