"""User entity - authenticated principal of the platform."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class User:
    """System user with coarse role tag, fine-grained role and scoping data.

    Users are never deleted; ``is_active``/``status`` carry the lifecycle.
    """

    id: int
    username: str
    email: str
    display_name: str
    role: str
    role_id: int | None = None
    data_key: str | None = None
    channels: list[str] = field(default_factory=list)
    macrosetores: list[str] = field(default_factory=list)
    team_id: int | None = None
    is_active: bool = True
    status: str = "active"
    is_online: bool = False
    last_login_at: datetime | None = None
    last_activity_at: datetime | None = None
    created_at: datetime | None = None
