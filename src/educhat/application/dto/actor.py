"""Who performs an admin action, for the audit trail and scope checks."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Actor:
    user_id: int
    ip_address: str | None = None
    user_agent: str | None = None
    is_admin: bool = False
    data_key: str | None = None
