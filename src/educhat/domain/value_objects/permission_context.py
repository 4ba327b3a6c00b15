"""Request context for permission checks."""

from dataclasses import dataclass


@dataclass(frozen=True)
class PermissionContext:
    """Optional scope of a permission check."""

    channel: str | None = None
    macrosetor: str | None = None
    resource_id: str | None = None


@dataclass(frozen=True)
class HierarchicalFilter:
    """Query scoping for non-admin roles, consumed by downstream handlers."""

    assigned_user_id: int | None = None
    assigned_team_id: int | None = None
