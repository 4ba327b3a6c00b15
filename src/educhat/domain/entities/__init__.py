"""Domain entities."""

from educhat.domain.entities.audit_log_entry import AuditLogEntry
from educhat.domain.entities.custom_rule import CustomRule
from educhat.domain.entities.permission import Permission
from educhat.domain.entities.role import Role
from educhat.domain.entities.role_permission import RolePermission
from educhat.domain.entities.user import User

__all__ = [
    "AuditLogEntry",
    "CustomRule",
    "Permission",
    "Role",
    "RolePermission",
    "User",
]
