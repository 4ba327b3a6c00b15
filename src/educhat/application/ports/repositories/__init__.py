"""Repository ports."""

from educhat.application.ports.repositories.audit_log_repository import (
    AuditLogRepository,
)
from educhat.application.ports.repositories.custom_rule_repository import (
    CustomRuleRepository,
)
from educhat.application.ports.repositories.permission_repository import (
    PermissionRepository,
)
from educhat.application.ports.repositories.role_repository import RoleRepository
from educhat.application.ports.repositories.user_repository import UserRepository

__all__ = [
    "AuditLogRepository",
    "CustomRuleRepository",
    "PermissionRepository",
    "RoleRepository",
    "UserRepository",
]
