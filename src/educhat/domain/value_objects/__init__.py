"""Domain value objects."""

from educhat.domain.value_objects.audit import (
    AccessDetails,
    AuditAction,
    AuditDetails,
    AuditResult,
    ChangeDetails,
    serialize_details,
)
from educhat.domain.value_objects.custom_rule_conditions import CustomRuleConditions
from educhat.domain.value_objects.permission_context import (
    HierarchicalFilter,
    PermissionContext,
)

__all__ = [
    "AccessDetails",
    "AuditAction",
    "AuditDetails",
    "AuditResult",
    "ChangeDetails",
    "CustomRuleConditions",
    "HierarchicalFilter",
    "PermissionContext",
    "serialize_details",
]
