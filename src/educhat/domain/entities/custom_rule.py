"""Custom rule entity - per-user permission override."""

from dataclasses import dataclass
from datetime import datetime

from educhat.domain.value_objects.custom_rule_conditions import CustomRuleConditions


@dataclass
class CustomRule:
    """Grants a permission to one user outside their role, optionally scoped."""

    id: int
    user_id: int
    permission_id: int
    conditions: CustomRuleConditions | None = None
    is_active: bool = True
    created_at: datetime | None = None
