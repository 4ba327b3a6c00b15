"""Application ports - interfaces for external adapters."""

from educhat.application.ports.audit_log import AuditLog
from educhat.application.ports.ownership_verifier import OwnershipVerifier
from educhat.application.ports.permission_resolver import PermissionResolver
from educhat.application.ports.unit_of_work import UnitOfWork, UnitOfWorkFactory

__all__ = [
    "AuditLog",
    "OwnershipVerifier",
    "PermissionResolver",
    "UnitOfWork",
    "UnitOfWorkFactory",
]
