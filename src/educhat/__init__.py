"""EduChat access control - RBAC engine, audit log and admin API."""

__version__ = "0.1.0"
