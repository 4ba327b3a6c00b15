"""Pytest fixtures for EduChat access control tests."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import replace
from datetime import datetime
from typing import Any

import pytest

from educhat.application.dto.audit_dto import AuditLogQuery, AuditLogView
from educhat.domain.entities import (
    AuditLogEntry,
    CustomRule,
    Permission,
    Role,
    RolePermission,
    User,
)


# --- Fake repositories ---


class FakeUserRepository:
    """In-memory user repository."""

    def __init__(self) -> None:
        self._by_id: dict[int, User] = {}

    def add_user(self, user: User) -> User:
        self._by_id[user.id] = user
        return user

    async def get_by_id(self, user_id: int) -> User | None:
        return self._by_id.get(user_id)

    async def get_by_email(self, email: str) -> User | None:
        for user in self._by_id.values():
            if user.email == email:
                return user
        return None

    async def list_all(self, assigned_user_id: int | None = None) -> list[User]:
        users = [
            u for u in self._by_id.values() if assigned_user_id is None or u.id == assigned_user_id
        ]
        return sorted(users, key=lambda u: u.display_name)

    async def update(self, user: User) -> None:
        self._by_id[user.id] = user

    async def touch_last_activity(self, user_id: int, at: datetime) -> None:
        user = self._by_id.get(user_id)
        if user:
            self._by_id[user_id] = replace(user, last_activity_at=at, is_online=True)

    async def set_online(self, user_id: int, online: bool) -> None:
        user = self._by_id.get(user_id)
        if user:
            self._by_id[user_id] = replace(user, is_online=online)

    async def stats(self) -> dict[str, Any]:
        users = list(self._by_id.values())
        return {
            "total": len(users),
            "active": sum(1 for u in users if u.status == "active"),
            "online": sum(1 for u in users if u.is_online),
        }


class FakePermissionRepository:
    """In-memory permission catalogue."""

    def __init__(self) -> None:
        self._by_id: dict[int, Permission] = {}
        self._next_id = 1

    def add_permission(self, name: str, category: str = "general", is_active: bool = True) -> Permission:
        resource, _, action = name.partition(":")
        permission = Permission(
            id=self._next_id,
            name=name,
            resource=resource,
            action=action,
            category=category,
            is_active=is_active,
        )
        self._by_id[permission.id] = permission
        self._next_id += 1
        return permission

    async def get_by_id(self, permission_id: int) -> Permission | None:
        return self._by_id.get(permission_id)

    async def get_by_name(self, name: str) -> Permission | None:
        for p in self._by_id.values():
            if p.name == name:
                return p
        return None

    async def list_all(self) -> list[Permission]:
        return sorted(self._by_id.values(), key=lambda p: (p.category, p.resource, p.action))

    async def list_active_by_names(self, names: list[str]) -> list[Permission]:
        return [p for p in self._by_id.values() if p.is_active and p.name in names]

    async def create(self, permission: Permission) -> Permission:
        created = replace(permission, id=self._next_id)
        self._by_id[created.id] = created
        self._next_id += 1
        return created

    async def update(self, permission: Permission) -> None:
        self._by_id[permission.id] = permission

    async def count_active(self) -> int:
        return sum(1 for p in self._by_id.values() if p.is_active)


class FakeRoleRepository:
    """In-memory roles and role-permission grants."""

    def __init__(self, permissions: FakePermissionRepository) -> None:
        self._permissions = permissions
        self._by_id: dict[int, Role] = {}
        self._grants: dict[tuple[int, int], RolePermission] = {}
        self._next_id = 1

    def add_role(self, name: str, is_active: bool = True) -> Role:
        role = Role(id=self._next_id, name=name, is_active=is_active)
        self._by_id[role.id] = role
        self._next_id += 1
        return role

    def grant(self, role_id: int, permission_id: int, is_active: bool = True) -> None:
        self._grants[(role_id, permission_id)] = RolePermission(role_id, permission_id, is_active)

    async def get_by_id(self, role_id: int) -> Role | None:
        return self._by_id.get(role_id)

    async def get_by_name(self, name: str) -> Role | None:
        for r in self._by_id.values():
            if r.name == name:
                return r
        return None

    async def list_active(self) -> list[Role]:
        return sorted((r for r in self._by_id.values() if r.is_active), key=lambda r: r.name)

    async def create(self, role: Role) -> Role:
        created = replace(role, id=self._next_id)
        self._by_id[created.id] = created
        self._next_id += 1
        return created

    async def update(self, role: Role) -> None:
        self._by_id[role.id] = role

    async def count_active(self) -> int:
        return sum(1 for r in self._by_id.values() if r.is_active)

    async def has_active_grant(self, role_id: int, permission_name: str) -> bool:
        return any(p.name == permission_name for p in await self.list_granted_permissions(role_id))

    async def list_granted_permissions(self, role_id: int) -> list[Permission]:
        granted = []
        for (rid, pid), grant in self._grants.items():
            if rid != role_id or not grant.is_active:
                continue
            permission = await self._permissions.get_by_id(pid)
            if permission and permission.is_active:
                granted.append(permission)
        return sorted(granted, key=lambda p: (p.category, p.resource, p.action))

    async def get_grant(self, role_id: int, permission_id: int) -> RolePermission | None:
        return self._grants.get((role_id, permission_id))

    async def activate_grant(self, role_id: int, permission_id: int) -> RolePermission:
        grant = RolePermission(role_id, permission_id, True)
        self._grants[(role_id, permission_id)] = grant
        return grant

    async def deactivate_grant(self, role_id: int, permission_id: int) -> bool:
        grant = self._grants.get((role_id, permission_id))
        if grant is None or not grant.is_active:
            return False
        self._grants[(role_id, permission_id)] = replace(grant, is_active=False)
        return True

    async def deactivate_all_grants(self, role_id: int) -> None:
        for key, grant in list(self._grants.items()):
            if key[0] == role_id:
                self._grants[key] = replace(grant, is_active=False)


class FakeCustomRuleRepository:
    """In-memory custom rules."""

    def __init__(self, permissions: FakePermissionRepository) -> None:
        self._permissions = permissions
        self._by_id: dict[int, CustomRule] = {}
        self._next_id = 1

    async def get_by_id(self, rule_id: int) -> CustomRule | None:
        return self._by_id.get(rule_id)

    async def get_active_for(self, user_id: int, permission_name: str) -> CustomRule | None:
        for rule in sorted(self._by_id.values(), key=lambda r: r.id):
            if rule.user_id != user_id or not rule.is_active:
                continue
            permission = await self._permissions.get_by_id(rule.permission_id)
            if permission and permission.is_active and permission.name == permission_name:
                return rule
        return None

    async def list_active_for_user(self, user_id: int) -> list[tuple[CustomRule, Permission]]:
        out = []
        for rule in self._by_id.values():
            if rule.user_id == user_id and rule.is_active:
                permission = await self._permissions.get_by_id(rule.permission_id)
                if permission:
                    out.append((rule, permission))
        return sorted(out, key=lambda pair: pair[1].name)

    async def create(self, rule: CustomRule) -> CustomRule:
        created = replace(rule, id=self._next_id)
        self._by_id[created.id] = created
        self._next_id += 1
        return created

    async def deactivate(self, rule_id: int) -> None:
        rule = self._by_id.get(rule_id)
        if rule:
            self._by_id[rule_id] = replace(rule, is_active=False)


class FakeAuditLogRepository:
    """Append-only in-memory audit log."""

    def __init__(self, users: FakeUserRepository) -> None:
        self._users = users
        self.entries: list[AuditLogEntry] = []

    async def append(self, entry: AuditLogEntry) -> None:
        self.entries.append(replace(entry, id=len(self.entries) + 1))

    def _matching(self, query: AuditLogQuery) -> list[AuditLogEntry]:
        out = []
        for e in self.entries:
            if query.user_id is not None and e.user_id != query.user_id:
                continue
            if query.action and e.action != query.action:
                continue
            if query.resource and e.resource != query.resource:
                continue
            if query.start_date and e.created_at < query.start_date:
                continue
            if query.end_date and e.created_at > query.end_date:
                continue
            out.append(e)
        return sorted(out, key=lambda e: e.created_at, reverse=True)

    async def search(self, query: AuditLogQuery) -> list[AuditLogView]:
        page = self._matching(query)[query.offset : query.offset + query.limit]
        views = []
        for e in page:
            user = await self._users.get_by_id(e.user_id) if e.user_id is not None else None
            views.append(
                AuditLogView(
                    entry=e,
                    user_name=user.display_name if user else None,
                    user_email=user.email if user else None,
                )
            )
        return views

    async def count(self, query: AuditLogQuery) -> int:
        return len(self._matching(query))

    async def list_recent(self, limit: int = 10) -> list[AuditLogEntry]:
        return sorted(self.entries, key=lambda e: e.created_at, reverse=True)[:limit]


class FailingAuditLogRepository(FakeAuditLogRepository):
    """Audit repository whose writes always fail."""

    async def append(self, entry: AuditLogEntry) -> None:
        raise RuntimeError("audit storage unavailable")


class FakeUnitOfWork:
    """In-memory Unit of Work with fake repositories."""

    def __init__(self) -> None:
        self.users = FakeUserRepository()
        self.permissions = FakePermissionRepository()
        self.roles = FakeRoleRepository(self.permissions)
        self.custom_rules = FakeCustomRuleRepository(self.permissions)
        self.audit_logs = FakeAuditLogRepository(self.users)

    async def commit(self) -> None:
        pass

    async def rollback(self) -> None:
        pass


def factory_for(uow: FakeUnitOfWork):
    """Factory that yields the same FakeUnitOfWork on every call."""

    @asynccontextmanager
    async def _factory() -> AsyncIterator[FakeUnitOfWork]:
        yield uow

    return _factory


def make_user(user_id: int, role: str = "atendente", **kwargs: Any) -> User:
    defaults: dict[str, Any] = {
        "username": f"user{user_id}",
        "email": f"user{user_id}@educhat.test",
        "display_name": f"User {user_id}",
    }
    defaults.update(kwargs)
    return User(id=user_id, role=role, **defaults)


# --- Fixtures ---


@pytest.fixture
def fake_uow() -> FakeUnitOfWork:
    """Fresh in-memory UnitOfWork for each test."""
    return FakeUnitOfWork()


@pytest.fixture
def uow_factory(fake_uow: FakeUnitOfWork):
    """Factory returning async context manager with the test's FakeUnitOfWork."""
    return factory_for(fake_uow)


@pytest.fixture
def mock_audit_log():
    """AsyncMock for AuditLog - records log_action calls."""
    from unittest.mock import AsyncMock

    mock = AsyncMock()
    mock.log_action.return_value = None
    return mock
