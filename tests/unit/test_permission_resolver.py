"""Unit tests for EduChatPermissionResolver."""

from contextlib import asynccontextmanager
from dataclasses import replace
from unittest.mock import AsyncMock

import pytest

from educhat.domain.entities import CustomRule
from educhat.domain.value_objects import CustomRuleConditions, PermissionContext
from educhat.infrastructure.permission.ownership import OwnershipRegistry
from educhat.infrastructure.permission.permission_resolver import EduChatPermissionResolver

from tests.conftest import FakeUnitOfWork, factory_for, make_user


@pytest.fixture
def seeded_uow() -> FakeUnitOfWork:
    """Role "atendente" (id 1) granting conversa:ver; user 7 restricted to whatsapp/comercial."""
    uow = FakeUnitOfWork()
    role = uow.roles.add_role("atendente")
    view = uow.permissions.add_permission("conversa:ver")
    uow.permissions.add_permission("conversa:excluir")
    uow.roles.grant(role.id, view.id)
    uow.users.add_user(
        make_user(7, role_id=role.id, channels=["whatsapp"], macrosetores=["comercial"])
    )
    uow.users.add_user(make_user(1, role="admin", display_name="Admin"))
    return uow


@pytest.fixture
def resolver(seeded_uow: FakeUnitOfWork) -> EduChatPermissionResolver:
    return EduChatPermissionResolver(factory_for(seeded_uow))


def _add_rule(uow: FakeUnitOfWork, user_id: int, permission_name: str, conditions=None) -> CustomRule:
    permission = next(p for p in uow.permissions._by_id.values() if p.name == permission_name)
    rule = CustomRule(
        id=len(uow.custom_rules._by_id) + 1,
        user_id=user_id,
        permission_id=permission.id,
        conditions=CustomRuleConditions.from_dict(conditions),
    )
    uow.custom_rules._by_id[rule.id] = rule
    return rule


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "permission,context",
    [
        ("conversa:ver", None),
        ("qualquer:coisa", PermissionContext(channel="facebook", macrosetor="outro")),
        ("conversa:editar_proprio", PermissionContext(resource_id="99")),
    ],
)
async def test_admin_bypasses_every_check(resolver, permission, context) -> None:
    assert await resolver.has_permission(1, permission, context) is True


@pytest.mark.asyncio
async def test_inactive_admin_is_denied(seeded_uow, resolver) -> None:
    admin = await seeded_uow.users.get_by_id(1)
    await seeded_uow.users.update(replace(admin, is_active=False))
    assert await resolver.has_permission(1, "conversa:ver") is False


@pytest.mark.asyncio
async def test_inactive_user_denied_despite_grant(seeded_uow, resolver) -> None:
    user = await seeded_uow.users.get_by_id(7)
    await seeded_uow.users.update(replace(user, is_active=False))
    assert await resolver.has_permission(7, "conversa:ver") is False


@pytest.mark.asyncio
async def test_unknown_user_denied(resolver) -> None:
    assert await resolver.has_permission(404, "conversa:ver") is False


@pytest.mark.asyncio
async def test_role_grant_respects_channel_membership(resolver) -> None:
    assert await resolver.has_permission(7, "conversa:ver", PermissionContext(channel="whatsapp")) is True
    assert await resolver.has_permission(7, "conversa:ver", PermissionContext(channel="instagram")) is False


@pytest.mark.asyncio
async def test_role_grant_respects_macrosetor_membership(resolver) -> None:
    ctx = PermissionContext(channel="whatsapp", macrosetor="financeiro")
    assert await resolver.has_permission(7, "conversa:ver", ctx) is False


@pytest.mark.asyncio
async def test_empty_membership_admits_any_context(seeded_uow, resolver) -> None:
    user = await seeded_uow.users.get_by_id(7)
    await seeded_uow.users.update(replace(user, channels=[], macrosetores=[]))
    ctx = PermissionContext(channel="anything", macrosetor="anywhere")
    assert await resolver.has_permission(7, "conversa:ver", ctx) is True


@pytest.mark.asyncio
async def test_custom_rule_grants_and_revocation_removes(seeded_uow, resolver) -> None:
    assert await resolver.has_permission(7, "conversa:excluir") is False
    rule = _add_rule(seeded_uow, 7, "conversa:excluir")
    assert await resolver.has_permission(7, "conversa:excluir") is True

    await seeded_uow.custom_rules.deactivate(rule.id)
    assert await resolver.has_permission(7, "conversa:excluir") is False
    assert await resolver.has_permission(7, "conversa:ver") is True


@pytest.mark.asyncio
async def test_custom_rule_conditions_enforced(seeded_uow, resolver) -> None:
    _add_rule(seeded_uow, 7, "conversa:excluir", {"channels": ["email"]})
    assert await resolver.has_permission(7, "conversa:excluir", PermissionContext(channel="sms")) is False
    assert await resolver.has_permission(7, "conversa:excluir", PermissionContext(channel="email")) is True


@pytest.mark.asyncio
async def test_custom_rule_conditions_all_must_hold(seeded_uow, resolver) -> None:
    _add_rule(seeded_uow, 7, "conversa:excluir", {"channels": ["email"], "macrosetores": ["suporte"]})
    ok = PermissionContext(channel="email", macrosetor="suporte")
    wrong_sector = PermissionContext(channel="email", macrosetor="comercial")
    assert await resolver.has_permission(7, "conversa:excluir", ok) is True
    assert await resolver.has_permission(7, "conversa:excluir", wrong_sector) is False


@pytest.mark.asyncio
async def test_custom_rule_on_inactive_permission_does_not_grant(seeded_uow, resolver) -> None:
    _add_rule(seeded_uow, 7, "conversa:excluir")
    permission = await seeded_uow.permissions.get_by_name("conversa:excluir")
    await seeded_uow.permissions.update(replace(permission, is_active=False))
    assert await resolver.has_permission(7, "conversa:excluir") is False


@pytest.mark.asyncio
async def test_deny_by_default(resolver) -> None:
    assert await resolver.has_permission(7, "conversa:excluir") is False


@pytest.mark.asyncio
async def test_inactive_grant_does_not_allow(seeded_uow, resolver) -> None:
    await seeded_uow.roles.deactivate_all_grants(1)
    assert await resolver.has_permission(7, "conversa:ver") is False


@pytest.mark.asyncio
async def test_empty_permission_name_denied(resolver) -> None:
    assert await resolver.has_permission(1, "") is False


@pytest.mark.asyncio
async def test_storage_failure_resolves_to_deny() -> None:
    @asynccontextmanager
    async def broken_factory():
        raise RuntimeError("connection refused")
        yield

    resolver = EduChatPermissionResolver(broken_factory)
    assert await resolver.has_permission(7, "conversa:ver") is False
    assert await resolver.get_user_permissions(7) == []
    assert await resolver.is_admin(7) is False


@pytest.mark.asyncio
async def test_ownership_verifier_consulted_for_resource_id(seeded_uow) -> None:
    verifier = AsyncMock()
    verifier.verify.return_value = False
    resolver = EduChatPermissionResolver(factory_for(seeded_uow), ownership_verifier=verifier)

    ctx = PermissionContext(channel="whatsapp", resource_id="55")
    assert await resolver.has_permission(7, "conversa:ver", ctx) is False
    verifier.verify.assert_awaited_once_with(7, "conversa", "55")


@pytest.mark.asyncio
async def test_unregistered_resource_ownership_is_delegated(seeded_uow) -> None:
    registry = OwnershipRegistry()
    resolver = EduChatPermissionResolver(factory_for(seeded_uow), ownership_verifier=registry)
    ctx = PermissionContext(resource_id="55")
    assert await resolver.has_permission(7, "conversa:ver", ctx) is True


@pytest.mark.asyncio
async def test_has_any_and_has_all(resolver) -> None:
    names = ["conversa:excluir", "conversa:ver"]
    assert await resolver.has_any_permission(7, names) is True
    assert await resolver.has_all_permissions(7, names) is False
    assert await resolver.has_any_permission(7, []) is False


@pytest.mark.asyncio
async def test_get_user_permissions(seeded_uow, resolver) -> None:
    _add_rule(seeded_uow, 7, "conversa:excluir")
    assert await resolver.get_user_permissions(7) == ["conversa:excluir", "conversa:ver"]
    assert await resolver.get_user_permissions(1) == ["*"]
    assert await resolver.is_admin(1) is True
    assert await resolver.is_admin(7) is False
