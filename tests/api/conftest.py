"""Fixtures for API tests."""

import falcon
import falcon.asgi
import pytest
from falcon.testing import TestClient

from educhat.application.use_cases.custom_rule.create_custom_rule import CreateCustomRuleUseCase
from educhat.application.use_cases.custom_rule.revoke_custom_rule import RevokeCustomRuleUseCase
from educhat.application.use_cases.permission.create_permission import CreatePermissionUseCase
from educhat.application.use_cases.permission.update_permission import UpdatePermissionUseCase
from educhat.application.use_cases.role.create_role import CreateRoleUseCase
from educhat.application.use_cases.role.grant_role_permission import GrantRolePermissionUseCase
from educhat.application.use_cases.role.revoke_role_permission import RevokeRolePermissionUseCase
from educhat.application.use_cases.role.set_role_permissions import SetRolePermissionsUseCase
from educhat.application.use_cases.role.update_role import UpdateRoleUseCase
from educhat.application.use_cases.user.update_user import UpdateUserUseCase
from educhat.domain.value_objects import PermissionContext
from educhat.infrastructure.activity.activity_monitor import ActivityMonitor
from educhat.infrastructure.activity.activity_tracker import ActivityTracker
from educhat.infrastructure.audit.audit_log_sink import AuditLogSink
from educhat.infrastructure.permission.permission_resolver import EduChatPermissionResolver
from educhat.interfaces.api.authorization import AccessGuard
from educhat.interfaces.api.errors import register_error_handlers
from educhat.interfaces.api.hooks import (
    apply_hierarchical_filter,
    require_admin,
    require_any_permission,
    require_hierarchical_permission,
    require_permission,
)
from educhat.interfaces.api.middleware.auth import RequestUser
from educhat.interfaces.api.resources.audit_logs import AuditLogsResource
from educhat.interfaces.api.resources.custom_rules import CustomRuleResource, UserCustomRulesResource
from educhat.interfaces.api.resources.health import HealthResource
from educhat.interfaces.api.resources.my_permissions import MyPermissionsResource
from educhat.interfaces.api.resources.permissions import PermissionResource, PermissionsResource
from educhat.interfaces.api.resources.roles import (
    RolePermissionGrantResource,
    RolePermissionSetResource,
    RolePermissionsResource,
    RoleResource,
    RolesResource,
)
from educhat.interfaces.api.resources.session import LogoutResource
from educhat.interfaces.api.resources.stats import StatsResource
from educhat.interfaces.api.resources.users import UserResource, UsersResource

from tests.conftest import FakeUnitOfWork, make_user

ADMIN_ID = 1
MANAGER_ID = 2
AGENT_ID = 7


class HeaderAuthMiddleware:
    """Sets ``req.context.user`` from the ``X-Test-User`` header (a user id)."""

    def __init__(self, uow: FakeUnitOfWork) -> None:
        self._uow = uow

    async def process_request(self, req, resp):
        req.context.user = None
        raw = req.get_header("X-Test-User")
        if raw is None:
            return
        user = await self._uow.users.get_by_id(int(raw))
        if user is not None and user.is_active:
            req.context.user = RequestUser.from_user(user)


def _conversation_context(req, params):
    return PermissionContext(
        channel=req.get_param("channel"),
        macrosetor=req.get_param("macrosetor"),
    )


class ConversationsResource:
    """Stand-in business endpoint gated by context-scoped permissions."""

    def __init__(self, access_guard: AccessGuard) -> None:
        self.access_guard = access_guard

    @falcon.before(require_permission("conversa:ver", _conversation_context))
    async def on_get(self, req, resp):
        resp.media = {"items": []}

    @falcon.before(require_any_permission(["conversa:excluir", "conversa:arquivar"]))
    async def on_delete(self, req, resp):
        resp.status = falcon.HTTP_204


class ConversationResource:
    def __init__(self, access_guard: AccessGuard) -> None:
        self.access_guard = access_guard

    @falcon.before(require_hierarchical_permission("conversa:editar_proprio"))
    async def on_put(self, req, resp, id):
        resp.media = {"id": id}

    @falcon.before(require_hierarchical_permission("conversa:ver"))
    @falcon.before(apply_hierarchical_filter())
    async def on_get(self, req, resp, id):
        scope = req.context.hierarchical_filter
        resp.media = {"id": id, "assigned_user_id": scope.assigned_user_id if scope else None}


class OwnConversationsResource:
    """Own-resource route with no ``id`` parameter."""

    def __init__(self, access_guard: AccessGuard) -> None:
        self.access_guard = access_guard

    @falcon.before(require_hierarchical_permission("conversa:editar_proprio"))
    async def on_put(self, req, resp):
        resp.media = {"ok": True}


@falcon.before(require_admin())
class AdminOnlyResource:
    def __init__(self, access_guard: AccessGuard) -> None:
        self.access_guard = access_guard

    async def on_get(self, req, resp):
        resp.media = {"ok": True}


@pytest.fixture
def seeded_uow(fake_uow: FakeUnitOfWork) -> FakeUnitOfWork:
    """Admin (1), manager (2, data key "sp") and agent (7, whatsapp/comercial)."""
    agent_role = fake_uow.roles.add_role("atendente")
    manager_role = fake_uow.roles.add_role("gerente")
    for name in ("conversa:ver", "conversa:editar_proprio"):
        permission = fake_uow.permissions.add_permission(name, category="conversas")
        fake_uow.roles.grant(agent_role.id, permission.id)
    for name in ("usuario:ver", "usuario:editar"):
        permission = fake_uow.permissions.add_permission(name, category="usuarios")
        fake_uow.roles.grant(manager_role.id, permission.id)
    fake_uow.permissions.add_permission("conversa:excluir", category="conversas")
    fake_uow.permissions.add_permission("permissao:gerenciar", category="admin")

    fake_uow.users.add_user(make_user(ADMIN_ID, role="admin", display_name="Admin"))
    fake_uow.users.add_user(
        make_user(MANAGER_ID, role="gerente", role_id=manager_role.id, data_key="sp", display_name="Gerente")
    )
    fake_uow.users.add_user(
        make_user(
            AGENT_ID,
            role_id=agent_role.id,
            channels=["whatsapp"],
            macrosetores=["comercial"],
            data_key="sp.centro",
            display_name="Atendente",
        )
    )
    fake_uow.users.add_user(make_user(8, data_key="rj", display_name="Outro Atendente"))
    return fake_uow


@pytest.fixture
def app(seeded_uow, uow_factory):
    """Falcon ASGI app wired with fakes, real resolver and real audit sink."""
    audit_log = AuditLogSink(uow_factory)
    resolver = EduChatPermissionResolver(uow_factory)
    guard = AccessGuard(resolver, audit_log)
    tracker = ActivityTracker(uow_factory, ActivityMonitor(), audit_log)
    deps = {"unit_of_work_factory": uow_factory, "audit_log": audit_log}

    app = falcon.asgi.App(middleware=[HeaderAuthMiddleware(seeded_uow)])
    register_error_handlers(app)

    app.add_route("/api/health", HealthResource())
    app.add_route("/api/auth/logout", LogoutResource(guard, tracker))
    app.add_route(
        "/api/admin/permissions",
        PermissionsResource(guard, uow_factory, audit_log, CreatePermissionUseCase(**deps)),
    )
    app.add_route(
        "/api/admin/permissions/{permission_id:int}",
        PermissionResource(guard, UpdatePermissionUseCase(**deps)),
    )
    app.add_route("/api/admin/roles", RolesResource(guard, uow_factory, CreateRoleUseCase(**deps)))
    app.add_route("/api/admin/roles/{role_id:int}", RoleResource(guard, UpdateRoleUseCase(**deps)))
    app.add_route(
        "/api/admin/roles/{role_id:int}/permissions",
        RolePermissionSetResource(guard, SetRolePermissionsUseCase(**deps)),
    )
    app.add_route("/api/admin/role-permissions/{role_id:int}", RolePermissionsResource(guard, uow_factory))
    app.add_route(
        "/api/admin/role-permissions",
        RolePermissionGrantResource(
            guard, GrantRolePermissionUseCase(**deps), RevokeRolePermissionUseCase(**deps)
        ),
    )
    app.add_route("/api/admin/users", UsersResource(guard, uow_factory))
    app.add_route("/api/admin/users/{user_id:int}", UserResource(guard, UpdateUserUseCase(**deps)))
    app.add_route(
        "/api/admin/users/{user_id:int}/custom-rules",
        UserCustomRulesResource(guard, uow_factory, CreateCustomRuleUseCase(**deps)),
    )
    app.add_route("/api/admin/custom-rules/{rule_id:int}", CustomRuleResource(guard, RevokeCustomRuleUseCase(**deps)))
    app.add_route("/api/admin/audit-logs", AuditLogsResource(guard, uow_factory))
    app.add_route("/api/admin/stats", StatsResource(guard, uow_factory))
    app.add_route("/api/admin/my-permissions", MyPermissionsResource(guard, uow_factory))

    app.add_route("/api/conversations", ConversationsResource(guard))
    app.add_route("/api/conversations/{id}", ConversationResource(guard))
    app.add_route("/api/my-conversations", OwnConversationsResource(guard))
    app.add_route("/api/admin-only", AdminOnlyResource(guard))
    return app


@pytest.fixture
def client(app):
    """Falcon ASGI test client."""
    return TestClient(app)


def as_user(user_id: int) -> dict[str, str]:
    return {"X-Test-User": str(user_id)}
