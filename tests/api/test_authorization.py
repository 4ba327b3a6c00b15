"""Authorization hook tests: status codes, messages and audit trail."""

from unittest.mock import AsyncMock

import falcon.asgi
from falcon.testing import TestClient

from educhat.domain.value_objects import AuditResult
from educhat.interfaces.api.authorization import AccessGuard
from educhat.interfaces.api.errors import (
    MSG_FORBIDDEN,
    MSG_FORBIDDEN_ADMIN,
    MSG_UNAUTHENTICATED,
    register_error_handlers,
)

from tests.api.conftest import (
    ADMIN_ID,
    AGENT_ID,
    MANAGER_ID,
    ConversationsResource,
    HeaderAuthMiddleware,
    OwnConversationsResource,
    as_user,
)
from tests.conftest import FailingAuditLogRepository


def _entries(seeded_uow):
    return seeded_uow.audit_logs.entries


def test_unauthenticated_request_is_401_and_audited(client, seeded_uow) -> None:
    result = client.simulate_get("/api/conversations")

    assert result.status_code == 401
    assert result.json == {"message": "Acesso negado - usuário não autenticado"}
    entries = _entries(seeded_uow)
    assert len(entries) == 1
    assert entries[0].action == "access_denied"
    assert entries[0].resource == "conversa:ver"
    assert entries[0].user_id is None
    assert entries[0].result == AuditResult.UNAUTHORIZED


def test_granted_in_scope_proceeds_without_audit(client, seeded_uow) -> None:
    result = client.simulate_get(
        "/api/conversations",
        params={"channel": "whatsapp", "macrosetor": "comercial"},
        headers=as_user(AGENT_ID),
    )

    assert result.status_code == 200
    assert _entries(seeded_uow) == []


def test_out_of_scope_channel_is_403_with_one_denial(client, seeded_uow) -> None:
    result = client.simulate_get(
        "/api/conversations", params={"channel": "facebook"}, headers=as_user(AGENT_ID)
    )

    assert result.status_code == 403
    assert result.json == {"message": "Acesso negado - permissão insuficiente"}
    entries = _entries(seeded_uow)
    assert len(entries) == 1
    assert entries[0].action == "permission_denied"
    assert entries[0].resource == "conversa:ver"
    assert entries[0].channel == "facebook"
    assert entries[0].user_id == AGENT_ID
    assert entries[0].result == AuditResult.UNAUTHORIZED


def test_admin_passes_any_context(client, seeded_uow) -> None:
    result = client.simulate_get(
        "/api/conversations", params={"channel": "facebook"}, headers=as_user(ADMIN_ID)
    )
    assert result.status_code == 200
    assert _entries(seeded_uow) == []


def test_any_permission_denial_uses_joined_names(client, seeded_uow) -> None:
    result = client.simulate_delete("/api/conversations", headers=as_user(AGENT_ID))

    assert result.status_code == 403
    entries = _entries(seeded_uow)
    assert len(entries) == 1
    assert entries[0].resource == "conversa:excluir|conversa:arquivar"


def test_hierarchical_own_resource_without_id_is_400(client, seeded_uow) -> None:
    result = client.simulate_put("/api/my-conversations", headers=as_user(AGENT_ID))

    assert result.status_code == 400
    assert result.json == {"message": "ID do recurso não fornecido"}
    assert _entries(seeded_uow) == []


def test_hierarchical_missing_id_never_calls_resolver(seeded_uow) -> None:
    resolver = AsyncMock()
    audit = AsyncMock()
    app = falcon.asgi.App(middleware=[HeaderAuthMiddleware(seeded_uow)])
    register_error_handlers(app)
    app.add_route("/api/my-conversations", OwnConversationsResource(AccessGuard(resolver, audit)))

    result = TestClient(app).simulate_put("/api/my-conversations", headers=as_user(AGENT_ID))

    assert result.status_code == 400
    resolver.has_permission.assert_not_awaited()
    audit.log_action.assert_not_awaited()


def test_hierarchical_own_resource_granted_is_audited(client, seeded_uow) -> None:
    result = client.simulate_put("/api/conversations/55", headers=as_user(AGENT_ID))

    assert result.status_code == 200
    entries = _entries(seeded_uow)
    assert len(entries) == 1
    assert entries[0].action == "access_granted"
    assert entries[0].resource == "conversa"
    assert entries[0].resource_id == "55"
    assert entries[0].result == AuditResult.SUCCESS


def test_hierarchical_own_resource_denied(client, seeded_uow) -> None:
    result = client.simulate_put("/api/conversations/55", headers=as_user(8))

    assert result.status_code == 403
    assert result.json == {"message": "Acesso negado - você só pode acessar seus próprios recursos"}
    entries = _entries(seeded_uow)
    assert len(entries) == 1
    assert entries[0].action == "access_denied"
    assert entries[0].result == AuditResult.UNAUTHORIZED


def test_hierarchical_plain_permission_denied(client, seeded_uow) -> None:
    result = client.simulate_get("/api/conversations/5", headers=as_user(MANAGER_ID))

    assert result.status_code == 403
    assert result.json == {"message": "Acesso negado - permissão insuficiente"}
    assert len(_entries(seeded_uow)) == 1


def test_hierarchical_admin_bypass_is_logged(client, seeded_uow) -> None:
    result = client.simulate_get("/api/conversations/5", headers=as_user(ADMIN_ID))

    assert result.status_code == 200
    assert result.json["assigned_user_id"] is None
    entries = _entries(seeded_uow)
    assert len(entries) == 1
    assert entries[0].action == "access_granted"
    assert entries[0].user_id == ADMIN_ID


def test_hierarchical_filter_scopes_agents(client) -> None:
    result = client.simulate_get("/api/conversations/5", headers=as_user(AGENT_ID))

    assert result.status_code == 200
    assert result.json["assigned_user_id"] == AGENT_ID


def test_require_admin(client, seeded_uow) -> None:
    assert client.simulate_get("/api/admin-only", headers=as_user(ADMIN_ID)).status_code == 200

    result = client.simulate_get("/api/admin-only", headers=as_user(MANAGER_ID))
    assert result.status_code == 403
    assert result.json == {"message": "Acesso negado - apenas administradores"}
    assert _entries(seeded_uow)[-1].action == "admin_access_denied"


def test_resolver_crash_is_500_with_generic_message(seeded_uow) -> None:
    resolver = AsyncMock()
    resolver.has_permission.side_effect = RuntimeError("boom")
    audit = AsyncMock()
    app = falcon.asgi.App(middleware=[HeaderAuthMiddleware(seeded_uow)])
    register_error_handlers(app)
    app.add_route("/api/conversations", ConversationsResource(AccessGuard(resolver, audit)))

    result = TestClient(app).simulate_get("/api/conversations", headers=as_user(AGENT_ID))

    assert result.status_code == 500
    assert result.json == {"message": "Erro interno do servidor"}


def test_audit_storage_failure_does_not_change_denials(client, seeded_uow) -> None:
    seeded_uow.audit_logs = FailingAuditLogRepository(seeded_uow.users)

    anonymous = client.simulate_get("/api/conversations")
    forbidden = client.simulate_get("/api/admin/permissions", headers=as_user(AGENT_ID))
    not_admin = client.simulate_get("/api/admin-only", headers=as_user(MANAGER_ID))

    assert anonymous.status_code == 401
    assert anonymous.json == {"message": MSG_UNAUTHENTICATED}
    assert forbidden.status_code == 403
    assert forbidden.json == {"message": MSG_FORBIDDEN}
    assert not_admin.status_code == 403
    assert not_admin.json == {"message": MSG_FORBIDDEN_ADMIN}
