"""Application entry point and composition root."""

import logging
import sys

import falcon.asgi

from educhat import __version__
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
from educhat.config import get_settings
from educhat.infrastructure.activity.activity_monitor import ActivityMonitor
from educhat.infrastructure.activity.activity_tracker import ActivityTracker
from educhat.infrastructure.audit.audit_log_sink import AuditLogSink
from educhat.infrastructure.auth.keycloak_provider import KeycloakProvider
from educhat.infrastructure.permission.ownership import OwnershipRegistry
from educhat.infrastructure.permission.permission_resolver import EduChatPermissionResolver
from educhat.infrastructure.persistence.postgres.connection import create_pool
from educhat.infrastructure.persistence.postgres.unit_of_work import create_uow_factory
from educhat.interfaces.api.authorization import AccessGuard
from educhat.interfaces.api.errors import register_error_handlers
from educhat.interfaces.api.middleware.activity import ActivityMiddleware
from educhat.interfaces.api.middleware.auth import AuthMiddleware
from educhat.interfaces.api.middleware.cors import CORSMiddleware
from educhat.interfaces.api.middleware.pool_lifespan import PoolLifespanMiddleware
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


def main() -> None:
    """CLI entry point."""
    print(f"EduChat access control v{__version__}")


def configure_logging(level: str = "INFO") -> None:
    """Single stream handler on the root logger."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level.upper())


async def _owns_user_record(user_id: int, resource_id: str) -> bool:
    return str(user_id) == resource_id


def create_educhat_app():
    """Composition root - build Falcon app with all dependencies."""
    settings = get_settings()
    configure_logging(settings.log_level)

    pool = create_pool(
        settings.database_url,
        min_size=settings.database_pool_min_size,
        max_size=settings.database_pool_max_size,
    )
    uow_factory = create_uow_factory(pool)

    keycloak = (
        KeycloakProvider(
            server_url=settings.keycloak_url,
            realm=settings.keycloak_realm,
            client_id=settings.keycloak_client_id,
            client_secret=settings.keycloak_client_secret,
        )
        if settings.keycloak_client_secret
        else None
    )

    ownership = OwnershipRegistry()
    ownership.register("usuario", _owns_user_record)
    permission_resolver = EduChatPermissionResolver(uow_factory, ownership_verifier=ownership)
    audit_log = AuditLogSink(uow_factory)
    access_guard = AccessGuard(permission_resolver, audit_log)

    activity_monitor = ActivityMonitor(settings.inactivity_timeout_seconds)
    activity_tracker = ActivityTracker(uow_factory, activity_monitor, audit_log)

    use_case_deps = {"unit_of_work_factory": uow_factory, "audit_log": audit_log}
    create_permission = CreatePermissionUseCase(**use_case_deps)
    update_permission = UpdatePermissionUseCase(**use_case_deps)
    create_role = CreateRoleUseCase(**use_case_deps)
    update_role = UpdateRoleUseCase(**use_case_deps)
    set_role_permissions = SetRolePermissionsUseCase(**use_case_deps)
    grant_role_permission = GrantRolePermissionUseCase(**use_case_deps)
    revoke_role_permission = RevokeRolePermissionUseCase(**use_case_deps)
    update_user = UpdateUserUseCase(**use_case_deps)
    create_custom_rule = CreateCustomRuleUseCase(**use_case_deps)
    revoke_custom_rule = RevokeCustomRuleUseCase(**use_case_deps)

    cors_origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
    app = falcon.asgi.App(
        middleware=[
            CORSMiddleware(cors_origins),
            PoolLifespanMiddleware(pool, activity_monitor),
            AuthMiddleware(keycloak, uow_factory),
            ActivityMiddleware(activity_tracker),
        ],
    )
    register_error_handlers(app)

    health_resource = HealthResource(uow_factory, activity_monitor)
    app.add_route("/api/health", health_resource)
    app.add_route("/api/health/ready", health_resource, suffix="ready")
    app.add_route("/api/auth/logout", LogoutResource(access_guard, activity_tracker))

    app.add_route(
        "/api/admin/permissions",
        PermissionsResource(access_guard, uow_factory, audit_log, create_permission),
    )
    app.add_route(
        "/api/admin/permissions/{permission_id:int}",
        PermissionResource(access_guard, update_permission),
    )
    app.add_route("/api/admin/roles", RolesResource(access_guard, uow_factory, create_role))
    app.add_route("/api/admin/roles/{role_id:int}", RoleResource(access_guard, update_role))
    app.add_route(
        "/api/admin/roles/{role_id:int}/permissions",
        RolePermissionSetResource(access_guard, set_role_permissions),
    )
    app.add_route(
        "/api/admin/role-permissions/{role_id:int}",
        RolePermissionsResource(access_guard, uow_factory),
    )
    app.add_route(
        "/api/admin/role-permissions",
        RolePermissionGrantResource(access_guard, grant_role_permission, revoke_role_permission),
    )
    app.add_route("/api/admin/users", UsersResource(access_guard, uow_factory))
    app.add_route("/api/admin/users/{user_id:int}", UserResource(access_guard, update_user))
    app.add_route(
        "/api/admin/users/{user_id:int}/custom-rules",
        UserCustomRulesResource(access_guard, uow_factory, create_custom_rule),
    )
    app.add_route(
        "/api/admin/custom-rules/{rule_id:int}",
        CustomRuleResource(access_guard, revoke_custom_rule),
    )
    app.add_route(
        "/api/admin/audit-logs",
        AuditLogsResource(access_guard, uow_factory, settings.audit_log_page_limit),
    )
    app.add_route("/api/admin/stats", StatsResource(access_guard, uow_factory))
    app.add_route("/api/admin/my-permissions", MyPermissionsResource(access_guard, uow_factory))

    return app


def run_server() -> None:
    """Run uvicorn server."""
    import uvicorn

    uvicorn.run(create_educhat_app(), host="0.0.0.0", port=8000)
