"""Authorization gate for HTTP handlers.

``AccessGuard`` turns a resolver decision into either a pass-through or an
``ApiError``, and writes the audit trail for each decision. The Falcon hooks
in ``interfaces.api.hooks`` call into it.
"""

import logging
from collections.abc import Callable
from typing import Any

import falcon.asgi

from educhat.application.dto.audit_dto import AuditLogInput
from educhat.application.ports import AuditLog, PermissionResolver
from educhat.domain.value_objects import (
    AccessDetails,
    AuditAction,
    AuditResult,
    HierarchicalFilter,
    PermissionContext,
)
from educhat.domain.value_objects.roles import (
    AGENT_ROLE,
    is_own_resource_permission,
    is_superuser,
    permission_resource,
)
from educhat.interfaces.api.errors import (
    MSG_FORBIDDEN,
    MSG_FORBIDDEN_ADMIN,
    MSG_FORBIDDEN_OWN,
    MSG_INTERNAL,
    MSG_MISSING_RESOURCE_ID,
    MSG_UNAUTHENTICATED,
    ApiError,
)
from educhat.interfaces.api.middleware.auth import RequestUser

logger = logging.getLogger(__name__)

ContextExtractor = Callable[[falcon.asgi.Request, dict[str, Any]], PermissionContext | None]
ResourceIdExtractor = Callable[[falcon.asgi.Request, dict[str, Any]], Any]


def client_ip(req: falcon.asgi.Request) -> str | None:
    route = req.access_route
    return route[0] if route else req.remote_addr


class AccessGuard:
    """Permission gate with audit logging.

    Denials are written to the audit log before the error is raised. Plain
    permission checks that succeed are not audited; hierarchical checks log
    every decision.
    """

    def __init__(self, permission_resolver: PermissionResolver, audit_log: AuditLog) -> None:
        self._resolver = permission_resolver
        self._audit = audit_log

    async def require_permission(
        self,
        req: falcon.asgi.Request,
        params: dict[str, Any],
        permission_name: str,
        context_extractor: ContextExtractor | None = None,
    ) -> None:
        try:
            user = await self._authenticated(req, permission_name)
            context = (context_extractor(req, params) if context_extractor else None) or PermissionContext()
            if await self._resolver.has_permission(user.id, permission_name, context):
                return
            await self._deny(req, user, permission_name, context)
        except ApiError:
            raise
        except Exception:
            logger.exception("Authorization failed for permission=%s", permission_name)
            raise ApiError(500, MSG_INTERNAL)

    async def require_any_permission(
        self,
        req: falcon.asgi.Request,
        params: dict[str, Any],
        permission_names: list[str],
        context_extractor: ContextExtractor | None = None,
    ) -> None:
        joined = "|".join(permission_names)
        try:
            user = await self._authenticated(req, joined)
            context = (context_extractor(req, params) if context_extractor else None) or PermissionContext()
            if await self._resolver.has_any_permission(user.id, permission_names, context):
                return
            await self._deny(req, user, joined, context)
        except ApiError:
            raise
        except Exception:
            logger.exception("Authorization failed for permissions=%s", joined)
            raise ApiError(500, MSG_INTERNAL)

    async def require_hierarchical_permission(
        self,
        req: falcon.asgi.Request,
        params: dict[str, Any],
        permission_name: str,
        resource_id_extractor: ResourceIdExtractor | None = None,
    ) -> None:
        """Gate with own-resource semantics for ``*_proprio`` permissions."""
        try:
            await self._hierarchical(req, params, permission_name, resource_id_extractor)
        except ApiError:
            raise
        except Exception:
            logger.exception("Hierarchical authorization failed for permission=%s", permission_name)
            raise ApiError(500, MSG_INTERNAL)

    async def _hierarchical(
        self,
        req: falcon.asgi.Request,
        params: dict[str, Any],
        permission_name: str,
        resource_id_extractor: ResourceIdExtractor | None,
    ) -> None:
        user = await self._authenticated(req, permission_name)
        resource = permission_resource(permission_name)

        if is_superuser(user.role):
            await self._log_decision(req, user, resource, permission_name, None, granted=True)
            return

        if is_own_resource_permission(permission_name):
            raw_id = resource_id_extractor(req, params) if resource_id_extractor else params.get("id")
            if raw_id is None or raw_id == "":
                raise ApiError(400, MSG_MISSING_RESOURCE_ID)
            resource_id = str(raw_id)
            granted = await self._resolver.has_permission(
                user.id, permission_name, PermissionContext(resource_id=resource_id)
            )
            await self._log_decision(req, user, resource, permission_name, resource_id, granted)
            if not granted:
                logger.info("Own-resource access denied: user=%s %s=%s", user.id, resource, resource_id)
                raise ApiError(403, MSG_FORBIDDEN_OWN)
            return

        granted = await self._resolver.has_permission(user.id, permission_name)
        await self._log_decision(req, user, resource, permission_name, None, granted)
        if not granted:
            logger.info("Access denied: user=%s permission=%s", user.id, permission_name)
            raise ApiError(403, MSG_FORBIDDEN)

    async def apply_hierarchical_filter(self, req: falcon.asgi.Request) -> None:
        """Attach query scoping for agents; other roles see everything they may access."""
        user = getattr(req.context, "user", None)
        if user is None:
            raise ApiError(401, MSG_UNAUTHENTICATED)
        if user.role == AGENT_ROLE:
            req.context.hierarchical_filter = HierarchicalFilter(assigned_user_id=user.id)
        else:
            req.context.hierarchical_filter = None

    async def require_admin(self, req: falcon.asgi.Request) -> None:
        user = await self._authenticated(req, "admin")
        if is_superuser(user.role):
            return
        logger.info("Admin-only access denied: user=%s", user.id)
        await self._audit.log_action(
            AuditLogInput(
                user_id=user.id,
                action=AuditAction.ADMIN_ACCESS_DENIED,
                resource="admin",
                result=AuditResult.UNAUTHORIZED,
                details=AccessDetails(permission="admin", method=req.method, path=req.path),
                ip_address=client_ip(req),
                user_agent=req.user_agent,
            )
        )
        raise ApiError(403, MSG_FORBIDDEN_ADMIN)

    async def require_authenticated(self, req: falcon.asgi.Request) -> RequestUser:
        return await self._authenticated(req, req.path)

    async def _authenticated(self, req: falcon.asgi.Request, resource: str) -> RequestUser:
        user = getattr(req.context, "user", None)
        if user is not None:
            return user
        await self._audit.log_action(
            AuditLogInput(
                action=AuditAction.ACCESS_DENIED,
                resource=resource,
                result=AuditResult.UNAUTHORIZED,
                details=AccessDetails(permission=resource, method=req.method, path=req.path),
                ip_address=client_ip(req),
                user_agent=req.user_agent,
            )
        )
        raise ApiError(401, MSG_UNAUTHENTICATED)

    async def _deny(
        self,
        req: falcon.asgi.Request,
        user: RequestUser,
        permission_name: str,
        context: PermissionContext,
    ) -> None:
        logger.info("Permission denied: user=%s permission=%s", user.id, permission_name)
        await self._audit.log_action(
            AuditLogInput(
                user_id=user.id,
                action=AuditAction.PERMISSION_DENIED,
                resource=permission_name,
                result=AuditResult.UNAUTHORIZED,
                resource_id=context.resource_id,
                channel=context.channel,
                macrosetor=context.macrosetor,
                details=AccessDetails(
                    permission=permission_name,
                    channel=context.channel,
                    macrosetor=context.macrosetor,
                    resource_id=context.resource_id,
                    method=req.method,
                    path=req.path,
                ),
                ip_address=client_ip(req),
                user_agent=req.user_agent,
            )
        )
        raise ApiError(403, MSG_FORBIDDEN)

    async def _log_decision(
        self,
        req: falcon.asgi.Request,
        user: RequestUser,
        resource: str,
        permission_name: str,
        resource_id: str | None,
        granted: bool,
    ) -> None:
        await self._audit.log_action(
            AuditLogInput(
                user_id=user.id,
                action=AuditAction.ACCESS_GRANTED if granted else AuditAction.ACCESS_DENIED,
                resource=resource,
                resource_id=resource_id,
                result=AuditResult.SUCCESS if granted else AuditResult.UNAUTHORIZED,
                details=AccessDetails(
                    permission=permission_name,
                    resource_id=resource_id,
                    method=req.method,
                    path=req.path,
                ),
                ip_address=client_ip(req),
                user_agent=req.user_agent,
            )
        )
