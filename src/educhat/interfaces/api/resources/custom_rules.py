"""Custom rule admin endpoints."""

import falcon
import falcon.asgi

from educhat.application.use_cases.custom_rule.create_custom_rule import CreateCustomRuleUseCase
from educhat.application.use_cases.custom_rule.revoke_custom_rule import RevokeCustomRuleUseCase
from educhat.domain.exceptions import NotFound
from educhat.interfaces.api.authorization import AccessGuard
from educhat.interfaces.api.errors import ApiError
from educhat.interfaces.api.hooks import require_permission
from educhat.interfaces.api.resources.permissions import MANAGE_PERMISSIONS
from educhat.interfaces.api.serializers import actor_from, custom_rule_to_dict, read_body


@falcon.before(require_permission(MANAGE_PERMISSIONS))
class UserCustomRulesResource:
    """GET/POST /api/admin/users/{user_id}/custom-rules."""

    def __init__(
        self,
        access_guard: AccessGuard,
        unit_of_work_factory: type,
        create_custom_rule: CreateCustomRuleUseCase,
    ) -> None:
        self.access_guard = access_guard
        self._uow_factory = unit_of_work_factory
        self._create_custom_rule = create_custom_rule

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response, user_id: int) -> None:
        async with self._uow_factory() as uow:
            if await uow.users.get_by_id(user_id) is None:
                raise NotFound("User", user_id)
            rules = await uow.custom_rules.list_active_for_user(user_id)
        resp.media = {"items": [custom_rule_to_dict(rule, p) for rule, p in rules]}
        resp.status = falcon.HTTP_200

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response, user_id: int) -> None:
        """Body: ``permission_id`` or ``permission`` (name), optional ``conditions``."""
        body = await read_body(req)
        raw_id = body.get("permission_id", body.get("permissionId"))
        try:
            permission_id = int(raw_id) if raw_id is not None else None
        except (TypeError, ValueError):
            raise ApiError(400, "Campo inválido: permission_id")
        rule = await self._create_custom_rule.execute(
            actor_from(req),
            user_id,
            permission_id=permission_id,
            permission_name=body.get("permission") or body.get("permission_name"),
            conditions=body.get("conditions"),
        )
        resp.media = custom_rule_to_dict(rule)
        resp.status = falcon.HTTP_201


@falcon.before(require_permission(MANAGE_PERMISSIONS))
class CustomRuleResource:
    """DELETE /api/admin/custom-rules/{rule_id} - deactivate a rule."""

    def __init__(self, access_guard: AccessGuard, revoke_custom_rule: RevokeCustomRuleUseCase) -> None:
        self.access_guard = access_guard
        self._revoke_custom_rule = revoke_custom_rule

    async def on_delete(self, req: falcon.asgi.Request, resp: falcon.asgi.Response, rule_id: int) -> None:
        await self._revoke_custom_rule.execute(actor_from(req), rule_id)
        resp.status = falcon.HTTP_204
