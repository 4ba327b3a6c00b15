"""Auth middleware - resolves the bearer token to an EduChat user."""

import logging
from dataclasses import dataclass, field

import falcon.asgi

from educhat.domain.entities import User
from educhat.infrastructure.auth.keycloak_provider import KeycloakProvider

logger = logging.getLogger(__name__)


@dataclass
class RequestUser:
    """Authenticated user attached to ``req.context.user``."""

    id: int
    role: str
    email: str | None = None
    username: str | None = None
    display_name: str | None = None
    role_id: int | None = None
    data_key: str | None = None
    channels: list[str] = field(default_factory=list)
    macrosetores: list[str] = field(default_factory=list)
    team_id: int | None = None

    @classmethod
    def from_user(cls, user: User) -> "RequestUser":
        return cls(
            id=user.id,
            role=user.role,
            email=user.email,
            username=user.username,
            display_name=user.display_name,
            role_id=user.role_id,
            data_key=user.data_key,
            channels=list(user.channels),
            macrosetores=list(user.macrosetores),
            team_id=user.team_id,
        )


class AuthMiddleware:
    """Middleware that validates the bearer token and sets ``req.context.user``.

    Anything short of an active token for a known, active user leaves the
    request unauthenticated (``None``); the authorization hooks answer 401.
    """

    def __init__(self, keycloak_provider: KeycloakProvider | None, unit_of_work_factory: type) -> None:
        self._keycloak = keycloak_provider
        self._uow_factory = unit_of_work_factory

    async def process_request(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        req.context.user = None
        auth = req.get_header("Authorization")
        if not auth or not auth.startswith("Bearer ") or self._keycloak is None:
            return

        identity = await self._keycloak.identify(auth[7:])
        if identity is None or not identity.email:
            return

        async with self._uow_factory() as uow:
            user = await uow.users.get_by_email(identity.email)
        if user is None or not user.is_active:
            logger.info("Token for %s has no active EduChat user", identity.email)
            return
        req.context.user = RequestUser.from_user(user)
