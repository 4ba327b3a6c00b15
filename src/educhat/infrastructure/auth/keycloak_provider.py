"""Keycloak OIDC provider - token introspection for upstream authentication."""

import logging
from dataclasses import dataclass

from keycloak import KeycloakOpenID
from keycloak.exceptions import KeycloakError

logger = logging.getLogger(__name__)


@dataclass
class OIDCIdentity:
    """Identity asserted by an active access token."""

    subject: str
    email: str | None
    username: str | None


class KeycloakProvider:
    """Validates bearer tokens against Keycloak and returns the identity."""

    def __init__(
        self,
        server_url: str,
        realm: str,
        client_id: str,
        client_secret: str = "",
    ) -> None:
        self._keycloak = KeycloakOpenID(
            server_url=server_url,
            realm_name=realm,
            client_id=client_id,
            client_secret_key=client_secret,
        )

    async def identify(self, token: str) -> OIDCIdentity | None:
        """Introspect token; ``None`` when inactive or unverifiable."""
        try:
            info = await self._keycloak.a_introspect(token)
        except KeycloakError:
            logger.info("Token introspection rejected", exc_info=True)
            return None
        if not info.get("active"):
            return None
        return OIDCIdentity(
            subject=info.get("sub", ""),
            email=info.get("email"),
            username=info.get("preferred_username"),
        )
