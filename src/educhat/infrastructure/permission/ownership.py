"""Ownership verification registry for own-resource permissions."""

import logging
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

OwnershipCheck = Callable[[int, str], Awaitable[bool]]


class OwnershipRegistry:
    """Dispatches ownership checks by resource (``conversa``, ``contato``, ...).

    The data layer of each resource registers its own check. Resources with
    no registered check are not verified here.
    """

    def __init__(self) -> None:
        self._checks: dict[str, OwnershipCheck] = {}

    def register(self, resource: str, check: OwnershipCheck) -> None:
        self._checks[resource] = check

    def is_registered(self, resource: str) -> bool:
        return resource in self._checks

    async def verify(self, user_id: int, resource: str, resource_id: str) -> bool:
        check = self._checks.get(resource)
        if check is None:
            logger.debug("No ownership check for resource=%s, delegating", resource)
            return True
        return await check(user_id, resource_id)
