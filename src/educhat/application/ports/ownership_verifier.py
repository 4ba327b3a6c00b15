"""Ownership verifier port - does a resource belong to a user."""

from typing import Protocol


class OwnershipVerifier(Protocol):
    """Port implemented per resource type (conversa, contato, negocio, ...)."""

    async def verify(self, user_id: int, resource: str, resource_id: str) -> bool: ...
