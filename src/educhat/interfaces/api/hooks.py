"""Falcon ``before`` hooks wrapping ``AccessGuard``.

Decorated resources must expose the guard as ``access_guard``::

    @falcon.before(require_permission("permissao:gerenciar"))
    class PermissionsResource:
        def __init__(self, access_guard, ...):
            self.access_guard = access_guard
"""

from educhat.interfaces.api.authorization import ContextExtractor, ResourceIdExtractor


def require_permission(permission_name: str, context_extractor: ContextExtractor | None = None):
    async def hook(req, resp, resource, params):
        await resource.access_guard.require_permission(req, params, permission_name, context_extractor)

    return hook


def require_any_permission(permission_names: list[str], context_extractor: ContextExtractor | None = None):
    names = list(permission_names)

    async def hook(req, resp, resource, params):
        await resource.access_guard.require_any_permission(req, params, names, context_extractor)

    return hook


def require_hierarchical_permission(
    permission_name: str, resource_id_extractor: ResourceIdExtractor | None = None
):
    async def hook(req, resp, resource, params):
        await resource.access_guard.require_hierarchical_permission(
            req, params, permission_name, resource_id_extractor
        )

    return hook


def apply_hierarchical_filter():
    async def hook(req, resp, resource, params):
        await resource.access_guard.apply_hierarchical_filter(req)

    return hook


def require_admin():
    async def hook(req, resp, resource, params):
        await resource.access_guard.require_admin(req)

    return hook


def require_authenticated():
    """Only an authenticated user is required; no permission is checked."""

    async def hook(req, resp, resource, params):
        await resource.access_guard.require_authenticated(req)

    return hook
