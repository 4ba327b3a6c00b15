"""Role tags and permission naming conventions."""

SUPERUSER_ROLE = "admin"
AGENT_ROLE = "atendente"
MANAGER_ROLE = "gerente"

# Permissions restricted to resources owned by the caller, e.g. "conversa:editar_proprio".
OWN_RESOURCE_SUFFIX = "_proprio"


def is_superuser(role: str | None) -> bool:
    """Superuser bypass: role "admin" skips every permission and context check."""
    return role == SUPERUSER_ROLE


def permission_resource(permission_name: str) -> str:
    """``conversa:ver`` -> ``conversa``."""
    return permission_name.split(":", 1)[0]


def is_own_resource_permission(permission_name: str) -> bool:
    return permission_name.endswith(OWN_RESOURCE_SUFFIX)


DATA_KEY_SEPARATOR = "."


def in_data_key_scope(scope_key: str | None, data_key: str | None) -> bool:
    """Data-key hierarchy: "sp" covers "sp" and "sp.centro" but not "spx".

    A missing key on either side does not restrict.
    """
    if not scope_key or not data_key:
        return True
    return data_key == scope_key or data_key.startswith(scope_key + DATA_KEY_SEPARATOR)
