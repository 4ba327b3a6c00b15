"""Domain exceptions."""


class EduChatError(Exception):
    """Base exception for EduChat access control."""

    pass


class PermissionDenied(EduChatError):
    """User does not have permission for the requested action."""

    pass


class NotFound(EduChatError):
    """Requested resource was not found."""

    def __init__(self, entity: str, key: object) -> None:
        super().__init__(f"{entity} not found: {key}")
        self.entity = entity
        self.key = key


class Conflict(EduChatError):
    """Resource already exists (unique name, duplicate grant)."""

    pass


class ValidationError(EduChatError):
    """Validation failed for input data."""

    pass
