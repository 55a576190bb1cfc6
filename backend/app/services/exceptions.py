"""Domain exceptions for group and review services."""


class AmorServiceError(Exception):
    """Base exception for all service errors."""
    pass


class Unauthorized(AmorServiceError):
    """Caller lacks the role required for this action."""
    pass


class ValidationError(AmorServiceError):
    """Group input (name, tags, images) is malformed."""
    pass


class StorageError(AmorServiceError):
    """The object store could not complete an upload or delete."""
    pass
