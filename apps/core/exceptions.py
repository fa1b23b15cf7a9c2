"""
Error taxonomy shared by all service layers.

Every service function either returns its result or raises one of these.
App-specific exceptions subclass both their app's base error and one of
the classes below, so views can map them to HTTP responses by category.
"""


class ServiceError(Exception):
    """Base exception for all service errors."""
    pass


class NotFoundError(ServiceError):
    """Raised when a referenced user, group, expense or join code is absent."""
    pass


class InvalidArgumentError(ServiceError):
    """Raised when a required field is missing or malformed."""
    pass


class ConflictError(ServiceError):
    """Raised on a uniqueness collision that the caller may retry."""
    pass


class PermissionDeniedError(ServiceError):
    """Raised when an injected policy refuses an action."""
    pass


class StorageUnavailableError(ServiceError):
    """Raised when storage times out, fails, or retries are exhausted."""
    pass
