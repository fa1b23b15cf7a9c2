"""
Domain-specific exceptions for groups app.

These exceptions represent business rule violations and should be
caught in views and converted to appropriate HTTP responses.
"""

from apps.core.exceptions import (
    ServiceError,
    NotFoundError,
    InvalidArgumentError,
    ConflictError,
    PermissionDeniedError,
    StorageUnavailableError,
)


class GroupsServiceError(ServiceError):
    """Base exception for all groups service errors."""
    pass


class GroupNotFoundError(GroupsServiceError, NotFoundError):
    """Raised when a group does not exist."""
    pass


class InvalidJoinCodeError(GroupsServiceError, NotFoundError):
    """Raised when no group has the given join code."""
    pass


class InvalidGroupError(GroupsServiceError, InvalidArgumentError):
    """Raised when group fields are missing or malformed."""
    pass


class JoinCodeCollisionError(GroupsServiceError, ConflictError):
    """Raised when a generated join code is already taken."""
    pass


class JoinCodeExhaustedError(GroupsServiceError, StorageUnavailableError):
    """Raised when no unique join code could be generated within the retry budget."""
    pass


class InsufficientPermissionsError(GroupsServiceError, PermissionDeniedError):
    """Raised when the join approval policy refuses the caller."""
    pass
