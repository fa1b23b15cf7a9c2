"""Domain-specific exceptions for accounts services."""

from apps.core.exceptions import (
    ServiceError,
    NotFoundError,
    InvalidArgumentError,
)


class AccountsServiceError(ServiceError):
    """Base exception for accounts services."""
    pass


class UserNotFoundError(AccountsServiceError, NotFoundError):
    """Raised when user does not exist."""
    pass


class InvalidDeviceError(AccountsServiceError, InvalidArgumentError):
    """Raised when a device identifier is missing or blank."""
    pass
