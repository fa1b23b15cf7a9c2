"""Services for accounts business logic."""

from .exceptions import (
    AccountsServiceError,
    UserNotFoundError,
    InvalidDeviceError,
)
from .identity_resolution import resolve_user, get_user_by_id

__all__ = [
    # Exceptions
    'AccountsServiceError',
    'UserNotFoundError',
    'InvalidDeviceError',
    # Services
    'resolve_user',
    'get_user_by_id',
]
