"""
Identity resolution service.

Maps an opaque device identifier to a stable User record.
"""

import logging
from uuid import UUID

from django.core.exceptions import ValidationError
from django.db import transaction, IntegrityError

from apps.accounts.models import User
from apps.core.storage import storage_guard

from .exceptions import InvalidDeviceError, UserNotFoundError

logger = logging.getLogger(__name__)


@storage_guard
def resolve_user(*, device_id: str, display_name: str = '') -> User:
    """
    Look up the user for a device, creating one on first sight.

    Safe to call on every client launch. When the user already exists and
    a non-empty ``display_name`` differs from the stored one, the stored
    name is updated in place.

    Args:
        device_id: Opaque device identifier
        display_name: Name reported by the device

    Returns:
        User instance

    Raises:
        InvalidDeviceError: If device_id is missing or blank
    """
    device_id = (device_id or '').strip()
    if not device_id:
        raise InvalidDeviceError("device_id is required")

    display_name = (display_name or '').strip()

    try:
        with transaction.atomic():
            user, created = User.objects.get_or_create(
                device_id=device_id,
                defaults={'display_name': display_name},
            )
    except IntegrityError:
        # Another request registered the same device first
        user, created = User.objects.get(device_id=device_id), False

    if created:
        logger.info("Registered user %s for new device", user.id)
        return user

    if display_name and user.display_name != display_name:
        user.display_name = display_name
        user.save(update_fields=['display_name', 'updated_at'])
        logger.debug("Updated display name of user %s", user.id)

    return user


@storage_guard
def get_user_by_id(*, user_id: UUID) -> User:
    """
    Get a user by ID.

    Raises:
        UserNotFoundError: If user doesn't exist
    """
    try:
        return User.objects.select_related('current_group').get(id=user_id)
    except (User.DoesNotExist, ValidationError):
        raise UserNotFoundError(f"User with ID {user_id} not found")
