"""
Notification publishing service.

State changes are committed before they are announced, and a failed
announcement never undoes or fails the change itself.
"""

import logging
from typing import Any, Dict, Optional

from django.db import transaction

from .channel import NotificationChannel, get_notification_channel
from .events import ALL_EVENTS

logger = logging.getLogger(__name__)


def _check_event(event: str) -> None:
    if event not in ALL_EVENTS:
        raise ValueError(f"Unknown notification event: {event}")


def publish_event(
    *,
    room: str,
    event: str,
    payload: Dict[str, Any],
    channel: Optional[NotificationChannel] = None
) -> bool:
    """
    Publish an event to a room, best-effort.

    Args:
        room: Room name (group id)
        event: One of the names in ``events.ALL_EVENTS``
        payload: JSON-serializable event body
        channel: Channel to publish on, defaults to the configured one

    Returns:
        True if the channel accepted the event, False if publishing failed
    """
    _check_event(event)

    try:
        channel = channel or get_notification_channel()
        channel.publish(str(room), event, payload)
    except Exception:
        logger.warning("Failed to publish %s to room %s", event, room, exc_info=True)
        return False

    logger.debug("Published %s to room %s", event, room)
    return True


def publish_on_commit(
    *,
    room: str,
    event: str,
    payload: Dict[str, Any],
    channel: Optional[NotificationChannel] = None
) -> None:
    """
    Publish an event once the surrounding transaction commits.

    Outside a transaction the event is published immediately. If the
    transaction rolls back, nothing is published. Callbacks run in the
    order they were scheduled.
    """
    _check_event(event)

    transaction.on_commit(
        lambda: publish_event(room=room, event=event, payload=payload, channel=channel)
    )
