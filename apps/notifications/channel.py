"""
Notification channels.

A channel fans named events out to everyone subscribed to a room. Rooms
are group ids, so members of a group receive each other's updates.
Delivery is best-effort and at-most-once per publish call.
"""

import logging
import threading
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Callable, Dict, List

from django.conf import settings
from django.utils.module_loading import import_string

logger = logging.getLogger(__name__)

Callback = Callable[[str, Dict[str, Any]], None]


@dataclass(frozen=True, eq=False)
class Subscription:
    """Handle returned by ``subscribe``, pass it back to unsubscribe."""

    room: str
    callback: Callback


class NotificationChannel:
    """Interface every notification backend implements."""

    # Backends that can hand events to connected clients in this process
    supports_subscriptions = False

    def publish(self, room: str, event: str, payload: Dict[str, Any]) -> None:
        raise NotImplementedError


class InMemoryNotificationChannel(NotificationChannel):
    """
    Process-local publish/subscribe registry.

    Subscribers are called synchronously, in subscription order, from the
    publishing thread. A subscriber that raises is logged and skipped so
    the rest of the room still receives the event.
    """

    supports_subscriptions = True

    def __init__(self):
        self._lock = threading.Lock()
        self._rooms: Dict[str, List[Subscription]] = {}

    def subscribe(self, room: str, callback: Callback) -> Subscription:
        subscription = Subscription(room=str(room), callback=callback)
        with self._lock:
            self._rooms.setdefault(subscription.room, []).append(subscription)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        with self._lock:
            subscribers = self._rooms.get(subscription.room, [])
            if subscription in subscribers:
                subscribers.remove(subscription)
            if not subscribers:
                self._rooms.pop(subscription.room, None)

    def subscriber_count(self, room: str) -> int:
        with self._lock:
            return len(self._rooms.get(str(room), []))

    def publish(self, room: str, event: str, payload: Dict[str, Any]) -> None:
        with self._lock:
            subscribers = list(self._rooms.get(str(room), []))

        for subscription in subscribers:
            try:
                subscription.callback(event, payload)
            except Exception:
                logger.exception("Subscriber failed on %s in room %s", event, room)


@lru_cache(maxsize=None)
def _load_channel(backend: str) -> NotificationChannel:
    return import_string(backend)()


def get_notification_channel() -> NotificationChannel:
    """Return the channel configured by ``settings.NOTIFICATIONS['BACKEND']``."""
    return _load_channel(settings.NOTIFICATIONS['BACKEND'])
