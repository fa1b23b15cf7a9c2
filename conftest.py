import pytest
from rest_framework.test import APIClient

from apps.accounts.models import User
from apps.notifications.channel import NotificationChannel


class RecordingChannel(NotificationChannel):
    """Notification channel that remembers everything published to it."""

    def __init__(self):
        self.published = []

    def publish(self, room, event, payload):
        self.published.append((room, event, payload))

    def events(self, room=None):
        """Event names in publish order, optionally for one room."""
        return [event for r, event, _ in self.published if room is None or r == str(room)]

    def payloads(self, event):
        return [payload for _, e, payload in self.published if e == event]


class FailingChannel(NotificationChannel):
    """Notification channel whose transport is down."""

    def publish(self, room, event, payload):
        raise ConnectionError("notification transport unavailable")


@pytest.fixture
def api_client():
    """Return an API client."""
    return APIClient()


@pytest.fixture
def recorder():
    """Return a channel that records published notifications."""
    return RecordingChannel()


@pytest.fixture
def failing_channel():
    """Return a channel that fails on every publish."""
    return FailingChannel()


@pytest.fixture
def make_user(db):
    """Factory creating device users."""
    counter = {'n': 0}

    def _make_user(display_name=None, device_id=None):
        counter['n'] += 1
        n = counter['n']
        return User.objects.create(
            device_id=device_id or f'device-{n:04d}',
            display_name=display_name or f'User {n}',
        )

    return _make_user
