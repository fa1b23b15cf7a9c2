"""
Event stream for connected clients.

A client opens ``GET /api/notifications/groups/<id>/stream/`` and keeps the
connection open. It is subscribed to the group's room and receives every
event published there as a server-sent event::

    event: expenseApproved
    data: {"expense": {...}}

Idle streams get a comment line every ``STREAM_KEEPALIVE`` seconds so
proxies do not drop them.
"""

import logging
import queue

from django.conf import settings
from django.http import JsonResponse, StreamingHttpResponse
from django.views.decorators.http import require_GET
from rest_framework.renderers import JSONRenderer

from apps.core.exceptions import StorageUnavailableError
from apps.groups.services import get_group_by_id, GroupNotFoundError

from . import events
from .channel import get_notification_channel

logger = logging.getLogger(__name__)


def format_event(event, payload) -> str:
    data = JSONRenderer().render(payload).decode('utf-8')
    return f"event: {event}\ndata: {data}\n\n"


def stream_room(channel, room, keepalive):
    """Yield server-sent event frames for ``room`` until the client goes away."""
    pending = queue.Queue()
    subscription = channel.subscribe(room, lambda event, payload: pending.put((event, payload)))
    logger.info("Client subscribed to room %s", room)

    try:
        yield ": connected\n\n"
        while True:
            try:
                event, payload = pending.get(timeout=keepalive)
            except queue.Empty:
                yield ": keepalive\n\n"
                continue
            yield format_event(event, payload)
    finally:
        channel.unsubscribe(subscription)
        logger.info("Client left room %s", room)


@require_GET
def group_event_stream(request, group_id):
    """Stream a group's notifications to a connected client."""
    try:
        group = get_group_by_id(group_id=group_id)
    except GroupNotFoundError as e:
        return JsonResponse({'error': str(e)}, status=404)
    except StorageUnavailableError as e:
        return JsonResponse({'error': str(e)}, status=503)

    channel = get_notification_channel()
    if not channel.supports_subscriptions:
        return JsonResponse(
            {'error': 'Configured notification backend does not serve event streams'},
            status=503
        )

    response = StreamingHttpResponse(
        stream_room(channel, events.room_for_group(group.id), settings.NOTIFICATIONS['STREAM_KEEPALIVE']),
        content_type='text/event-stream',
    )
    response['Cache-Control'] = 'no-cache'
    response['X-Accel-Buffering'] = 'no'
    return response
