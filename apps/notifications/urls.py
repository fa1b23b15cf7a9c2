from django.urls import path
from . import views

app_name = 'notifications'

urlpatterns = [
    # GET /api/notifications/groups/{id}/stream/  - Server-sent events for a group
    path('groups/<uuid:group_id>/stream/', views.group_event_stream, name='group-stream'),
]
