"""Service Queue App URLs - Queue boards & queue entry changes.

Prefix: /api/
Routes:
    GET   /api/events/<event_id>/queue/          - Board: groups per service (?status=, ?service=)
    GET   /api/events/<event_id>/queue/summary/  - Counts per service
    PATCH /api/queue/<pk>/status/                - Set status (stamps started_at/completed_at)
    PATCH /api/queue/<pk>/assignment/            - Set/clear doctor and nurse
"""

from django.urls import path

from healthfair_backend.service_queue.views import (
    QueueBoardView,
    QueueEntryAssignmentView,
    QueueEntryStatusView,
    QueueSummaryView,
)

app_name = 'service_queue'

urlpatterns = [
    path('events/<int:event_id>/queue/', QueueBoardView.as_view(), name='board'),
    path('events/<int:event_id>/queue/summary/', QueueSummaryView.as_view(), name='summary'),
    path('queue/<int:pk>/status/', QueueEntryStatusView.as_view(), name='status'),
    path('queue/<int:pk>/assignment/', QueueEntryAssignmentView.as_view(), name='assignment'),
]
