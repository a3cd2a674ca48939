import logging

from django.db import DatabaseError
from django.shortcuts import get_object_or_404

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from healthfair_backend.core.utils import log_patient_action, parse_int_param
from healthfair_backend.events.models import Event

from .exceptions import InvalidQueueStatus, QueueEntryNotFound, QueueUpdateError
from .models import QueueEntry
from .permissions import QueuePermission
from .serializers import (
    QueueAssignmentSerializer,
    QueueBoardSerializer,
    QueueEntrySerializer,
    QueueStatusUpdateSerializer,
    QueueSummarySerializer,
)
from .services.projection import build_queue_board, summarize_queue
from .services.status import assign_providers, update_queue_entry_status

logger = logging.getLogger(__name__)

LOAD_FAILED = {'detail': 'Failed to load the queue. Please try again.'}


class QueueBoardView(APIView):
    """GET /api/events/<event_id>/queue/

    Query params:
    - status: waiting | in_progress | completed (rows only)
    - service: service id (single group)
    """

    permission_classes = [QueuePermission]

    def get(self, request, event_id):
        event = get_object_or_404(Event.objects.using('default'), pk=event_id)

        status_param = request.query_params.get('status') or None
        if status_param and status_param not in dict(QueueEntry.STATUS_CHOICES):
            exc = InvalidQueueStatus(status_param, dict(QueueEntry.STATUS_CHOICES).keys())
            return Response(exc.to_dict(), status=status.HTTP_400_BAD_REQUEST)

        service_id, error = parse_int_param(request, 'service')
        if error is not None:
            return error

        try:
            board = build_queue_board(
                event.id,
                status=status_param,
                service_id=service_id,
            )
            data = QueueBoardSerializer(board, context={'request': request}).data
        except DatabaseError:
            logger.exception('Loading queue of event %s failed', event.id)
            return Response(LOAD_FAILED, status=status.HTTP_503_SERVICE_UNAVAILABLE)
        return Response(data)


class QueueSummaryView(APIView):
    """GET /api/events/<event_id>/queue/summary/"""

    permission_classes = [QueuePermission]

    def get(self, request, event_id):
        event = get_object_or_404(Event.objects.using('default'), pk=event_id)
        try:
            rows = summarize_queue(event.id)
        except DatabaseError:
            logger.exception('Loading queue summary of event %s failed', event.id)
            return Response(LOAD_FAILED, status=status.HTTP_503_SERVICE_UNAVAILABLE)
        return Response(QueueSummarySerializer(rows, many=True).data)


class _QueueEntryWriteView(APIView):
    permission_classes = [QueuePermission]

    def get_entry(self, pk) -> QueueEntry:
        entry = (
            QueueEntry.objects.using('default')
            .select_related('service', 'patient_visit')
            .filter(pk=pk)
            .first()
        )
        if entry is None:
            raise QueueEntryNotFound(pk)
        self.check_object_permissions(self.request, entry)
        return entry


class QueueEntryStatusView(_QueueEntryWriteView):
    """PATCH /api/queue/<pk>/status/  {"status": "in_progress"}

    No transition guard: any status may follow any other.
    """

    def patch(self, request, pk):
        serializer = QueueStatusUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        new_status = serializer.validated_data['status']

        try:
            entry = self.get_entry(pk)
            old_status = entry.status
            entry = update_queue_entry_status(entry.id, new_status)
        except QueueEntryNotFound as e:
            return Response(e.to_dict(), status=status.HTTP_404_NOT_FOUND)
        except InvalidQueueStatus as e:
            return Response(e.to_dict(), status=status.HTTP_400_BAD_REQUEST)
        except QueueUpdateError as e:
            return Response(e.to_dict(), status=status.HTTP_503_SERVICE_UNAVAILABLE)
        except DatabaseError:
            logger.exception('Loading queue entry %s failed', pk)
            return Response(QueueUpdateError().to_dict(), status=status.HTTP_503_SERVICE_UNAVAILABLE)

        log_patient_action(
            request.user,
            'queue_status_changed',
            patient_id=entry.patient_visit.patient_id,
            meta={
                'queue_entry_id': entry.id,
                'service_id': entry.service_id,
                'from': old_status,
                'to': new_status,
            },
        )
        return Response(QueueEntrySerializer(entry, context={'request': request}).data)


class QueueEntryAssignmentView(_QueueEntryWriteView):
    """PATCH /api/queue/<pk>/assignment/  {"doctor_id": 3, "nurse_id": null}"""

    def patch(self, request, pk):
        serializer = QueueAssignmentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            entry = self.get_entry(pk)
            entry = assign_providers(entry.id, **serializer.validated_data)
        except QueueEntryNotFound as e:
            return Response(e.to_dict(), status=status.HTTP_404_NOT_FOUND)
        except QueueUpdateError as e:
            return Response(e.to_dict(), status=status.HTTP_503_SERVICE_UNAVAILABLE)
        except DatabaseError:
            logger.exception('Loading queue entry %s failed', pk)
            return Response(QueueUpdateError().to_dict(), status=status.HTTP_503_SERVICE_UNAVAILABLE)

        log_patient_action(
            request.user,
            'queue_providers_assigned',
            patient_id=entry.patient_visit.patient_id,
            meta={
                'queue_entry_id': entry.id,
                'doctor_id': entry.doctor_id,
                'nurse_id': entry.nurse_id,
            },
        )
        return Response(QueueEntrySerializer(entry, context={'request': request}).data)
