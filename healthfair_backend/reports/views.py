import logging

from django.db import DatabaseError
from django.shortcuts import get_object_or_404

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from healthfair_backend.core.utils import parse_int_param
from healthfair_backend.events.models import Event

from .permissions import ReportPermission
from .services.reports import location_report, parish_report, service_report

logger = logging.getLogger(__name__)

REPORT_FAILED = {'detail': 'Failed to generate the report. Please try again.'}


def _report_failed(name, **context) -> Response:
    logger.exception('Generating %s report failed (%s)', name, context)
    return Response(REPORT_FAILED, status=status.HTTP_503_SERVICE_UNAVAILABLE)


class LocationReportView(APIView):
    """GET /api/reports/events/<event_id>/location/"""

    permission_classes = [ReportPermission]

    def get(self, request, event_id):
        event = get_object_or_404(Event.objects.using('default').select_related('location'), pk=event_id)
        try:
            report = location_report(event)
        except DatabaseError:
            return _report_failed('location', event_id=event.id)
        return Response(report)


class ServiceReportView(APIView):
    """GET /api/reports/events/<event_id>/services/?service=<id>"""

    permission_classes = [ReportPermission]

    def get(self, request, event_id):
        event = get_object_or_404(Event.objects.using('default'), pk=event_id)
        service_id, error = parse_int_param(request, 'service')
        if error is not None:
            return error
        try:
            report = service_report(event, service_id=service_id)
        except DatabaseError:
            return _report_failed('service', event_id=event.id)
        return Response(report)


class ParishReportView(APIView):
    """GET /api/reports/parishes/?event=<id>&parish=<name>"""

    permission_classes = [ReportPermission]

    def get(self, request):
        event_id, error = parse_int_param(request, 'event')
        if error is not None:
            return error
        if event_id is not None:
            get_object_or_404(Event.objects.using('default'), pk=event_id)
        parish = (request.query_params.get('parish') or '').strip() or None
        try:
            report = parish_report(event_id=event_id, parish=parish)
        except DatabaseError:
            return _report_failed('parish', event_id=event_id)
        return Response(report)
