import logging

from django.db import DatabaseError
from django.db.models import Q
from django.shortcuts import get_object_or_404

from rest_framework import generics, status
from rest_framework.response import Response
from rest_framework.views import APIView

from healthfair_backend.core.utils import log_patient_action, parse_int_param
from healthfair_backend.events.models import Event

from .exceptions import (
    AlreadyRegisteredError,
    DuplicatePatientError,
    IntakeServiceNotConfigured,
    RegistrationError,
)
from .models import Patient, PatientVisit
from .permissions import PatientPermission, ScreeningPermission
from .serializers import (
    AddServicesSerializer,
    BasicScreeningSerializer,
    BasicScreeningWriteSerializer,
    CheckInSerializer,
    PatientHistoryVisitSerializer,
    PatientSerializer,
    PatientVisitSerializer,
    PatientWriteSerializer,
    RegistrationSerializer,
    VisitQueueEntrySerializer,
)
from .services.history import patient_visit_history
from .services.registration import add_services_to_visit, check_in_patient, register_patient
from .services.screening import get_basic_screening, save_basic_screening

logger = logging.getLogger(__name__)

SEARCH_LIMIT = 50


def _registration_error_response(e: RegistrationError) -> Response:
    if isinstance(e, (DuplicatePatientError, AlreadyRegisteredError)):
        return Response(e.to_dict(), status=status.HTTP_409_CONFLICT)
    if isinstance(e, IntakeServiceNotConfigured):
        return Response(e.to_dict(), status=status.HTTP_400_BAD_REQUEST)
    return Response(e.to_dict(), status=status.HTTP_503_SERVICE_UNAVAILABLE)


def _visit_queryset():
    return (
        PatientVisit.objects.using('default')
        .select_related('patient', 'event')
        .prefetch_related('queue_entries__service')
    )


def _created_visit_response(visit_id) -> Response:
    try:
        visit = _visit_queryset().get(pk=visit_id)
    except DatabaseError:
        logger.exception('Reloading visit %s failed', visit_id)
        return Response(
            {'detail': 'The patient was registered but could not be loaded. Please refresh.'},
            status=status.HTTP_503_SERVICE_UNAVAILABLE,
        )
    return Response(PatientVisitSerializer(visit).data, status=status.HTTP_201_CREATED)


class PatientListView(generics.ListAPIView):
    """GET /api/patients/?q=<term>

    Case-insensitive match on first/last name, patient number, phone, email.
    Without ``q`` the most recently registered patients are returned.
    """

    permission_classes = [PatientPermission]
    serializer_class = PatientSerializer
    pagination_class = None

    def get_queryset(self):
        qs = Patient.objects.using('default').filter(is_active=True)
        term = (self.request.query_params.get('q') or '').strip()
        if term:
            q = (
                Q(first_name__icontains=term)
                | Q(last_name__icontains=term)
                | Q(patient_number__icontains=term)
                | Q(phone__icontains=term)
                | Q(email__icontains=term)
            )
            parts = term.split()
            if len(parts) >= 2:
                q |= Q(first_name__icontains=parts[0], last_name__icontains=parts[-1])
            return qs.filter(q).order_by('last_name', 'first_name', 'id')[:SEARCH_LIMIT]
        return qs.order_by('-created_at', '-id')[:SEARCH_LIMIT]


class PatientDetailView(generics.RetrieveUpdateAPIView):
    """GET/PATCH /api/patients/<pk>/"""

    permission_classes = [PatientPermission]
    http_method_names = ['get', 'patch', 'head', 'options']

    def get_queryset(self):
        return Patient.objects.using('default').all()

    def get_serializer_class(self):
        if self.request.method == 'PATCH':
            return PatientWriteSerializer
        return PatientSerializer

    def update(self, request, *args, **kwargs):
        instance = self.get_object()
        serializer = PatientWriteSerializer(instance, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        patient = serializer.save()
        log_patient_action(
            request.user,
            'patient_updated',
            patient_id=patient.id,
            meta={'fields': sorted(serializer.validated_data.keys())},
        )
        return Response(PatientSerializer(patient).data)


class RegistrationView(APIView):
    """POST /api/events/<event_id>/registrations/

    Registers a new patient and queues them (intake first) in one
    transaction. 409 with ``candidates`` when the patient looks like a
    duplicate; resend with ``allow_duplicate: true`` to register anyway.
    """

    permission_classes = [PatientPermission]

    def post(self, request, event_id):
        event = get_object_or_404(Event.objects.using('default'), pk=event_id)
        serializer = RegistrationSerializer(data=request.data, context={'request': request, 'event': event})
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            result = register_patient(
                event=event,
                patient_data=dict(data['patient']),
                service_ids=data.get('service_ids') or [],
                allow_duplicate=data.get('allow_duplicate', False),
                user=request.user,
            )
        except RegistrationError as e:
            return _registration_error_response(e)

        return _created_visit_response(result.visit.pk)


class EventVisitListCreateView(APIView):
    """GET/POST /api/events/<event_id>/visits/

    GET lists the event's visits by queue number; POST checks in a known
    patient (409 when already registered for the event).
    """

    permission_classes = [PatientPermission]

    def get(self, request, event_id):
        event = get_object_or_404(Event.objects.using('default'), pk=event_id)
        try:
            visits = list(_visit_queryset().filter(event=event).order_by('queue_number'))
        except DatabaseError:
            logger.exception('Loading visits of event %s failed', event.id)
            return Response(
                {'detail': 'Failed to load visits. Please try again.'},
                status=status.HTTP_503_SERVICE_UNAVAILABLE,
            )
        return Response(PatientVisitSerializer(visits, many=True).data)

    def post(self, request, event_id):
        event = get_object_or_404(Event.objects.using('default'), pk=event_id)
        serializer = CheckInSerializer(data=request.data, context={'request': request, 'event': event})
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            result = check_in_patient(
                event=event,
                patient=data['patient'],
                service_ids=data.get('service_ids') or [],
                user=request.user,
            )
        except RegistrationError as e:
            return _registration_error_response(e)

        return _created_visit_response(result.visit.pk)


class VisitServicesView(APIView):
    """POST /api/visits/<visit_id>/services/  {"service_ids": [..]}"""

    permission_classes = [PatientPermission]

    def post(self, request, visit_id):
        visit = get_object_or_404(PatientVisit.objects.using('default').select_related('event'), pk=visit_id)
        serializer = AddServicesSerializer(data=request.data, context={'request': request, 'event': visit.event})
        serializer.is_valid(raise_exception=True)

        try:
            entries = add_services_to_visit(
                visit=visit,
                service_ids=serializer.validated_data['service_ids'],
                user=request.user,
            )
        except RegistrationError as e:
            return _registration_error_response(e)

        return Response(VisitQueueEntrySerializer(entries, many=True).data, status=status.HTTP_201_CREATED)


class PatientVisitHistoryView(APIView):
    """GET /api/patients/<pk>/visits/?event=<id>&location=<id>

    Every visit of the patient across events, newest first, with the
    services received at each.
    """

    permission_classes = [PatientPermission]

    def get(self, request, pk):
        patient = get_object_or_404(Patient.objects.using('default'), pk=pk)

        event_id, error = parse_int_param(request, 'event')
        if error is not None:
            return error
        location_id, error = parse_int_param(request, 'location')
        if error is not None:
            return error

        try:
            visits = patient_visit_history(patient, event_id=event_id, location_id=location_id)
        except DatabaseError:
            logger.exception('Loading visit history of patient %s failed', patient.id)
            return Response(
                {'detail': 'Failed to load patient history. Please try again.'},
                status=status.HTTP_503_SERVICE_UNAVAILABLE,
            )
        return Response(PatientHistoryVisitSerializer(visits, many=True).data)


class BasicScreeningView(APIView):
    """GET/PUT /api/visits/<visit_id>/screening/

    GET returns 404 until results are recorded. PUT creates the record or
    updates the fields sent; BMI follows height and weight.
    """

    permission_classes = [ScreeningPermission]

    def get(self, request, visit_id):
        visit = get_object_or_404(PatientVisit.objects.using('default'), pk=visit_id)
        screening = get_basic_screening(visit)
        if screening is None:
            return Response({'detail': 'No screening recorded for this visit.'}, status=status.HTTP_404_NOT_FOUND)
        return Response(BasicScreeningSerializer(screening).data)

    def put(self, request, visit_id):
        visit = get_object_or_404(PatientVisit.objects.using('default'), pk=visit_id)
        serializer = BasicScreeningWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            screening, created = save_basic_screening(visit=visit, data=serializer.validated_data, user=request.user)
        except DatabaseError:
            logger.exception('Saving basic screening of visit %s failed', visit.id)
            return Response(
                {'detail': 'Failed to save basic screening data. Please try again.'},
                status=status.HTTP_503_SERVICE_UNAVAILABLE,
            )

        return Response(
            BasicScreeningSerializer(screening).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )
