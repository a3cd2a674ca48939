import logging

from django.db import DatabaseError

from rest_framework import generics, status
from rest_framework.response import Response

from healthfair_backend.core.cache import get_or_fetch
from healthfair_backend.core.permissions import ReferenceDataPermission

from .models import Doctor, Event, Location, Nurse, Service
from .permissions import EventPermission
from .serializers import (
    DoctorSerializer,
    EventCreateUpdateSerializer,
    EventSerializer,
    LocationSerializer,
    NurseSerializer,
    ServiceSerializer,
)

logger = logging.getLogger(__name__)


class _ReferenceDataListCreateView(generics.ListCreateAPIView):
    """GET serves active rows through the reference-data cache; POST is admin-only.

    Writes drop the cache key through the model signals in ``events.signals``.
    """

    permission_classes = [ReferenceDataPermission]
    pagination_class = None
    cache_key: str = ''
    model = None

    def get_queryset(self):
        return self.model.objects.using('default').filter(is_active=True)

    def _load(self):
        serializer = self.get_serializer(self.get_queryset(), many=True)
        return [dict(row) for row in serializer.data]

    def list(self, request, *args, **kwargs):
        try:
            rows = get_or_fetch(self.cache_key, None, self._load)
        except DatabaseError:
            logger.exception('Loading %s failed', self.cache_key)
            return Response(
                {'detail': f'Failed to load {self.cache_key}.'},
                status=status.HTTP_503_SERVICE_UNAVAILABLE,
            )
        return Response(rows)


class LocationListCreateView(_ReferenceDataListCreateView):
    serializer_class = LocationSerializer
    cache_key = 'locations'
    model = Location


class ServiceListCreateView(_ReferenceDataListCreateView):
    serializer_class = ServiceSerializer
    cache_key = 'services'
    model = Service


class DoctorListCreateView(_ReferenceDataListCreateView):
    serializer_class = DoctorSerializer
    cache_key = 'doctors'
    model = Doctor


class NurseListCreateView(_ReferenceDataListCreateView):
    serializer_class = NurseSerializer
    cache_key = 'nurses'
    model = Nurse


class EventListCreateView(generics.ListCreateAPIView):
    permission_classes = [EventPermission]
    pagination_class = None

    def get_serializer_class(self):
        if self.request.method == 'POST':
            return EventCreateUpdateSerializer
        return EventSerializer

    def get_queryset(self):
        qs = (
            Event.objects.using('default')
            .select_related('location')
            .prefetch_related('services', 'doctors', 'nurses')
            .order_by('-event_date', '-id')
        )
        status_param = self.request.query_params.get('status')
        if status_param:
            qs = qs.filter(status=status_param)
        return qs

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        event = serializer.save()
        logger.info('Event %s created (%s)', event.id, event.name)
        out = EventSerializer(event, context={'request': request}).data
        return Response(out, status=status.HTTP_201_CREATED)


class EventDetailView(generics.RetrieveUpdateAPIView):
    permission_classes = [EventPermission]

    def get_serializer_class(self):
        if self.request.method in ('PUT', 'PATCH'):
            return EventCreateUpdateSerializer
        return EventSerializer

    def get_queryset(self):
        return (
            Event.objects.using('default')
            .select_related('location')
            .prefetch_related('services', 'doctors', 'nurses')
        )

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        instance = self.get_object()
        serializer = self.get_serializer(instance, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        event = serializer.save()
        return Response(EventSerializer(event, context={'request': request}).data)
