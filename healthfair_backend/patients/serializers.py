from rest_framework import serializers

from healthfair_backend.events.models import Nurse, Service
from healthfair_backend.events.serializers import (
    DoctorNestedSerializer,
    EventNestedSerializer,
    NurseNestedSerializer,
    ServiceNestedSerializer,
)
from healthfair_backend.service_queue.models import QueueEntry

from .models import BasicScreening, Patient, PatientVisit


PATIENT_FIELDS = [
    'first_name',
    'last_name',
    'date_of_birth',
    'gender',
    'phone',
    'email',
    'parish',
    'town',
    'emergency_contact_name',
    'emergency_contact_phone',
    'medical_conditions',
    'allergies',
    'medications',
    'insurance_provider',
    'insurance_number',
]


class PatientSerializer(serializers.ModelSerializer):
    full_name = serializers.CharField(read_only=True)

    class Meta:
        model = Patient
        fields = ['id', 'patient_number', 'full_name'] + PATIENT_FIELDS + ['is_active', 'created_at', 'updated_at']
        read_only_fields = fields


class PatientWriteSerializer(serializers.ModelSerializer):
    """Patient fields accepted on registration and PATCH; ``patient_number`` is generated."""

    class Meta:
        model = Patient
        fields = PATIENT_FIELDS

    def validate_first_name(self, value):
        value = (value or '').strip()
        if not value:
            raise serializers.ValidationError('This field may not be blank.')
        return value

    def validate_last_name(self, value):
        value = (value or '').strip()
        if not value:
            raise serializers.ValidationError('This field may not be blank.')
        return value


class VisitQueueEntrySerializer(serializers.ModelSerializer):
    service = ServiceNestedSerializer(read_only=True)

    class Meta:
        model = QueueEntry
        fields = ['id', 'service', 'queue_position', 'status', 'started_at', 'completed_at']
        read_only_fields = fields


class PatientVisitSerializer(serializers.ModelSerializer):
    patient = PatientSerializer(read_only=True)
    event_id = serializers.IntegerField(read_only=True)
    queue_entries = VisitQueueEntrySerializer(many=True, read_only=True)

    class Meta:
        model = PatientVisit
        fields = ['id', 'event_id', 'queue_number', 'status', 'visit_date', 'patient', 'queue_entries']
        read_only_fields = fields


class _ServiceSelectionMixin:
    """Validates ``service_ids`` against the services the event offers.

    Events without any attached services accept every active service.
    """

    def validate_service_ids(self, value):
        event = self.context.get('event')
        if event is None or not value:
            return value
        offered = set(event.services.values_list('id', flat=True))
        if not offered:
            return value
        missing = sorted(s.id for s in value if s.id not in offered and not s.is_intake_gate)
        if missing:
            raise serializers.ValidationError(f'Services not offered at this event: {missing}')
        return value


def _service_ids_field(**kwargs):
    return serializers.PrimaryKeyRelatedField(
        many=True,
        queryset=Service.objects.using('default').filter(is_active=True),
        **kwargs,
    )


class RegistrationSerializer(_ServiceSelectionMixin, serializers.Serializer):
    """POST /api/events/<event_id>/registrations/"""

    patient = PatientWriteSerializer()
    service_ids = _service_ids_field(required=False)
    allow_duplicate = serializers.BooleanField(required=False, default=False)


class CheckInSerializer(_ServiceSelectionMixin, serializers.Serializer):
    """POST /api/events/<event_id>/visits/"""

    patient_id = serializers.PrimaryKeyRelatedField(
        source='patient',
        queryset=Patient.objects.using('default').filter(is_active=True),
    )
    service_ids = _service_ids_field(required=False)


class AddServicesSerializer(_ServiceSelectionMixin, serializers.Serializer):
    """POST /api/visits/<visit_id>/services/"""

    service_ids = _service_ids_field(allow_empty=False)


class HistoryQueueEntrySerializer(serializers.ModelSerializer):
    service = ServiceNestedSerializer(read_only=True)
    doctor = DoctorNestedSerializer(read_only=True)
    nurse = NurseNestedSerializer(read_only=True)

    class Meta:
        model = QueueEntry
        fields = ['id', 'service', 'status', 'doctor', 'nurse', 'created_at', 'started_at', 'completed_at']
        read_only_fields = fields


class PatientHistoryVisitSerializer(serializers.ModelSerializer):
    """One visit in a patient's cross-event history."""

    event = EventNestedSerializer(read_only=True)
    basic_screening_completed = serializers.SerializerMethodField()
    queue_entries = HistoryQueueEntrySerializer(many=True, read_only=True)

    class Meta:
        model = PatientVisit
        fields = [
            'id',
            'event',
            'queue_number',
            'status',
            'visit_date',
            'basic_screening_completed',
            'queue_entries',
        ]
        read_only_fields = fields

    def get_basic_screening_completed(self, obj) -> bool:
        return hasattr(obj, 'basic_screening')


SCREENING_FIELDS = [
    'height',
    'weight',
    'blood_pressure_systolic',
    'blood_pressure_diastolic',
    'heart_rate',
    'temperature',
    'blood_sugar',
    'cholesterol',
    'oxygen_saturation',
    'notes',
]


class BasicScreeningSerializer(serializers.ModelSerializer):
    screened_by = NurseNestedSerializer(read_only=True)

    class Meta:
        model = BasicScreening
        fields = ['id', 'patient_visit_id', 'bmi'] + SCREENING_FIELDS + ['screened_by', 'created_at', 'updated_at']
        read_only_fields = fields


class BasicScreeningWriteSerializer(serializers.ModelSerializer):
    """PUT /api/visits/<visit_id>/screening/

    Every measurement is optional; ranges reject values the record cannot hold.
    """

    height = serializers.DecimalField(max_digits=5, decimal_places=1, min_value=30, max_value=300, required=False, allow_null=True)
    weight = serializers.DecimalField(max_digits=5, decimal_places=1, min_value=0, max_value=1000, required=False, allow_null=True)
    blood_pressure_systolic = serializers.IntegerField(min_value=0, max_value=300, required=False, allow_null=True)
    blood_pressure_diastolic = serializers.IntegerField(min_value=0, max_value=200, required=False, allow_null=True)
    heart_rate = serializers.IntegerField(min_value=0, max_value=300, required=False, allow_null=True)
    temperature = serializers.DecimalField(max_digits=4, decimal_places=1, min_value=0, max_value=50, required=False, allow_null=True)
    blood_sugar = serializers.IntegerField(min_value=0, max_value=1000, required=False, allow_null=True)
    cholesterol = serializers.IntegerField(min_value=0, max_value=1000, required=False, allow_null=True)
    oxygen_saturation = serializers.IntegerField(min_value=0, max_value=100, required=False, allow_null=True)
    screened_by_id = serializers.PrimaryKeyRelatedField(
        source='screened_by',
        queryset=Nurse.objects.using('default').all(),
        required=False,
        allow_null=True,
    )

    class Meta:
        model = BasicScreening
        fields = SCREENING_FIELDS + ['screened_by_id']
