from rest_framework import serializers

from healthfair_backend.events.models import Doctor, Nurse
from healthfair_backend.events.serializers import (
    DoctorNestedSerializer,
    NurseNestedSerializer,
    ServiceNestedSerializer,
)
from healthfair_backend.patients.models import Patient

from .models import QueueEntry


class QueuePatientSerializer(serializers.ModelSerializer):
    class Meta:
        model = Patient
        fields = ['id', 'patient_number', 'first_name', 'last_name', 'date_of_birth', 'gender', 'phone']


class QueueEntrySerializer(serializers.ModelSerializer):
    """One row on a queue board: entry + visit queue number + patient + providers."""

    service = ServiceNestedSerializer(read_only=True)
    patient_visit_id = serializers.IntegerField(read_only=True)
    queue_number = serializers.IntegerField(source='patient_visit.queue_number', read_only=True)
    patient = QueuePatientSerializer(source='patient_visit.patient', read_only=True)
    doctor = DoctorNestedSerializer(read_only=True)
    nurse = NurseNestedSerializer(read_only=True)

    class Meta:
        model = QueueEntry
        fields = [
            'id',
            'service',
            'patient_visit_id',
            'queue_number',
            'queue_position',
            'status',
            'patient',
            'doctor',
            'nurse',
            'created_at',
            'started_at',
            'completed_at',
        ]
        read_only_fields = fields


class ServiceGroupSerializer(serializers.Serializer):
    service = ServiceNestedSerializer(read_only=True)
    patients = QueueEntrySerializer(many=True, read_only=True)


class QueueBoardSerializer(serializers.Serializer):
    event_id = serializers.IntegerField(read_only=True)
    intake_configured = serializers.BooleanField(read_only=True)
    groups = ServiceGroupSerializer(many=True, read_only=True)


class QueueSummarySerializer(serializers.Serializer):
    service_id = serializers.IntegerField()
    service_name = serializers.CharField()
    is_intake_gate = serializers.BooleanField()
    total_registered = serializers.IntegerField()
    waiting = serializers.IntegerField()
    in_progress = serializers.IntegerField()
    completed = serializers.IntegerField()


class QueueStatusUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=QueueEntry.STATUS_CHOICES)


class QueueAssignmentSerializer(serializers.Serializer):
    """PATCH body for provider assignment; omitted keys stay unchanged, ``null`` clears."""

    doctor_id = serializers.PrimaryKeyRelatedField(
        source='doctor',
        queryset=Doctor.objects.using('default').filter(is_active=True),
        allow_null=True,
        required=False,
    )
    nurse_id = serializers.PrimaryKeyRelatedField(
        source='nurse',
        queryset=Nurse.objects.using('default').filter(is_active=True),
        allow_null=True,
        required=False,
    )

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError('Provide doctor_id and/or nurse_id.')
        return attrs
