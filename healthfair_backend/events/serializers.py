from rest_framework import serializers

from .models import Doctor, Event, Location, Nurse, Service


class LocationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Location
        fields = ['id', 'name', 'address', 'capacity', 'phone', 'email', 'is_active']


class ServiceSerializer(serializers.ModelSerializer):
    class Meta:
        model = Service
        fields = ['id', 'name', 'description', 'duration_minutes', 'is_active', 'is_intake_gate']


class ServiceNestedSerializer(serializers.ModelSerializer):
    class Meta:
        model = Service
        fields = ['id', 'name', 'description', 'duration_minutes', 'is_intake_gate']


class DoctorSerializer(serializers.ModelSerializer):
    class Meta:
        model = Doctor
        fields = [
            'id',
            'first_name',
            'last_name',
            'specialization',
            'license_number',
            'email',
            'phone',
            'is_active',
        ]


class DoctorNestedSerializer(serializers.ModelSerializer):
    class Meta:
        model = Doctor
        fields = ['id', 'first_name', 'last_name', 'specialization']


class NurseSerializer(serializers.ModelSerializer):
    class Meta:
        model = Nurse
        fields = [
            'id',
            'first_name',
            'last_name',
            'certification_level',
            'license_number',
            'email',
            'phone',
            'is_active',
        ]


class NurseNestedSerializer(serializers.ModelSerializer):
    class Meta:
        model = Nurse
        fields = ['id', 'first_name', 'last_name', 'certification_level']


class LocationNestedSerializer(serializers.ModelSerializer):
    class Meta:
        model = Location
        fields = ['id', 'name']


class EventNestedSerializer(serializers.ModelSerializer):
    location = LocationNestedSerializer(read_only=True)

    class Meta:
        model = Event
        fields = ['id', 'name', 'event_date', 'location']


class EventSerializer(serializers.ModelSerializer):
    location = LocationSerializer(read_only=True)
    services = ServiceNestedSerializer(many=True, read_only=True)
    doctors = DoctorNestedSerializer(many=True, read_only=True)
    nurses = NurseNestedSerializer(many=True, read_only=True)

    class Meta:
        model = Event
        fields = [
            'id',
            'name',
            'description',
            'location',
            'event_date',
            'start_time',
            'end_time',
            'status',
            'is_active',
            'services',
            'doctors',
            'nurses',
            'created_at',
            'updated_at',
        ]


class EventCreateUpdateSerializer(serializers.ModelSerializer):
    location_id = serializers.PrimaryKeyRelatedField(
        source='location',
        queryset=Location.objects.using('default').all(),
        write_only=True,
    )
    service_ids = serializers.PrimaryKeyRelatedField(
        source='services',
        queryset=Service.objects.using('default').all(),
        many=True,
        required=False,
        write_only=True,
    )
    doctor_ids = serializers.PrimaryKeyRelatedField(
        source='doctors',
        queryset=Doctor.objects.using('default').all(),
        many=True,
        required=False,
        write_only=True,
    )
    nurse_ids = serializers.PrimaryKeyRelatedField(
        source='nurses',
        queryset=Nurse.objects.using('default').all(),
        many=True,
        required=False,
        write_only=True,
    )

    class Meta:
        model = Event
        fields = [
            'name',
            'description',
            'location_id',
            'event_date',
            'start_time',
            'end_time',
            'status',
            'is_active',
            'service_ids',
            'doctor_ids',
            'nurse_ids',
        ]

    def validate(self, attrs):
        start = attrs.get('start_time', getattr(self.instance, 'start_time', None))
        end = attrs.get('end_time', getattr(self.instance, 'end_time', None))
        if start is not None and end is not None and end <= start:
            raise serializers.ValidationError({'end_time': 'end_time must be after start_time.'})
        return attrs
