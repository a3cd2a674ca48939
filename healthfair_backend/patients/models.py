from decimal import ROUND_HALF_UP, Decimal

from django.db import models

from healthfair_backend.events.models import Event, Nurse


class Patient(models.Model):
    """A person seen at one or more health fairs.

    ``patient_number`` is assigned right after the first insert
    (``HF-000042``) and printed on the patient's queue slip.
    """

    GENDER_CHOICES = (
        ('female', 'Female'),
        ('male', 'Male'),
        ('other', 'Other'),
    )

    patient_number = models.CharField(max_length=32, unique=True, null=True, blank=True)
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    date_of_birth = models.DateField(null=True, blank=True)
    gender = models.CharField(max_length=16, choices=GENDER_CHOICES, blank=True, default='')
    phone = models.CharField(max_length=32, blank=True, default='')
    email = models.EmailField(blank=True, default='')
    parish = models.CharField(max_length=100, blank=True, default='')
    town = models.CharField(max_length=100, blank=True, default='')
    emergency_contact_name = models.CharField(max_length=200, blank=True, default='')
    emergency_contact_phone = models.CharField(max_length=32, blank=True, default='')
    medical_conditions = models.TextField(blank=True, default='')
    allergies = models.TextField(blank=True, default='')
    medications = models.TextField(blank=True, default='')
    insurance_provider = models.CharField(max_length=200, blank=True, default='')
    insurance_number = models.CharField(max_length=100, blank=True, default='')
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['last_name', 'first_name', 'id']
        indexes = [
            models.Index(fields=['last_name', 'first_name'], name='patients_pa_last_na_5e1c0b_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.last_name}, {self.first_name} ({self.patient_number or 'new'})"

    def save(self, *args, **kwargs):
        super().save(*args, **kwargs)
        if not self.patient_number:
            self.patient_number = f"HF-{self.pk:06d}"
            type(self).objects.using(self._state.db or 'default').filter(pk=self.pk).update(
                patient_number=self.patient_number,
            )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class PatientVisit(models.Model):
    """One patient's attendance at one event; carries the queue number."""

    STATUS_CHECKED_IN = 'checked_in'
    STATUS_COMPLETED = 'completed'

    STATUS_CHOICES = (
        (STATUS_CHECKED_IN, STATUS_CHECKED_IN),
        (STATUS_COMPLETED, STATUS_COMPLETED),
    )

    patient = models.ForeignKey(Patient, on_delete=models.PROTECT, related_name='visits')
    event = models.ForeignKey(Event, on_delete=models.PROTECT, related_name='visits')
    queue_number = models.PositiveIntegerField()
    status = models.CharField(max_length=32, choices=STATUS_CHOICES, default=STATUS_CHECKED_IN)
    visit_date = models.DateField(auto_now_add=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['event_id', 'queue_number']
        constraints = [
            models.UniqueConstraint(fields=['patient', 'event'], name='uniq_visit_patient_event'),
            models.UniqueConstraint(fields=['event', 'queue_number'], name='uniq_visit_event_queue_number'),
        ]

    def __str__(self) -> str:
        return f"Visit #{self.queue_number} ({self.event_id})"


class BasicScreening(models.Model):
    """Know Your Numbers results of one visit (at most one record per visit).

    ``bmi`` is derived from height (cm) and weight (kg) on every save.
    """

    patient_visit = models.OneToOneField(PatientVisit, on_delete=models.CASCADE, related_name='basic_screening')
    height = models.DecimalField(max_digits=5, decimal_places=1, null=True, blank=True)
    weight = models.DecimalField(max_digits=5, decimal_places=1, null=True, blank=True)
    bmi = models.DecimalField(max_digits=6, decimal_places=1, null=True, blank=True)
    blood_pressure_systolic = models.PositiveSmallIntegerField(null=True, blank=True)
    blood_pressure_diastolic = models.PositiveSmallIntegerField(null=True, blank=True)
    heart_rate = models.PositiveSmallIntegerField(null=True, blank=True)
    temperature = models.DecimalField(max_digits=4, decimal_places=1, null=True, blank=True)
    blood_sugar = models.PositiveSmallIntegerField(null=True, blank=True)
    cholesterol = models.PositiveSmallIntegerField(null=True, blank=True)
    oxygen_saturation = models.PositiveSmallIntegerField(null=True, blank=True)
    notes = models.TextField(blank=True, default='')
    screened_by = models.ForeignKey(
        Nurse,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='screenings',
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"Screening for visit {self.patient_visit_id}"

    def save(self, *args, **kwargs):
        self.bmi = calculate_bmi(self.height, self.weight)
        super().save(*args, **kwargs)


def calculate_bmi(height_cm, weight_kg):
    """kg / m², one decimal; ``None`` unless both values are positive."""
    if not height_cm or not weight_kg:
        return None
    height_cm = Decimal(str(height_cm))
    weight_kg = Decimal(str(weight_kg))
    if height_cm <= 0 or weight_kg <= 0:
        return None
    meters = height_cm / 100
    return (weight_kg / (meters * meters)).quantize(Decimal('0.1'), rounding=ROUND_HALF_UP)
