from django.conf import settings
from django.db import models


class Location(models.Model):
    """Venue where a health fair takes place (church hall, school, ...)."""

    name = models.CharField(max_length=200)
    address = models.TextField(blank=True, default='')
    capacity = models.PositiveIntegerField(null=True, blank=True)
    phone = models.CharField(max_length=32, blank=True, default='')
    email = models.EmailField(blank=True, default='')
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name', 'id']

    def __str__(self) -> str:
        return self.name


class Service(models.Model):
    """A station patients queue for (screening, dental, optician, ECG, ...).

    Exactly one active service is normally flagged ``is_intake_gate``: the
    first screening step ("Know Your Numbers"). Other services only show a
    patient on their queue board once that patient's intake entry is
    completed.
    """

    name = models.CharField(max_length=200)
    description = models.TextField(blank=True, default='')
    duration_minutes = models.PositiveIntegerField(null=True, blank=True)
    is_active = models.BooleanField(default=True)
    is_intake_gate = models.BooleanField(default=False, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name', 'id']

    def __str__(self) -> str:
        return self.name


class Doctor(models.Model):
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    specialization = models.CharField(max_length=200, blank=True, default='')
    license_number = models.CharField(max_length=64, blank=True, default='')
    email = models.EmailField(blank=True, default='')
    phone = models.CharField(max_length=32, blank=True, default='')
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['last_name', 'first_name', 'id']

    def __str__(self) -> str:
        return f"Dr. {self.first_name} {self.last_name}"


class Nurse(models.Model):
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    certification_level = models.CharField(max_length=100, blank=True, default='')
    license_number = models.CharField(max_length=64, blank=True, default='')
    email = models.EmailField(blank=True, default='')
    phone = models.CharField(max_length=32, blank=True, default='')
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['last_name', 'first_name', 'id']

    def __str__(self) -> str:
        return f"{self.first_name} {self.last_name}"


class Event(models.Model):
    """A single health fair day at one location."""

    STATUS_OPEN = 'open'
    STATUS_PENDING = 'pending'
    STATUS_CLOSED = 'closed'

    STATUS_CHOICES = (
        (STATUS_OPEN, 'Open'),
        (STATUS_PENDING, 'Pending'),
        (STATUS_CLOSED, 'Closed'),
    )

    name = models.CharField(max_length=200)
    description = models.TextField(blank=True, default='')
    location = models.ForeignKey(Location, on_delete=models.PROTECT, related_name='events')
    event_date = models.DateField()
    start_time = models.TimeField(null=True, blank=True)
    end_time = models.TimeField(null=True, blank=True)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_OPEN, db_index=True)
    is_active = models.BooleanField(default=True)
    services = models.ManyToManyField(Service, blank=True, related_name='events')
    doctors = models.ManyToManyField(Doctor, blank=True, related_name='events')
    nurses = models.ManyToManyField(Nurse, blank=True, related_name='events')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-event_date', '-id']

    def __str__(self) -> str:
        return f"{self.name} ({self.event_date})"


class StaffServicePermission(models.Model):
    """Grants a staff user the right to operate one service's queue."""

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='service_permissions',
    )
    service = models.ForeignKey(Service, on_delete=models.CASCADE, related_name='staff_permissions')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=['user', 'service'], name='uniq_staff_service_permission'),
        ]

    def __str__(self) -> str:
        return f"{self.user} -> {self.service}"
