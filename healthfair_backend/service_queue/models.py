from django.db import models

from healthfair_backend.events.models import Doctor, Nurse, Service
from healthfair_backend.patients.models import PatientVisit


class QueueEntry(models.Model):
    """One patient visit waiting for (or being seen at) one service.

    Medical meaning:
    - ``waiting`` → ``in_progress`` → ``completed`` is the intended flow, but
      any status may be set at any time (no transition guard).
    - ``started_at``/``completed_at`` are stamped by the status mutator
      (``service_queue.services.status``).
    """

    STATUS_WAITING = 'waiting'
    STATUS_IN_PROGRESS = 'in_progress'
    STATUS_COMPLETED = 'completed'

    STATUS_CHOICES = (
        (STATUS_WAITING, STATUS_WAITING),
        (STATUS_IN_PROGRESS, STATUS_IN_PROGRESS),
        (STATUS_COMPLETED, STATUS_COMPLETED),
    )

    service = models.ForeignKey(Service, on_delete=models.PROTECT, related_name='queue_entries')
    patient_visit = models.ForeignKey(PatientVisit, on_delete=models.CASCADE, related_name='queue_entries')
    queue_position = models.PositiveIntegerField(null=True, blank=True)
    status = models.CharField(max_length=32, choices=STATUS_CHOICES, default=STATUS_WAITING, db_index=True)
    doctor = models.ForeignKey(
        Doctor,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name='queue_entries',
    )
    nurse = models.ForeignKey(
        Nurse,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name='queue_entries',
    )
    created_at = models.DateTimeField(auto_now_add=True)
    started_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'service_queue'
        ordering = ['queue_position', 'id']
        verbose_name = 'Queue entry'
        verbose_name_plural = 'Queue entries'

    def __str__(self) -> str:
        return f"QueueEntry #{self.id} ({self.status})"
