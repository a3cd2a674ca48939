from django.contrib.auth.models import AbstractUser
from django.db import models
from django.conf import settings


class Role(models.Model):
    """User roles for RBAC (Role-Based Access Control).

    Standard roles: admin, registration, doctor, nurse, technician
    """

    name = models.CharField(max_length=64, unique=True, db_index=True)
    label = models.CharField(max_length=128)

    class Meta:
        db_table = 'core_role'
        ordering = ['name']
        verbose_name = 'Role'
        verbose_name_plural = 'Roles'

    def __str__(self) -> str:
        return self.label


class User(AbstractUser):
    """Staff account working at health fair events.

    Extends Django's AbstractUser with:
    - role: ForeignKey to Role for RBAC
    - professional_capacity: what the person does on the fair floor
    - email: made unique (staff are looked up by email)
    """

    CAPACITY_DOCTOR = 'doctor'
    CAPACITY_NURSE = 'nurse'
    CAPACITY_OPTICIAN = 'optician'
    CAPACITY_DENTIST = 'dentist'
    CAPACITY_DENTAL_TECHNICIAN = 'dental_technician'
    CAPACITY_REGISTRATION_TECHNICIAN = 'registration_technician'
    CAPACITY_ADMINISTRATION = 'administration'

    CAPACITY_CHOICES = (
        (CAPACITY_DOCTOR, 'Doctor'),
        (CAPACITY_NURSE, 'Nurse'),
        (CAPACITY_OPTICIAN, 'Optician'),
        (CAPACITY_DENTIST, 'Dentist'),
        (CAPACITY_DENTAL_TECHNICIAN, 'Dental technician'),
        (CAPACITY_REGISTRATION_TECHNICIAN, 'Registration technician'),
        (CAPACITY_ADMINISTRATION, 'Administration'),
    )

    email = models.EmailField('email address', blank=True, unique=True)
    phone = models.CharField(max_length=32, blank=True, default='')
    professional_capacity = models.CharField(max_length=32, choices=CAPACITY_CHOICES, blank=True, default='')
    role = models.ForeignKey(
        Role,
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name='users',
    )

    class Meta:
        db_table = 'core_user'
        ordering = ['username']
        verbose_name = 'User'
        verbose_name_plural = 'Users'

    @property
    def role_name(self) -> str | None:
        role = getattr(self, 'role', None)
        return getattr(role, 'name', None)

    @property
    def is_fair_admin(self) -> bool:
        return bool(self.is_superuser or self.role_name == 'admin')


class AuditLog(models.Model):
    """Audit log for patient and queue actions.

    Tracks who registered, viewed or moved a patient and when.
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='audit_logs',
    )
    role_name = models.CharField(max_length=50, db_index=True)
    action = models.CharField(max_length=50, db_index=True)
    patient_id = models.IntegerField(null=True, blank=True, db_index=True)
    timestamp = models.DateTimeField(auto_now_add=True, db_index=True)
    meta = models.JSONField(null=True, blank=True)

    class Meta:
        db_table = 'core_auditlog'
        ordering = ['-timestamp', '-id']
        verbose_name = 'Audit Log'
        verbose_name_plural = 'Audit Logs'
        indexes = [
            models.Index(fields=['action', 'timestamp'], name='core_auditl_action_8b1c2e_idx'),
            models.Index(fields=['patient_id', 'timestamp'], name='core_auditl_patient_4d7f3a_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.timestamp} {self.action} (patient_id={self.patient_id})"
