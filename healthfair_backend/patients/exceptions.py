"""
Registration exceptions for the patients app.

Raised by ``patients.services.registration`` and translated to DRF
responses in the views.
"""

from __future__ import annotations

from typing import Any


class RegistrationError(Exception):
    """Base exception for registration/check-in failures."""

    def to_dict(self) -> dict[str, Any]:
        return {'detail': str(self)}


class DuplicatePatientError(RegistrationError):
    """Raised when a patient with the same name (and birth date) already exists."""

    def __init__(self, candidates: list, message: str = "Possible duplicate patient"):
        self.candidates = candidates
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            'detail': str(self),
            'candidates': [
                {
                    'id': p.id,
                    'patient_number': p.patient_number,
                    'first_name': p.first_name,
                    'last_name': p.last_name,
                    'date_of_birth': p.date_of_birth.isoformat() if p.date_of_birth else None,
                    'phone': p.phone,
                }
                for p in self.candidates
            ],
        }


class AlreadyRegisteredError(RegistrationError):
    """Raised when a patient already has a visit for the event."""

    def __init__(self, *, patient_id: int, event_id: int, visit_id: int, queue_number: int):
        self.patient_id = patient_id
        self.event_id = event_id
        self.visit_id = visit_id
        self.queue_number = queue_number
        super().__init__("This patient is already registered for this event")

    def to_dict(self) -> dict[str, Any]:
        return {
            'detail': str(self),
            'patient_id': self.patient_id,
            'event_id': self.event_id,
            'visit_id': self.visit_id,
            'queue_number': self.queue_number,
        }


class IntakeServiceNotConfigured(RegistrationError):
    """Raised when no active service is flagged as the intake gate."""

    def __init__(self, *, event_id: int):
        self.event_id = event_id
        super().__init__("No intake service is configured; patients cannot be queued")

    def to_dict(self) -> dict[str, Any]:
        return {'detail': str(self), 'event_id': self.event_id}
