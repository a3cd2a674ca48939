from __future__ import annotations

from healthfair_backend.patients.models import Patient, PatientVisit


def patient_visit_history(patient: Patient, *, event_id=None, location_id=None) -> list[PatientVisit]:
    """Visits of ``patient`` across events, newest first.

    Each visit carries its event (with location), screening record and queue
    entries with service and providers.
    """
    qs = (
        PatientVisit.objects.using('default')
        .filter(patient=patient)
        .select_related('event', 'event__location', 'basic_screening')
        .prefetch_related('queue_entries__service', 'queue_entries__doctor', 'queue_entries__nurse')
    )
    if event_id is not None:
        qs = qs.filter(event_id=event_id)
    if location_id is not None:
        qs = qs.filter(event__location_id=location_id)
    return list(qs.order_by('-visit_date', '-event__event_date', '-id'))
