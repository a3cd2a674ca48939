"""
Patient registration and check-in.

Every entry point here runs inside one ``transaction.atomic`` block: the
patient row, the visit (with its queue number) and all queue entries are
written together or not at all. A visit can therefore never end up with the
intake entry but without the services the registration desk selected.

Queue entry layout for a new visit:
- position 1: the intake service (``Service.is_intake_gate``)
- positions 2..N+1: the selected services, in the order given, intake and
  duplicates removed
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from django.db import DatabaseError, transaction
from django.db.models import Max

from healthfair_backend.core.utils import log_patient_action
from healthfair_backend.events.models import Event, Service
from healthfair_backend.patients.exceptions import (
    AlreadyRegisteredError,
    DuplicatePatientError,
    IntakeServiceNotConfigured,
    RegistrationError,
)
from healthfair_backend.patients.models import Patient, PatientVisit
from healthfair_backend.service_queue.models import QueueEntry

logger = logging.getLogger(__name__)


@dataclass
class RegistrationResult:
    patient: Patient
    visit: PatientVisit
    entries: list[QueueEntry] = field(default_factory=list)
    created_patient: bool = False


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------

def find_duplicate_patients(*, first_name: str, last_name: str, date_of_birth=None) -> list[Patient]:
    """Existing patients with the same name (case-insensitive) and birth date.

    Without a birth date, name alone decides.
    """
    qs = Patient.objects.using('default').filter(
        first_name__iexact=(first_name or '').strip(),
        last_name__iexact=(last_name or '').strip(),
        is_active=True,
    )
    if date_of_birth is not None:
        qs = qs.filter(date_of_birth=date_of_birth)
    return list(qs.order_by('id'))


def get_intake_service(event: Event) -> Service | None:
    """The active intake-gate service for ``event``.

    Services attached to the event win; otherwise any active intake service.
    """
    qs = Service.objects.using('default').filter(is_active=True, is_intake_gate=True)
    in_event = qs.filter(events=event).order_by('id').first()
    if in_event is not None:
        return in_event
    return qs.order_by('id').first()


def next_queue_number(event: Event) -> int:
    current = PatientVisit.objects.using('default').filter(event=event).aggregate(m=Max('queue_number'))['m']
    return (current or 0) + 1


# ---------------------------------------------------------------------------
# Building blocks (call inside an atomic block)
# ---------------------------------------------------------------------------

def _lock_event(event: Event) -> Event:
    # Serializes queue-number allocation per event on databases with row locks.
    return Event.objects.using('default').select_for_update().get(pk=event.pk)


def _create_visit(event: Event, patient: Patient) -> PatientVisit:
    existing = PatientVisit.objects.using('default').filter(event=event, patient=patient).first()
    if existing is not None:
        raise AlreadyRegisteredError(
            patient_id=patient.id,
            event_id=event.id,
            visit_id=existing.id,
            queue_number=existing.queue_number,
        )
    return PatientVisit.objects.using('default').create(
        patient=patient,
        event=event,
        queue_number=next_queue_number(event),
        status=PatientVisit.STATUS_CHECKED_IN,
    )


def _ordered_unique(service_ids, exclude=()) -> list[int]:
    seen = set(exclude)
    result = []
    for sid in service_ids or []:
        sid = getattr(sid, 'pk', sid)
        if sid in seen:
            continue
        seen.add(sid)
        result.append(sid)
    return result


def _create_entries(visit: PatientVisit, service_ids: list[int], start_position: int) -> list[QueueEntry]:
    entries = [
        QueueEntry(
            patient_visit=visit,
            service_id=sid,
            queue_position=start_position + offset,
            status=QueueEntry.STATUS_WAITING,
        )
        for offset, sid in enumerate(service_ids)
    ]
    if not entries:
        return []
    QueueEntry.objects.using('default').bulk_create(entries)
    return list(
        QueueEntry.objects.using('default')
        .filter(patient_visit=visit)
        .select_related('service')
        .order_by('queue_position', 'id')
    )


def _queue_visit(event: Event, visit: PatientVisit, service_ids) -> list[QueueEntry]:
    intake = get_intake_service(event)
    if intake is None:
        raise IntakeServiceNotConfigured(event_id=event.id)
    ordered = [intake.id] + _ordered_unique(service_ids, exclude={intake.id})
    return _create_entries(visit, ordered, start_position=1)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def register_patient(
    *,
    event: Event,
    patient_data: dict,
    service_ids=None,
    allow_duplicate: bool = False,
    user=None,
) -> RegistrationResult:
    """Register a new patient at ``event`` and queue them.

    Raises:
        DuplicatePatientError: a matching patient exists and ``allow_duplicate`` is False
        IntakeServiceNotConfigured: no intake service to put at position 1
        RegistrationError: the database rejected the write or was unreachable (nothing is kept)
    """
    try:
        if not allow_duplicate:
            candidates = find_duplicate_patients(
                first_name=patient_data.get('first_name', ''),
                last_name=patient_data.get('last_name', ''),
                date_of_birth=patient_data.get('date_of_birth'),
            )
            if candidates:
                raise DuplicatePatientError(candidates)
        with transaction.atomic(using='default'):
            locked_event = _lock_event(event)
            patient = Patient.objects.using('default').create(**patient_data)
            visit = _create_visit(locked_event, patient)
            entries = _queue_visit(locked_event, visit, service_ids)
    except DatabaseError as exc:
        logger.exception('Registration failed for event %s', event.id)
        raise RegistrationError('Failed to register patient. Please try again.') from exc

    logger.info(
        'Registered patient %s at event %s with queue number %s (%d services)',
        patient.patient_number, event.id, visit.queue_number, len(entries),
    )
    log_patient_action(
        user,
        'patient_registered',
        patient_id=patient.id,
        meta={'event_id': event.id, 'visit_id': visit.id, 'queue_number': visit.queue_number},
    )
    return RegistrationResult(patient=patient, visit=visit, entries=entries, created_patient=True)


def check_in_patient(*, event: Event, patient: Patient, service_ids=None, user=None) -> RegistrationResult:
    """Add an already known patient to ``event`` and queue them.

    Raises:
        AlreadyRegisteredError: the patient already has a visit for ``event``
        IntakeServiceNotConfigured: no intake service to put at position 1
        RegistrationError: the database rejected the write
    """
    try:
        with transaction.atomic(using='default'):
            locked_event = _lock_event(event)
            visit = _create_visit(locked_event, patient)
            entries = _queue_visit(locked_event, visit, service_ids)
    except DatabaseError as exc:
        logger.exception('Check-in failed for patient %s at event %s', patient.id, event.id)
        raise RegistrationError('Could not add patient to the current event.') from exc

    logger.info('Checked in patient %s at event %s with queue number %s', patient.id, event.id, visit.queue_number)
    log_patient_action(
        user,
        'patient_checked_in',
        patient_id=patient.id,
        meta={'event_id': event.id, 'visit_id': visit.id, 'queue_number': visit.queue_number},
    )
    return RegistrationResult(patient=patient, visit=visit, entries=entries)


def add_services_to_visit(*, visit: PatientVisit, service_ids, user=None) -> list[QueueEntry]:
    """Queue ``visit`` for more services, after its existing entries.

    Services the visit is already queued for are skipped. Returns the new
    entries only.
    """
    try:
        with transaction.atomic(using='default'):
            existing = list(QueueEntry.objects.using('default').select_for_update().filter(patient_visit=visit))
            existing_ids = {e.service_id for e in existing}
            last = max((e.queue_position or 0 for e in existing), default=0)
            new_ids = _ordered_unique(service_ids, exclude=existing_ids)
            created = _create_entries(visit, new_ids, start_position=last + 1)
    except DatabaseError as exc:
        logger.exception('Adding services to visit %s failed', visit.id)
        raise RegistrationError('Failed to add services. Please try again.') from exc

    new_entries = [e for e in created if e.service_id in set(new_ids)]
    if new_entries:
        log_patient_action(
            user,
            'visit_services_added',
            patient_id=visit.patient_id,
            meta={'visit_id': visit.id, 'service_ids': new_ids},
        )
    return new_entries
