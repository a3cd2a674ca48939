"""
Report calculations for events and parishes.

Each function returns plain dicts ready for a ``Response``:
- ``location_report``: every patient seen at one event (its location and date)
- ``service_report``: the patients of one event grouped by service
- ``parish_report``: patients grouped by parish, optionally for one event
"""

from __future__ import annotations

from typing import Any

from healthfair_backend.events.models import Event
from healthfair_backend.patients.models import Patient, PatientVisit
from healthfair_backend.service_queue.models import QueueEntry


def _patient_row(patient: Patient, **extra) -> dict[str, Any]:
    row = {
        'id': patient.id,
        'patient_number': patient.patient_number,
        'first_name': patient.first_name,
        'last_name': patient.last_name,
        'date_of_birth': patient.date_of_birth,
        'gender': patient.gender,
        'phone': patient.phone,
        'parish': patient.parish,
        'town': patient.town,
    }
    row.update(extra)
    return row


def _service_sort_key(service):
    return (not service.is_intake_gate, (service.name or '').casefold())


def location_report(event: Event) -> dict[str, Any]:
    """Patients registered at ``event``, by queue number."""
    visits = list(
        PatientVisit.objects.using('default')
        .filter(event=event)
        .select_related('patient')
        .order_by('queue_number', 'id')
    )
    patients = [
        _patient_row(v.patient, visit_id=v.id, queue_number=v.queue_number, visit_status=v.status)
        for v in visits
    ]
    return {
        'event_id': event.id,
        'event_name': event.name,
        'location_name': event.location.name if event.location_id else '',
        'event_date': event.event_date,
        'patient_count': len(patients),
        'patients': patients,
    }


def service_report(event: Event, service_id: int | None = None) -> list[dict[str, Any]]:
    """Patients of ``event`` grouped by the services they were queued for.

    Groups: intake first, then by name (case-insensitive). Patients within a
    group by queue number. Only services with at least one entry appear.
    """
    qs = (
        QueueEntry.objects.using('default')
        .filter(patient_visit__event=event)
        .select_related('service', 'patient_visit', 'patient_visit__patient')
        .order_by('patient_visit__queue_number', 'queue_position', 'id')
    )
    if service_id is not None:
        qs = qs.filter(service_id=service_id)

    groups: dict = {}
    for entry in qs:
        group = groups.get(entry.service_id)
        if group is None:
            group = groups[entry.service_id] = {'service': entry.service, 'patients': []}
        group['patients'].append(
            _patient_row(
                entry.patient_visit.patient,
                visit_id=entry.patient_visit_id,
                queue_number=entry.patient_visit.queue_number,
                status=entry.status,
            )
        )

    ordered = sorted(groups.values(), key=lambda g: _service_sort_key(g['service']))
    return [
        {
            'service_id': g['service'].id,
            'service_name': g['service'].name,
            'is_intake_gate': g['service'].is_intake_gate,
            'patient_count': len(g['patients']),
            'patients': g['patients'],
        }
        for g in ordered
    ]


def parish_report(*, event_id: int | None = None, parish: str | None = None) -> list[dict[str, Any]]:
    """Active patients with a parish, grouped by parish name.

    Parish names are compared after trimming and case-folding; the first
    spelling seen names the group. ``event_id`` limits the report to patients
    who visited that event.
    """
    qs = Patient.objects.using('default').filter(is_active=True).exclude(parish='')
    if event_id is not None:
        qs = qs.filter(visits__event_id=event_id).distinct()

    groups: dict = {}
    for patient in qs.order_by('last_name', 'first_name', 'id'):
        name = patient.parish.strip()
        if not name:
            continue
        key = name.casefold()
        if parish and key != parish.strip().casefold():
            continue
        group = groups.get(key)
        if group is None:
            group = groups[key] = {'parish_name': name, 'patients': []}
        group['patients'].append(_patient_row(patient))

    return [
        {
            'parish_name': g['parish_name'],
            'patient_count': len(g['patients']),
            'patients': g['patients'],
        }
        for key, g in sorted(groups.items())
    ]
