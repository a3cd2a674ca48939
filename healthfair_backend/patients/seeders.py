from datetime import date

from django.db import transaction

from healthfair_backend.events.models import Event, Service
from healthfair_backend.service_queue.models import QueueEntry
from healthfair_backend.service_queue.services.status import update_queue_entry_status

from .models import Patient, PatientVisit
from .services.registration import register_patient
from .services.screening import save_basic_screening

DEMO_PATIENTS = [
    # first, last, dob, gender, parish, services, intake done
    ("Winston", "Edwards", date(1958, 3, 14), "male", "St. Andrew", ["ECG", "Prognosis"], True),
    ("Claudette", "Henry", date(1971, 11, 2), "female", "Kingston", ["Pap Smear", "Optician"], True),
    ("Devon", "Powell", date(1985, 6, 21), "male", "St. Catherine", ["Dental"], False),
    ("Marlene", "Stewart", date(1964, 1, 9), "female", "St. Andrew", ["Optician", "Prescriptions"], False),
    ("Omar", "Lewis", date(1992, 8, 30), "male", "Kingston", ["Dental", "ECG"], True),
]


def flush_patients() -> None:
    """Delete queue entries, visits and patients (in FK order)."""
    with transaction.atomic():
        QueueEntry.objects.all().delete()
        PatientVisit.objects.all().delete()
        Patient.objects.all().delete()


def seed_patients() -> dict:
    """
    Registers a few demo patients at the first open event, each queued for
    intake plus some services. Some have finished intake so the other
    service boards are not empty. Skipped when the event already has visits.
    """
    stats = {"patients_patients": 0, "patients_visits": 0, "service_queue_entries": 0}

    event = Event.objects.filter(status=Event.STATUS_OPEN).order_by("event_date", "id").first()
    if event is None or PatientVisit.objects.filter(event=event).exists():
        return stats

    services = {s.name: s for s in Service.objects.filter(is_active=True)}
    for first_name, last_name, dob, gender, parish, service_names, intake_done in DEMO_PATIENTS:
        result = register_patient(
            event=event,
            patient_data={
                "first_name": first_name,
                "last_name": last_name,
                "date_of_birth": dob,
                "gender": gender,
                "parish": parish,
            },
            service_ids=[services[name].id for name in service_names if name in services],
            allow_duplicate=True,
        )
        stats["patients_patients"] += 1
        stats["patients_visits"] += 1
        stats["service_queue_entries"] += len(result.entries)

        if intake_done:
            intake = next(e for e in result.entries if e.service.is_intake_gate)
            save_basic_screening(
                visit=result.visit,
                data={"height": 170, "weight": 78, "blood_pressure_systolic": 128, "blood_pressure_diastolic": 82},
            )
            update_queue_entry_status(intake.id, QueueEntry.STATUS_COMPLETED)

    return stats
