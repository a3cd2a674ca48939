from datetime import time, timedelta

from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils import timezone

from .models import Doctor, Event, Location, Nurse, Service, StaffServicePermission

User = get_user_model()

INTAKE_SERVICE_NAME = "Know Your Numbers"

SERVICE_DEFINITIONS = [
    # name, description, minutes, intake
    (INTAKE_SERVICE_NAME, "Blood pressure, blood sugar, BMI and cholesterol screening", 10, True),
    ("Dental", "Dental check and cleaning", 20, False),
    ("Optician", "Eye test and glasses prescription", 15, False),
    ("ECG", "Electrocardiogram", 15, False),
    ("Pap Smear", "Cervical screening", 15, False),
    ("Prescriptions", "Medication review and prescriptions", 10, False),
    ("Prognosis", "Doctor consultation on screening results", 15, False),
]

# username -> services the user may operate
STAFF_SERVICE_GRANTS = {
    "dr.thompson": ["ECG", "Prescriptions", "Prognosis"],
    "dr.clarke": ["Dental"],
    "nurse.reid": [INTAKE_SERVICE_NAME, "Pap Smear"],
    "nurse.gordon": [INTAKE_SERVICE_NAME, "ECG"],
    "tech.morgan": ["Optician"],
}


def seed_events(flush: bool = False) -> dict:
    """
    Seeds one location, the service catalogue (intake service flagged),
    doctors, nurses, one open event offering every service and the staff
    service permissions.

    With flush=True all events and reference data are deleted first; queue
    entries, visits and patients must already be gone (see ``seed_patients``).
    """
    stats: dict[str, int] = {}

    with transaction.atomic():
        if flush:
            StaffServicePermission.objects.all().delete()
            Event.objects.all().delete()
            Service.objects.all().delete()
            Doctor.objects.all().delete()
            Nurse.objects.all().delete()
            Location.objects.all().delete()

        location = _seed_location()
        stats["events_locations"] = 1

        services = _seed_services()
        stats["events_services"] = len(services)

        doctors = _seed_doctors()
        stats["events_doctors"] = len(doctors)

        nurses = _seed_nurses()
        stats["events_nurses"] = len(nurses)

        event = _seed_event(location, services, doctors, nurses)
        stats["events_events"] = 1 if event else 0

        stats["events_staff_permissions"] = _seed_staff_permissions(services)

    return stats


def _seed_location() -> Location:
    location, _ = Location.objects.get_or_create(
        name="St. Andrew Parish Church Hall",
        defaults={
            "address": "Half Way Tree Road, Kingston 10",
            "capacity": 250,
            "phone": "876-555-0100",
        },
    )
    return location


def _seed_services() -> list[Service]:
    services = []
    for name, description, minutes, intake in SERVICE_DEFINITIONS:
        service, _ = Service.objects.update_or_create(
            name=name,
            defaults={
                "description": description,
                "duration_minutes": minutes,
                "is_intake_gate": intake,
                "is_active": True,
            },
        )
        services.append(service)
    return services


def _seed_doctors() -> list[Doctor]:
    rows = [
        ("Richard", "Thompson", "General Practice", "MC-10231"),
        ("Natalie", "Clarke", "Dentistry", "DC-20417"),
        ("Howard", "Bailey", "Cardiology", "MC-10877"),
    ]
    doctors = []
    for first_name, last_name, specialization, license_number in rows:
        doctor, _ = Doctor.objects.get_or_create(
            license_number=license_number,
            defaults={"first_name": first_name, "last_name": last_name, "specialization": specialization},
        )
        doctors.append(doctor)
    return doctors


def _seed_nurses() -> list[Nurse]:
    rows = [
        ("Sandra", "Reid", "Registered Nurse", "RN-3321"),
        ("Paul", "Gordon", "Registered Nurse", "RN-3398"),
        ("Tanya", "Francis", "Enrolled Assistant Nurse", "EAN-118"),
    ]
    nurses = []
    for first_name, last_name, level, license_number in rows:
        nurse, _ = Nurse.objects.get_or_create(
            license_number=license_number,
            defaults={"first_name": first_name, "last_name": last_name, "certification_level": level},
        )
        nurses.append(nurse)
    return nurses


def _seed_event(location, services, doctors, nurses) -> Event:
    event_date = timezone.localdate() + timedelta(days=7)
    event, created = Event.objects.get_or_create(
        name="Community Health Fair",
        event_date=event_date,
        defaults={
            "description": "Free screenings for the community",
            "location": location,
            "start_time": time(9, 0),
            "end_time": time(15, 0),
            "status": Event.STATUS_OPEN,
        },
    )
    if created:
        event.services.set(services)
        event.doctors.set(doctors)
        event.nurses.set(nurses)
    return event


def _seed_staff_permissions(services: list[Service]) -> int:
    by_name = {s.name: s for s in services}
    count = 0
    for username, service_names in STAFF_SERVICE_GRANTS.items():
        user = User.objects.filter(username=username).first()
        if user is None:
            continue
        for name in service_names:
            _, created = StaffServicePermission.objects.get_or_create(user=user, service=by_name[name])
            count += int(created)
    return count
