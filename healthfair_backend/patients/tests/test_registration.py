from __future__ import annotations

from datetime import date
from unittest.mock import patch

from django.db import IntegrityError, OperationalError
from django.test import TestCase

from healthfair_backend.core.models import AuditLog
from healthfair_backend.events.models import Event, Location, Service
from healthfair_backend.patients.exceptions import (
    AlreadyRegisteredError,
    DuplicatePatientError,
    IntakeServiceNotConfigured,
    RegistrationError,
)
from healthfair_backend.patients.models import Patient, PatientVisit
from healthfair_backend.patients.services.registration import (
    add_services_to_visit,
    check_in_patient,
    get_intake_service,
    register_patient,
)
from healthfair_backend.service_queue.models import QueueEntry


class RegistrationServiceTest(TestCase):
    """Atomic registration: patient + visit + intake entry + selected services."""

    databases = {"default"}

    def setUp(self):
        self.location = Location.objects.using("default").create(name="Church Hall")
        self.event = Event.objects.using("default").create(
            name="Spring Fair", location=self.location, event_date=date(2030, 4, 5)
        )
        self.intake = Service.objects.using("default").create(name="Know Your Numbers", is_intake_gate=True)
        self.dental = Service.objects.using("default").create(name="Dental")
        self.ecg = Service.objects.using("default").create(name="ECG")

    def _register(self, first="Winston", last="Edwards", dob=date(1958, 3, 14), **kwargs):
        return register_patient(
            event=self.event,
            patient_data={"first_name": first, "last_name": last, "date_of_birth": dob},
            **kwargs,
        )

    def test_creates_patient_visit_and_entries_in_order(self):
        result = self._register(service_ids=[self.ecg.id, self.dental.id])

        self.assertTrue(result.created_patient)
        self.assertEqual(result.patient.patient_number, f"HF-{result.patient.id:06d}")
        self.assertEqual(result.visit.queue_number, 1)
        self.assertEqual(
            [(e.service_id, e.queue_position, e.status) for e in result.entries],
            [
                (self.intake.id, 1, "waiting"),
                (self.ecg.id, 2, "waiting"),
                (self.dental.id, 3, "waiting"),
            ],
        )

    def test_patient_number_is_persisted(self):
        result = self._register()
        stored = Patient.objects.using("default").get(pk=result.patient.pk)
        self.assertEqual(stored.patient_number, result.patient.patient_number)

    def test_intake_and_repeated_services_are_not_duplicated(self):
        result = self._register(service_ids=[self.intake.id, self.dental.id, self.dental.id])
        self.assertEqual([e.service_id for e in result.entries], [self.intake.id, self.dental.id])

    def test_queue_numbers_increase_per_event(self):
        first = self._register()
        second = self._register(first="Claudette", last="Henry", dob=date(1971, 11, 2))
        self.assertEqual((first.visit.queue_number, second.visit.queue_number), (1, 2))

        other_event = Event.objects.using("default").create(
            name="Summer Fair", location=self.location, event_date=date(2030, 7, 1)
        )
        third = register_patient(
            event=other_event,
            patient_data={"first_name": "Devon", "last_name": "Powell"},
        )
        self.assertEqual(third.visit.queue_number, 1)

    def test_duplicate_detection(self):
        self._register()

        with self.assertRaises(DuplicatePatientError) as ctx:
            self._register(first="WINSTON", last="edwards")

        self.assertEqual(len(ctx.exception.candidates), 1)
        self.assertEqual(ctx.exception.to_dict()["candidates"][0]["first_name"], "Winston")
        self.assertEqual(Patient.objects.using("default").count(), 1)

    def test_different_birth_date_is_not_a_duplicate(self):
        self._register()
        result = self._register(dob=date(1990, 1, 1))
        self.assertEqual(result.visit.queue_number, 2)

    def test_allow_duplicate(self):
        self._register()
        result = self._register(allow_duplicate=True)
        self.assertEqual(Patient.objects.using("default").count(), 2)
        self.assertEqual(result.visit.queue_number, 2)

    def test_missing_intake_service_rolls_back_everything(self):
        self.intake.is_intake_gate = False
        self.intake.save()

        with self.assertRaises(IntakeServiceNotConfigured):
            self._register(service_ids=[self.dental.id])

        self.assertEqual(Patient.objects.using("default").count(), 0)
        self.assertEqual(PatientVisit.objects.using("default").count(), 0)
        self.assertEqual(QueueEntry.objects.using("default").count(), 0)

    def test_failure_while_queueing_leaves_no_partial_visit(self):
        with patch(
            "healthfair_backend.patients.services.registration._create_entries",
            side_effect=IntegrityError("insert failed"),
        ):
            with self.assertRaises(RegistrationError):
                self._register(service_ids=[self.dental.id])

        self.assertEqual(Patient.objects.using("default").count(), 0)
        self.assertEqual(PatientVisit.objects.using("default").count(), 0)
        self.assertEqual(QueueEntry.objects.using("default").count(), 0)

    def test_registration_is_audited(self):
        result = self._register()
        log = AuditLog.objects.using("default").get(action="patient_registered")
        self.assertEqual(log.patient_id, result.patient.id)
        self.assertEqual(log.meta["queue_number"], 1)

    def test_intake_service_prefers_event_services(self):
        other_intake = Service.objects.using("default").create(name="Triage", is_intake_gate=True)
        self.event.services.set([other_intake, self.dental])

        self.assertEqual(get_intake_service(self.event), other_intake)

    def test_check_in_existing_patient(self):
        patient = Patient.objects.using("default").create(first_name="Marlene", last_name="Stewart")

        result = check_in_patient(event=self.event, patient=patient, service_ids=[self.dental.id])

        self.assertFalse(result.created_patient)
        self.assertEqual(result.visit.patient_id, patient.id)
        self.assertEqual([e.service_id for e in result.entries], [self.intake.id, self.dental.id])

    def test_check_in_twice_raises_already_registered(self):
        patient = Patient.objects.using("default").create(first_name="Marlene", last_name="Stewart")
        first = check_in_patient(event=self.event, patient=patient)

        with self.assertRaises(AlreadyRegisteredError) as ctx:
            check_in_patient(event=self.event, patient=patient, service_ids=[self.ecg.id])

        self.assertEqual(ctx.exception.visit_id, first.visit.id)
        self.assertEqual(ctx.exception.queue_number, first.visit.queue_number)
        self.assertEqual(QueueEntry.objects.using("default").filter(patient_visit=first.visit).count(), 1)

    def test_add_services_appends_after_existing(self):
        result = self._register(service_ids=[self.dental.id])

        added = add_services_to_visit(visit=result.visit, service_ids=[self.dental.id, self.ecg.id])

        self.assertEqual([(e.service_id, e.queue_position) for e in added], [(self.ecg.id, 3)])
        self.assertEqual(QueueEntry.objects.using("default").filter(patient_visit=result.visit).count(), 3)

    def test_add_only_existing_services_is_a_no_op(self):
        result = self._register(service_ids=[self.dental.id])
        self.assertEqual(add_services_to_visit(visit=result.visit, service_ids=[self.dental.id]), [])

    def test_lost_connection_during_registration_raises_registration_error(self):
        with patch(
            "healthfair_backend.patients.services.registration.next_queue_number",
            side_effect=OperationalError("connection lost"),
        ):
            with self.assertRaises(RegistrationError) as ctx:
                self._register(service_ids=[self.dental.id])

        self.assertNotIn("connection", str(ctx.exception))
        self.assertIsInstance(ctx.exception.__cause__, OperationalError)
        self.assertEqual(Patient.objects.using("default").count(), 0)
        self.assertEqual(PatientVisit.objects.using("default").count(), 0)

    def test_lost_connection_during_duplicate_lookup_raises_registration_error(self):
        with patch(
            "healthfair_backend.patients.services.registration.find_duplicate_patients",
            side_effect=OperationalError("connection lost"),
        ):
            with self.assertRaises(RegistrationError):
                self._register()

    def test_lost_connection_during_check_in_raises_registration_error(self):
        patient = Patient.objects.using("default").create(first_name="Marlene", last_name="Stewart")
        with patch(
            "healthfair_backend.patients.services.registration.next_queue_number",
            side_effect=OperationalError("connection lost"),
        ):
            with self.assertRaises(RegistrationError):
                check_in_patient(event=self.event, patient=patient)

        self.assertFalse(PatientVisit.objects.using("default").filter(patient=patient).exists())

    def test_lost_connection_while_adding_services_raises_registration_error(self):
        result = self._register(service_ids=[self.dental.id])
        with patch(
            "healthfair_backend.patients.services.registration._create_entries",
            side_effect=OperationalError("connection lost"),
        ):
            with self.assertRaises(RegistrationError):
                add_services_to_visit(visit=result.visit, service_ids=[self.ecg.id])

        self.assertEqual(QueueEntry.objects.using("default").filter(patient_visit=result.visit).count(), 2)
