from __future__ import annotations

from datetime import date
from unittest.mock import patch

from django.db import OperationalError
from django.test import TestCase

from rest_framework.test import APIClient

from healthfair_backend.core.models import Role, User
from healthfair_backend.events.models import Event, Location, Service
from healthfair_backend.patients.models import Patient
from healthfair_backend.patients.services.registration import check_in_patient, register_patient
from healthfair_backend.reports.services.reports import location_report, parish_report, service_report


class ReportServiceTest(TestCase):
    """Location, service and parish report calculations."""

    databases = {"default"}

    def setUp(self):
        self.hall = Location.objects.using("default").create(name="Church Hall")
        self.square = Location.objects.using("default").create(name="Town Square")
        self.event = Event.objects.using("default").create(
            name="Spring Fair", location=self.hall, event_date=date(2030, 4, 5)
        )
        self.other_event = Event.objects.using("default").create(
            name="Autumn Fair", location=self.square, event_date=date(2030, 10, 5)
        )
        self.intake = Service.objects.using("default").create(name="Know Your Numbers", is_intake_gate=True)
        self.dental = Service.objects.using("default").create(name="dental")
        self.ecg = Service.objects.using("default").create(name="ECG")

        self.winston = register_patient(
            event=self.event,
            patient_data={"first_name": "Winston", "last_name": "Edwards", "parish": "St. Andrew"},
            service_ids=[self.ecg.id, self.dental.id],
        )
        self.claudette = register_patient(
            event=self.event,
            patient_data={"first_name": "Claudette", "last_name": "Henry", "parish": "Kingston"},
            service_ids=[self.dental.id],
        )
        self.devon = register_patient(
            event=self.other_event,
            patient_data={"first_name": "Devon", "last_name": "Powell", "parish": " st. andrew "},
        )
        Patient.objects.using("default").create(first_name="No", last_name="Parish")

    def test_location_report_lists_event_patients_by_queue_number(self):
        report = location_report(self.event)

        self.assertEqual(report["location_name"], "Church Hall")
        self.assertEqual(report["event_date"], date(2030, 4, 5))
        self.assertEqual(report["patient_count"], 2)
        self.assertEqual([(p["first_name"], p["queue_number"]) for p in report["patients"]], [("Winston", 1), ("Claudette", 2)])

    def test_service_report_groups_patients_per_service(self):
        report = service_report(self.event)

        self.assertEqual([g["service_name"] for g in report], ["Know Your Numbers", "dental", "ECG"])
        counts = {g["service_name"]: g["patient_count"] for g in report}
        self.assertEqual(counts, {"Know Your Numbers": 2, "dental": 2, "ECG": 1})
        ecg = report[2]
        self.assertEqual([p["first_name"] for p in ecg["patients"]], ["Winston"])
        self.assertEqual(ecg["patients"][0]["status"], "waiting")

    def test_service_report_for_one_service(self):
        report = service_report(self.event, service_id=self.ecg.id)
        self.assertEqual([g["service_id"] for g in report], [self.ecg.id])

    def test_parish_report_groups_case_insensitively(self):
        report = parish_report()

        self.assertEqual([g["parish_name"] for g in report], ["Kingston", "St. Andrew"])
        st_andrew = report[1]
        self.assertEqual(st_andrew["patient_count"], 2)
        self.assertEqual([p["last_name"] for p in st_andrew["patients"]], ["Edwards", "Powell"])

    def test_parish_report_for_one_event(self):
        report = parish_report(event_id=self.other_event.id)
        self.assertEqual([(g["parish_name"], g["patient_count"]) for g in report], [("st. andrew", 1)])

    def test_parish_report_for_one_parish(self):
        check_in_patient(event=self.other_event, patient=self.winston.patient)

        report = parish_report(parish="ST. ANDREW", event_id=self.other_event.id)
        self.assertEqual(len(report), 1)
        self.assertEqual(report[0]["patient_count"], 2)


class ReportApiTest(TestCase):
    databases = {"default"}

    def _client_for(self, user: User) -> APIClient:
        client = APIClient()
        client.defaults["HTTP_HOST"] = "localhost"
        client.force_authenticate(user=user)
        return client

    def setUp(self):
        role_reg, _ = Role.objects.using("default").get_or_create(name="registration", defaults={"label": "Registration"})
        role_nurse, _ = Role.objects.using("default").get_or_create(name="nurse", defaults={"label": "Nurse"})
        self.registration = User.objects.db_manager("default").create_user(
            username="reg_reports", email="reg_reports@example.com", password="DummyPass123!", role=role_reg
        )
        self.nurse = User.objects.db_manager("default").create_user(
            username="nurse_reports", email="nurse_reports@example.com", password="DummyPass123!", role=role_nurse
        )
        location = Location.objects.using("default").create(name="Church Hall")
        self.event = Event.objects.using("default").create(
            name="Spring Fair", location=location, event_date=date(2030, 4, 5)
        )
        self.intake = Service.objects.using("default").create(name="Know Your Numbers", is_intake_gate=True)
        register_patient(
            event=self.event,
            patient_data={"first_name": "Winston", "last_name": "Edwards", "parish": "St. Andrew"},
        )
        self.client = self._client_for(self.registration)

    def test_location_report(self):
        res = self.client.get(f"/api/reports/events/{self.event.id}/location/")
        self.assertEqual(res.status_code, 200, res.content)
        self.assertEqual(res.json()["event_date"], "2030-04-05")
        self.assertEqual(res.json()["patients"][0]["last_name"], "Edwards")

    def test_service_report(self):
        res = self.client.get(f"/api/reports/events/{self.event.id}/services/")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json()[0]["service_name"], "Know Your Numbers")

        self.assertEqual(self.client.get(f"/api/reports/events/{self.event.id}/services/?service=x").status_code, 400)

    def test_parish_report(self):
        res = self.client.get(f"/api/reports/parishes/?event={self.event.id}")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json()[0]["parish_name"], "St. Andrew")

        self.assertEqual(self.client.get("/api/reports/parishes/?event=999999").status_code, 404)
        self.assertEqual(self.client.get("/api/reports/parishes/?event=abc").status_code, 400)

    def test_unknown_event_404(self):
        self.assertEqual(self.client.get("/api/reports/events/999999/location/").status_code, 404)

    def test_clinical_staff_cannot_read_reports(self):
        res = self._client_for(self.nurse).get(f"/api/reports/events/{self.event.id}/location/")
        self.assertEqual(res.status_code, 403)

    def test_anonymous_is_rejected(self):
        self.assertEqual(APIClient().get("/api/reports/parishes/").status_code, 401)

    def test_store_failure_returns_503(self):
        with patch(
            "healthfair_backend.reports.views.service_report",
            side_effect=OperationalError("connection lost"),
        ):
            res = self.client.get(f"/api/reports/events/{self.event.id}/services/")
        self.assertEqual(res.status_code, 503)
        self.assertNotIn("connection", res.json()["detail"])
