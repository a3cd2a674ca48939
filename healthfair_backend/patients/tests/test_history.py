from __future__ import annotations

from datetime import date
from decimal import Decimal
from unittest.mock import patch

from django.db import OperationalError
from django.test import SimpleTestCase, TestCase

from rest_framework.test import APIClient

from healthfair_backend.core.models import AuditLog, Role, User
from healthfair_backend.events.models import Event, Location, Nurse, Service
from healthfair_backend.patients.models import BasicScreening, PatientVisit, calculate_bmi
from healthfair_backend.patients.services.registration import check_in_patient, register_patient
from healthfair_backend.service_queue.services.status import update_queue_entry_status


class CalculateBmiTest(SimpleTestCase):
    def test_rounds_to_one_decimal(self):
        self.assertEqual(calculate_bmi(170, 78), Decimal("27.0"))
        self.assertEqual(calculate_bmi(Decimal("182.5"), Decimal("90.3")), Decimal("27.1"))

    def test_missing_or_zero_values_give_none(self):
        self.assertIsNone(calculate_bmi(None, 70))
        self.assertIsNone(calculate_bmi(170, None))
        self.assertIsNone(calculate_bmi(0, 70))


class VisitHistoryAndScreeningApiTest(TestCase):
    """Cross-event visit history and basic screening records over HTTP."""

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
            username="reg_history", email="reg_history@example.com", password="DummyPass123!", role=role_reg
        )
        self.nurse_user = User.objects.db_manager("default").create_user(
            username="nurse_history", email="nurse_history@example.com", password="DummyPass123!", role=role_nurse
        )
        self.nurse = Nurse.objects.using("default").create(first_name="Paulette", last_name="Reid")

        self.hall = Location.objects.using("default").create(name="Church Hall")
        self.square = Location.objects.using("default").create(name="Town Square")
        self.spring = Event.objects.using("default").create(
            name="Spring Fair", location=self.hall, event_date=date(2030, 4, 5)
        )
        self.autumn = Event.objects.using("default").create(
            name="Autumn Fair", location=self.square, event_date=date(2030, 10, 5)
        )
        self.intake = Service.objects.using("default").create(name="Know Your Numbers", is_intake_gate=True)
        self.dental = Service.objects.using("default").create(name="Dental")

        self.spring_result = register_patient(
            event=self.spring,
            patient_data={"first_name": "Winston", "last_name": "Edwards"},
            service_ids=[self.dental.id],
        )
        self.patient = self.spring_result.patient
        self.autumn_result = check_in_patient(event=self.autumn, patient=self.patient)
        # Both visits are created today; the autumn visit is the later fair.
        PatientVisit.objects.using("default").filter(pk=self.spring_result.visit.pk).update(visit_date=date(2030, 4, 5))
        PatientVisit.objects.using("default").filter(pk=self.autumn_result.visit.pk).update(visit_date=date(2030, 10, 5))

    def _history(self, query=""):
        res = self._client_for(self.nurse_user).get(f"/api/patients/{self.patient.id}/visits/{query}")
        self.assertEqual(res.status_code, 200, res.content)
        return res.json()

    def test_history_is_newest_first(self):
        history = self._history()
        self.assertEqual([v["event"]["name"] for v in history], ["Autumn Fair", "Spring Fair"])
        self.assertEqual(history[1]["event"]["location"]["name"], "Church Hall")

    def test_history_lists_services_received(self):
        intake = next(e for e in self.spring_result.entries if e.service_id == self.intake.id)
        update_queue_entry_status(intake.id, "completed")

        spring = self._history()[1]
        self.assertEqual(
            [(e["service"]["name"], e["status"]) for e in spring["queue_entries"]],
            [("Know Your Numbers", "completed"), ("Dental", "waiting")],
        )
        self.assertIsNotNone(spring["queue_entries"][0]["completed_at"])

    def test_history_filters(self):
        self.assertEqual([v["event"]["id"] for v in self._history(f"?event={self.spring.id}")], [self.spring.id])
        self.assertEqual([v["event"]["id"] for v in self._history(f"?location={self.square.id}")], [self.autumn.id])

        res = self._client_for(self.nurse_user).get(f"/api/patients/{self.patient.id}/visits/?location=hall")
        self.assertEqual(res.status_code, 400)

    def test_history_unknown_patient_404(self):
        res = self._client_for(self.nurse_user).get("/api/patients/999999/visits/")
        self.assertEqual(res.status_code, 404)

    def test_history_store_failure_returns_503(self):
        with patch(
            "healthfair_backend.patients.views.patient_visit_history",
            side_effect=OperationalError("connection lost"),
        ):
            res = self._client_for(self.nurse_user).get(f"/api/patients/{self.patient.id}/visits/")
        self.assertEqual(res.status_code, 503)
        self.assertNotIn("connection", res.json()["detail"])

    def test_screening_round_trip(self):
        url = f"/api/visits/{self.spring_result.visit.id}/screening/"
        client = self._client_for(self.nurse_user)

        self.assertEqual(client.get(url).status_code, 404)
        self.assertFalse(self._history()[1]["basic_screening_completed"])

        res = client.put(
            url,
            {"height": "170.0", "weight": "78.0", "blood_pressure_systolic": 128, "screened_by_id": self.nurse.id},
            format="json",
        )
        self.assertEqual(res.status_code, 201, res.content)
        self.assertEqual(res.json()["bmi"], "27.0")
        self.assertEqual(res.json()["screened_by"]["last_name"], "Reid")

        res = client.put(url, {"weight": "85.0"}, format="json")
        self.assertEqual(res.status_code, 200, res.content)
        self.assertEqual(res.json()["bmi"], "29.4")
        self.assertEqual(res.json()["blood_pressure_systolic"], 128)

        self.assertEqual(BasicScreening.objects.using("default").count(), 1)
        self.assertTrue(self._history()[1]["basic_screening_completed"])
        self.assertEqual(AuditLog.objects.using("default").filter(action="basic_screening_saved").count(), 2)

    def test_screening_rejects_out_of_range_values(self):
        url = f"/api/visits/{self.spring_result.visit.id}/screening/"
        res = self._client_for(self.nurse_user).put(url, {"oxygen_saturation": 140}, format="json")
        self.assertEqual(res.status_code, 400)
        self.assertIn("oxygen_saturation", res.json())
        self.assertFalse(BasicScreening.objects.using("default").exists())

    def test_registration_desk_cannot_record_screening(self):
        url = f"/api/visits/{self.spring_result.visit.id}/screening/"
        res = self._client_for(self.registration).put(url, {"heart_rate": 72}, format="json")
        self.assertEqual(res.status_code, 403)

    def test_screening_store_failure_returns_503(self):
        url = f"/api/visits/{self.spring_result.visit.id}/screening/"
        with patch(
            "healthfair_backend.patients.views.save_basic_screening",
            side_effect=OperationalError("connection lost"),
        ):
            res = self._client_for(self.nurse_user).put(url, {"heart_rate": 72}, format="json")
        self.assertEqual(res.status_code, 503)
        self.assertNotIn("connection", res.json()["detail"])
