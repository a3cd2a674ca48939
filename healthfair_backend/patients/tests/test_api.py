from __future__ import annotations

from datetime import date
from unittest.mock import patch

from django.db import OperationalError
from django.test import TestCase

from rest_framework.test import APIClient

from healthfair_backend.core.models import Role, User
from healthfair_backend.events.models import Event, Location, Service
from healthfair_backend.patients.models import Patient, PatientVisit
from healthfair_backend.service_queue.models import QueueEntry


class PatientApiTest(TestCase):
    """Registration, check-in, visits, search and RBAC over HTTP."""

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
            username="reg_api", email="reg_api@example.com", password="DummyPass123!", role=role_reg
        )
        self.nurse = User.objects.db_manager("default").create_user(
            username="nurse_api", email="nurse_api@example.com", password="DummyPass123!", role=role_nurse
        )

        self.location = Location.objects.using("default").create(name="Church Hall")
        self.intake = Service.objects.using("default").create(name="Know Your Numbers", is_intake_gate=True)
        self.dental = Service.objects.using("default").create(name="Dental")
        self.ecg = Service.objects.using("default").create(name="ECG")
        self.optician = Service.objects.using("default").create(name="Optician")
        self.event = Event.objects.using("default").create(
            name="Spring Fair", location=self.location, event_date=date(2030, 4, 5)
        )
        self.event.services.set([self.intake, self.dental, self.ecg])

        self.client = self._client_for(self.registration)

    def _registration_payload(self, **overrides):
        payload = {
            "patient": {
                "first_name": "Winston",
                "last_name": "Edwards",
                "date_of_birth": "1958-03-14",
                "parish": "St. Andrew",
                "phone": "876-555-0101",
            },
            "service_ids": [self.dental.id],
        }
        payload.update(overrides)
        return payload

    def test_register_returns_visit_with_queue(self):
        res = self.client.post(
            f"/api/events/{self.event.id}/registrations/", self._registration_payload(), format="json"
        )
        self.assertEqual(res.status_code, 201, res.content)
        body = res.json()
        self.assertEqual(body["queue_number"], 1)
        self.assertEqual(body["event_id"], self.event.id)
        self.assertTrue(body["patient"]["patient_number"].startswith("HF-"))
        self.assertEqual(
            [(e["service"]["name"], e["queue_position"]) for e in body["queue_entries"]],
            [("Know Your Numbers", 1), ("Dental", 2)],
        )

    def test_duplicate_returns_409_with_candidates(self):
        url = f"/api/events/{self.event.id}/registrations/"
        self.client.post(url, self._registration_payload(), format="json")

        res = self.client.post(url, self._registration_payload(), format="json")
        self.assertEqual(res.status_code, 409)
        self.assertEqual(len(res.json()["candidates"]), 1)

        res = self.client.post(url, self._registration_payload(allow_duplicate=True), format="json")
        self.assertEqual(res.status_code, 201)
        self.assertEqual(res.json()["queue_number"], 2)

    def test_service_not_offered_at_event_is_rejected(self):
        res = self.client.post(
            f"/api/events/{self.event.id}/registrations/",
            self._registration_payload(service_ids=[self.optician.id]),
            format="json",
        )
        self.assertEqual(res.status_code, 400)
        self.assertIn("service_ids", res.json())
        self.assertEqual(Patient.objects.using("default").count(), 0)

    def test_missing_names_rejected(self):
        payload = self._registration_payload()
        payload["patient"]["first_name"] = "  "
        res = self.client.post(f"/api/events/{self.event.id}/registrations/", payload, format="json")
        self.assertEqual(res.status_code, 400)

    def test_no_intake_service_returns_400(self):
        self.intake.is_intake_gate = False
        self.intake.save()

        res = self.client.post(
            f"/api/events/{self.event.id}/registrations/", self._registration_payload(), format="json"
        )
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.json()["event_id"], self.event.id)
        self.assertEqual(Patient.objects.using("default").count(), 0)

    def test_nurse_cannot_register(self):
        res = self._client_for(self.nurse).post(
            f"/api/events/{self.event.id}/registrations/", self._registration_payload(), format="json"
        )
        self.assertEqual(res.status_code, 403)

    def test_unknown_event_404(self):
        res = self.client.post("/api/events/999999/registrations/", self._registration_payload(), format="json")
        self.assertEqual(res.status_code, 404)

    def test_check_in_and_conflict(self):
        patient = Patient.objects.using("default").create(first_name="Marlene", last_name="Stewart")
        url = f"/api/events/{self.event.id}/visits/"

        res = self.client.post(url, {"patient_id": patient.id, "service_ids": [self.ecg.id]}, format="json")
        self.assertEqual(res.status_code, 201, res.content)
        visit_id = res.json()["id"]

        res = self.client.post(url, {"patient_id": patient.id}, format="json")
        self.assertEqual(res.status_code, 409)
        self.assertEqual(res.json()["visit_id"], visit_id)

    def test_list_visits_by_queue_number(self):
        url = f"/api/events/{self.event.id}/registrations/"
        self.client.post(url, self._registration_payload(), format="json")
        second = self._registration_payload()
        second["patient"].update({"first_name": "Claudette", "last_name": "Henry"})
        self.client.post(url, second, format="json")

        res = self._client_for(self.nurse).get(f"/api/events/{self.event.id}/visits/")
        self.assertEqual(res.status_code, 200)
        self.assertEqual([v["queue_number"] for v in res.json()], [1, 2])
        self.assertEqual(res.json()[1]["patient"]["first_name"], "Claudette")

    def test_add_services_to_visit(self):
        body = self.client.post(
            f"/api/events/{self.event.id}/registrations/", self._registration_payload(), format="json"
        ).json()

        res = self.client.post(
            f"/api/visits/{body['id']}/services/", {"service_ids": [self.ecg.id]}, format="json"
        )
        self.assertEqual(res.status_code, 201, res.content)
        self.assertEqual([(e["service"]["name"], e["queue_position"]) for e in res.json()], [("ECG", 3)])

        res = self.client.post(f"/api/visits/{body['id']}/services/", {"service_ids": []}, format="json")
        self.assertEqual(res.status_code, 400)

    def test_search(self):
        Patient.objects.using("default").create(first_name="Winston", last_name="Edwards", phone="876-555-0101")
        Patient.objects.using("default").create(first_name="Claudette", last_name="Henry", email="c.henry@example.com")
        Patient.objects.using("default").create(first_name="Inactive", last_name="Edwards", is_active=False)

        client = self._client_for(self.nurse)
        self.assertEqual([p["first_name"] for p in client.get("/api/patients/?q=edw").json()], ["Winston"])
        self.assertEqual([p["last_name"] for p in client.get("/api/patients/?q=c.henry").json()], ["Henry"])
        self.assertEqual([p["last_name"] for p in client.get("/api/patients/?q=winston edwards").json()], ["Edwards"])
        self.assertEqual([p["first_name"] for p in client.get("/api/patients/?q=0101").json()], ["Winston"])

        number = Patient.objects.using("default").get(first_name="Claudette").patient_number
        self.assertEqual([p["patient_number"] for p in client.get(f"/api/patients/?q={number}").json()], [number])

    def test_patch_patient(self):
        patient = Patient.objects.using("default").create(first_name="Omar", last_name="Lewis")
        res = self.client.patch(f"/api/patients/{patient.id}/", {"town": "Half Way Tree"}, format="json")
        self.assertEqual(res.status_code, 200, res.content)
        self.assertEqual(res.json()["town"], "Half Way Tree")
        self.assertEqual(res.json()["patient_number"], patient.patient_number)

        res = self._client_for(self.nurse).patch(f"/api/patients/{patient.id}/", {"town": "X"}, format="json")
        self.assertEqual(res.status_code, 403)

    def test_registration_writes_one_transaction_worth_of_rows(self):
        self.client.post(f"/api/events/{self.event.id}/registrations/", self._registration_payload(), format="json")
        self.assertEqual(Patient.objects.using("default").count(), 1)
        self.assertEqual(PatientVisit.objects.using("default").count(), 1)
        self.assertEqual(QueueEntry.objects.using("default").count(), 2)

    def test_lost_connection_during_registration_returns_503(self):
        with patch(
            "healthfair_backend.patients.services.registration.next_queue_number",
            side_effect=OperationalError("connection lost"),
        ):
            res = self.client.post(
                f"/api/events/{self.event.id}/registrations/", self._registration_payload(), format="json"
            )
        self.assertEqual(res.status_code, 503)
        self.assertNotIn("connection", res.json()["detail"])
        self.assertEqual(Patient.objects.using("default").count(), 0)

    def test_failed_reload_after_check_in_returns_503(self):
        patient = Patient.objects.using("default").create(first_name="Marlene", last_name="Stewart")
        with patch(
            "healthfair_backend.patients.views._visit_queryset",
            side_effect=OperationalError("connection lost"),
        ):
            res = self.client.post(f"/api/events/{self.event.id}/visits/", {"patient_id": patient.id}, format="json")
        self.assertEqual(res.status_code, 503)
        self.assertNotIn("connection", res.json()["detail"])
        self.assertTrue(PatientVisit.objects.using("default").filter(patient=patient).exists())
