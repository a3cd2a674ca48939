from __future__ import annotations

from datetime import date

from django.test import TestCase

from rest_framework.test import APIClient

from healthfair_backend.core.models import Role, User
from healthfair_backend.events.models import Event, Location, Service


class EventEndpointsTest(TestCase):
    databases = {"default"}

    def _client_for(self, user: User) -> APIClient:
        client = APIClient()
        client.defaults["HTTP_HOST"] = "localhost"
        client.force_authenticate(user=user)
        return client

    def setUp(self):
        role_admin, _ = Role.objects.using("default").get_or_create(name="admin", defaults={"label": "Administrator"})
        role_reg, _ = Role.objects.using("default").get_or_create(name="registration", defaults={"label": "Registration"})
        self.admin = User.objects.db_manager("default").create_user(
            username="admin_events", email="admin_events@example.com", password="DummyPass123!", role=role_admin
        )
        self.registration = User.objects.db_manager("default").create_user(
            username="reg_events", email="reg_events@example.com", password="DummyPass123!", role=role_reg
        )
        self.location = Location.objects.using("default").create(name="Church Hall")
        self.intake = Service.objects.using("default").create(name="Know Your Numbers", is_intake_gate=True)
        self.dental = Service.objects.using("default").create(name="Dental")

        self.open_event = Event.objects.using("default").create(
            name="Spring Fair", location=self.location, event_date=date(2030, 4, 5), status="open"
        )
        self.closed_event = Event.objects.using("default").create(
            name="Winter Fair", location=self.location, event_date=date(2029, 12, 1), status="closed"
        )

    def test_list_and_filter_by_status(self):
        client = self._client_for(self.registration)
        res = client.get("/api/events/")
        self.assertEqual(res.status_code, 200)
        self.assertEqual([e["name"] for e in res.json()], ["Spring Fair", "Winter Fair"])

        res = client.get("/api/events/?status=open")
        self.assertEqual([e["name"] for e in res.json()], ["Spring Fair"])

    def test_admin_creates_event_with_services(self):
        res = self._client_for(self.admin).post(
            "/api/events/",
            {
                "name": "Summer Fair",
                "location_id": self.location.id,
                "event_date": "2030-07-01",
                "start_time": "09:00",
                "end_time": "15:00",
                "service_ids": [self.intake.id, self.dental.id],
            },
            format="json",
        )
        self.assertEqual(res.status_code, 201, res.content)
        body = res.json()
        self.assertEqual(body["location"]["name"], "Church Hall")
        self.assertEqual(sorted(s["name"] for s in body["services"]), ["Dental", "Know Your Numbers"])
        self.assertEqual(body["status"], "open")

    def test_end_before_start_rejected(self):
        res = self._client_for(self.admin).post(
            "/api/events/",
            {
                "name": "Bad Fair",
                "location_id": self.location.id,
                "event_date": "2030-07-01",
                "start_time": "15:00",
                "end_time": "09:00",
            },
            format="json",
        )
        self.assertEqual(res.status_code, 400)
        self.assertIn("end_time", res.json())

    def test_registration_cannot_create_event(self):
        res = self._client_for(self.registration).post(
            "/api/events/",
            {"name": "Nope", "location_id": self.location.id, "event_date": "2030-07-01"},
            format="json",
        )
        self.assertEqual(res.status_code, 403)

    def test_admin_patches_status(self):
        res = self._client_for(self.admin).patch(
            f"/api/events/{self.open_event.id}/", {"status": "closed"}, format="json"
        )
        self.assertEqual(res.status_code, 200, res.content)
        self.assertEqual(res.json()["status"], "closed")
        self.open_event.refresh_from_db()
        self.assertEqual(self.open_event.status, "closed")

    def test_detail_404(self):
        res = self._client_for(self.registration).get("/api/events/999999/")
        self.assertEqual(res.status_code, 404)
