from datetime import date, time

from django.core.cache import cache
from django.test import TestCase
from rest_framework.test import APIClient

from accounts.models import User
from core.models import AuditEvent, Holiday, Hymn, ScriptureReading, Service, ServiceTemplate, ServiceType
from core.signals import month_view_key


class ApiTestCase(TestCase):
    def setUp(self):
        cache.clear()
        self.admin = User.objects.create_user(
            email="admin@example.com", full_name="Admin", password="pass", role=User.ROLE_ADMIN
        )
        self.editor = User.objects.create_user(
            email="editor@example.com",
            full_name="Editor",
            password="pass",
            role=User.ROLE_EDITOR,
            pulpit_eligible=True,
        )
        self.member = User.objects.create_user(email="member@example.com", full_name="Member", password="pass")
        self.service_type = ServiceType.objects.create(name="Estudio Biblico")
        self.service = Service.objects.create(
            date=date(2025, 1, 8), service_type=self.service_type, start_time=time(19, 0)
        )
        self.client = APIClient()

    def login(self, user):
        self.client.force_authenticate(user=user)


class ServiceApiTests(ApiTestCase):
    def test_anonymous_is_rejected(self):
        response = self.client.get("/api/services/")
        self.assertIn(response.status_code, (401, 403))

    def test_list_filters_by_month(self):
        Service.objects.create(date=date(2025, 2, 5), service_type=self.service_type, start_time=time(19, 0))
        self.login(self.member)

        response = self.client.get("/api/services/", {"year": 2025, "month": 1})

        self.assertEqual(response.status_code, 200)
        self.assertEqual([row["id"] for row in response.json()], [self.service.id])
        self.assertEqual(response.json()[0]["assignment_status"], "pending")

    def test_generate_requires_administrator(self):
        self.login(self.editor)
        response = self.client.post("/api/services/generate/", {"year": 2025, "month": 1}, format="json")
        self.assertEqual(response.status_code, 403)

    def test_generate_invalidates_month_view(self):
        ServiceTemplate.objects.create(weekday=2, service_type=self.service_type, default_time=time(19, 0))
        self.login(self.member)
        first = self.client.get("/api/services/month/", {"year": 2025, "month": 1}).json()
        self.assertEqual(len(first["services"]), 1)
        self.assertIsNotNone(cache.get(month_view_key(2025, 1)))

        self.login(self.admin)
        response = self.client.post("/api/services/generate/", {"year": 2025, "month": 1}, format="json")

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.json()["success"])
        self.assertEqual(response.json()["created"], 4)
        second = self.client.get("/api/services/month/", {"year": 2025, "month": 1}).json()
        self.assertEqual(len(second["services"]), 5)

    def test_month_requires_valid_params(self):
        self.login(self.member)
        response = self.client.get("/api/services/month/", {"year": 2025, "month": 13})
        self.assertEqual(response.status_code, 400)

    def test_create_duplicate_is_bad_request(self):
        self.login(self.admin)
        payload = {"date": "2025-01-08", "start_time": "20:00", "service_type": self.service_type.id}

        response = self.client.post("/api/services/", payload, format="json")

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "Ya existe un culto de ese tipo en esa fecha.")

    def test_assign_and_refresh_detail(self):
        self.login(self.editor)
        detail = self.client.get(f"/api/services/{self.service.id}/").json()
        self.assertIsNone(detail["intro_reader"])

        response = self.client.post(
            f"/api/services/{self.service.id}/assign/",
            {"role": "introduction", "user": self.editor.id},
            format="json",
        )

        self.assertEqual(response.status_code, 200)
        detail = self.client.get(f"/api/services/{self.service.id}/").json()
        self.assertEqual(detail["intro_reader"], self.editor.id)

    def test_assign_missing_service_is_not_found(self):
        self.login(self.editor)
        response = self.client.post(
            "/api/services/999/assign/", {"role": "introduction", "user": None}, format="json"
        )
        self.assertEqual(response.status_code, 404)

    def test_member_cannot_assign(self):
        self.login(self.member)
        response = self.client.post(
            f"/api/services/{self.service.id}/assign/", {"role": "introduction", "user": None}, format="json"
        )
        self.assertEqual(response.status_code, 403)

    def test_toggle_holiday(self):
        self.login(self.admin)
        response = self.client.post(f"/api/services/{self.service.id}/toggle-holiday/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["start_time"], "18:00")

    def test_zero_padded_detail_is_expired_with_the_service(self):
        self.login(self.admin)
        url = f"/api/services/0{self.service.id}/"
        self.assertEqual(self.client.get(url).json()["start_time"], "19:00:00")

        self.client.post(f"/api/services/{self.service.id}/toggle-holiday/")

        self.assertEqual(self.client.get(url).json()["start_time"], "18:00:00")

    def test_non_numeric_ids_are_not_found(self):
        self.login(self.admin)
        self.assertEqual(self.client.get("/api/services/abc/").status_code, 404)
        self.assertEqual(self.client.post("/api/services/abc/toggle-holiday/").status_code, 404)
        self.assertEqual(self.client.delete("/api/readings/abc/").status_code, 404)
        self.assertEqual(self.client.delete("/api/holidays/abc/").status_code, 404)
        self.assertEqual(self.client.delete("/api/plan-entries/abc/").status_code, 404)

    def test_plan(self):
        hymn = Hymn.objects.create(number=1, title="Santo")
        self.login(self.editor)

        response = self.client.post(
            f"/api/services/{self.service.id}/plan/", {"kind": "hymn", "item": hymn.id}, format="json"
        )

        self.assertEqual(response.status_code, 201)
        plan = self.client.get(f"/api/services/{self.service.id}/plan/").json()
        self.assertEqual(plan[0]["title"], "Santo")
        response = self.client.delete(f"/api/plan-entries/{plan[0]['id']}/")
        self.assertEqual(response.status_code, 200)


class ReadingApiTests(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.other = Service.objects.create(
            date=date(2025, 1, 15), service_type=self.service_type, start_time=time(19, 0)
        )
        self.payload = {
            "service": self.service.id,
            "role": "introduction",
            "book": "Juan",
            "start_chapter": 3,
            "start_verse": 16,
        }

    def test_conflict_then_confirm(self):
        self.login(self.editor)
        response = self.client.post("/api/readings/", self.payload, format="json")
        self.assertEqual(response.status_code, 201)
        original_id = response.json()["reading"]

        repeat = dict(self.payload, service=self.other.id)
        response = self.client.post("/api/readings/", repeat, format="json")

        self.assertEqual(response.status_code, 409)
        body = response.json()
        self.assertTrue(body["requires_confirmation"])
        self.assertEqual(body["conflict"]["reading_id"], original_id)
        self.assertEqual(body["conflict"]["date"], "2025-01-08")

        response = self.client.post(
            "/api/readings/confirm/", dict(repeat, original_reading=original_id), format="json"
        )

        self.assertEqual(response.status_code, 201)
        self.assertTrue(response.json()["is_repeat"])
        reading = ScriptureReading.objects.get(pk=response.json()["reading"])
        self.assertEqual(reading.reader, self.editor)

    def test_list_is_paginated_and_filtered(self):
        self.login(self.editor)
        self.client.post("/api/readings/", self.payload, format="json")
        self.client.post(
            "/api/readings/", dict(self.payload, service=self.other.id, start_verse=17), format="json"
        )

        response = self.client.get("/api/readings/", {"limit": 1})
        self.assertEqual(response.json()["count"], 2)
        self.assertEqual(len(response.json()["results"]), 1)

        response = self.client.get("/api/readings/", {"start_date": "2025-01-10"})
        self.assertEqual([row["citation"] for row in response.json()["results"]], ["Juan 3:17"])

    def test_list_filters_by_service_type(self):
        teaching = ServiceType.objects.create(name="Ensenanza", has_teaching=True)
        sunday = Service.objects.create(date=date(2025, 1, 12), service_type=teaching, start_time=time(11, 0))
        self.login(self.editor)
        self.client.post("/api/readings/", self.payload, format="json")
        self.client.post("/api/readings/", dict(self.payload, service=sunday.id, start_verse=17), format="json")

        response = self.client.get("/api/readings/", {"service_type": teaching.id})

        self.assertEqual([row["service"] for row in response.json()["results"]], [sunday.id])

    def test_invalid_citation_is_bad_request(self):
        self.login(self.editor)
        response = self.client.post(
            "/api/readings/", dict(self.payload, end_chapter=3, end_verse=2), format="json"
        )
        self.assertEqual(response.status_code, 400)

    def test_delete_requires_administrator(self):
        self.login(self.editor)
        reading_id = self.client.post("/api/readings/", self.payload, format="json").json()["reading"]

        self.assertEqual(self.client.delete(f"/api/readings/{reading_id}/").status_code, 403)
        self.login(self.admin)
        self.assertEqual(self.client.delete(f"/api/readings/{reading_id}/").status_code, 200)
        self.assertEqual(self.client.delete(f"/api/readings/{reading_id}/").status_code, 404)


class CatalogApiTests(ApiTestCase):
    def test_holidays(self):
        self.login(self.member)
        response = self.client.post("/api/holidays/", {"date": "2025-01-08", "kind": "national"}, format="json")
        self.assertEqual(response.status_code, 403)

        self.login(self.admin)
        response = self.client.post("/api/holidays/", {"date": "2025-01-08", "kind": "national"}, format="json")
        self.assertEqual(response.status_code, 201)
        self.service.refresh_from_db()
        self.assertTrue(self.service.is_holiday)
        self.assertEqual(len(self.client.get("/api/holidays/", {"year": 2025}).json()), 1)
        self.assertEqual(len(self.client.get("/api/holidays/", {"year": 2024}).json()), 0)
        holiday = Holiday.objects.get()
        self.assertEqual(self.client.delete(f"/api/holidays/{holiday.id}/").status_code, 200)

    def test_templates_are_read_only_for_members(self):
        payload = {"weekday": 6, "service_type": self.service_type.id, "default_time": "11:00"}
        self.login(self.member)
        self.assertEqual(self.client.get("/api/templates/").status_code, 200)
        self.assertEqual(self.client.post("/api/templates/", payload, format="json").status_code, 403)

        self.login(self.admin)
        self.assertEqual(self.client.post("/api/templates/", payload, format="json").status_code, 201)

    def test_members_and_hymns(self):
        Hymn.objects.create(number=7, title="Grande es tu fidelidad")
        self.login(self.member)

        members = self.client.get("/api/members/").json()
        self.assertEqual([row["id"] for row in members], [self.editor.id])
        self.assertEqual(len(self.client.get("/api/members/", {"all": "1"}).json()), 3)
        self.assertEqual(self.client.get("/api/hymns/", {"q": "7"}).json()[0]["title"], "Grande es tu fidelidad")
        self.assertEqual(self.client.get("/api/hymns/counts/").json(), {"hymns": 1, "choruses": 0})

    def test_audit_is_for_administrators(self):
        self.login(self.admin)
        self.client.post(f"/api/services/{self.service.id}/toggle-holiday/")

        response = self.client.get("/api/audit/", {"action_type": "holiday_toggle"})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["count"], 1)
        self.assertEqual(response.json()["results"][0]["actor_name"], "Admin")
        self.assertEqual(self.client.get("/api/audit/types/").json(), ["holiday_toggle"])
        self.assertEqual(AuditEvent.objects.count(), 1)
        self.login(self.member)
        self.assertEqual(self.client.get("/api/audit/").status_code, 403)

    def test_stats_and_bible(self):
        self.login(self.member)
        self.assertEqual(self.client.get("/api/stats/participation/").status_code, 400)
        participation = self.client.get("/api/stats/participation/", {"year": 2025}).json()
        self.assertEqual([row["user_id"] for row in participation], [self.editor.id])
        self.assertEqual(self.client.get("/api/stats/readings/").json()["top_readings"], [])
        self.assertEqual(self.client.get("/api/bible/books/").json(), [])
