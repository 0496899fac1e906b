from datetime import date, time

from django.test import TestCase

from accounts.models import User
from core.models import AuditEvent, Service, ServiceType
from core.services.assignments import assignment_status, update_assignment


class UpdateAssignmentTests(TestCase):
    def setUp(self):
        self.member = User.objects.create_user(
            email="pedro@example.com", full_name="Pedro", password="pass", pulpit_eligible=True
        )
        self.service_type = ServiceType.objects.create(name="Estudio Biblico")
        self.service = Service.objects.create(
            date=date(2025, 2, 5), service_type=self.service_type, start_time=time(19, 0)
        )

    def test_assign_and_clear_role(self):
        result = update_assignment(self.service.id, "introduction", self.member.id)

        self.assertTrue(result.success)
        self.service.refresh_from_db()
        self.assertEqual(self.service.intro_reader, self.member)
        self.assertEqual(result.data["status"], "pending")

        result = update_assignment(self.service.id, "introduction", None)

        self.assertTrue(result.success)
        self.assertIsNone(result.data["user"])
        self.service.refresh_from_db()
        self.assertIsNone(self.service.intro_reader)
        self.assertEqual(
            AuditEvent.objects.filter(action_type="assignment_change", service=self.service).count(), 2
        )

    def test_status_complete_once_required_roles_are_filled(self):
        update_assignment(self.service.id, "introduction", self.member.id)
        result = update_assignment(self.service.id, "closing", self.member.id)

        self.assertEqual(result.data["status"], "complete")
        self.service.refresh_from_db()
        self.assertEqual(assignment_status(self.service), "complete")

    def test_role_not_offered_by_service_type_fails(self):
        result = update_assignment(self.service.id, "teaching", self.member.id)

        self.assertFalse(result.success)
        self.assertIn("ensenanza", result.error)

    def test_unknown_role_fails(self):
        result = update_assignment(self.service.id, "choir", self.member.id)

        self.assertFalse(result.success)

    def test_member_must_be_pulpit_eligible(self):
        self.member.pulpit_eligible = False
        self.member.save()

        result = update_assignment(self.service.id, "introduction", self.member.id)

        self.assertFalse(result.success)
        self.assertFalse(result.not_found)
        self.service.refresh_from_db()
        self.assertIsNone(self.service.intro_reader)

    def test_missing_service_is_not_found(self):
        result = update_assignment(999, "introduction", self.member.id)

        self.assertTrue(result.not_found)

    def test_missing_member_is_not_found(self):
        result = update_assignment(self.service.id, "introduction", 999)

        self.assertTrue(result.not_found)
        self.assertEqual(result.error, "Hermano no encontrado")
