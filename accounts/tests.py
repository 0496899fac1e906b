from django.test import TestCase

from .models import User


class UserModelTests(TestCase):
    def test_create_user(self):
        user = User.objects.create_user(email="user@example.com", full_name="User", password="pass")
        self.assertTrue(user.check_password("pass"))
        self.assertEqual(user.role, User.ROLE_MEMBER)
        self.assertFalse(user.pulpit_eligible)
        self.assertFalse(user.can_edit_services)

    def test_create_superuser_is_administrator(self):
        user = User.objects.create_superuser(email="root@example.com", full_name="Root", password="pass")
        self.assertTrue(user.is_staff)
        self.assertTrue(user.is_administrator)
        self.assertTrue(user.can_edit_services)

    def test_editor_can_edit_but_is_not_administrator(self):
        user = User.objects.create_user(
            email="editor@example.com", full_name="Editor", password="pass", role=User.ROLE_EDITOR
        )
        self.assertTrue(user.can_edit_services)
        self.assertFalse(user.is_administrator)

    def test_create_user_requires_email(self):
        with self.assertRaises(ValueError):
            User.objects.create_user(email="", full_name="Nobody", password="pass")
