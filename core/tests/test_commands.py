from datetime import time
from io import StringIO

from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase

from core.models import Service, ServiceTemplate, ServiceType


class GenerateServicesCommandTests(TestCase):
    def test_generates_requested_month(self):
        service_type = ServiceType.objects.create(name="Estudio Biblico")
        ServiceTemplate.objects.create(weekday=2, service_type=service_type, default_time=time(19, 0))
        out = StringIO()

        call_command("generate_services", year=2025, month=1, stdout=out)

        self.assertIn("2025-01: created 5 services", out.getvalue())
        self.assertEqual(Service.objects.count(), 5)

    def test_invalid_month_raises(self):
        with self.assertRaises(CommandError):
            call_command("generate_services", year=2025, month=13, stdout=StringIO())


class SeedServiceTypesCommandTests(TestCase):
    def test_seed_is_repeatable(self):
        call_command("seed_service_types", stdout=StringIO())
        call_command("seed_service_types", stdout=StringIO())

        self.assertEqual(ServiceType.objects.count(), 3)
        teaching = ServiceType.objects.get(name="Ensenanza")
        self.assertTrue(teaching.has_teaching)
        self.assertFalse(teaching.has_closing_reading)
