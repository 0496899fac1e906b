from datetime import date, time

from django.core.cache import cache
from django.test import TestCase

from core.models import Holiday, Service, ServiceTemplate, ServiceType
from core.services.assignments import update_assignment
from core.services.calendar_generation import generate_services_for_month
from core.services.holidays import create_holiday, delete_holiday
from core.signals import month_view_key, notify_services_changed, service_view_key


class ViewInvalidationTests(TestCase):
    def setUp(self):
        cache.clear()
        self.service_type = ServiceType.objects.create(name="Estudio Biblico")

    def test_keys(self):
        self.assertEqual(month_view_key(2025, 1), "pulpito:view:month:2025-01")
        self.assertEqual(service_view_key(7), "pulpito:view:service:7")

    def test_notify_expires_service_and_month(self):
        service = Service.objects.create(
            date=date(2025, 2, 5), service_type=self.service_type, start_time=time(19, 0)
        )
        cache.set(service_view_key(service.id), {"stale": True})
        cache.set(month_view_key(2025, 2), {"stale": True})
        cache.set(month_view_key(2025, 3), {"fresh": True})

        notify_services_changed([service])

        self.assertIsNone(cache.get(service_view_key(service.id)))
        self.assertIsNone(cache.get(month_view_key(2025, 2)))
        self.assertEqual(cache.get(month_view_key(2025, 3)), {"fresh": True})

    def test_generation_expires_month_view(self):
        ServiceTemplate.objects.create(weekday=2, service_type=self.service_type, default_time=time(19, 0))
        cache.set(month_view_key(2025, 1), {"services": []})

        generate_services_for_month(2025, 1)

        self.assertIsNone(cache.get(month_view_key(2025, 1)))

    def test_failed_action_leaves_cache_alone(self):
        cache.set(month_view_key(2025, 1), {"services": []})

        update_assignment(999, "introduction", None)

        self.assertEqual(cache.get(month_view_key(2025, 1)), {"services": []})

    def test_holiday_changes_expire_month_view_without_services(self):
        cache.set(month_view_key(2025, 1), {"holidays": []})

        result = create_holiday(date(2025, 1, 6), Holiday.KIND_NATIONAL)

        self.assertIsNone(cache.get(month_view_key(2025, 1)))
        cache.set(month_view_key(2025, 1), {"holidays": [{"id": result.data["holiday"]}]})

        delete_holiday(result.data["holiday"])

        self.assertIsNone(cache.get(month_view_key(2025, 1)))
