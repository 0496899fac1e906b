from datetime import date, time
from unittest import mock

from django.db import DatabaseError
from django.test import TestCase

from core.models import Holiday, Service, ServiceType
from core.services.holidays import (
    create_holiday,
    delete_holiday,
    holidays_for_year,
    toggle_holiday_adjustment,
)


class HolidayServiceTests(TestCase):
    def setUp(self):
        self.service_type = ServiceType.objects.create(name="Alabanza")
        self.service = Service.objects.create(
            date=date(2025, 5, 1), service_type=self.service_type, start_time=time(19, 0)
        )

    def test_create_holiday_flags_existing_services(self):
        result = create_holiday(date(2025, 5, 1), Holiday.KIND_NATIONAL, "Dia del Trabajo")

        self.assertTrue(result.success)
        self.service.refresh_from_db()
        self.assertTrue(self.service.is_holiday)
        self.assertEqual(self.service.start_time, time(19, 0))

    def test_duplicate_date_fails(self):
        create_holiday(date(2025, 5, 1), Holiday.KIND_NATIONAL)

        result = create_holiday(date(2025, 5, 1), Holiday.KIND_LOCAL)

        self.assertFalse(result.success)
        self.assertEqual(result.error, "Ya existe un festivo en esa fecha.")

    def test_unknown_kind_fails(self):
        result = create_holiday(date(2025, 5, 2), "bank")

        self.assertFalse(result.success)
        self.assertFalse(Holiday.objects.exists())

    def test_delete_holiday_clears_flag(self):
        holiday_id = create_holiday(date(2025, 5, 1), Holiday.KIND_NATIONAL).data["holiday"]

        result = delete_holiday(holiday_id)

        self.assertTrue(result.success)
        self.service.refresh_from_db()
        self.assertFalse(self.service.is_holiday)
        self.assertTrue(delete_holiday(holiday_id).not_found)

    def test_holidays_for_year(self):
        Holiday.objects.create(date=date(2024, 12, 25), kind=Holiday.KIND_NATIONAL)
        Holiday.objects.create(date=date(2025, 1, 6), kind=Holiday.KIND_NATIONAL)

        self.assertEqual([h.date for h in holidays_for_year(2025)], [date(2025, 1, 6)])
        self.assertEqual(holidays_for_year().count(), 2)

    def test_toggle_adjustment_shifts_and_restores(self):
        result = toggle_holiday_adjustment(self.service.id)

        self.assertTrue(result.success)
        self.assertEqual(result.data["start_time"], "18:00")
        self.assertTrue(result.data["is_holiday_adjusted"])

        result = toggle_holiday_adjustment(self.service.id)

        self.assertEqual(result.data["start_time"], "19:00")
        self.assertFalse(result.data["is_holiday_adjusted"])
        self.service.refresh_from_db()
        self.assertEqual(self.service.start_time, time(19, 0))

    def test_toggle_across_midnight_fails(self):
        self.service.start_time = time(0, 15)
        self.service.save()

        result = toggle_holiday_adjustment(self.service.id)

        self.assertFalse(result.success)
        self.service.refresh_from_db()
        self.assertFalse(self.service.is_holiday_adjusted)

    def test_failed_delete_keeps_holiday_and_flags(self):
        holiday_id = create_holiday(date(2025, 5, 1), Holiday.KIND_NATIONAL).data["holiday"]

        with mock.patch("core.services.holidays.log_audit", side_effect=DatabaseError("disk full")):
            with self.assertLogs("core.services.results", level="ERROR"):
                result = delete_holiday(holiday_id)

        self.assertFalse(result.success)
        self.assertTrue(Holiday.objects.filter(pk=holiday_id).exists())
        self.service.refresh_from_db()
        self.assertTrue(self.service.is_holiday)

    def test_failed_create_leaves_no_holiday(self):
        with mock.patch("core.services.holidays.log_audit", side_effect=DatabaseError("disk full")):
            with self.assertLogs("core.services.results", level="ERROR"):
                result = create_holiday(date(2025, 5, 1), Holiday.KIND_NATIONAL)

        self.assertFalse(result.success)
        self.assertFalse(Holiday.objects.exists())
        self.service.refresh_from_db()
        self.assertFalse(self.service.is_holiday)
