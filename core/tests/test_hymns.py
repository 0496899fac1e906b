from datetime import date, time
from unittest import mock

from django.db import DatabaseError
from django.test import TestCase

from core.models import Chorus, Hymn, Service, ServicePlanEntry, ServiceType
from core.services.hymns import (
    add_plan_entry,
    hymnal_counts,
    remove_plan_entry,
    search_choruses,
    search_hymns,
)


class HymnSearchTests(TestCase):
    def setUp(self):
        Hymn.objects.create(number=12, title="Santo, Santo, Santo")
        Hymn.objects.create(number=120, title="Cuan grande es El")
        Chorus.objects.create(number=3, title="Alabare")

    def test_numeric_query_matches_number(self):
        self.assertEqual([h.number for h in search_hymns("12")], [12])

    def test_text_query_matches_title(self):
        self.assertEqual([h.number for h in search_hymns("grande")], [120])

    def test_empty_query_lists_all(self):
        self.assertEqual(len(search_hymns("")), 2)
        self.assertEqual(len(search_choruses(None)), 1)

    def test_counts(self):
        self.assertEqual(hymnal_counts(), {"hymns": 2, "choruses": 1})


class PlanEntryTests(TestCase):
    def setUp(self):
        self.service_type = ServiceType.objects.create(name="Alabanza")
        self.service = Service.objects.create(
            date=date(2025, 6, 1), service_type=self.service_type, start_time=time(11, 0)
        )
        self.hymns = [Hymn.objects.create(number=n, title=f"Himno {n}") for n in range(1, 5)]
        self.chorus = Chorus.objects.create(number=1, title="Coro 1")

    def test_add_and_remove_entry(self):
        result = add_plan_entry(self.service.id, "chorus", self.chorus.id)

        self.assertTrue(result.success)
        entry = ServicePlanEntry.objects.get(pk=result.data["entry"])
        self.assertEqual(entry.item, self.chorus)

        self.assertTrue(remove_plan_entry(entry.id).success)
        self.assertFalse(ServicePlanEntry.objects.exists())

    def test_at_most_three_per_kind(self):
        for order, hymn in enumerate(self.hymns[:3], start=1):
            self.assertTrue(add_plan_entry(self.service.id, "hymn", hymn.id, order=order).success)

        result = add_plan_entry(self.service.id, "hymn", self.hymns[3].id, order=4)

        self.assertFalse(result.success)
        self.assertEqual(result.error, "Maximo 3 himnos permitidos.")
        self.assertTrue(add_plan_entry(self.service.id, "chorus", self.chorus.id).success)

    def test_service_type_without_hymns_fails(self):
        self.service_type.has_hymns_and_choruses = False
        self.service_type.save()

        result = add_plan_entry(self.service.id, "hymn", self.hymns[0].id)

        self.assertFalse(result.success)

    def test_missing_item_is_not_found(self):
        result = add_plan_entry(self.service.id, "hymn", 999)

        self.assertTrue(result.not_found)
        self.assertEqual(result.error, "Himno no encontrado")

    def test_failed_remove_keeps_entry(self):
        entry_id = add_plan_entry(self.service.id, "hymn", self.hymns[0].id).data["entry"]

        with mock.patch("core.services.hymns.log_audit", side_effect=DatabaseError("disk full")):
            with self.assertLogs("core.services.results", level="ERROR"):
                result = remove_plan_entry(entry_id)

        self.assertFalse(result.success)
        self.assertTrue(ServicePlanEntry.objects.filter(pk=entry_id).exists())
