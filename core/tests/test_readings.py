from datetime import date, time
from unittest import mock

from django.test import TestCase

from accounts.models import User
from core.models import AuditEvent, BibleChapter, ScriptureReading, Service, ServiceType
from core.services.readings import (
    Citation,
    confirm_repeated_reading,
    delete_reading,
    record_reading,
)

JOHN_3_16 = Citation("Juan", 3, 16)


class ReadingTestCase(TestCase):
    def setUp(self):
        self.reader = User.objects.create_user(email="ana@example.com", full_name="Ana", password="pass")
        self.other_reader = User.objects.create_user(email="luis@example.com", full_name="Luis", password="pass")
        self.service_type = ServiceType.objects.create(name="Estudio Biblico")
        self.march = Service.objects.create(
            date=date(2025, 3, 5), service_type=self.service_type, start_time=time(19, 0)
        )
        self.april = Service.objects.create(
            date=date(2025, 4, 2), service_type=self.service_type, start_time=time(19, 0)
        )
        self.may = Service.objects.create(
            date=date(2025, 5, 7), service_type=self.service_type, start_time=time(19, 0)
        )

    def record_original(self, service=None, role="introduction", citation=JOHN_3_16):
        result = record_reading((service or self.march).id, role, citation, self.reader.id)
        self.assertTrue(result.success, result.error)
        return ScriptureReading.objects.get(pk=result.data["reading"])

    def record_repeat(self, service, original, role="introduction"):
        result = confirm_repeated_reading(service.id, role, JOHN_3_16, self.other_reader.id, original.id)
        self.assertTrue(result.success, result.error)
        return ScriptureReading.objects.get(pk=result.data["reading"])


class RecordReadingTests(ReadingTestCase):
    def test_first_reading_is_original(self):
        result = record_reading(self.march.id, "introduction", JOHN_3_16, self.reader.id)

        self.assertTrue(result.success)
        self.assertFalse(result.data["is_repeat"])
        reading = ScriptureReading.objects.get(pk=result.data["reading"])
        self.assertEqual((reading.end_chapter, reading.end_verse), (3, 16))
        self.assertEqual(reading.citation, "Juan 3:16")
        self.assertTrue(AuditEvent.objects.filter(entity_type="ScriptureReading", action_type="create").exists())

    def test_repeated_citation_requires_confirmation(self):
        original = self.record_original()

        result = record_reading(self.april.id, "closing", Citation(" Juan ", 3, 16, 3, 16), self.other_reader.id)

        self.assertFalse(result.success)
        self.assertTrue(result.requires_confirmation)
        self.assertEqual(result.conflict["reading_id"], original.id)
        self.assertEqual(result.conflict["service_id"], self.march.id)
        self.assertEqual(result.conflict["date"], "2025-03-05")
        self.assertEqual(result.conflict["reader_name"], "Ana")
        self.assertEqual(ScriptureReading.objects.count(), 1)

    def test_confirm_stores_repeat_linked_to_original(self):
        original = self.record_original()

        result = confirm_repeated_reading(
            self.april.id, "closing", JOHN_3_16, self.other_reader.id, original.id
        )

        self.assertTrue(result.success)
        self.assertTrue(result.data["is_repeat"])
        self.assertEqual(result.data["original_reading"], original.id)
        self.assertEqual(ScriptureReading.objects.filter(is_repeat=False).count(), 1)

    def test_different_verse_is_not_a_repeat(self):
        self.record_original()

        result = record_reading(self.april.id, "introduction", Citation("Juan", 3, 17), self.reader.id)

        self.assertTrue(result.success)
        self.assertFalse(result.data["is_repeat"])

    def test_overlapping_range_is_not_a_repeat(self):
        self.record_original()

        result = record_reading(self.april.id, "introduction", Citation("Juan", 3, 16, 3, 18), self.reader.id)

        self.assertTrue(result.success)

    def test_same_slot_is_replaced(self):
        first = self.record_original()

        result = record_reading(self.march.id, "introduction", Citation("Juan", 3, 17), self.other_reader.id)

        self.assertTrue(result.success)
        self.assertEqual(result.data["reading"], first.id)
        reading = ScriptureReading.objects.get()
        self.assertEqual(reading.start_verse, 17)
        self.assertEqual(reading.reader, self.other_reader)

    def test_recording_same_citation_in_same_slot_is_not_a_conflict(self):
        self.record_original()

        result = record_reading(self.march.id, "introduction", JOHN_3_16, self.reader.id)

        self.assertTrue(result.success)
        self.assertEqual(ScriptureReading.objects.count(), 1)

    def test_concurrent_original_maps_to_confirmation(self):
        original = ScriptureReading.objects.create(
            service=self.april,
            role="introduction",
            reader=self.reader,
            book="Juan",
            start_chapter=3,
            start_verse=16,
            end_chapter=3,
            end_verse=16,
        )
        with mock.patch(
            "core.services.readings.find_original_reading", side_effect=[None, original]
        ):
            result = record_reading(self.march.id, "introduction", JOHN_3_16, self.other_reader.id)

        self.assertTrue(result.requires_confirmation)
        self.assertEqual(result.conflict["reading_id"], original.id)
        self.assertEqual(ScriptureReading.objects.count(), 1)


class ReadingValidationTests(ReadingTestCase):
    def test_end_before_start_fails(self):
        result = record_reading(self.march.id, "introduction", Citation("Juan", 3, 16, 3, 10), self.reader.id)

        self.assertFalse(result.success)
        self.assertIn("versiculo final", result.error)

    def test_end_chapter_before_start_chapter_fails(self):
        result = record_reading(self.march.id, "introduction", Citation("Juan", 3, 16, 2, 20), self.reader.id)

        self.assertFalse(result.success)
        self.assertIn("capitulo final", result.error)

    def test_non_positive_numbers_fail(self):
        result = record_reading(self.march.id, "introduction", Citation("Juan", 0, 16), self.reader.id)

        self.assertFalse(result.success)
        self.assertEqual(ScriptureReading.objects.count(), 0)

    def test_blank_book_fails(self):
        result = record_reading(self.march.id, "introduction", Citation("  ", 3, 16), self.reader.id)

        self.assertFalse(result.success)
        self.assertIn("libro", result.error)

    def test_unknown_role_fails(self):
        result = record_reading(self.march.id, "sermon", JOHN_3_16, self.reader.id)

        self.assertFalse(result.success)
        self.assertFalse(result.not_found)

    def test_missing_service_is_not_found(self):
        result = record_reading(999, "introduction", JOHN_3_16, self.reader.id)

        self.assertTrue(result.not_found)
        self.assertEqual(result.error, "Culto no encontrado")

    def test_inactive_reader_is_not_found(self):
        self.reader.is_active = False
        self.reader.save()

        result = record_reading(self.march.id, "introduction", JOHN_3_16, self.reader.id)

        self.assertTrue(result.not_found)

    def test_role_not_offered_by_service_type_fails(self):
        teaching = ServiceType.objects.create(name="Ensenanza", has_closing_reading=False)
        service = Service.objects.create(date=date(2025, 3, 9), service_type=teaching, start_time=time(11, 0))

        result = record_reading(service.id, "closing", JOHN_3_16, self.reader.id)

        self.assertFalse(result.success)
        self.assertEqual(ScriptureReading.objects.count(), 0)

    def test_confirm_with_different_citation_fails(self):
        original = self.record_original()

        result = confirm_repeated_reading(
            self.april.id, "introduction", Citation("Juan", 3, 17), self.reader.id, original.id
        )

        self.assertFalse(result.success)
        self.assertEqual(result.error, "La cita no coincide con la lectura original.")

    def test_confirm_against_a_repeat_is_not_found(self):
        original = self.record_original()
        repeat = self.record_repeat(self.april, original)

        result = confirm_repeated_reading(self.may.id, "introduction", JOHN_3_16, self.reader.id, repeat.id)

        self.assertTrue(result.not_found)


class BibleBoundsTests(ReadingTestCase):
    def setUp(self):
        super().setUp()
        BibleChapter.objects.create(
            book="Juan", testament="NT", abbreviation="Jn", book_order=43, chapter=3, verse_count=36
        )

    def test_known_citation_passes(self):
        self.assertTrue(record_reading(self.march.id, "introduction", JOHN_3_16, self.reader.id).success)

    def test_verse_beyond_chapter_fails(self):
        result = record_reading(self.march.id, "introduction", Citation("Juan", 3, 40), self.reader.id)

        self.assertFalse(result.success)
        self.assertIn("no tiene versiculo 40", result.error)

    def test_missing_chapter_fails(self):
        result = record_reading(self.march.id, "introduction", Citation("Juan", 4, 1), self.reader.id)

        self.assertFalse(result.success)

    def test_unknown_book_fails(self):
        result = record_reading(self.march.id, "introduction", Citation("Jaun", 3, 16), self.reader.id)

        self.assertFalse(result.success)
        self.assertIn("no existe", result.error)


class RepeatPromotionTests(ReadingTestCase):
    def test_deleting_original_promotes_oldest_repeat(self):
        original = self.record_original()
        first_repeat = self.record_repeat(self.april, original)
        second_repeat = self.record_repeat(self.may, original)

        result = delete_reading(original.id)

        self.assertTrue(result.success)
        self.assertEqual(result.data["promoted"], first_repeat.id)
        first_repeat.refresh_from_db()
        second_repeat.refresh_from_db()
        self.assertFalse(first_repeat.is_repeat)
        self.assertIsNone(first_repeat.original_reading)
        self.assertTrue(second_repeat.is_repeat)
        self.assertEqual(second_repeat.original_reading, first_repeat)

    def test_replacing_original_citation_promotes_repeat(self):
        original = self.record_original()
        repeat = self.record_repeat(self.april, original)

        result = record_reading(self.march.id, "introduction", Citation("Romanos", 8, 28), self.reader.id)

        self.assertTrue(result.success)
        repeat.refresh_from_db()
        self.assertFalse(repeat.is_repeat)
        self.assertIsNone(repeat.original_reading)
        conflict = record_reading(self.may.id, "introduction", JOHN_3_16, self.reader.id)
        self.assertEqual(conflict.conflict["reading_id"], repeat.id)

    def test_deleting_repeat_keeps_original(self):
        original = self.record_original()
        repeat = self.record_repeat(self.april, original)

        result = delete_reading(repeat.id)

        self.assertTrue(result.success)
        self.assertIsNone(result.data["promoted"])
        original.refresh_from_db()
        self.assertFalse(original.is_repeat)

    def test_delete_missing_reading_is_not_found(self):
        result = delete_reading(999)

        self.assertTrue(result.not_found)
