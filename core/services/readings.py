"""Scripture reading registry.

A citation may be read as an *original* only once across all services. Any
later reading of the identical citation (same book, same chapter/verse
bounds) is stored as a *repeat* linked to that original, and only after the
caller has confirmed it. Each service holds at most one reading per role;
saving again for the same (service, role) replaces the previous reading.
"""

import logging
from dataclasses import dataclass

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.db import IntegrityError, connection, transaction

from core.models import ScriptureReading, Service
from core.services.audit import log_audit
from core.services.bible import check_citation_bounds
from core.services.results import ActionResult, get_or_fail, service_action
from core.signals import notify_services_changed

logger = logging.getLogger(__name__)

READING_ROLES = [code for code, _label in ScriptureReading.ROLE_CHOICES]
CITATION_FIELDS = ("book", "start_chapter", "start_verse", "end_chapter", "end_verse")
ROLE_FLAGS = {
    "introduction": "has_intro_reading",
    "closing": "has_closing_reading",
}


def citation_label(book, start_chapter, start_verse, end_chapter, end_verse):
    label = f"{book} {start_chapter}:{start_verse}"
    if (end_chapter, end_verse) != (start_chapter, start_verse):
        label += f"-{end_chapter}:{end_verse}"
    return label


@dataclass(frozen=True)
class Citation:
    book: str
    start_chapter: int
    start_verse: int
    end_chapter: int = None
    end_verse: int = None

    @classmethod
    def from_reading(cls, reading):
        return cls(*(getattr(reading, name) for name in CITATION_FIELDS))

    def normalized(self):
        return Citation(
            book=(self.book or "").strip(),
            start_chapter=self.start_chapter,
            start_verse=self.start_verse,
            end_chapter=self.start_chapter if self.end_chapter is None else self.end_chapter,
            end_verse=self.start_verse if self.end_verse is None else self.end_verse,
        )

    def as_fields(self):
        return {name: getattr(self, name) for name in CITATION_FIELDS}

    @property
    def label(self):
        return citation_label(*(getattr(self, name) for name in CITATION_FIELDS))


def validate_citation(citation):
    errors = {}
    if not citation.book:
        errors["book"] = "El libro es requerido."
    for name in ("start_chapter", "start_verse", "end_chapter", "end_verse"):
        value = getattr(citation, name)
        if not isinstance(value, int) or isinstance(value, bool) or value < 1:
            errors[name] = "Debe ser un numero mayor a 0."
    if errors:
        raise ValidationError(errors)
    if citation.end_chapter < citation.start_chapter:
        errors["end_chapter"] = "El capitulo final no puede ser menor al inicial."
    elif citation.end_chapter == citation.start_chapter and citation.end_verse < citation.start_verse:
        errors["end_verse"] = "El versiculo final no puede ser menor al inicial."
    if errors:
        raise ValidationError(errors)
    check_citation_bounds(citation)


def find_original_reading(citation):
    return (
        ScriptureReading.objects.filter(is_repeat=False, **citation.as_fields())
        .select_related("service", "reader")
        .first()
    )


def _conflict(original):
    return {
        "reading_id": original.id,
        "service_id": original.service_id,
        "role": original.role,
        "date": original.service.date.isoformat(),
        "reader_id": original.reader_id,
        "reader_name": str(original.reader),
        "citation": original.citation,
    }


def _prepare(service_id, role, citation, reader_id):
    if role not in READING_ROLES:
        raise ValidationError({"role": "Tipo de lectura no valido."})
    citation = citation.normalized()
    validate_citation(citation)
    service = get_or_fail(Service.objects.select_related("service_type"), service_id, "Culto")
    if not getattr(service.service_type, ROLE_FLAGS[role]):
        raise ValidationError({"role": f"Este tipo de culto no tiene lectura de {role}."})
    reader = get_or_fail(get_user_model().objects.filter(is_active=True), reader_id, "Lector")
    return service, citation, reader


def _lock_slot_reading(service, role):
    qs = ScriptureReading.objects
    if connection.features.has_select_for_update:
        qs = qs.select_for_update()
    return qs.filter(service=service, role=role).first()


def _promote_repeats(repeat_ids):
    """Make the oldest repeat the new original and re-link the others to it."""
    if not repeat_ids:
        return None
    heir_id, *others = repeat_ids
    ScriptureReading.objects.filter(id=heir_id).update(is_repeat=False, original_reading=None)
    if others:
        ScriptureReading.objects.filter(id__in=others).update(original_reading_id=heir_id)
    return heir_id


def _repeat_ids(reading):
    return list(reading.repeats.order_by("created_at", "id").values_list("id", flat=True))


def _save_reading(service, role, citation, reader, original=None, actor=None):
    is_repeat = original is not None
    with transaction.atomic():
        reading = _lock_slot_reading(service, role)
        orphaned = []
        if reading is None:
            reading = ScriptureReading.objects.create(
                service=service,
                role=role,
                reader=reader,
                is_repeat=is_repeat,
                original_reading=original,
                **citation.as_fields(),
            )
            action = "create"
        else:
            if not reading.is_repeat and (is_repeat or Citation.from_reading(reading) != citation):
                orphaned = _repeat_ids(reading)
            for name, value in citation.as_fields().items():
                setattr(reading, name, value)
            reading.reader = reader
            reading.is_repeat = is_repeat
            reading.original_reading = original
            reading.save()
            action = "update"
        promoted = _promote_repeats(orphaned)
        log_audit(
            actor,
            "ScriptureReading",
            reading.id,
            action,
            f"Lectura de {role}: {citation.label}",
            service=service,
            diff={
                "is_repeat": is_repeat,
                "original_reading_id": original.id if original else None,
                "promoted_reading_id": promoted,
            },
        )
    notify_services_changed([service])
    return reading


@service_action
def record_reading(service_id, role, citation, reader_id, actor=None):
    service, citation, reader = _prepare(service_id, role, citation, reader_id)
    original = find_original_reading(citation)
    if original and (original.service_id, original.role) != (service.id, role):
        logger.info("Reading %s already used in service %s", citation.label, original.service_id)
        return ActionResult.confirm(_conflict(original))
    try:
        reading = _save_reading(service, role, citation, reader, actor=actor)
    except IntegrityError:
        # Another writer stored the same citation between the check and the write.
        original = find_original_reading(citation)
        if original is None:
            raise
        return ActionResult.confirm(_conflict(original))
    return ActionResult.ok(reading=reading.id, is_repeat=False, original_reading=None)


@service_action
def confirm_repeated_reading(service_id, role, citation, reader_id, original_reading_id, actor=None):
    service, citation, reader = _prepare(service_id, role, citation, reader_id)
    original = get_or_fail(
        ScriptureReading.objects.filter(is_repeat=False), original_reading_id, "Lectura original"
    )
    if Citation.from_reading(original) != citation:
        raise ValidationError("La cita no coincide con la lectura original.")
    if (original.service_id, original.role) == (service.id, role):
        original = None
    reading = _save_reading(service, role, citation, reader, original=original, actor=actor)
    return ActionResult.ok(
        reading=reading.id,
        is_repeat=reading.is_repeat,
        original_reading=reading.original_reading_id,
    )


@service_action
def delete_reading(reading_id, actor=None):
    with transaction.atomic():
        reading = get_or_fail(ScriptureReading.objects.select_related("service"), reading_id, "Lectura")
        service = reading.service
        repeat_ids = [] if reading.is_repeat else _repeat_ids(reading)
        label = reading.citation
        reading.delete()
        promoted = _promote_repeats(repeat_ids)
        log_audit(
            actor,
            "ScriptureReading",
            reading_id,
            "delete",
            f"Lectura eliminada: {label}",
            service=service,
            diff={"promoted_reading_id": promoted},
        )
    notify_services_changed([service])
    return ActionResult.ok(deleted=reading_id, promoted=promoted)
