from django.core.exceptions import ValidationError
from django.db import transaction

from core.models import Chorus, Hymn, Service, ServicePlanEntry
from core.services.audit import log_audit
from core.services.results import ActionResult, get_or_fail, service_action
from core.signals import notify_services_changed

MAX_PER_KIND = 3
SEARCH_LIMIT = 20
KIND_MODELS = {
    "hymn": Hymn,
    "chorus": Chorus,
}
ITEM_LABELS = {
    "hymn": "Himno",
    "chorus": "Coro",
}
KIND_LABELS = {
    "hymn": "himnos",
    "chorus": "coros",
}


def _search(model, query):
    query = (query or "").strip()
    qs = model.objects.order_by("number")
    if query.isdigit():
        qs = qs.filter(number=int(query))
    elif query:
        qs = qs.filter(title__icontains=query)
    return qs[:SEARCH_LIMIT]


def search_hymns(query):
    return _search(Hymn, query)


def search_choruses(query):
    return _search(Chorus, query)


def hymnal_counts():
    return {"hymns": Hymn.objects.count(), "choruses": Chorus.objects.count()}


@service_action
def add_plan_entry(service_id, kind, item_id, order=1, actor=None):
    if kind not in KIND_MODELS:
        raise ValidationError({"kind": "Tipo no valido."})
    with transaction.atomic():
        service = get_or_fail(
            Service.objects.select_for_update().select_related("service_type"), service_id, "Culto"
        )
        if not service.service_type.has_hymns_and_choruses:
            raise ValidationError(f"{service.service_type.name} no incluye himnos ni coros.")
        item = get_or_fail(KIND_MODELS[kind].objects.all(), item_id, ITEM_LABELS[kind])
        if service.plan_entries.filter(kind=kind).count() >= MAX_PER_KIND:
            raise ValidationError(f"Maximo {MAX_PER_KIND} {KIND_LABELS[kind]} permitidos.")
        entry = ServicePlanEntry.objects.create(service=service, kind=kind, order=order, **{kind: item})
        log_audit(
            actor,
            "ServicePlanEntry",
            entry.id,
            "hymns_change",
            f"Anadido {item} al culto",
            service=service,
            diff={"kind": kind, "item_id": item.id},
        )
    notify_services_changed([service])
    return ActionResult.ok(entry=entry.id)


@service_action
def remove_plan_entry(entry_id, actor=None):
    with transaction.atomic():
        entry = get_or_fail(ServicePlanEntry.objects.select_related("service", "hymn", "chorus"), entry_id, "Entrada")
        service = entry.service
        label = str(entry.item)
        entry.delete()
        log_audit(actor, "ServicePlanEntry", entry_id, "hymns_change", f"Eliminado {label} del culto", service=service)
    notify_services_changed([service])
    return ActionResult.ok(deleted=entry_id)
