import logging

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction

from core.models import Holiday, Service, ServiceTemplate, ServiceType
from core.services.audit import log_audit
from core.services.dates import month_bounds, month_days, shift_time, working_holiday_offset
from core.services.results import ActionResult, get_or_fail, service_action
from core.signals import notify_services_changed

logger = logging.getLogger(__name__)


def resolve_start_time(template, holiday):
    """Return (start_time, is_holiday_adjusted) for a template on a given day."""
    if holiday and holiday.shifts_services and template.affected_by_working_holiday:
        return shift_time(template.default_time, -working_holiday_offset()), True
    return template.default_time, False


def _create_service(**fields):
    # Savepoint so a duplicate (date, service_type) doesn't poison the outer transaction.
    try:
        with transaction.atomic():
            return Service.objects.create(**fields)
    except IntegrityError:
        if Service.objects.filter(date=fields["date"], service_type=fields["service_type"]).exists():
            return None
        raise


@service_action
def generate_services_for_month(year, month, actor=None):
    start, end = month_bounds(year, month)
    templates = list(ServiceTemplate.objects.filter(active=True).select_related("service_type"))
    holidays = {holiday.date: holiday for holiday in Holiday.objects.filter(date__range=(start, end))}
    existing = set(
        Service.objects.filter(date__range=(start, end)).values_list("date", "service_type_id")
    )

    created = []
    try:
        for day in month_days(year, month):
            holiday = holidays.get(day)
            for template in templates:
                if template.weekday != day.weekday():
                    continue
                if (day, template.service_type_id) in existing:
                    continue
                start_time, adjusted = resolve_start_time(template, holiday)
                service = _create_service(
                    date=day,
                    service_type=template.service_type,
                    start_time=start_time,
                    status="planned",
                    is_holiday=holiday is not None,
                    is_holiday_adjusted=adjusted,
                    created_by=actor if getattr(actor, "is_authenticated", False) else None,
                )
                if service is None:
                    continue
                existing.add((day, template.service_type_id))
                created.append(service)
                log_audit(
                    actor,
                    "Service",
                    service.id,
                    "generate",
                    f"Culto generado para {day:%d/%m/%Y}",
                    service=service,
                    diff={"template_id": template.id, "holiday_adjusted": adjusted},
                )
    finally:
        # Inserted rows are kept even if a later insert fails.
        notify_services_changed(created, months=[(year, month)] if created else ())

    logger.info("Generated %s services for %04d-%02d", len(created), year, month)
    return ActionResult.ok(created=len(created), service_ids=[service.id for service in created])


@service_action
def create_service(date, start_time, service_type_id, actor=None):
    if date is None:
        raise ValidationError({"date": "La fecha es requerida."})
    if start_time is None:
        raise ValidationError({"start_time": "La hora es requerida."})
    service_type = get_or_fail(ServiceType.objects.all(), service_type_id, "Tipo de culto")
    service = _create_service(
        date=date,
        service_type=service_type,
        start_time=start_time,
        status="planned",
        is_holiday=Holiday.objects.filter(date=date).exists(),
        created_by=actor if getattr(actor, "is_authenticated", False) else None,
    )
    if service is None:
        raise ValidationError("Ya existe un culto de ese tipo en esa fecha.")
    log_audit(actor, "Service", service.id, "create", f"Culto creado para {date:%d/%m/%Y}", service=service)
    notify_services_changed([service])
    return ActionResult.ok(service=service.id)
