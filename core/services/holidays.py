from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction

from core.models import Holiday, Service
from core.services.audit import log_audit
from core.services.dates import shift_time, working_holiday_offset
from core.services.results import ActionResult, get_or_fail, service_action
from core.signals import notify_services_changed

HOLIDAY_KINDS = [code for code, _label in Holiday.KIND_CHOICES]


def holidays_for_year(year=None):
    qs = Holiday.objects.order_by("date")
    if year:
        qs = qs.filter(date__year=year)
    return qs


@service_action
def create_holiday(date, kind, description="", actor=None):
    if date is None:
        raise ValidationError({"date": "La fecha es requerida."})
    if kind not in HOLIDAY_KINDS:
        raise ValidationError({"kind": "Tipo de festivo no valido."})
    with transaction.atomic():
        try:
            with transaction.atomic():
                holiday = Holiday.objects.create(date=date, kind=kind, description=description or "")
        except IntegrityError:
            raise ValidationError({"date": "Ya existe un festivo en esa fecha."})
        # Existing services keep their time; only the informational flag follows the calendar.
        services = list(Service.objects.filter(date=date, is_holiday=False))
        Service.objects.filter(id__in=[service.id for service in services]).update(is_holiday=True)
        log_audit(actor, "Holiday", holiday.id, "create", f"Festivo {holiday}", diff={"kind": kind})
    notify_services_changed(services, months=[(date.year, date.month)])
    return ActionResult.ok(holiday=holiday.id)


@service_action
def delete_holiday(holiday_id, actor=None):
    with transaction.atomic():
        holiday = get_or_fail(Holiday.objects.all(), holiday_id, "Festivo")
        holiday_date = holiday.date
        label = str(holiday)
        holiday.delete()
        services = list(Service.objects.filter(date=holiday_date, is_holiday=True))
        Service.objects.filter(id__in=[service.id for service in services]).update(is_holiday=False)
        log_audit(actor, "Holiday", holiday_id, "delete", f"Festivo eliminado {label}")
    notify_services_changed(services, months=[(holiday_date.year, holiday_date.month)])
    return ActionResult.ok(deleted=holiday_id)


@service_action
def toggle_holiday_adjustment(service_id, actor=None):
    with transaction.atomic():
        service = get_or_fail(Service.objects.select_for_update(), service_id, "Culto")
        offset = working_holiday_offset()
        if service.is_holiday_adjusted:
            service.start_time = shift_time(service.start_time, offset)
        else:
            service.start_time = shift_time(service.start_time, -offset)
        service.is_holiday_adjusted = not service.is_holiday_adjusted
        service.save(update_fields=["start_time", "is_holiday_adjusted", "updated_at"])
        log_audit(
            actor,
            "Service",
            service.id,
            "holiday_toggle",
            "Ajuste de festivo laborable" if service.is_holiday_adjusted else "Ajuste de festivo retirado",
            service=service,
            diff={"start_time": service.start_time.strftime("%H:%M")},
        )
    notify_services_changed([service])
    return ActionResult.ok(
        service=service.id,
        start_time=service.start_time.strftime("%H:%M"),
        is_holiday_adjusted=service.is_holiday_adjusted,
    )
