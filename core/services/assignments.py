from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.db import transaction

from core.models import Service
from core.services.audit import log_audit
from core.services.results import ActionResult, get_or_fail, service_action
from core.signals import notify_services_changed

ROLE_FIELDS = {
    "introduction": "intro_reader",
    "closing": "closing_reader",
    "teaching": "teaching_leader",
    "testimonies": "testimonies_leader",
}

ROLE_LABELS = {
    "introduction": "introduccion",
    "closing": "finalizacion",
    "teaching": "ensenanza",
    "testimonies": "testimonios",
}


def assignment_status(service):
    """``pending`` while any role the service type requires is unassigned."""
    for role in service.service_type.required_roles():
        if getattr(service, f"{ROLE_FIELDS[role]}_id") is None:
            return "pending"
    return "complete"


def _lock_service(service_id):
    return get_or_fail(
        Service.objects.select_for_update().select_related("service_type"), service_id, "Culto"
    )


@service_action
def update_assignment(service_id, role, user_id, actor=None):
    if role not in ROLE_FIELDS:
        raise ValidationError({"role": "Tipo de asignacion no valido."})
    with transaction.atomic():
        service = _lock_service(service_id)
        if role not in service.service_type.required_roles():
            raise ValidationError(
                {"role": f"{service.service_type.name} no tiene {ROLE_LABELS[role]}."}
            )
        member = None
        if user_id is not None:
            member = get_or_fail(get_user_model().objects.filter(is_active=True), user_id, "Hermano")
            if not member.pulpit_eligible:
                raise ValidationError({"user": f"{member} no esta habilitado para el pulpito."})
        field = ROLE_FIELDS[role]
        previous_id = getattr(service, f"{field}_id")
        setattr(service, field, member)
        service.save(update_fields=[field, "updated_at"])
        log_audit(
            actor,
            "Service",
            service.id,
            "assignment_change",
            f"Cambio de {ROLE_LABELS[role]} en culto",
            service=service,
            diff={"role": role, "from": previous_id, "to": member.id if member else None},
        )
    notify_services_changed([service])
    return ActionResult.ok(
        service=service.id,
        role=role,
        user=member.id if member else None,
        status=assignment_status(service),
    )
