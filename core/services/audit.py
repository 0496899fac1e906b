from core.models import AuditEvent


def log_audit(actor, entity_type, entity_id, action_type, description="", service=None, diff=None):
    if actor is not None and not getattr(actor, "is_authenticated", False):
        actor = None
    AuditEvent.objects.create(
        actor_user=actor,
        entity_type=entity_type,
        entity_id=str(entity_id),
        action_type=action_type,
        description=description,
        service=service,
        diff_json=diff or {},
    )
