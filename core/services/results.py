import logging
from dataclasses import dataclass, field
from functools import wraps

from django.core.exceptions import ValidationError
from django.db import DatabaseError

logger = logging.getLogger(__name__)

GENERIC_ERROR = "Ha ocurrido un error. Por favor, intenta de nuevo."


class NotFoundError(LookupError):
    pass


@dataclass
class ActionResult:
    """Uniform outcome returned by every service action.

    Exactly one of three shapes: ``success`` with ``data``, a failure with a
    human readable ``error``, or ``requires_confirmation`` with the
    ``conflict`` the caller must show before retrying through the confirm
    entry point.
    """

    success: bool = False
    error: str = ""
    data: dict = field(default_factory=dict)
    requires_confirmation: bool = False
    conflict: dict = field(default_factory=dict)
    not_found: bool = False

    @classmethod
    def ok(cls, **data):
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, message, not_found=False):
        return cls(success=False, error=message, not_found=not_found)

    @classmethod
    def confirm(cls, conflict):
        return cls(success=False, requires_confirmation=True, conflict=conflict)

    def as_dict(self):
        if self.requires_confirmation:
            return {"requires_confirmation": True, "conflict": self.conflict}
        if self.success:
            return {"success": True, **self.data}
        return {"success": False, "error": self.error}


def get_or_fail(queryset, pk, label):
    obj = queryset.filter(pk=pk).first() if pk is not None else None
    if obj is None:
        raise NotFoundError(f"{label} no encontrado")
    return obj


def validation_message(exc):
    if hasattr(exc, "message_dict"):
        return " ".join(message for messages in exc.message_dict.values() for message in messages)
    return " ".join(exc.messages)


def service_action(func):
    """Convert exceptions raised inside a service into an ActionResult."""

    @wraps(func)
    def _wrapped(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ValidationError as exc:
            return ActionResult.fail(validation_message(exc))
        except NotFoundError as exc:
            return ActionResult.fail(str(exc), not_found=True)
        except DatabaseError:
            logger.exception("Persistence failure in %s", func.__name__)
            return ActionResult.fail(GENERIC_ERROR)

    return _wrapped
