import calendar
from datetime import date, datetime, timedelta

from dateutil import rrule
from django.conf import settings
from django.core.exceptions import ValidationError


def validate_month(year, month):
    if not isinstance(year, int) or not 1900 <= year <= 9999:
        raise ValidationError({"year": "El ano no es valido."})
    if not isinstance(month, int) or not 1 <= month <= 12:
        raise ValidationError({"month": "El mes debe estar entre 1 y 12."})


def month_bounds(year, month):
    validate_month(year, month)
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def month_days(year, month):
    start, end = month_bounds(year, month)
    return [occ.date() for occ in rrule.rrule(rrule.DAILY, dtstart=start, until=end)]


def working_holiday_offset():
    return timedelta(minutes=getattr(settings, "WORKING_HOLIDAY_OFFSET_MINUTES", 60))


def shift_time(value, delta):
    """Move a wall-clock time by ``delta`` without crossing midnight."""
    anchor = date(2000, 1, 1)
    shifted = datetime.combine(anchor, value) + delta
    if shifted.date() != anchor:
        raise ValidationError(
            {"start_time": f"No se puede ajustar la hora {value:%H:%M} sin cambiar de dia."}
        )
    return shifted.time()
