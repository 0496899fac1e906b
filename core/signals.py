from django.core.cache import cache
from django.dispatch import Signal, receiver

# Sent after a mutation that makes cached service views stale.
# Receivers get ``service_ids`` and ``months`` (iterables of (year, month)).
services_changed = Signal()


def service_view_key(service_id):
    return f"pulpito:view:service:{service_id}"


def month_view_key(year, month):
    return f"pulpito:view:month:{year:04d}-{month:02d}"


def notify_services_changed(services=(), months=()):
    service_ids = set()
    affected_months = set(months)
    for service in services:
        service_ids.add(service.id)
        affected_months.add((service.date.year, service.date.month))
    if not service_ids and not affected_months:
        return
    services_changed.send(sender=None, service_ids=sorted(service_ids), months=sorted(affected_months))


@receiver(services_changed)
def expire_service_views(sender, service_ids=(), months=(), **kwargs):
    keys = [service_view_key(service_id) for service_id in service_ids]
    keys += [month_view_key(year, month) for year, month in months]
    cache.delete_many(keys)
