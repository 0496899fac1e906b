from collections import Counter

from django.contrib.auth import get_user_model

from core.models import ScriptureReading, Service
from core.services.assignments import ROLE_FIELDS
from core.services.readings import citation_label

TOP_READINGS = 5


def participation_stats(year):
    """Role counts per pulpit-eligible member for services in ``year``."""
    members = get_user_model().objects.filter(pulpit_eligible=True).order_by("full_name")
    stats = {
        member.id: {
            "user_id": member.id,
            "name": str(member),
            "total": 0,
            "stats": {role: 0 for role in ROLE_FIELDS},
        }
        for member in members
    }
    fields = [f"{field}_id" for field in ROLE_FIELDS.values()]
    for row in Service.objects.filter(date__year=year).values(*fields):
        for role, field in ROLE_FIELDS.items():
            entry = stats.get(row[f"{field}_id"])
            if entry is None:
                continue
            entry["stats"][role] += 1
            entry["total"] += 1
    return sorted(stats.values(), key=lambda entry: entry["total"], reverse=True)


def reading_stats():
    rows = ScriptureReading.objects.values_list(
        "book", "start_chapter", "start_verse", "end_chapter", "end_verse", "role"
    )
    citations = Counter()
    by_role = Counter({role: 0 for role, _label in ScriptureReading.ROLE_CHOICES})
    for book, start_chapter, start_verse, end_chapter, end_verse, role in rows:
        citations[citation_label(book, start_chapter, start_verse, end_chapter, end_verse)] += 1
        by_role[role] += 1
    labels = dict(ScriptureReading.ROLE_CHOICES)
    return {
        "top_readings": [
            {"label": label, "count": count} for label, count in citations.most_common(TOP_READINGS)
        ],
        "readings_by_role": [
            {"role": role, "label": labels[role], "count": count} for role, count in by_role.items()
        ],
    }
