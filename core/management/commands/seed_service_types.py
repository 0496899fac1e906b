from django.core.management.base import BaseCommand

from core.models import ServiceType

DEFAULT_TYPES = [
    {
        "name": "Estudio Biblico",
        "color": "#3b82f6",
        "order": 1,
        "has_intro_reading": True,
        "has_closing_reading": True,
        "has_teaching": False,
        "has_testimonies": False,
    },
    {
        "name": "Alabanza",
        "color": "#10b981",
        "order": 2,
        "has_intro_reading": True,
        "has_closing_reading": True,
        "has_teaching": False,
        "has_testimonies": False,
    },
    {
        "name": "Ensenanza",
        "color": "#f59e0b",
        "order": 3,
        "has_intro_reading": True,
        "has_closing_reading": False,
        "has_teaching": True,
        "has_testimonies": True,
    },
]


class Command(BaseCommand):
    help = "Create the default service types if they are missing."

    def handle(self, *args, **options):
        created = 0
        for values in DEFAULT_TYPES:
            defaults = {key: value for key, value in values.items() if key != "name"}
            _, was_created = ServiceType.objects.get_or_create(name=values["name"], defaults=defaults)
            created += int(was_created)
        self.stdout.write(self.style.SUCCESS(f"Service types: created {created}"))
