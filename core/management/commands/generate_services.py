from datetime import date

from django.core.management.base import BaseCommand, CommandError

from core.services.calendar_generation import generate_services_for_month


class Command(BaseCommand):
    help = "Generate the services of a month from the weekly templates."

    def add_arguments(self, parser):
        parser.add_argument("--year", type=int)
        parser.add_argument("--month", type=int)

    def handle(self, *args, **options):
        today = date.today()
        year = options.get("year") or today.year
        month = options.get("month") or today.month
        result = generate_services_for_month(year, month)
        if not result.success:
            raise CommandError(result.error)
        self.stdout.write(self.style.SUCCESS(f"{year:04d}-{month:02d}: created {result.data['created']} services"))
