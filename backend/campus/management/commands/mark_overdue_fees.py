from django.core.management.base import BaseCommand

from campus.fee_utils import update_overdue_fees


class Command(BaseCommand):
    help = "Mark pending fees whose due date has passed as overdue."

    def handle(self, *args, **options):
        updated = update_overdue_fees()
        self.stdout.write(self.style.SUCCESS(f"Marked {updated} fee(s) as overdue."))
