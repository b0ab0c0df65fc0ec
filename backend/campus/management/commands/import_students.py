"""Management command to import students from an .xlsx/.csv sheet."""

from __future__ import annotations

import logging
from pathlib import Path

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError

from campus.excel_import.sheet_reader import UnsupportedSheetError, read_sheet
from campus.excel_import.runner import run_student_import

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Create or update students (matched by roll number) from a spreadsheet."

    def add_arguments(self, parser) -> None:
        parser.add_argument("path", help="Path to the .xlsx or .csv file.")
        parser.add_argument(
            "--sheet",
            dest="sheet",
            default=None,
            help="Worksheet name for .xlsx files. Defaults to the first sheet.",
        )
        parser.add_argument(
            "--user",
            dest="username",
            default=None,
            help="Username recorded as added_by on created students.",
        )

    def handle(self, *args, **options):
        path = Path(options["path"])
        if not path.exists():
            raise CommandError(f"File not found: {path}")

        user = None
        if options["username"]:
            User = get_user_model()
            user = User.objects.filter(username=options["username"]).first()
            if user is None:
                raise CommandError(f"User not found: {options['username']}")

        try:
            rows = read_sheet(str(path), sheet_name=options["sheet"] or 0)
        except UnsupportedSheetError as exc:
            raise CommandError(str(exc))

        if not rows:
            raise CommandError("No student data found in the sheet.")

        payload = run_student_import(rows, user)
        results = payload["results"]
        self.stdout.write(self.style.SUCCESS(payload["message"]))
        for err in results["errors"]:
            self.stdout.write(self.style.WARNING(f"  {err['rollNumber']}: {err['error']}"))
        if results["skipped"] and results["firstSkippedRowKeys"]:
            self.stdout.write(f"  First skipped row columns: {', '.join(results['firstSkippedRowKeys'])}")
        if results["failed"]:
            logger.warning("Skipped %s rows and failed %s rows during student import.", results["skipped"], results["failed"])
