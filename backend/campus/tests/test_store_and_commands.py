"""Database-backed tests for the student store, fee helpers and management commands.

Run with: python manage.py test campus.tests.test_store_and_commands -v 2
"""
import os
import tempfile
from datetime import date, timedelta
from decimal import Decimal
from io import StringIO

from django.contrib.auth.models import User
from django.core.exceptions import ValidationError
from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase

from campus.excel_import.store import OrmStudentStore
from campus.fee_utils import get_fee_status, get_remaining_amount, is_fee_fully_paid, update_overdue_fees
from campus.models import Department, Fee, FeeStatus, Speciality, Student
from campus.excel_import.runner import run_student_import


def student_values(department, **overrides):
    values = dict(
        roll_number="R1",
        name="Asha",
        phone="9000000000",
        parent_name="Kiran",
        parent_phone="9000000001",
        admission_date=date(2023, 1, 15),
        department_id=department.pk,
    )
    values.update(overrides)
    return values


class OrmStudentStoreTest(TestCase):
    def setUp(self):
        self.department = Department.objects.create(name="Nursing")
        self.store = OrmStudentStore()

    def test_create_and_find(self):
        created = self.store.create(**student_values(self.department))
        found = self.store.find_by_roll_number("R1")
        self.assertEqual(found.pk, created.pk)
        self.assertIsNone(self.store.find_by_roll_number("missing"))

    def test_create_validates(self):
        with self.assertRaises(ValidationError):
            self.store.create(**student_values(self.department, department_id=9999))
        with self.assertRaises(ValidationError):
            self.store.create(**student_values(self.department, phone="9" * 60))
        self.assertFalse(Student.objects.exists())

    def test_update_changes_only_given_fields(self):
        student = self.store.create(**student_values(self.department, email="asha@example.com"))
        self.store.update(student, {"phone": "9111111111", "total_fee": Decimal("500.00")})
        student.refresh_from_db()
        self.assertEqual(student.phone, "9111111111")
        self.assertEqual(student.total_fee, Decimal("500.00"))
        self.assertEqual(student.email, "asha@example.com")


class OrmImportTest(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(username="clerk", password="pass12345")
        self.nursing = Department.objects.create(name="Nursing")
        self.bsc = Speciality.objects.create(name="B.Sc Nursing", department=self.nursing, total_seats=60)

    def test_failed_row_is_rolled_back_alone(self):
        rows = [
            {"Roll No": "S1", "Name": "Asha", "Dept": "Nursing"},
            {"Roll No": "S2", "Name": "Binu", "Phone": "1" * 80},
            {"Roll No": "S3", "Name": "Charu", "Fee": "Rs. 12,000"},
        ]
        payload = run_student_import(rows, self.user)

        self.assertTrue(payload["success"])
        results = payload["results"]
        self.assertEqual((results["created"], results["failed"]), (2, 1))
        self.assertEqual(results["errors"][0]["rollNumber"], "S2")
        self.assertIn("phone", results["errors"][0]["error"])
        self.assertEqual(
            sorted(Student.objects.values_list("roll_number", flat=True)), ["S1", "S3"]
        )
        s3 = Student.objects.get(roll_number="S3")
        self.assertEqual(s3.total_fee, Decimal("12000.00"))
        self.assertEqual(s3.department, self.nursing)
        self.assertEqual(s3.speciality, self.bsc)
        self.assertEqual(s3.added_by, self.user)

    def test_reimport_updates_in_place(self):
        rows = [{"Roll No": "S1", "Name": "Asha", "Dept": "Nursing", "Fee": "12000"}]
        run_student_import(rows)
        payload = run_student_import([{"Roll No": "S1", "Fee": "15000"}])

        self.assertEqual(payload["message"], "Import complete. Created: 0, Updated: 1, Failed: 0, Skipped: 0")
        student = Student.objects.get(roll_number="S1")
        self.assertEqual(student.name, "Asha")
        self.assertEqual(student.total_fee, Decimal("15000.00"))
        self.assertEqual(Student.objects.count(), 1)


class FeeUtilsTest(TestCase):
    def setUp(self):
        department = Department.objects.create(name="Pharmacy")
        self.student = Student.objects.create(**student_values(department))
        self.today = date(2024, 6, 1)

    def make_fee(self, **kwargs):
        values = dict(student=self.student, fee_type="Tuition", amount=Decimal("1000.00"), due_date=self.today)
        values.update(kwargs)
        return Fee.objects.create(**values)

    def test_status_helpers(self):
        fee = self.make_fee(paid_amount=Decimal("400.00"))
        self.assertFalse(is_fee_fully_paid(fee))
        self.assertEqual(get_remaining_amount(fee), Decimal("600.00"))
        self.assertEqual(get_fee_status(fee, today=self.today), FeeStatus.PENDING)
        self.assertEqual(get_fee_status(fee, today=self.today + timedelta(days=1)), FeeStatus.OVERDUE)

        fee.paid_amount = Decimal("1200.00")
        self.assertEqual(get_remaining_amount(fee), Decimal("0"))
        self.assertEqual(get_fee_status(fee, today=self.today + timedelta(days=30)), FeeStatus.PAID)

    def test_update_overdue_fees(self):
        late = self.make_fee(due_date=self.today - timedelta(days=3))
        settled = self.make_fee(due_date=self.today - timedelta(days=3), paid_amount=Decimal("1000.00"))
        current = self.make_fee(due_date=self.today + timedelta(days=3))

        self.assertEqual(update_overdue_fees(today=self.today), 1)
        late.refresh_from_db()
        settled.refresh_from_db()
        current.refresh_from_db()
        self.assertEqual(late.status, FeeStatus.OVERDUE)
        self.assertEqual(settled.status, FeeStatus.PENDING)
        self.assertEqual(current.status, FeeStatus.PENDING)


class ManagementCommandTest(TestCase):
    def setUp(self):
        Department.objects.create(name="Nursing")
        self.user = User.objects.create_user(username="clerk", password="pass12345")

    def write_csv(self, text, suffix=".csv"):
        handle, path = tempfile.mkstemp(suffix=suffix)
        with os.fdopen(handle, "w", encoding="utf-8") as fh:
            fh.write(text)
        self.addCleanup(os.remove, path)
        return path

    def test_import_students_command(self):
        path = self.write_csv(
            "Roll No,Name,Dept,Fee,Admission Date\n"
            "S1,Asha,Nursing,12000,15-01-2023\n"
            "S2,Binu,,8000,\n"
            "Total,,,20000,\n"
        )
        out = StringIO()
        call_command("import_students", path, "--user", "clerk", stdout=out)

        output = out.getvalue()
        self.assertIn("Import complete. Created: 2, Updated: 0, Failed: 0, Skipped: 1", output)
        self.assertIn("First skipped row columns: Roll No, Name, Dept, Fee, Admission Date", output)
        s1 = Student.objects.get(roll_number="S1")
        self.assertEqual(s1.admission_date, date(2023, 1, 15))
        self.assertEqual(s1.added_by, self.user)
        self.assertEqual(Student.objects.get(roll_number="S2").total_fee, Decimal("8000.00"))

    def test_import_students_command_errors(self):
        with self.assertRaises(CommandError):
            call_command("import_students", "/nonexistent/students.csv")
        with self.assertRaises(CommandError):
            call_command("import_students", self.write_csv("a,b\n", suffix=".txt"))
        with self.assertRaises(CommandError):
            call_command("import_students", self.write_csv("Roll No,Name\nS1,Asha\n"), "--user", "ghost")

    def test_mark_overdue_fees_command(self):
        student = Student.objects.create(**student_values(Department.objects.get(name="Nursing")))
        Fee.objects.create(student=student, fee_type="Hostel", amount=Decimal("50.00"), due_date=date(2000, 1, 1))
        out = StringIO()
        call_command("mark_overdue_fees", stdout=out)
        self.assertIn("Marked 1 fee(s) as overdue.", out.getvalue())
        self.assertEqual(Fee.objects.get().status, FeeStatus.OVERDUE)
