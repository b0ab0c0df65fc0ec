"""Reconciler behaviour against in-memory departments, specialities and students.

Run with: python manage.py test campus.tests.test_reconciler -v 2
"""
from contextlib import nullcontext
from datetime import date
from decimal import Decimal
from types import SimpleNamespace

from django.core.exceptions import ValidationError
from django.test import SimpleTestCase

from campus.excel_import import import_students
from campus.excel_import.context import GlobalContext, NameIndex, NameMatchPolicy, scan_global_context
from campus.excel_import.field_lookup import SheetRow
from campus.excel_import.student_import import ImportDefaults


def make_department(pk, name):
    return SimpleNamespace(pk=pk, name=name)


def make_speciality(pk, name, department_id):
    return SimpleNamespace(pk=pk, name=name, department_id=department_id)


class MemoryStudentStore:
    """Keeps students in a dict keyed by roll number; can be told to reject some rolls."""

    def __init__(self, students=()):
        self.students = {s.roll_number: s for s in students}
        self.reject = set()
        self.created = []
        self.updates = []

    def atomic(self):
        return nullcontext()

    def find_by_roll_number(self, roll_number):
        return self.students.get(roll_number)

    def create(self, **values):
        if values["roll_number"] in self.reject:
            raise ValidationError({"roll_number": ["Rejected by store."]})
        student = SimpleNamespace(**values)
        self.students[student.roll_number] = student
        self.created.append(student)
        return student

    def update(self, student, changes):
        if student.roll_number in self.reject:
            raise ValidationError("Rejected by store.")
        for name, value in changes.items():
            setattr(student, name, value)
        self.updates.append((student.roll_number, dict(changes)))
        return student


POLICY = NameMatchPolicy(min_length=4, scan_rows=50)
DEFAULTS = ImportDefaults(placeholder_phone="0000000000", fee_type="Annual", parent_name="Not Provided")


class ReconcilerTestBase(SimpleTestCase):
    def setUp(self):
        self.departments = [make_department(1, "Nursing"), make_department(2, "Pharmacy")]
        self.specialities = [
            make_speciality(10, "B.Sc Nursing", 1),
            make_speciality(11, "GNM", 1),
            make_speciality(20, "D.Pharm", 2),
        ]
        self.store = MemoryStudentStore()

    def run_import(self, rows, **overrides):
        kwargs = dict(
            departments=self.departments,
            specialities=self.specialities,
            store=self.store,
            policy=POLICY,
            defaults=DEFAULTS,
        )
        kwargs.update(overrides)
        return import_students(rows, **kwargs)


class CreateStudentTests(ReconcilerTestBase):
    def test_create_from_short_headers(self):
        result = self.run_import([{"Roll No": "S100", "Name": "Asha", "Dept": "Nursing", "Fee": "12000"}])

        self.assertEqual((result.created, result.updated, result.failed, result.skipped), (1, 0, 0, 0))
        student = self.store.students["S100"]
        self.assertEqual(student.name, "Asha")
        self.assertEqual(student.department_id, 1)
        self.assertEqual(student.total_fee, Decimal("12000.00"))
        self.assertEqual(result.message, "Import complete. Created: 1, Updated: 0, Failed: 0, Skipped: 0")

    def test_defaults_for_missing_fields(self):
        self.run_import([{"Roll No": "S7", "Department": "Pharmacy", "Parent Phone": "9123456789"}])

        student = self.store.students["S7"]
        self.assertEqual(student.name, "Student S7")
        self.assertEqual(student.phone, "9123456789")
        self.assertEqual(student.parent_phone, "9123456789")
        self.assertEqual(student.parent_name, "Not Provided")
        self.assertEqual(student.fee_type, "Annual")
        self.assertEqual(student.email, "")
        self.assertEqual(student.tuition_fee, Decimal("0"))
        self.assertIsNone(student.date_of_birth)
        self.assertIsInstance(student.admission_date, date)
        self.assertTrue(student.is_active)

    def test_placeholder_phone_when_no_numbers(self):
        self.run_import([{"Roll No": "S8", "Department": "Pharmacy"}])
        student = self.store.students["S8"]
        self.assertEqual(student.phone, "0000000000")
        self.assertEqual(student.parent_phone, "0000000000")

    def test_dates_are_day_first(self):
        self.run_import([{"Roll No": "S9", "Dept": "Nursing", "Admission Date": "15-01-2023", "DOB": "02/03/2005"}])
        student = self.store.students["S9"]
        self.assertEqual(student.admission_date, date(2023, 1, 15))
        self.assertEqual(student.date_of_birth, date(2005, 3, 2))

    def test_added_by_recorded(self):
        user = SimpleNamespace(username="clerk")
        self.run_import([{"Roll No": "S10", "Dept": "Nursing"}], added_by=user)
        self.assertIs(self.store.students["S10"].added_by, user)


class ResolutionTests(ReconcilerTestBase):
    def test_department_from_batch_title(self):
        rows = [
            {"S.No": "5", "Student Name": "Raj"},
            {"S.No": "B.Sc Nursing 2024", "Student Name": None},
        ]
        result = self.run_import(rows)

        # the title row itself is a usable roll number, so it is created too
        self.assertEqual(result.failed, 0)
        student = self.store.students["5"]
        self.assertEqual(student.name, "Raj")
        self.assertEqual(student.department_id, 1)
        self.assertEqual(student.speciality_id, 10)

    def test_partial_department_name(self):
        self.run_import([{"Roll No": "P1", "Course": "Pharmacy (2 yrs)"}])
        self.assertEqual(self.store.students["P1"].department_id, 2)

    def test_speciality_column(self):
        self.run_import([{"Roll No": "N2", "Dept": "Nursing", "Speciality": "GNM"}])
        student = self.store.students["N2"]
        self.assertEqual(student.speciality_id, 11)

    def test_speciality_from_department_text(self):
        self.run_import([{"Roll No": "P2", "Course": "D.Pharm"}])
        student = self.store.students["P2"]
        self.assertEqual(student.speciality_id, 20)
        # "d.pharm" is not a department name; falls back to the first department
        self.assertEqual(student.department_id, 1)

    def test_first_department_fallback(self):
        self.run_import([{"Roll No": "X1", "Name": "Nobody"}])
        student = self.store.students["X1"]
        self.assertEqual(student.department_id, 1)
        self.assertEqual(student.speciality_id, 10)

    def test_speciality_fallback_stays_inside_department(self):
        self.run_import([{"Roll No": "X2", "Dept": "Pharmacy"}])
        self.assertEqual(self.store.students["X2"].speciality_id, 20)

    def test_speciality_falls_back_to_first_overall(self):
        self.specialities = [make_speciality(10, "B.Sc Nursing", 1)]
        self.run_import([{"Roll No": "Q1", "Dept": "Pharmacy"}])
        student = self.store.students["Q1"]
        self.assertEqual(student.department_id, 2)
        self.assertEqual(student.speciality_id, 10)

    def test_no_specialities_leaves_speciality_unset(self):
        self.run_import([{"Roll No": "Q2", "Dept": "Pharmacy"}], specialities=[])
        self.assertIsNone(self.store.students["Q2"].speciality_id)

    def test_short_names_match_only_exactly(self):
        self.departments.append(make_department(3, "Art"))
        self.run_import([{"Roll No": "A1", "Dept": "Artificial Intelligence"}])
        # "art" is too short for substring matching
        self.assertEqual(self.store.students["A1"].department_id, 1)

        self.run_import([{"Roll No": "A2", "Dept": "art"}])
        self.assertEqual(self.store.students["A2"].department_id, 3)

    def test_no_department_anywhere_fails_row(self):
        result = self.run_import([{"Roll No": "Z1", "Name": "Lost"}], departments=[], specialities=[])

        self.assertEqual(result.failed, 1)
        self.assertEqual(result.created, 0)
        self.assertEqual(result.errors[0]["rollNumber"], "Z1")
        self.assertIn("Department not found", result.errors[0]["error"])
        self.assertNotIn("Z1", self.store.students)


class UpdateStudentTests(ReconcilerTestBase):
    def setUp(self):
        super().setUp()
        self.existing = SimpleNamespace(
            roll_number="S100",
            name="Asha",
            phone="9000000000",
            email="asha@example.com",
            department_id=1,
            speciality_id=10,
            total_fee=Decimal("12000.00"),
            tuition_fee=Decimal("8000.00"),
        )
        self.store = MemoryStudentStore([self.existing])

    def test_update_only_present_fields(self):
        result = self.run_import([{"Roll No": "S100", "Name": "", "Phone": "9111111111", "Tuition Fee": "0"}])

        self.assertEqual((result.created, result.updated), (0, 1))
        self.assertEqual(len(self.store.students), 1)
        self.assertEqual(self.existing.name, "Asha")
        self.assertEqual(self.existing.email, "asha@example.com")
        self.assertEqual(self.existing.phone, "9111111111")
        self.assertEqual(self.existing.tuition_fee, Decimal("0.00"))

    def test_update_keeps_references_when_unresolved(self):
        self.run_import([{"Roll No": "S100", "Dept": "Unknown Dept"}])
        roll_number, changes = self.store.updates[-1]
        self.assertEqual(roll_number, "S100")
        self.assertNotIn("department_id", changes)
        self.assertEqual(self.existing.department_id, 1)

    def test_update_moves_department(self):
        self.run_import([{"Roll No": "S100", "Dept": "Pharmacy"}])
        self.assertEqual(self.existing.department_id, 2)

    def test_rerun_is_idempotent(self):
        rows = [
            {"Roll No": "S100", "Name": "Asha K", "Dept": "Nursing"},
            {"Roll No": "S101", "Name": "Binu", "Dept": "Pharmacy", "Fee": "5000"},
        ]
        first = self.run_import(rows)
        snapshot = {k: vars(v).copy() for k, v in self.store.students.items()}
        second = self.run_import(rows)

        self.assertEqual((first.created, first.updated), (1, 1))
        self.assertEqual((second.created, second.updated), (0, 2))
        self.assertEqual(len(self.store.students), 2)
        self.assertEqual({k: vars(v) for k, v in self.store.students.items()}, snapshot)


class BatchOutcomeTests(ReconcilerTestBase):
    def test_total_rows_are_skipped(self):
        rows = [
            {"Roll No": "S1", "Dept": "Nursing"},
            {"Roll No": "Total", "Name": None, "Fee": "99000"},
            {"Roll No": None, "Name": None},
        ]
        result = self.run_import(rows)

        self.assertEqual(result.created, 1)
        self.assertEqual(result.skipped, 2)
        self.assertEqual(result.failed, 0)
        self.assertEqual(result.first_skipped_row_keys, ["Roll No", "Name", "Fee"])

    def test_failure_does_not_stop_batch(self):
        self.store.reject.add("S2")
        rows = [
            {"Roll No": "S1", "Dept": "Nursing"},
            {"Roll No": "S2", "Dept": "Nursing"},
            {"Roll No": "S3", "Dept": "Nursing"},
        ]
        result = self.run_import(rows)

        self.assertEqual(result.created, 2)
        self.assertEqual(result.failed, 1)
        self.assertEqual(result.errors, [{"rollNumber": "S2", "error": "roll_number: Rejected by store."}])
        self.assertEqual(sorted(self.store.students), ["S1", "S3"])

    def test_counts_add_up(self):
        self.store.reject.add("S3")
        rows = [
            {"Roll No": "S1", "Dept": "Nursing"},
            {"Roll No": "S1", "Name": "Again"},
            {"Roll No": "S3"},
            {"Roll No": "sub total"},
        ]
        result = self.run_import(rows)
        self.assertEqual(result.created + result.updated + result.failed + result.skipped, len(rows))
        self.assertEqual(result.as_dict(), {
            "created": 1,
            "updated": 1,
            "failed": 1,
            "skipped": 1,
            "errors": [{"rollNumber": "S3", "error": "roll_number: Rejected by store."}],
            "firstSkippedRowKeys": ["Roll No"],
        })

    def test_no_skips_reports_null_keys(self):
        result = self.run_import([{"Roll No": "S1", "Dept": "Nursing"}])
        self.assertIsNone(result.as_dict()["firstSkippedRowKeys"])


class GlobalContextTests(SimpleTestCase):
    def setUp(self):
        self.departments = NameIndex([make_department(1, "Nursing"), make_department(2, "Pharmacy")])
        self.specialities = NameIndex([make_speciality(10, "B.Sc Nursing", 1), make_speciality(20, "D.Pharm", 2)])

    def scan(self, rows, policy=POLICY):
        return scan_global_context([SheetRow(r) for r in rows], self.departments, self.specialities, policy)

    def test_nothing_mentioned(self):
        self.assertEqual(self.scan([{"A": "x", "B": 3}]), GlobalContext())

    def test_most_recent_mention_wins(self):
        ctx = self.scan([
            {"Title": "Nursing batch"},
            {"Title": "Pharmacy batch, D.Pharm"},
        ])
        self.assertEqual(ctx, GlobalContext(department_id=2, speciality_id=20))

    def test_scan_is_bounded(self):
        rows = [{"A": "filler"}] * 3 + [{"A": "B.Sc Nursing"}]
        ctx = self.scan(rows, NameMatchPolicy(min_length=4, scan_rows=3))
        self.assertEqual(ctx, GlobalContext())

    def test_name_index_later_duplicate_wins(self):
        index = NameIndex([make_department(1, " Nursing "), make_department(5, "nursing")])
        self.assertEqual(index.exact("NURSING"), 5)
        self.assertEqual(index.mentions("nursing", NameMatchPolicy(min_length=4, scan_rows=50)), [5])
