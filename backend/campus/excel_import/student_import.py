# Bulk student import: reconcile loosely structured sheet rows against the Student table

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional

from django.conf import settings
from django.core.exceptions import ValidationError
from django.utils import timezone

from . import field_lookup as fl
from .context import GlobalContext, NameIndex, NameMatchPolicy, scan_global_context
from .field_lookup import SheetRow
from .helpers import clean_text, coerce_amount, is_blank, parse_import_date

logger = logging.getLogger(__name__)

CREATED = "created"
UPDATED = "updated"


class StudentImportError(Exception):
    """A row looked usable but could not be reconciled."""


class DepartmentNotResolved(StudentImportError):
    def __init__(self):
        super().__init__(
            "Department not found. Please ensure at least one department exists "
            "in the system or is named in the sheet."
        )


@dataclass(frozen=True)
class ImportDefaults:
    placeholder_phone: str = "0000000000"
    fee_type: str = "Annual"
    parent_name: str = "Not Provided"

    @classmethod
    def from_settings(cls) -> "ImportDefaults":
        conf = getattr(settings, "STUDENT_IMPORT", {}) or {}
        return cls(
            placeholder_phone=conf.get("PLACEHOLDER_PHONE", cls.placeholder_phone),
            fee_type=conf.get("DEFAULT_FEE_TYPE", cls.fee_type),
            parent_name=conf.get("DEFAULT_PARENT_NAME", cls.parent_name),
        )


@dataclass
class ImportResult:
    created: int = 0
    updated: int = 0
    skipped: int = 0
    failed: int = 0
    errors: List[Dict[str, str]] = field(default_factory=list)
    first_skipped_row_keys: Optional[List[str]] = None

    def record_skip(self, row: SheetRow):
        if self.skipped == 0:
            self.first_skipped_row_keys = row.headers()
        self.skipped += 1

    def record_failure(self, roll_number, exc: Exception):
        self.failed += 1
        self.errors.append({"rollNumber": roll_number or "Unknown", "error": error_message(exc)})

    @property
    def message(self) -> str:
        return (
            f"Import complete. Created: {self.created}, Updated: {self.updated}, "
            f"Failed: {self.failed}, Skipped: {self.skipped}"
        )

    def as_dict(self) -> Dict[str, Any]:
        return {
            "created": self.created,
            "updated": self.updated,
            "failed": self.failed,
            "skipped": self.skipped,
            "errors": list(self.errors),
            "firstSkippedRowKeys": self.first_skipped_row_keys,
        }


def error_message(exc: Exception) -> str:
    if isinstance(exc, ValidationError):
        if hasattr(exc, "message_dict"):
            return "; ".join(f"{k}: {' '.join(v)}" for k, v in exc.message_dict.items())
        return " ".join(exc.messages)
    return str(exc)


def resolve_roll_number(row: SheetRow) -> Optional[str]:
    """Roll number via synonyms, else the first column. None means the row is not a data row."""
    value = fl.ROLL_NUMBER.resolve(row)
    if value is None:
        value = row.first_value()
    roll_number = clean_text(value)
    if not roll_number or "total" in roll_number.lower():
        return None
    return roll_number


def extract_fields(row: SheetRow) -> Dict[str, Any]:
    """Pull every known student field out of a row; absent or unparseable fields map to None."""
    values: Dict[str, Any] = {}
    for column in fl.TEXT_FIELDS:
        values[column.name] = clean_text(column.resolve(row))
    for column in fl.DATE_FIELDS:
        values[column.name] = parse_import_date(column.resolve(row))
    for column in fl.AMOUNT_FIELDS:
        values[column.name] = coerce_amount(column.resolve(row))
    return values


def resolve_department(row: SheetRow, index: NameIndex, policy: NameMatchPolicy):
    raw = fl.DEPARTMENT.resolve(row)
    return index.resolve(raw, policy) if raw is not None else None


def resolve_speciality(row: SheetRow, index: NameIndex, policy: NameMatchPolicy):
    # no speciality column: the department/course text often names the speciality too
    raw = fl.SPECIALITY.resolve(row)
    if raw is None:
        raw = fl.DEPARTMENT.resolve(row)
    return index.resolve(raw, policy) if raw is not None else None


def _present(value) -> bool:
    return not is_blank(value)


def _or_default(value, default):
    return value if _present(value) else default


class StudentReconciler:
    """Create-or-update students for one import run.

    departments/specialities are the full current collections; ``store`` is the
    persistence collaborator (see ``campus.excel_import.store``).
    """

    def __init__(self, *, departments, specialities, store, added_by=None,
                 policy: NameMatchPolicy = None, defaults: ImportDefaults = None):
        self.departments = list(departments)
        self.specialities = list(specialities)
        self.store = store
        self.added_by = added_by
        self.policy = policy or NameMatchPolicy.from_settings()
        self.defaults = defaults or ImportDefaults.from_settings()
        self.department_index = NameIndex(self.departments)
        self.speciality_index = NameIndex(self.specialities)

    def run(self, rows: Iterable) -> ImportResult:
        sheet_rows = [r if isinstance(r, SheetRow) else SheetRow(r) for r in rows]
        context = scan_global_context(sheet_rows, self.department_index, self.speciality_index, self.policy)
        logger.info("Starting bulk import for %s students.", len(sheet_rows))

        result = ImportResult()
        for position, row in enumerate(sheet_rows, start=1):
            roll_number = resolve_roll_number(row)
            if roll_number is None:
                result.record_skip(row)
                continue
            try:
                with self.store.atomic():
                    outcome = self.reconcile_row(row, roll_number, context)
            except Exception as exc:
                logger.warning("Import row %s (roll number %s) failed: %s", position, roll_number, exc)
                result.record_failure(roll_number, exc)
                continue
            if outcome == CREATED:
                result.created += 1
            else:
                result.updated += 1

        logger.info(result.message)
        return result

    def reconcile_row(self, row: SheetRow, roll_number: str, context: GlobalContext) -> str:
        department_id = resolve_department(row, self.department_index, self.policy)
        speciality_id = resolve_speciality(row, self.speciality_index, self.policy)
        values = extract_fields(row)

        student = self.store.find_by_roll_number(roll_number)
        if student is not None:
            changes = {name: value for name, value in values.items() if _present(value)}
            if department_id is not None:
                changes["department_id"] = department_id
            if speciality_id is not None:
                changes["speciality_id"] = speciality_id
            self.store.update(student, changes)
            return UPDATED

        if department_id is None:
            department_id = context.department_id
        if department_id is None and self.departments:
            department_id = self.departments[0].pk
        if department_id is None:
            raise DepartmentNotResolved()

        if speciality_id is None:
            speciality_id = context.speciality_id
        if speciality_id is None:
            speciality_id = self._fallback_speciality(department_id)

        self.store.create(**self._new_student_values(roll_number, values, department_id, speciality_id))
        return CREATED

    def _fallback_speciality(self, department_id):
        """First speciality of the department, else the first speciality overall."""
        if not self.specialities:
            return None
        for speciality in self.specialities:
            if speciality.department_id == department_id:
                return speciality.pk
        return self.specialities[0].pk

    def _new_student_values(self, roll_number, values, department_id, speciality_id) -> Dict[str, Any]:
        placeholder = self.defaults.placeholder_phone
        parent_phone = values["parent_phone"]
        student_values = {
            "roll_number": roll_number,
            "name": _or_default(values["name"], f"Student {roll_number}"),
            "phone": _or_default(values["phone"], _or_default(parent_phone, placeholder)),
            "email": _or_default(values["email"], ""),
            "address": _or_default(values["address"], ""),
            "parent_name": _or_default(values["parent_name"], self.defaults.parent_name),
            "parent_phone": _or_default(parent_phone, placeholder),
            "admission_date": _or_default(values["admission_date"], timezone.localdate()),
            "date_of_birth": values["date_of_birth"],
            "section": _or_default(values["section"], ""),
            "fee_type": _or_default(values["fee_type"], self.defaults.fee_type),
            "department_id": department_id,
            "speciality_id": speciality_id,
            "is_active": True,
            "added_by": self.added_by,
        }
        for column in fl.AMOUNT_FIELDS:
            student_values[column.name] = _or_default(values[column.name], Decimal("0"))
        return student_values


def import_students(rows, *, departments, specialities, store, added_by=None, policy=None, defaults=None) -> ImportResult:
    """Reconcile ``rows`` (header -> value mappings) into the student store and report per-row outcomes."""
    reconciler = StudentReconciler(
        departments=departments,
        specialities=specialities,
        store=store,
        added_by=added_by,
        policy=policy,
        defaults=defaults,
    )
    return reconciler.run(rows)
