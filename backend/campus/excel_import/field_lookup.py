"""Fuzzy column lookup for spreadsheet rows whose headers are not known in advance.

Headers and requested field names are both normalized (lower-cased, everything
but ``a-z0-9`` stripped) so "Roll No", "roll_no" and "ROLLNO" are the same key.
A lookup walks an ordered list of match strategies (exact, prefix, substring)
and returns the value of the first header matched by the first strategy that
matches anything.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Mapping, Tuple

from .helpers import is_blank

logger = logging.getLogger(__name__)

_NON_ALNUM = re.compile(r"[^a-z0-9]")


def normalize_key(value: Any) -> str:
    return _NON_ALNUM.sub("", str(value).lower())


@dataclass(frozen=True)
class MatchStrategy:
    name: str
    matches: Callable[[str, str], bool]


EXACT = MatchStrategy("exact", lambda header, target: header == target)
PREFIX = MatchStrategy("prefix", lambda header, target: header.startswith(target))
CONTAINS = MatchStrategy("contains", lambda header, target: target in header)

DEFAULT_STRATEGIES: Tuple[MatchStrategy, ...] = (EXACT, PREFIX, CONTAINS)


class SheetRow:
    """One spreadsheet line: an ordered header -> value mapping with fuzzy lookup."""

    __slots__ = ("_cells", "_keys")

    def __init__(self, cells: Mapping[str, Any]):
        self._cells: List[Tuple[str, Any]] = [(str(k), v) for k, v in cells.items()]
        self._keys: List[str] = [normalize_key(k) for k, _ in self._cells]

    def __len__(self):
        return len(self._cells)

    def __repr__(self):
        return f"SheetRow({dict(self._cells)!r})"

    def headers(self) -> List[str]:
        return [k for k, _ in self._cells]

    def values(self) -> List[Any]:
        return [v for _, v in self._cells]

    def first_value(self):
        """Value of the first column, whatever its header."""
        if not self._cells:
            return None
        return self._cells[0][1]

    def lookup(self, field_name: str, strategies: Iterable[MatchStrategy] = DEFAULT_STRATEGIES):
        target = normalize_key(field_name)
        if not target:
            return None
        for strategy in strategies:
            for key, (header, value) in zip(self._keys, self._cells):
                if strategy.matches(key, target):
                    logger.debug("Found %s match for '%s': '%s'", strategy.name, field_name, header)
                    return value
        logger.debug("No match found for '%s' among keys: %s", field_name, ", ".join(self.headers()))
        return None


@dataclass(frozen=True)
class Alias:
    label: str
    strategies: Tuple[MatchStrategy, ...] = DEFAULT_STRATEGIES


@dataclass(frozen=True)
class FieldSpec:
    """A logical field and the header synonyms accepted for it, in priority order."""
    name: str
    aliases: Tuple[Alias, ...]

    def resolve(self, row: SheetRow):
        for alias in self.aliases:
            value = row.lookup(alias.label, alias.strategies)
            if not is_blank(value):
                return value
        return None


def field(name: str, *labels: str, exact_only: Iterable[str] = ()) -> FieldSpec:
    aliases = tuple(Alias(label) for label in labels)
    aliases += tuple(Alias(label, (EXACT,)) for label in exact_only)
    return FieldSpec(name, aliases)


ROLL_NUMBER = field(
    "roll_number",
    "Roll Number", "Roll No", "RollNumber", "Roll", "Id", "Enrollment", "Enrolment",
    "Reg No", "Registration", "Admission No", "Scholar No", "SNo", "S.No.", "S.No",
)
NAME = field("name", "Name")
PHONE = field("phone", "Phone")
EMAIL = field("email", "Email")
ADDRESS = field("address", "Address")
# bare "Fee"/"Amount" would swallow "Tuition Fee" etc. under prefix/substring rules
TOTAL_FEE = field(
    "total_fee", "Total Fee", "Fee Due", "TotalDue", "Fixed Fee",
    exact_only=("Fee", "Amount"),
)
PARENT_NAME = field("parent_name", "Parent Name", "Father Name", "Guardian")
PARENT_PHONE = field("parent_phone", "Parent Phone")
ADMISSION_DATE = field("admission_date", "Admission Date")
DATE_OF_BIRTH = field("date_of_birth", "Date of Birth", "DOB")
SECTION = field("section", "Section")
FEE_TYPE = field("fee_type", "Fee Type")
TUITION_FEE = field("tuition_fee", "Tuition Fee")
HOSTEL_FEE = field("hostel_fee", "Hostel Fee")
SECURITY_FEE = field("security_fee", "Security Fee")
MISCELLANEOUS_FEE = field("miscellaneous_fee", "Miscellaneous Fee")
AC_CHARGE = field("ac_charge", "AC Charge")
DEPARTMENT = field("department", "Department", "Course", "Branch", "Class", "Stream", "Batch", "Dept")
SPECIALITY = field("speciality", "Speciality", "Subject", "Specialization")

TEXT_FIELDS = (NAME, PHONE, EMAIL, ADDRESS, PARENT_NAME, PARENT_PHONE, SECTION, FEE_TYPE)
DATE_FIELDS = (ADMISSION_DATE, DATE_OF_BIRTH)
AMOUNT_FIELDS = (TOTAL_FEE, TUITION_FEE, HOSTEL_FEE, SECURITY_FEE, MISCELLANEOUS_FEE, AC_CHARGE)

