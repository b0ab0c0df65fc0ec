"""Batch-level name resolution for departments and specialities.

``NameIndex`` maps normalized names to ids and resolves a free-text value in two
phases: exact name, then bounded substring match. ``scan_global_context``
looks for any indexed name mentioned in the first rows of a batch (sheet titles
such as "B.Sc Nursing Batch 2024") and yields a ``GlobalContext`` used as a
fallback for rows that do not name a department or speciality themselves.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence

from django.conf import settings

from .helpers import is_blank

logger = logging.getLogger(__name__)


def normalize_name(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip().lower()


@dataclass(frozen=True)
class NameMatchPolicy:
    """Tunables for fuzzy department/speciality matching.

    min_length: names (and row values) shorter than this never take part in
        substring matching, only in exact matching.
    scan_rows: how many leading rows are searched for global mentions.
    """
    min_length: int = 4
    scan_rows: int = 50

    @classmethod
    def from_settings(cls) -> "NameMatchPolicy":
        conf = getattr(settings, "STUDENT_IMPORT", {}) or {}
        return cls(
            min_length=int(conf.get("MIN_MATCH_LENGTH", cls.min_length)),
            scan_rows=int(conf.get("CONTEXT_SCAN_ROWS", cls.scan_rows)),
        )

    def allows_partial(self, text: str) -> bool:
        return len(text) >= self.min_length


class NameIndex:
    """Read-only normalized-name -> id lookup built once per import run."""

    def __init__(self, records: Iterable[Any]):
        self._ids: Dict[str, Any] = {}
        for record in records:
            key = normalize_name(getattr(record, "name", None))
            if key:
                # later duplicates win, first position is kept
                self._ids[key] = record.pk

    def exact(self, value: Any):
        return self._ids.get(normalize_name(value))

    def resolve(self, value: Any, policy: NameMatchPolicy):
        """Exact match first, then the first indexed name that contains or is contained by the value."""
        text = normalize_name(value)
        if not text:
            return None
        if text in self._ids:
            return self._ids[text]
        if not policy.allows_partial(text):
            return None
        for name, pk in self._ids.items():
            if policy.allows_partial(name) and (name in text or text in name):
                return pk
        return None

    def mentions(self, text: str, policy: NameMatchPolicy) -> List[Any]:
        """Ids of every indexed name (long enough) appearing inside text, in index order."""
        return [pk for name, pk in self._ids.items() if policy.allows_partial(name) and name in text]


@dataclass(frozen=True)
class GlobalContext:
    department_id: Optional[Any] = None
    speciality_id: Optional[Any] = None


def scan_global_context(rows: Sequence, departments: NameIndex, specialities: NameIndex,
                        policy: NameMatchPolicy) -> GlobalContext:
    """Search the leading rows for department/speciality names mentioned in any cell.

    The most recent mention wins: rows are scanned in order, cells left to right,
    index names in index order, and every hit replaces the previous candidate.
    """
    department_id = None
    speciality_id = None
    for row in rows[:policy.scan_rows]:
        for value in row.values():
            if is_blank(value):
                continue
            text = str(value).lower()
            for pk in departments.mentions(text, policy):
                department_id = pk
            for pk in specialities.mentions(text, policy):
                speciality_id = pk
    logger.info("Global detection - department: %s, speciality: %s", department_id, speciality_id)
    return GlobalContext(department_id=department_id, speciality_id=speciality_id)
