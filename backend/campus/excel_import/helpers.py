# Shared cell parsing and cleaning helpers for spreadsheet imports

import math
import re
from datetime import datetime, date, timedelta
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Optional

import pandas as pd

_NA_STRINGS = ("nat", "nan", "null", "none", "<na>")
_DATE_SEPARATORS = re.compile(r"[-/]")
_AMOUNT_NOISE = re.compile(r"(?i)(rs\.?|inr|₹|,|\s)")
_CENTS = Decimal("0.01")


def is_blank(val: Any) -> bool:
    """True for None, pandas NA markers, NaN floats and whitespace-only strings."""
    if val is None:
        return True
    if isinstance(val, float) and math.isnan(val):
        return True
    if isinstance(val, str):
        s = val.strip()
        return s == "" or s.lower() in _NA_STRINGS
    try:
        return bool(pd.isna(val))
    except (TypeError, ValueError):
        return False


def clean_cell(val: Any):
    """Normalize a cell value from pandas/Excel into a safe Python value.
    - Converts pandas NaN/NaT and common sentinel strings to None
    - Unwraps numpy scalars and pandas timestamps into plain Python values
    - Strips strings and returns None for empty strings
    """
    if is_blank(val):
        return None
    if isinstance(val, pd.Timestamp):
        py_dt = val.to_pydatetime()
        if py_dt.tzinfo is not None:
            py_dt = py_dt.replace(tzinfo=None)
        return py_dt
    if hasattr(val, "item") and not isinstance(val, (str, bytes)):
        # numpy scalar
        try:
            val = val.item()
        except (ValueError, AttributeError):
            pass
    if isinstance(val, str):
        return val.strip()
    return val


def clean_text(val: Any) -> Optional[str]:
    """Stringify a cell for text fields; integral floats lose their '.0' (Excel phone/roll cells)."""
    val = clean_cell(val)
    if val is None:
        return None
    if isinstance(val, bool):
        return str(val)
    if isinstance(val, float) and val.is_integer():
        return str(int(val))
    if isinstance(val, datetime):
        return val.date().isoformat()
    if isinstance(val, date):
        return val.isoformat()
    s = str(val).strip()
    return s or None


def coerce_amount(val: Any) -> Optional[Decimal]:
    """Best-effort numeric coercion for fee cells. Returns None when the cell holds no number."""
    val = clean_cell(val)
    if val is None or isinstance(val, bool):
        return None
    if isinstance(val, Decimal):
        amount = val
    elif isinstance(val, (int, float)):
        if isinstance(val, float) and math.isinf(val):
            return None
        amount = Decimal(str(val))
    else:
        s = _AMOUNT_NOISE.sub("", str(val))
        if not s:
            return None
        try:
            amount = Decimal(s)
        except InvalidOperation:
            return None
    if not amount.is_finite():
        return None
    return amount.quantize(_CENTS, rounding=ROUND_HALF_UP)


def _excel_serial_to_date(val):
    # Excel serial numbers (>25000 heuristic, i.e. after 1968)
    if val > 25000:
        origin = datetime(1899, 12, 30)
        try:
            return (origin + timedelta(days=int(val))).date()
        except OverflowError:
            return None
    return None


def _day_first_date(text: str):
    parts = [p.strip() for p in _DATE_SEPARATORS.split(text)]
    if len(parts) != 3 or not all(p.isdigit() for p in parts):
        return None
    day, month, year = (int(p) for p in parts)
    if len(parts[2]) == 2:
        year += 2000
    try:
        return date(year, month, day)
    except ValueError:
        return None


def parse_import_date(val: Any):
    """Parse a spreadsheet date cell into a python date.

    Order of attempts:
      - date / datetime / pandas.Timestamp values are taken as-is
      - strings: ISO parsing first, then explicit day-month-year split on '-' or '/'
        (so "15-01-2023" is 15 January, never month 15)
      - anything else: Excel serial numbers, then pandas day-first coercion
    Returns None for empty or unparseable input; never raises.
    """
    val = clean_cell(val)
    if val is None:
        return None
    if isinstance(val, datetime):
        return val.date()
    if isinstance(val, date):
        return val
    if isinstance(val, str):
        try:
            return datetime.fromisoformat(val).date()
        except ValueError:
            pass
        parsed = _day_first_date(val)
        if parsed is not None:
            return parsed
    elif isinstance(val, (int, float)) and not isinstance(val, bool):
        return _excel_serial_to_date(val)
    try:
        coerced = pd.to_datetime(val, dayfirst=True, errors="coerce")
    except (TypeError, ValueError, OverflowError):
        return None
    if coerced is None or pd.isna(coerced):
        return None
    return coerced.to_pydatetime().date()
