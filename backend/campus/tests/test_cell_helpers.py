from datetime import date, datetime
from decimal import Decimal

import numpy as np
import pandas as pd

from campus.excel_import.helpers import clean_cell, clean_text, coerce_amount, is_blank, parse_import_date
from campus.excel_import.sheet_reader import dataframe_to_rows


def test_day_first_dates():
    assert parse_import_date("15-01-2023") == date(2023, 1, 15)
    assert parse_import_date("05/11/2021") == date(2021, 11, 5)
    assert parse_import_date("1-2-24") == date(2024, 2, 1)


def test_iso_and_native_dates():
    assert parse_import_date("2023-01-15") == date(2023, 1, 15)
    assert parse_import_date(datetime(2022, 6, 1, 10, 30)) == date(2022, 6, 1)
    assert parse_import_date(date(2020, 2, 29)) == date(2020, 2, 29)
    assert parse_import_date(pd.Timestamp("2021-03-04")) == date(2021, 3, 4)


def test_excel_serial_date():
    assert parse_import_date(44941) == date(2023, 1, 15)
    assert parse_import_date(12) is None


def test_unparseable_dates_are_none():
    assert parse_import_date(None) is None
    assert parse_import_date("") is None
    assert parse_import_date("   ") is None
    assert parse_import_date("31-02-2023") is None
    assert parse_import_date("not a date") is None


def test_coerce_amount():
    assert coerce_amount("12000") == Decimal("12000.00")
    assert coerce_amount("Rs. 1,250.5") == Decimal("1250.50")
    assert coerce_amount("₹ 800") == Decimal("800.00")
    assert coerce_amount(1500.456) == Decimal("1500.46")
    assert coerce_amount(0) == Decimal("0.00")
    assert coerce_amount(np.int64(300)) == Decimal("300.00")


def test_coerce_amount_rejects_non_numbers():
    assert coerce_amount(None) is None
    assert coerce_amount("") is None
    assert coerce_amount("N/A") is None
    assert coerce_amount(float("nan")) is None
    assert coerce_amount(True) is None


def test_blank_markers():
    assert is_blank(None)
    assert is_blank(" ")
    assert is_blank("nan")
    assert is_blank(float("nan"))
    assert is_blank(pd.NaT)
    assert not is_blank(0)
    assert not is_blank("0")


def test_clean_text_for_excel_numbers():
    assert clean_text(9876543210.0) == "9876543210"
    assert clean_text("  Asha ") == "Asha"
    assert clean_text(12.5) == "12.5"
    assert clean_text(None) is None
    assert clean_cell(np.float64(2.0)) == 2.0


def test_dataframe_to_rows_drops_empty_lines():
    df = pd.DataFrame(
        [
            {"Roll No": "S1", "Name": "Asha", "Fee": 100.0},
            {"Roll No": np.nan, "Name": np.nan, "Fee": np.nan},
            {"Roll No": "S2", "Name": np.nan, "Fee": 50.0},
        ]
    )
    rows = dataframe_to_rows(df)
    assert rows == [
        {"Roll No": "S1", "Name": "Asha", "Fee": 100.0},
        {"Roll No": "S2", "Name": None, "Fee": 50.0},
    ]
