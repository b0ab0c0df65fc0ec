# Translate an uploaded spreadsheet into plain row dicts for the student importer

import os
from typing import Any, Dict, List

import pandas as pd

from .helpers import clean_cell

SUPPORTED_EXTENSIONS = (".xlsx", ".csv")


class UnsupportedSheetError(ValueError):
    pass


def dataframe_to_rows(df) -> List[Dict[str, Any]]:
    """Convert a DataFrame into header -> value dicts.

    NaN/NaT cells become None, numpy/pandas scalars become plain Python values,
    and rows with no populated cell at all are dropped.
    """
    headers = [str(c).strip() for c in df.columns]
    rows = []
    for record in df.itertuples(index=False, name=None):
        row = {header: clean_cell(value) for header, value in zip(headers, record)}
        if any(v is not None for v in row.values()):
            rows.append(row)
    return rows


def read_sheet(source, filename=None, sheet_name=0) -> List[Dict[str, Any]]:
    """Read the first (or named) sheet of an .xlsx or .csv file into row dicts.

    ``source`` may be a path or a file-like object; ``filename`` decides the
    format when a file-like object is given.
    """
    name = filename or (source if isinstance(source, (str, os.PathLike)) else "")
    ext = os.path.splitext(str(name))[1].lower()
    if ext not in SUPPORTED_EXTENSIONS:
        raise UnsupportedSheetError(
            f"Invalid file type. Only {', '.join(SUPPORTED_EXTENSIONS)} files are allowed"
        )
    if ext == ".csv":
        df = pd.read_csv(source, dtype=object)
    else:
        df = pd.read_excel(source, sheet_name=sheet_name, engine="openpyxl")
    return dataframe_to_rows(df)
