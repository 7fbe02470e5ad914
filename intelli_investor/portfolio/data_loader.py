"""Spreadsheet import of investment lots."""

from __future__ import annotations

import os

import pandas as pd

from intelli_investor.portfolio.models import ValidationIssue
from intelli_investor.portfolio.validation import LotInput, validate_lot_fields

REQUIRED_COLUMNS = ["symbol", "shares", "purchase_price"]
OPTIONAL_COLUMNS = ["purchase_date", "name", "sector", "notes"]


def load_lot_frame(file_path: str) -> pd.DataFrame:
    absolute_path = file_path if os.path.isabs(file_path) else os.path.abspath(file_path)
    ext = os.path.splitext(absolute_path)[1].lower()
    if ext == ".csv":
        frame = pd.read_csv(absolute_path)
    elif ext == ".xlsx":
        frame = pd.read_excel(absolute_path, sheet_name=0)
    else:
        raise ValueError("Lot import must be a CSV or Excel file (.csv, .xlsx).")
    frame.columns = [str(col).strip().lower().replace(" ", "_") for col in frame.columns]
    return frame


def _cell(row: pd.Series, column: str) -> object | None:
    if column not in row.index:
        return None
    value = row[column]
    if pd.isna(value):
        return None
    if isinstance(value, pd.Timestamp):
        return value.date()
    if hasattr(value, "item"):
        # numpy scalars -> plain Python numbers
        return value.item()
    return value


def parse_lot_frame(frame: pd.DataFrame) -> tuple[list[LotInput], list[ValidationIssue]]:
    missing = [col for col in REQUIRED_COLUMNS if col not in frame.columns]
    if missing:
        return [], [
            ValidationIssue(field=col, code="missing_column", message=f"Required column is missing: {col}")
            for col in missing
        ]

    lots: list[LotInput] = []
    issues: list[ValidationIssue] = []
    for idx, row in frame.iterrows():
        row_num = int(idx) + 2
        row_issues, lot = validate_lot_fields(
            _cell(row, "symbol"),
            _cell(row, "shares"),
            _cell(row, "purchase_price"),
            _cell(row, "purchase_date"),
            row=row_num,
        )
        issues.extend(row_issues)
        if lot is None:
            continue
        for column in ("name", "sector", "notes"):
            value = _cell(row, column)
            setattr(lot, column, str(value).strip() if value is not None and str(value).strip() else None)
        lots.append(lot)
    return lots, issues
