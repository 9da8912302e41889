from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Optional, Sequence

import pandas as pd

from intake.flatten import raw_columns

from .fields import FIELD_SPECS
from .models import OUTPUT_COLUMNS, CanonicalRow

SCAN_SHEET = "Scan"
RAW_SHEET = "Raw"
COVERAGE_SHEET = "Coverage"

# Plain-number columns; written as integers when every known value is whole.
COUNT_COLUMNS = [spec.name for spec in FIELD_SPECS if spec.kind == "number"]
_INT_LIMIT = 2 ** 53


class ExportError(RuntimeError):
    pass


def _whole(values: pd.Series) -> bool:
    return all(float(value).is_integer() and abs(value) < _INT_LIMIT for value in values.dropna())


def rows_to_frame(rows: Sequence[CanonicalRow]) -> pd.DataFrame:
    frame = pd.DataFrame([row.as_dict() for row in rows], columns=OUTPUT_COLUMNS)
    if frame.empty:
        return frame
    for name in COUNT_COLUMNS:
        column = pd.to_numeric(frame[name])
        if _whole(column):
            frame[name] = column.astype("Int64")
    return frame


def raw_rows_to_frame(raw_rows: Sequence[Mapping[str, Any]]) -> pd.DataFrame:
    return pd.DataFrame(list(raw_rows), columns=raw_columns(raw_rows))


def write_csv(rows: Sequence[CanonicalRow], output_path: Path) -> None:
    # utf-8-sig writes a BOM so spreadsheet apps pick the right encoding.
    rows_to_frame(rows).to_csv(output_path, index=False, encoding="utf-8-sig")


def write_raw_csv(raw_rows: Sequence[Mapping[str, Any]], output_path: Path) -> None:
    raw_rows_to_frame(raw_rows).to_csv(output_path, index=False, encoding="utf-8-sig")


def write_excel_workbook(
    rows: Sequence[CanonicalRow],
    output_path: Path,
    *,
    raw_rows: Optional[Sequence[Mapping[str, Any]]] = None,
    coverage: Optional[pd.DataFrame] = None,
) -> None:
    with pd.ExcelWriter(output_path, engine="xlsxwriter") as writer:
        scan = rows_to_frame(rows)
        scan.to_excel(writer, sheet_name=SCAN_SHEET, index=False)
        worksheet = writer.sheets[SCAN_SHEET]
        worksheet.freeze_panes(1, 1)
        for idx, column in enumerate(scan.columns):
            worksheet.set_column(idx, idx, max(10, len(column) + 2))

        if raw_rows is not None:
            raw_rows_to_frame(raw_rows).to_excel(writer, sheet_name=RAW_SHEET, index=False)
        if coverage is not None:
            coverage.to_excel(writer, sheet_name=COVERAGE_SHEET, index=False)


def write_rows(
    rows: Sequence[CanonicalRow],
    output_path: Path,
    *,
    raw_rows: Optional[Sequence[Mapping[str, Any]]] = None,
    coverage: Optional[pd.DataFrame] = None,
) -> None:
    """Write rows to ``.xlsx`` (with raw/coverage sheets) or ``.csv``."""
    suffix = output_path.suffix.lower()
    if suffix == ".xlsx":
        write_excel_workbook(rows, output_path, raw_rows=raw_rows, coverage=coverage)
    elif suffix == ".csv":
        write_csv(rows, output_path)
    else:
        raise ExportError(f"Unsupported output type {suffix or '(none)'}; use .xlsx or .csv")
