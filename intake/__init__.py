"""Scan input loading: results files, side tables and username lists."""

from .exceptions import IntakeError, ScanInputError, SourceShapeError
from .flatten import build_raw_rows, flatten_for_export
from .loader import build_sources, load_scan_records, load_side_table
from .models import ScanRecord, ScanSources, ScanStatus
from .usernames import parse_user_input

__all__ = [
    "IntakeError",
    "ScanInputError",
    "SourceShapeError",
    "ScanRecord",
    "ScanSources",
    "ScanStatus",
    "build_raw_rows",
    "build_sources",
    "flatten_for_export",
    "load_scan_records",
    "load_side_table",
    "parse_user_input",
]
