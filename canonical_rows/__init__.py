"""Canonical scan rows: reconcile, normalize and rank per-user metrics."""
from .aliases import AliasIndex, load_aliases, normalize_header
from .coverage import build_coverage, collect_coverage_issues
from .excel import ExportError, rows_to_frame, write_csv, write_excel_workbook, write_rows
from .fields import FIELD_SPECS, FieldSpec
from .models import OUTPUT_COLUMNS, CanonicalRow, Tier
from .narrative import NarrativeExtractor, NarrativeFacts, narrative_as_text, reasons_as_list
from .parsing import as_percent, as_ratio3, coerce_number
from .paths import pick_path, resolve_path
from .reconcile import RowReconciler, reconcile_rows
from .sorting import sort_rows

__all__ = [
    "AliasIndex",
    "CanonicalRow",
    "ExportError",
    "FIELD_SPECS",
    "FieldSpec",
    "NarrativeExtractor",
    "NarrativeFacts",
    "OUTPUT_COLUMNS",
    "RowReconciler",
    "Tier",
    "as_percent",
    "as_ratio3",
    "build_coverage",
    "coerce_number",
    "collect_coverage_issues",
    "load_aliases",
    "narrative_as_text",
    "normalize_header",
    "pick_path",
    "reasons_as_list",
    "reconcile_rows",
    "resolve_path",
    "rows_to_frame",
    "sort_rows",
    "write_csv",
    "write_excel_workbook",
    "write_rows",
]
