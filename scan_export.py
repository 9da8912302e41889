#!/usr/bin/env python3
"""Reconcile scan results into ranked, unit-normalized export tables."""
from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import pandas as pd

from canonical_rows import (
    CanonicalRow,
    ExportError,
    RowReconciler,
    build_coverage,
    collect_coverage_issues,
    load_aliases,
    sort_rows,
    write_rows,
)
from canonical_rows.excel import write_raw_csv
from intake import (
    IntakeError,
    ScanInputError,
    build_raw_rows,
    build_sources,
    load_scan_records,
    load_side_table,
    parse_user_input,
)

DEFAULT_OUTPUT = Path("scan_exports/scan_rows.xlsx")
LOG_LEVEL_ENV = "SCAN_EXPORT_LOG_LEVEL"
ALIASES_ENV = "SCAN_EXPORT_ALIASES"

logger = logging.getLogger("scan_export")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=(
            "Merge scan results, an optional side table and narrative explanations "
            "into one ranked table of canonical per-user metrics."
        )
    )
    parser.add_argument(
        "results",
        type=Path,
        help="JSON file with scan results (a list, or an object with a 'results' list).",
    )
    parser.add_argument(
        "--side-table",
        type=Path,
        help="CSV with per-user metrics under loosely spelled headers (needs a username column).",
    )
    parser.add_argument(
        "--users",
        type=str,
        help="Usernames to export, comma/newline separated or a JSON array; prefix with @ to read a file.",
    )
    parser.add_argument(
        "--aliases",
        type=Path,
        help=f"Extra header spellings per field (defaults to ${ALIASES_ENV} when set).",
    )
    parser.add_argument(
        "--output",
        type=Path,
        help=f"Destination .xlsx or .csv (default: {DEFAULT_OUTPUT}).",
    )
    parser.add_argument(
        "--raw",
        action="store_true",
        help="Also write the flattened raw results next to the output as <name>_raw.csv.",
    )
    parser.add_argument(
        "--log-level",
        default=os.getenv(LOG_LEVEL_ENV, "WARNING"),
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help=f"Logging verbosity (default: ${LOG_LEVEL_ENV} or WARNING).",
    )
    return parser


def read_usernames(spec: Optional[str]) -> Optional[List[str]]:
    if spec is None:
        return None
    if spec.startswith("@"):
        path = Path(spec[1:])
        if not path.exists():
            raise ScanInputError(f"Username file not found: {path}")
        spec = path.read_text(encoding="utf-8")
    names = parse_user_input(spec)
    if not names:
        raise ScanInputError("No usernames found in --users.")
    return names


def resolve_alias_path(arg: Optional[Path]) -> Optional[Path]:
    if arg is not None:
        if not arg.exists():
            raise ScanInputError(f"Alias file not found: {arg}")
        return arg
    env_value = os.getenv(ALIASES_ENV)
    return Path(env_value) if env_value else None


def ensure_directory(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def print_coverage_summary(rows: Sequence[CanonicalRow], coverage: pd.DataFrame) -> None:
    issues = collect_coverage_issues(coverage)
    if issues.empty:
        if rows:
            print("Coverage summary: every field resolved for every user.")
        return
    print("Coverage gaps:")
    for record in issues.to_dict("records"):
        print(
            f" - {record['Field']}: {record['Result']} "
            f"(known {record['Known']}/{record['Known'] + record['Unknown']})"
        )


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    try:
        usernames = read_usernames(args.users)
        extra_aliases: Dict[str, List[str]] = load_aliases(resolve_alias_path(args.aliases))

        records = load_scan_records(args.results)
        side_table = load_side_table(args.side_table) if args.side_table else None
        bundles = build_sources(records, side_table, usernames=usernames)

        reconciler = RowReconciler(extra_aliases=extra_aliases)
        rows = sort_rows(reconciler.reconcile_all(bundles))
        raw_rows = build_raw_rows(records)
        coverage = build_coverage(rows)

        output = args.output or DEFAULT_OUTPUT
        ensure_directory(output)
        write_rows(rows, output, raw_rows=raw_rows, coverage=coverage)
        print(f"Reconciled {len(rows)} of {len(records)} scan record(s). Wrote {output}")

        if args.raw:
            raw_output = output.with_name(f"{output.stem}_raw.csv")
            write_raw_csv(raw_rows, raw_output)
            print(f"Wrote raw results to {raw_output}")

        print_coverage_summary(rows, coverage)
        return 0
    except (IntakeError, ExportError) as exc:
        print(f"Scan export failed: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
