from __future__ import annotations

from typing import Dict, List, Sequence

import pandas as pd

from .models import METRIC_COLUMNS, CanonicalRow, Tier

COVERAGE_COLUMNS = [
    "Field",
    "Known",
    "Unknown",
    "Structured",
    "Side Table",
    "Narrative",
    "Derived",
    "Result",
]

_TIER_COLUMNS = {
    Tier.STRUCTURED: "Structured",
    Tier.SIDE_TABLE: "Side Table",
    Tier.NARRATIVE: "Narrative",
    Tier.DERIVED: "Derived",
}


def _result(known: int, total: int) -> str:
    if total and known == total:
        return "PASS"
    if known:
        return "PARTIAL"
    return "MISSING"


def build_coverage(rows: Sequence[CanonicalRow]) -> pd.DataFrame:
    """Count, per metric column, how many rows resolved it and from which tier."""
    if not rows:
        return pd.DataFrame(columns=COVERAGE_COLUMNS)
    records: List[Dict[str, object]] = []
    for name in METRIC_COLUMNS:
        counts = {column: 0 for column in _TIER_COLUMNS.values()}
        known = 0
        for row in rows:
            if getattr(row, name) is None:
                continue
            known += 1
            column = _TIER_COLUMNS.get(row.source_of(name))
            if column:
                counts[column] += 1
        records.append(
            {
                "Field": name,
                "Known": known,
                "Unknown": len(rows) - known,
                **counts,
                "Result": _result(known, len(rows)),
            }
        )
    return pd.DataFrame(records, columns=COVERAGE_COLUMNS)


def collect_coverage_issues(coverage: pd.DataFrame) -> pd.DataFrame:
    if coverage is None or coverage.empty or "Result" not in coverage.columns:
        return pd.DataFrame(columns=COVERAGE_COLUMNS)
    return coverage[coverage["Result"] != "PASS"].reset_index(drop=True)
