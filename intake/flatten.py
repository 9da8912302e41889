"""Flatten scan results into raw, one-level export rows."""
from __future__ import annotations

import json
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from .models import ScanRecord

Scalar = Any


def flatten_for_export(
    value: Any,
    prefix: str = "",
    out: Optional[Dict[str, Scalar]] = None,
) -> Dict[str, Scalar]:
    """Deep-flatten mappings into ``a_b_c`` keys; sequences become JSON text."""
    if out is None:
        out = {}
    key = prefix[:-1] if prefix.endswith("_") else prefix
    if value is None:
        out[key] = None
        return out
    if isinstance(value, Mapping):
        for child_key, child in value.items():
            flatten_for_export(child, f"{prefix}{child_key}_", out)
        return out
    if isinstance(value, (list, tuple)):
        out[key] = json.dumps(list(value), ensure_ascii=False, default=str)
        return out
    if isinstance(value, (bool, int, float)):
        out[key] = value
    else:
        out[key] = str(value)
    return out


def _iso(moment) -> str:
    return moment.isoformat() if moment is not None else ""


def build_raw_row(record: ScanRecord) -> Dict[str, Scalar]:
    row: Dict[str, Scalar] = {
        "username": record.username,
        "status": record.status.value,
        "error": record.error or "",
        "notFound": bool(record.not_found),
        "startedAt": _iso(record.started_at),
        "finishedAt": _iso(record.finished_at),
    }
    if record.result is not None:
        flatten_for_export(record.result, "", row)
        row["result_json"] = json.dumps(record.result, ensure_ascii=False, default=str)
    return row


def build_raw_rows(records: Iterable[ScanRecord]) -> List[Dict[str, Scalar]]:
    """One raw row per record that finished, failed, or was not found."""
    return [
        build_raw_row(record)
        for record in records
        if record.result is not None or record.error or record.not_found
    ]


def raw_columns(rows: Sequence[Mapping[str, Scalar]]) -> List[str]:
    columns: List[str] = []
    seen = set()
    for row in rows:
        for column in row:
            if column not in seen:
                seen.add(column)
                columns.append(column)
    return columns
