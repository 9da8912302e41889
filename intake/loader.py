"""Read scan results and side tables into per-entity source bundles."""
from __future__ import annotations

import json
import logging
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

import pandas as pd

from .exceptions import ScanInputError, SourceShapeError
from .flatten import build_raw_row
from .models import NarrativeInput, ScanRecord, ScanSources, ScanStatus

logger = logging.getLogger(__name__)

SideTable = Dict[str, Dict[str, Any]]

USERNAME_HEADERS = ("username", "user", "player", "name")
_RECORD_KEYS = {"result", "status", "error", "notFound", "not_found"}
_HEADER_JUNK = re.compile(r"[^a-z0-9]+")


def _header_key(header: object) -> str:
    return _HEADER_JUNK.sub("", str(header).lower())


def _parse_moment(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        # epoch milliseconds
        try:
            return datetime.fromtimestamp(value / 1000.0, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            logger.debug("Ignoring unparseable timestamp %r", value)
            return None
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        logger.debug("Ignoring unparseable timestamp %r", value)
        return None


def _parse_status(value: Any, not_found: bool) -> ScanStatus:
    if value is None:
        return ScanStatus.NOT_FOUND if not_found else ScanStatus.DONE
    try:
        return ScanStatus(str(value).lower())
    except ValueError as exc:
        raise ScanInputError(f"Unknown scan status: {value!r}") from exc


def record_from_payload(item: Any, index: int = 0) -> ScanRecord:
    """Build a ``ScanRecord`` from either a bare result or a record object."""
    if not isinstance(item, Mapping):
        raise SourceShapeError(f"Entry {index} is not an object: {type(item).__name__}")

    if _RECORD_KEYS & set(item.keys()):
        result = item.get("result")
        if result is not None and not isinstance(result, Mapping):
            raise SourceShapeError(f"Entry {index} has a non-object result: {type(result).__name__}")
        username = item.get("username") or (result or {}).get("username")
        not_found = bool(item.get("notFound", item.get("not_found", False)))
        status = _parse_status(item.get("status"), not_found)
        error = item.get("error")
        started = _parse_moment(item.get("startedAt", item.get("started_at")))
        finished = _parse_moment(item.get("finishedAt", item.get("finished_at")))
    else:
        result = item
        username = item.get("username")
        not_found = False
        status = ScanStatus.DONE
        error = None
        started = finished = None

    if not username:
        raise ScanInputError(f"Entry {index} has no username")

    return ScanRecord(
        username=str(username),
        status=status,
        result=result,
        error=str(error) if error else None,
        started_at=started,
        finished_at=finished,
        not_found=not_found,
    )


def load_scan_records(path: Path) -> List[ScanRecord]:
    if not path.exists():
        raise ScanInputError(f"Results file not found: {path}")
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except ValueError as exc:
        raise ScanInputError(f"Results file is not valid JSON: {path}") from exc

    if isinstance(payload, Mapping) and isinstance(payload.get("results"), list):
        payload = payload["results"]
    if not isinstance(payload, list):
        raise ScanInputError(
            "Results file must hold a list of scan results or an object with a 'results' list."
        )

    records = [record_from_payload(item, index) for index, item in enumerate(payload)]
    logger.info("Loaded %d scan record(s) from %s", len(records), path)
    return records


def side_table_from_frame(frame: pd.DataFrame) -> SideTable:
    """Key side-table rows by the lowercased value of the username column."""
    wanted = {_header_key(header): rank for rank, header in enumerate(USERNAME_HEADERS)}
    candidates = [
        (wanted[_header_key(column)], column)
        for column in frame.columns
        if _header_key(column) in wanted
    ]
    if not candidates:
        raise ScanInputError(
            f"Side table has no username column (expected one of: {', '.join(USERNAME_HEADERS)})."
        )
    username_column = min(candidates, key=lambda pair: pair[0])[1]

    table: SideTable = {}
    for row in frame.to_dict("records"):
        name = row.get(username_column)
        if name is None or pd.isna(name):
            continue
        key = str(name).strip().lower()
        if not key or key in table:
            continue
        table[key] = row
    return table


def load_side_table(path: Path) -> SideTable:
    if not path.exists():
        raise ScanInputError(f"Side table not found: {path}")
    try:
        frame = pd.read_csv(path, dtype=object)
    except (ValueError, pd.errors.ParserError) as exc:
        raise ScanInputError(f"Side table could not be parsed: {path}") from exc
    table = side_table_from_frame(frame)
    logger.info("Loaded %d side-table row(s) from %s", len(table), path)
    return table


def _select_records(records: Sequence[ScanRecord], usernames: Optional[Sequence[str]]) -> List[ScanRecord]:
    if usernames is None:
        return list(records)
    by_name: Dict[str, ScanRecord] = {}
    for record in records:
        by_name.setdefault(record.username.lower(), record)
    selected: List[ScanRecord] = []
    for name in usernames:
        record = by_name.get(name.lower())
        if record is None:
            logger.warning("No scan result for requested user %s", name)
            continue
        selected.append(record)
    return selected


def build_sources(
    records: Iterable[ScanRecord],
    side_table: Optional[SideTable] = None,
    *,
    usernames: Optional[Sequence[str]] = None,
    narratives: Optional[Mapping[str, NarrativeInput]] = None,
) -> List[ScanSources]:
    """Pair each completed record with its side-table row and narrative.

    Without an explicit side table the record's flattened raw row stands in
    for it, so header-style aliases still resolve against nested results.
    """
    bundles: List[ScanSources] = []
    for record in _select_records(list(records), usernames):
        if not record.completed:
            logger.warning("Skipping %s: scan status %s", record.username, record.status.value)
            continue
        key = record.username.lower()
        if side_table is None:
            side_row: Optional[Mapping[str, Any]] = build_raw_row(record)
        else:
            side_row = side_table.get(key)
        narrative = narratives.get(key) if narratives else None
        bundles.append(
            ScanSources(
                username=record.username,
                structured=record.result,
                side_row=side_row,
                narrative=narrative,
            )
        )
    return bundles
