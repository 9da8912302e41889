from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .parsing import is_missing

logger = logging.getLogger(__name__)

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def normalize_header(text: object) -> str:
    if text is None:
        return ""
    return _NON_ALNUM.sub("", str(text).lower())


class AliasIndex:
    """Case/punctuation-insensitive lookups over flat side-table rows.

    The normalized-key map of the row being read is memoized here, so the row
    itself is never touched. Only the most recent row is kept; looking up a
    different row replaces it. Each instance owns its own memo; give every
    worker its own index.
    """

    def __init__(self) -> None:
        self._memo: Optional[Tuple[Mapping[str, Any], Dict[str, Any]]] = None

    def index_for(self, row: Mapping[str, Any]) -> Dict[str, Any]:
        if self._memo is not None and self._memo[0] is row:
            return self._memo[1]
        index: Dict[str, Any] = {}
        for header, value in row.items():
            index.setdefault(normalize_header(header), value)
        self._memo = (row, index)
        return index

    def lookup(self, row: Optional[Mapping[str, Any]], aliases: Sequence[str]) -> Any:
        if not isinstance(row, Mapping):
            return None
        index = self.index_for(row)
        for alias in aliases:
            value = index.get(normalize_header(alias))
            if not is_missing(value):
                return value
        return None

    def clear(self) -> None:
        self._memo = None

    def __len__(self) -> int:
        return 0 if self._memo is None else 1


def load_aliases(path: Path | None) -> Dict[str, List[str]]:
    """Read extra header spellings per canonical field.

    The file lists unindented ``field_name:`` sections, each followed by
    indented ``- spelling`` (or ``spelling:``) lines. ``#`` starts a comment.
    """
    alias_map: Dict[str, List[str]] = {}
    if path is None or not path.exists():
        return alias_map
    current: str | None = None
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.split("#", 1)[0].rstrip()
        if not line:
            continue
        if not line.startswith((" ", "\t")):
            current = line.strip().rstrip(":").strip().lower() or None
            continue
        if current is None:
            continue
        entry = line.strip()
        if entry.startswith("-"):
            entry = entry[1:].strip()
        elif entry.endswith(":"):
            entry = entry[:-1].strip()
        entry = entry.strip("\"'")
        if entry:
            alias_map.setdefault(current, []).append(entry)
    logger.debug("Loaded extra aliases for %d field(s) from %s", len(alias_map), path)
    return alias_map


def merge_aliases(base: Iterable[str], extra: Iterable[str]) -> Tuple[str, ...]:
    seen = set()
    merged: List[str] = []
    for alias in [*base, *extra]:
        key = normalize_header(alias)
        if not key or key in seen:
            continue
        seen.add(key)
        merged.append(alias)
    return tuple(merged)
