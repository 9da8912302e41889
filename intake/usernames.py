from __future__ import annotations

import json
import re
from typing import Iterable, List

_SEPARATORS = re.compile(r"[\n,]+")
_QUOTES = re.compile(r"[\"']")


def parse_user_input(raw: str | None) -> List[str]:
    """Split pasted usernames (JSON array, or comma/newline separated text)."""
    text = (raw or "").strip()
    if not text:
        return []

    try:
        parsed = json.loads(text)
    except ValueError:
        parsed = None
    if isinstance(parsed, list):
        names = ["" if item is None else str(item).strip() for item in parsed]
        return dedupe_usernames(name for name in names if name)

    names = [_QUOTES.sub("", part).strip() for part in _SEPARATORS.split(text)]
    return dedupe_usernames(name for name in names if name)


def dedupe_usernames(names: Iterable[str]) -> List[str]:
    seen = set()
    ordered: List[str] = []
    for name in names:
        key = name.lower()
        if key in seen:
            continue
        seen.add(key)
        ordered.append(name)
    return ordered
