from __future__ import annotations

from typing import Iterable, List, Tuple

from .models import CanonicalRow


def sort_key(row: CanonicalRow) -> Tuple[bool, float, str]:
    score = row.suspicion_score
    # Unknown scores sort after every known score.
    return (score is None, -score if score is not None else 0.0, row.username.lower())


def sort_rows(rows: Iterable[CanonicalRow]) -> List[CanonicalRow]:
    """Suspicion score descending, then username (case-insensitive) ascending."""
    return sorted(rows, key=sort_key)
