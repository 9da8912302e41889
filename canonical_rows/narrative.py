"""Best-effort numeric facts mined from free-text scan explanations."""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict, List, Optional, Pattern, Sequence

from .constants import (
    ELO_QUALIFIER,
    ELO_RATIO_PATTERNS,
    GAMES_PATTERNS,
    GAP_PATTERNS,
    NARRATIVE_JOINER,
    NON_TOURN_ELO_RATIO_PATTERNS,
    NT_SELF_BAIL_PATTERNS,
    REASON_SPLIT,
    TOURN_ELO_RATIO_PATTERNS,
    UPSET_PATTERNS,
)
from .parsing import as_percent, as_ratio3, coerce_number


@dataclass(slots=True, frozen=True)
class NarrativeFacts:
    games: Optional[float] = None
    elo_ratio: Optional[float] = None
    tourn_elo_ratio: Optional[float] = None
    non_tourn_elo_ratio: Optional[float] = None
    gap: Optional[float] = None
    nt_self_bail_percent: Optional[float] = None
    upset_wins: Optional[float] = None

    def get(self, name: str) -> Optional[float]:
        return getattr(self, name)

    def as_dict(self) -> Dict[str, Optional[float]]:
        return asdict(self)


EMPTY_FACTS = NarrativeFacts()


def narrative_as_text(value: Any) -> str:
    """Render a narrative as one string; phrase sequences are joined with ``"; "``."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        return NARRATIVE_JOINER.join("" if item is None else str(item) for item in value)
    return str(value)


def reasons_as_list(value: Any) -> List[str]:
    """Split a narrative into phrases on ``|``, ``,`` or ``;``."""
    if not value:
        return []
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value]
    return [part.strip() for part in REASON_SPLIT.split(str(value)) if part.strip()]


class NarrativeExtractor:
    """Pattern-match a fixed set of numeric facts out of narrative text."""

    def extract(self, text: Any) -> NarrativeFacts:
        narrative = narrative_as_text(text)
        if not narrative.strip():
            return EMPTY_FACTS
        return NarrativeFacts(
            games=self._first(narrative, GAMES_PATTERNS, coerce_number),
            elo_ratio=self._overall_elo_ratio(narrative),
            tourn_elo_ratio=self._first(narrative, TOURN_ELO_RATIO_PATTERNS, as_ratio3),
            non_tourn_elo_ratio=self._first(narrative, NON_TOURN_ELO_RATIO_PATTERNS, as_ratio3),
            gap=self._first(narrative, GAP_PATTERNS, as_ratio3),
            nt_self_bail_percent=self._first(narrative, NT_SELF_BAIL_PATTERNS, as_percent),
            upset_wins=self._first(narrative, UPSET_PATTERNS, coerce_number),
        )

    # --- helpers -----------------------------------------------------------------

    @staticmethod
    def _first(
        text: str,
        patterns: Sequence[Pattern[str]],
        convert: Callable[[Any], Optional[float]],
    ) -> Optional[float]:
        for pattern in patterns:
            match = pattern.search(text)
            if match:
                return convert(match.group(1))
        return None

    @staticmethod
    def _overall_elo_ratio(text: str) -> Optional[float]:
        # "elo ratio" also appears inside the tournament/non-tournament phrases;
        # only an unqualified occurrence counts as the overall ratio.
        for pattern in ELO_RATIO_PATTERNS:
            for match in pattern.finditer(text):
                if ELO_QUALIFIER.search(text[: match.start()]):
                    continue
                return as_ratio3(match.group(1))
        return None
