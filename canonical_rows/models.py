from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional


class Tier(str, Enum):
    STRUCTURED = "structured"
    SIDE_TABLE = "side_table"
    NARRATIVE = "narrative"
    DERIVED = "derived"
    UNKNOWN = "unknown"


@dataclass(slots=True, frozen=True)
class CanonicalRow:
    """One reconciled, unit-normalized export row. ``None`` means unknown."""

    username: str
    suspicion_score: Optional[float] = None
    recent_games: Optional[float] = None
    recent_wins: Optional[float] = None
    recent_draws: Optional[float] = None
    recent_losses: Optional[float] = None
    win_streak: Optional[float] = None
    max_win_streak: Optional[float] = None
    upset_wins: Optional[float] = None
    short_win_rate: Optional[float] = None
    timeout_win_ratio: Optional[float] = None
    tourn_games: Optional[float] = None
    tourn_wins: Optional[float] = None
    tourn_draws: Optional[float] = None
    tourn_losses: Optional[float] = None
    non_tourn_games: Optional[float] = None
    non_tourn_wins: Optional[float] = None
    non_tourn_draws: Optional[float] = None
    non_tourn_losses: Optional[float] = None
    tourn_win_rate: Optional[float] = None
    non_tourn_win_rate: Optional[float] = None
    wr_gap: Optional[float] = None
    elo_gain: Optional[float] = None
    elo_loss: Optional[float] = None
    elo_ratio: Optional[float] = None
    tourn_elo_gain: Optional[float] = None
    tourn_elo_loss: Optional[float] = None
    tourn_elo_ratio: Optional[float] = None
    non_tourn_elo_gain: Optional[float] = None
    non_tourn_elo_loss: Optional[float] = None
    non_tourn_elo_ratio: Optional[float] = None
    elo_ratio_gap: Optional[float] = None
    t_self_bail_loss_ratio: Optional[float] = None
    nt_self_bail_loss_ratio: Optional[float] = None
    reasons: str = ""
    sources: Mapping[str, Tier] = field(default_factory=dict, compare=False, repr=False)

    def as_dict(self) -> Dict[str, Any]:
        return {name: getattr(self, name) for name in OUTPUT_COLUMNS}

    def source_of(self, name: str) -> Tier:
        return self.sources.get(name, Tier.UNKNOWN)


OUTPUT_COLUMNS: List[str] = [item.name for item in fields(CanonicalRow) if item.name != "sources"]

METRIC_COLUMNS: List[str] = [name for name in OUTPUT_COLUMNS if name not in {"username", "reasons"}]
