"""Static field table: where each canonical column may be found.

Every column lists its dotted paths into the structured scan result, its
known side-table header spellings, the narrative fact that may stand in for
it, and how to derive it from other columns.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Callable, Dict, Mapping, Optional, Sequence, Tuple

from .aliases import merge_aliases
from .derived import percent_gap, rate_from_counts, ratio_gap, sum_known
from .parsing import Number, as_percent, as_ratio3, coerce_number

logger = logging.getLogger(__name__)

Resolved = Mapping[str, Optional[Number]]
Derivation = Callable[[Resolved], Optional[Number]]

CONVERTERS = {
    "number": coerce_number,
    "percent": as_percent,
    "ratio": as_ratio3,
}


@dataclass(frozen=True)
class FieldSpec:
    name: str
    kind: str = "number"
    paths: Tuple[str, ...] = ()
    aliases: Tuple[str, ...] = ()
    narrative: Optional[str] = None
    derive: Optional[Derivation] = None
    # Comparison gaps prefer the computed value over side-table/narrative copies.
    derive_first: bool = False

    def convert(self, raw: object) -> Optional[Number]:
        return CONVERTERS[self.kind](raw)


def _split_sum(tourn: str, non_tourn: str) -> Derivation:
    return lambda resolved: sum_known(resolved.get(tourn), resolved.get(non_tourn))


def _rate(wins: str, games: str) -> Derivation:
    return lambda resolved: rate_from_counts(resolved.get(wins), resolved.get(games))


FIELD_SPECS: Tuple[FieldSpec, ...] = (
    FieldSpec(
        "suspicion_score",
        paths=("suspicion_score", "suspicion.score"),
        aliases=("suspicion_score", "suspicion", "score"),
    ),
    FieldSpec(
        "recent_games",
        paths=("totals.games", "lifetime_games", "recent.games", "games", "recent_games"),
        aliases=("recent_games", "recent games", "games", "lifetime_games", "lifetime games"),
        narrative="games",
        derive=_split_sum("tourn_games", "non_tourn_games"),
    ),
    FieldSpec(
        "recent_wins",
        paths=("totals.wins", "wins", "recent.wins", "recent_wins"),
        aliases=("recent_wins", "recent wins", "wins"),
        derive=_split_sum("tourn_wins", "non_tourn_wins"),
    ),
    FieldSpec(
        "recent_draws",
        paths=("totals.draws", "draws", "recent.draws", "recent_draws"),
        aliases=("recent_draws", "recent draws", "draws"),
        derive=_split_sum("tourn_draws", "non_tourn_draws"),
    ),
    FieldSpec(
        "recent_losses",
        paths=("totals.losses", "losses", "recent.losses", "recent_losses"),
        aliases=("recent_losses", "recent losses", "losses"),
        derive=_split_sum("tourn_losses", "non_tourn_losses"),
    ),
    FieldSpec(
        "win_streak",
        paths=("streak", "win_streak"),
        aliases=("win_streak", "streak", "stk"),
    ),
    FieldSpec(
        "max_win_streak",
        paths=("max_streak", "max_win_streak"),
        aliases=("max_win_streak", "max streak", "maxstk", "max win streak"),
    ),
    FieldSpec(
        "upset_wins",
        paths=("upset_wins",),
        aliases=("upset_wins", "upsets", "upset"),
        narrative="upset_wins",
    ),
    FieldSpec(
        "short_win_rate",
        kind="percent",
        paths=("ratios.short_win_rate", "short_win_rate"),
        aliases=("short_win_rate", "short win rate", "shortw%", "short_win%", "shortwin%"),
    ),
    FieldSpec(
        "timeout_win_ratio",
        kind="percent",
        paths=("ratios.timeout_win_ratio", "timeout_win_ratio"),
        aliases=("timeout_win_ratio", "timeout win ratio", "to/res%", "timeout%"),
    ),
    FieldSpec(
        "tourn_games",
        paths=("tournament.games", "t.games", "tourn.games", "tourn_games"),
        aliases=("t_games", "t games", "tournament_games", "tournament games"),
    ),
    FieldSpec(
        "tourn_wins",
        paths=("tournament.wins", "t.wins", "tourn.wins", "tourn_wins"),
        aliases=("t_wins", "t wins", "tournament_wins", "tournament wins", "tw"),
    ),
    FieldSpec(
        "tourn_draws",
        paths=("tournament.draws", "t.draws", "tourn.draws", "tourn_draws"),
        aliases=("t_draws", "t draws", "tournament_draws", "tournament draws", "td"),
    ),
    FieldSpec(
        "tourn_losses",
        paths=("tournament.losses", "t.losses", "tourn.losses", "tourn_losses"),
        aliases=("t_losses", "t losses", "tournament_losses", "tournament losses", "tl"),
    ),
    FieldSpec(
        "non_tourn_games",
        paths=("non_tournament.games", "nt.games", "non_tourn_games"),
        aliases=("nt_games", "nt games", "non_tourn_games", "non tournament games", "non_tournament_games"),
    ),
    FieldSpec(
        "non_tourn_wins",
        paths=("non_tournament.wins", "nt.wins", "non_tourn_wins"),
        aliases=("nt_wins", "nt wins", "non_tourn_wins", "non tournament wins", "non_tournament_wins"),
    ),
    FieldSpec(
        "non_tourn_draws",
        paths=("non_tournament.draws", "nt.draws", "non_tourn_draws"),
        aliases=("nt_draws", "nt draws", "non_tourn_draws", "non tournament draws", "non_tournament_draws"),
    ),
    FieldSpec(
        "non_tourn_losses",
        paths=("non_tournament.losses", "nt.losses", "non_tourn_losses"),
        aliases=("nt_losses", "nt losses", "non_tourn_losses", "non tournament losses", "non_tournament_losses"),
    ),
    FieldSpec(
        "tourn_win_rate",
        kind="percent",
        paths=("tournament.win_rate", "t.win_rate", "tourn_win_rate"),
        aliases=("tourn_win_rate", "tournament win rate", "twr", "twr%"),
        derive=_rate("tourn_wins", "tourn_games"),
    ),
    FieldSpec(
        "non_tourn_win_rate",
        kind="percent",
        paths=("non_tournament.win_rate", "nt.win_rate", "non_tourn_win_rate"),
        aliases=("non_tourn_win_rate", "non tournament win rate", "ntwr", "ntwr%"),
        derive=_rate("non_tourn_wins", "non_tourn_games"),
    ),
    FieldSpec(
        "wr_gap",
        kind="percent",
        paths=("wr_gap",),
        aliases=("wr_gap", "wr gap", "Δwr", "wr gap (t − nt)", "wr gap (t-nt)"),
        derive=lambda resolved: percent_gap(resolved.get("tourn_win_rate"), resolved.get("non_tourn_win_rate")),
        derive_first=True,
    ),
    FieldSpec(
        "elo_gain",
        paths=("totals.elo.gain", "elo.gain", "elo_gain"),
        aliases=("elo_gain", "elo gain"),
    ),
    FieldSpec(
        "elo_loss",
        paths=("totals.elo.loss", "elo.loss", "elo_loss"),
        aliases=("elo_loss", "elo loss"),
    ),
    FieldSpec(
        "elo_ratio",
        kind="ratio",
        paths=("totals.elo.ratio", "elo.ratio", "elo_ratio"),
        aliases=("elo_ratio", "elo ratio", "elor"),
        narrative="elo_ratio",
    ),
    FieldSpec(
        "tourn_elo_gain",
        paths=("tournament.elo.gain", "t.elo.gain", "tourn_elo_gain"),
        aliases=("tourn_elo_gain", "t elo gain", "t_elo_gain"),
    ),
    FieldSpec(
        "tourn_elo_loss",
        paths=("tournament.elo.loss", "t.elo.loss", "tourn_elo_loss"),
        aliases=("tourn_elo_loss", "t elo loss", "t_elo_loss"),
    ),
    FieldSpec(
        "tourn_elo_ratio",
        kind="ratio",
        paths=("tournament.elo.ratio", "t.elo.ratio", "tourn_elo_ratio"),
        aliases=("tourn_elo_ratio", "t elo ratio", "t_elo_ratio", "telor", "t elor", "t eloratio"),
        narrative="tourn_elo_ratio",
    ),
    FieldSpec(
        "non_tourn_elo_gain",
        paths=("non_tournament.elo.gain", "nt.elo.gain", "non_tourn_elo_gain"),
        aliases=("non_tourn_elo_gain", "nt elo gain", "nt_elo_gain"),
    ),
    FieldSpec(
        "non_tourn_elo_loss",
        paths=("non_tournament.elo.loss", "nt.elo.loss", "non_tourn_elo_loss"),
        aliases=("non_tourn_elo_loss", "nt elo loss", "nt_elo_loss"),
    ),
    FieldSpec(
        "non_tourn_elo_ratio",
        kind="ratio",
        paths=("non_tournament.elo.ratio", "nt.elo.ratio", "non_tourn_elo_ratio"),
        aliases=("non_tourn_elo_ratio", "nt elo ratio", "nt_elo_ratio", "ntelor"),
        narrative="non_tourn_elo_ratio",
    ),
    FieldSpec(
        "elo_ratio_gap",
        kind="ratio",
        paths=("elo_ratio_gap",),
        aliases=("elo_ratio_gap", "elo ratio gap", "Δelor"),
        narrative="gap",
        derive=lambda resolved: ratio_gap(resolved.get("tourn_elo_ratio"), resolved.get("non_tourn_elo_ratio")),
        derive_first=True,
    ),
    FieldSpec(
        "t_self_bail_loss_ratio",
        kind="percent",
        paths=("ratios.self_bail_loss_ratio_t", "t_self_bail_loss_ratio"),
        aliases=("t_self_bail_loss_ratio", "t-selfto%"),
    ),
    FieldSpec(
        "nt_self_bail_loss_ratio",
        kind="percent",
        paths=("ratios.self_bail_loss_ratio_nt", "nt_self_bail_loss_ratio"),
        aliases=("nt_self_bail_loss_ratio", "nt-selfto%"),
        narrative="nt_self_bail_percent",
    ),
)

NARRATIVE_PATHS: Tuple[str, ...] = ("reasons",)
NARRATIVE_ALIASES: Tuple[str, ...] = ("reasons",)


def resolution_order(specs: Sequence[FieldSpec]) -> Tuple[FieldSpec, ...]:
    """Direct fields first, then derived ones in declaration order.

    Declaration order already puts win rates ahead of the win-rate gap.
    """
    direct = [spec for spec in specs if spec.derive is None]
    derived = [spec for spec in specs if spec.derive is not None]
    return tuple(direct + derived)


def with_extra_aliases(
    specs: Sequence[FieldSpec],
    extra: Mapping[str, Sequence[str]],
) -> Tuple[FieldSpec, ...]:
    if not extra:
        return tuple(specs)
    known = {spec.name for spec in specs}
    for name in extra:
        if name not in known:
            logger.warning("Ignoring aliases for unknown field %r", name)
    return tuple(
        replace(spec, aliases=merge_aliases(spec.aliases, extra.get(spec.name, ())))
        for spec in specs
    )


SPECS_BY_NAME: Dict[str, FieldSpec] = {spec.name: spec for spec in FIELD_SPECS}
