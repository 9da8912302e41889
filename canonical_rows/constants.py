from __future__ import annotations

import re
from typing import Pattern, Tuple

PERCENT_DIGITS = 1
RATIO_DIGITS = 3

NARRATIVE_JOINER = "; "
REASON_SPLIT = re.compile(r"[|,;]+")

# Narrative patterns are tried in order; the first match wins.
GAMES_PATTERNS: Tuple[Pattern[str], ...] = (
    re.compile(r"\bover\s+(\d+)\s+(?:rated\s+)?games\b", re.I),
)

ELO_RATIO_PATTERNS: Tuple[Pattern[str], ...] = (
    re.compile(r"\belo\s*ratio[:\s]*([0-9.]+)", re.I),
    re.compile(r"\belo\s*ratio\W+([0-9.]+)", re.I),
)

# Text immediately before an elo-ratio phrase that ties it to one game pool.
# Overall elo ratio skips such matches, so it is narrower than a bare "elo ratio" search.
ELO_QUALIFIER = re.compile(r"(?:\btourn(?:ament)?|\bn?t)[\s-]*$", re.I)

# Lookbehind keeps "non-tournament elo ratio" from counting as a tournament ratio.
TOURN_ELO_RATIO_PATTERNS: Tuple[Pattern[str], ...] = (
    re.compile(r"(?<!non[-\s])\btourn(?:ament)?\s+elo\s*ratio[:\s]*([0-9.]+)", re.I),
    re.compile(r"(?<!non[-\s])\btourn\s*eloratio\s*([0-9.]+)", re.I),
    re.compile(r"\bt\s+elo\s*ratio[:\s]*([0-9.]+)", re.I),
)

NON_TOURN_ELO_RATIO_PATTERNS: Tuple[Pattern[str], ...] = (
    re.compile(r"\bnon[-\s]?tourn(?:ament)?\s+(?:elo\s*)?ratio[:\s]*([0-9.]+)", re.I),
    re.compile(r"\bnt\s+elo\s*ratio[:\s]*([0-9.]+)", re.I),
)

GAP_PATTERNS: Tuple[Pattern[str], ...] = (
    re.compile(r"\(gap\s*([0-9.]+)\s*\)", re.I),
)

NT_SELF_BAIL_PATTERNS: Tuple[Pattern[str], ...] = (
    re.compile(r"\bnon[-\s]?tournament\s+self[-\s]?bail\s+losses\s+([0-9.]+)\s*%", re.I),
    re.compile(r"\bnt\s+self[-\s]?bail\s+loss(?:es)?\s+([0-9.]+)\s*%", re.I),
)

UPSET_PATTERNS: Tuple[Pattern[str], ...] = (
    re.compile(r"\b(\d+)\s+upset\s+wins?\b", re.I),
)
