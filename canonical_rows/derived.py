"""Null-propagating aggregates and comparison fields."""
from __future__ import annotations

from typing import Optional

from .constants import PERCENT_DIGITS, RATIO_DIGITS
from .parsing import Number, round_half_away


def sum_known(a: Optional[Number], b: Optional[Number]) -> Optional[Number]:
    if a is None or b is None:
        return None
    return a + b


def rate_from_counts(wins: Optional[Number], games: Optional[Number]) -> Optional[float]:
    if wins is None or games is None or games <= 0:
        return None
    return round_half_away(wins / games * 100, PERCENT_DIGITS)


def percent_gap(tourn: Optional[Number], non_tourn: Optional[Number]) -> Optional[float]:
    if tourn is None or non_tourn is None:
        return None
    return round_half_away(tourn - non_tourn, PERCENT_DIGITS)


def ratio_gap(tourn: Optional[Number], non_tourn: Optional[Number]) -> Optional[float]:
    if tourn is None or non_tourn is None:
        return None
    return round_half_away(tourn - non_tourn, RATIO_DIGITS)
