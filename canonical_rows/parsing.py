from __future__ import annotations

import math
import numbers
import re
from typing import Any, Optional, Union

import pandas as pd

from .constants import PERCENT_DIGITS, RATIO_DIGITS

Number = Union[int, float]

NUMERAL = re.compile(r"-?\d+(?:\.\d+)?")


def is_missing(value: Any) -> bool:
    """True for ``None`` and pandas/numpy missing scalars (NaN, NA, NaT)."""
    if value is None:
        return True
    if pd.api.types.is_scalar(value):
        return bool(pd.isna(value))
    return False


def _finite(value: float) -> Optional[float]:
    return value if math.isfinite(value) else None


def coerce_number(raw: Any) -> Optional[Number]:
    """Return a finite number for ``raw`` or ``None``; never raises."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        try:
            float(raw)
        except OverflowError:
            return None
        return raw
    if isinstance(raw, float):
        return _finite(raw)
    if isinstance(raw, numbers.Real):
        return _finite(float(raw))
    if isinstance(raw, str):
        match = NUMERAL.search(raw)
        if not match:
            return None
        return _finite(float(match.group(0)))
    return None


def round_half_away(value: Number, digits: int) -> float:
    scaled = value * 10 ** digits
    if not math.isfinite(scaled):
        return float(value)
    magnitude = math.floor(abs(scaled) + 0.5)
    return (magnitude if scaled >= 0 else -magnitude) / 10 ** digits


def as_percent(raw: Any) -> Optional[float]:
    value = coerce_number(raw)
    if value is None:
        return None
    # n <= 1 is read as a fraction, so 1 means 100%.
    percent = value * 100 if value <= 1 else value
    return round_half_away(percent, PERCENT_DIGITS)


def as_ratio3(raw: Any) -> Optional[float]:
    value = coerce_number(raw)
    if value is None:
        return None
    return round_half_away(value, RATIO_DIGITS)
