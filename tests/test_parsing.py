import math

import numpy as np
import pandas as pd
import pytest

from canonical_rows.parsing import as_percent, as_ratio3, coerce_number, is_missing, round_half_away


class TestCoerceNumber:
    def test_numbers_pass_through(self):
        assert coerce_number(7) == 7
        assert coerce_number(-2.5) == -2.5

    def test_non_finite_is_unknown(self):
        assert coerce_number(float("nan")) is None
        assert coerce_number(float("inf")) is None
        assert coerce_number(-math.inf) is None

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("42", 42.0),
            ("42%", 42.0),
            ("score: -3.75 pts", -3.75),
            ("  0.5 ", 0.5),
            ("W 12 / L 3", 12.0),
        ],
    )
    def test_first_numeral_in_string(self, text, expected):
        assert coerce_number(text) == expected

    @pytest.mark.parametrize("raw", ["", "n/a", "—", None, True, False, [1], {"a": 1}, object()])
    def test_unknown_inputs(self, raw):
        assert coerce_number(raw) is None

    def test_numpy_scalars(self):
        assert coerce_number(np.int64(9)) == 9.0
        assert coerce_number(np.float64(1.5)) == 1.5
        assert coerce_number(np.float64("nan")) is None

    def test_huge_int_is_unknown(self):
        assert coerce_number(10 ** 400) is None


class TestAsPercent:
    def test_fraction_is_scaled(self):
        assert as_percent(0.5) == 50.0
        assert as_percent("0.25") == 25.0

    def test_one_is_a_whole_fraction(self):
        assert as_percent(1) == 100.0

    def test_percentages_kept(self):
        assert as_percent(42) == 42.0
        assert as_percent("63.46%") == 63.5

    def test_negative_values_are_scaled_not_clamped(self):
        assert as_percent(-5) == -500.0
        assert as_percent("-0.25") == -25.0

    def test_unknown(self):
        assert as_percent("none") is None
        assert as_percent(None) is None

    def test_one_decimal(self):
        value = as_percent(0.12345)
        assert value == 12.3


class TestAsRatio3:
    def test_rounds_to_three_places(self):
        assert as_ratio3(1.23456) == 1.235

    def test_unknown(self):
        assert as_ratio3("ratio unavailable") is None

    def test_string_input(self):
        assert as_ratio3("EloRatio 0.1234") == 0.123


class TestRoundHalfAway:
    def test_half_rounds_away_from_zero(self):
        assert round_half_away(2.25, 1) == 2.3
        assert round_half_away(-2.25, 1) == -2.3
        assert round_half_away(0.0625, 3) == 0.063

    def test_no_negative_zero(self):
        assert math.copysign(1.0, round_half_away(-0.0001, 1)) == 1.0


def test_is_missing():
    assert is_missing(None)
    assert is_missing(float("nan"))
    assert is_missing(pd.NA)
    assert not is_missing(0)
    assert not is_missing("")
    assert not is_missing({"a": 1})
