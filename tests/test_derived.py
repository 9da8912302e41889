from canonical_rows.derived import percent_gap, rate_from_counts, ratio_gap, sum_known


def test_sum_is_null_propagating():
    assert sum_known(10, 5) == 15
    assert sum_known(10, None) is None
    assert sum_known(None, None) is None


def test_rate_from_counts():
    assert rate_from_counts(7, 10) == 70.0
    assert rate_from_counts(1, 3) == 33.3
    assert rate_from_counts(2, 3) == 66.7


def test_rate_needs_positive_games():
    assert rate_from_counts(0, 0) is None
    assert rate_from_counts(3, None) is None
    assert rate_from_counts(None, 10) is None


def test_gaps():
    assert percent_gap(70.0, 20.0) == 50.0
    assert percent_gap(20.0, 70.0) == -50.0
    assert ratio_gap(4.0, 0.25) == 3.75
    assert ratio_gap(1.2, None) is None
    assert percent_gap(None, 1.0) is None
