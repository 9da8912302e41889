"""Shared pytest configuration: path setup and sample scan sources."""

import sys
from pathlib import Path

import pytest

_ROOT = Path(__file__).resolve().parent.parent

# Allow ``import intake`` / ``import canonical_rows`` without installing.
sys.path.insert(0, str(_ROOT))

from intake.models import ScanSources  # noqa: E402


@pytest.fixture
def split_result():
    return {
        "username": "alice",
        "suspicion_score": 3.2,
        "tournament": {"games": 10, "wins": 7, "draws": 1, "losses": 2, "elo": {"gain": 80, "loss": 20, "ratio": 4.0}},
        "non_tournament": {"games": 5, "wins": 1, "draws": 0, "losses": 4, "elo": {"gain": 10, "loss": 40, "ratio": 0.25}},
        "ratios": {"short_win_rate": 0.42, "timeout_win_ratio": 35, "self_bail_loss_ratio_t": 0.1},
        "reasons": ["flagged over 15 games", "3 upset wins"],
    }


@pytest.fixture
def side_row():
    return {
        "Username": "alice",
        "T Elo Ratio": "2.5",
        "NT Games": "9",
        "Max Streak": "6",
        "Stk": 4,
        "WR Gap (T-NT)": "0.3",
        "Reasons": "side-table reasons",
    }


@pytest.fixture
def make_sources():
    def _make(username="alice", structured=None, side_row=None, narrative=None):
        return ScanSources(username=username, structured=structured, side_row=side_row, narrative=narrative)

    return _make
