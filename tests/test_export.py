import pandas as pd
import pytest

from canonical_rows.coverage import COVERAGE_COLUMNS, build_coverage, collect_coverage_issues
from canonical_rows.excel import ExportError, rows_to_frame, write_csv, write_excel_workbook, write_rows
from canonical_rows.models import OUTPUT_COLUMNS
from canonical_rows.reconcile import RowReconciler


@pytest.fixture
def rows(make_sources, split_result):
    reconciler = RowReconciler()
    return [
        reconciler.reconcile(make_sources("alice", structured=split_result)),
        reconciler.reconcile(make_sources("bob", structured={"suspicion_score": 1.5}, narrative="over 4 games")),
    ]


def test_rows_to_frame_has_fixed_columns(rows):
    frame = rows_to_frame(rows)
    assert list(frame.columns) == OUTPUT_COLUMNS
    assert frame.loc[0, "username"] == "alice"
    assert pd.isna(frame.loc[1, "tourn_games"])


def test_empty_frame_keeps_columns():
    assert list(rows_to_frame([]).columns) == OUTPUT_COLUMNS


def test_coverage_counts_tiers(rows):
    coverage = build_coverage(rows).set_index("Field")
    assert list(build_coverage(rows).columns) == COVERAGE_COLUMNS

    assert coverage.loc["suspicion_score", "Known"] == 2
    assert coverage.loc["suspicion_score", "Structured"] == 2
    assert coverage.loc["suspicion_score", "Result"] == "PASS"

    assert coverage.loc["recent_games", "Narrative"] == 2
    assert coverage.loc["tourn_win_rate", "Derived"] == 1
    assert coverage.loc["tourn_win_rate", "Result"] == "PARTIAL"
    assert coverage.loc["elo_ratio", "Result"] == "MISSING"


def test_coverage_issues_exclude_pass(rows):
    issues = collect_coverage_issues(build_coverage(rows))
    assert "suspicion_score" not in set(issues["Field"])
    assert "elo_ratio" in set(issues["Field"])
    assert collect_coverage_issues(build_coverage([])).empty


def test_write_csv_with_bom(tmp_path, rows):
    path = tmp_path / "rows.csv"
    write_csv(rows, path)
    assert path.read_bytes().startswith(b"\xef\xbb\xbf")
    frame = pd.read_csv(path, encoding="utf-8-sig")
    assert list(frame.columns) == OUTPUT_COLUMNS
    assert list(frame["username"]) == ["alice", "bob"]


def test_write_excel_workbook(tmp_path, rows):
    path = tmp_path / "rows.xlsx"
    raw = [{"username": "alice", "status": "done"}]
    write_excel_workbook(rows, path, raw_rows=raw, coverage=build_coverage(rows))
    sheets = pd.read_excel(path, sheet_name=None)
    assert set(sheets) == {"Scan", "Raw", "Coverage"}
    assert list(sheets["Scan"].columns) == OUTPUT_COLUMNS
    assert sheets["Raw"].loc[0, "status"] == "done"


def test_write_rows_rejects_unknown_suffix(tmp_path, rows):
    with pytest.raises(ExportError):
        write_rows(rows, tmp_path / "rows.json")


def test_counts_stay_whole_when_some_rows_are_unknown(tmp_path, make_sources):
    reconciler = RowReconciler()
    mixed = [
        reconciler.reconcile(
            make_sources("a", structured={"tournament": {"games": 10}, "non_tournament": {"games": 5}})
        ),
        reconciler.reconcile(make_sources("b", structured={"suspicion_score": 3.2})),
    ]
    path = tmp_path / "rows.csv"
    write_csv(mixed, path)

    lines = path.read_text(encoding="utf-8-sig").splitlines()
    assert lines[1].startswith("a,,15,")
    assert lines[2].startswith("b,3.2,,")
    assert "15.0" not in lines[1]
    assert "10.0" not in lines[1]


def test_fractional_counts_are_left_as_floats(make_sources):
    reconciler = RowReconciler()
    frame = rows_to_frame([reconciler.reconcile(make_sources("a", side_row={"T Games": "12.5"}))])
    assert frame.loc[0, "tourn_games"] == 12.5
