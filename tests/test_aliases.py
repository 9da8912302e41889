import json

from canonical_rows.aliases import AliasIndex, load_aliases, merge_aliases, normalize_header


def test_normalize_header_strips_case_and_punctuation():
    assert normalize_header("T Elo Ratio") == "teloratio"
    assert normalize_header("t_elo_ratio") == "teloratio"
    assert normalize_header("WR Gap (T − NT)") == "wrgaptnt"
    assert normalize_header(None) == ""


def test_lookup_is_spelling_insensitive():
    aliases = ["tourn_elo_ratio", "t elo ratio", "telor"]
    index = AliasIndex()
    for header in ("T Elo Ratio", "t_elo_ratio", "TELOR"):
        assert index.lookup({header: "1.5"}, aliases) == "1.5"


def test_first_present_alias_wins():
    row = {"Games": "12", "Recent Games": "30"}
    assert AliasIndex().lookup(row, ["recent_games", "games"]) == "30"


def test_null_values_fall_through_to_later_aliases():
    row = {"recent_games": None, "lifetime games": float("nan"), "Games": "8"}
    assert AliasIndex().lookup(row, ["recent_games", "lifetime_games", "games"]) == "8"


def test_missing_row_or_alias_is_unknown():
    index = AliasIndex()
    assert index.lookup(None, ["games"]) is None
    assert index.lookup({"wins": 3}, ["games"]) is None


def test_first_registered_header_wins_on_collision():
    row = {"T Games": "4", "t_games": "99"}
    assert AliasIndex().lookup(row, ["t games"]) == "4"


def test_memo_does_not_touch_the_row():
    row = {"NT Games": "9"}
    before = json.dumps(row, sort_keys=True)
    index = AliasIndex()
    index.lookup(row, ["nt_games"])
    index.lookup(row, ["nt games"])
    assert json.dumps(row, sort_keys=True) == before
    assert list(row) == ["NT Games"]
    assert len(index) == 1


def test_memo_is_reused_per_row():
    row = {"Wins": 3}
    index = AliasIndex()
    assert index.index_for(row) is index.index_for(row)
    index.clear()
    assert len(index) == 0


def test_load_aliases_file(tmp_path):
    path = tmp_path / "aliases.yaml"
    path.write_text(
        "# extra spellings\n"
        "tourn_games:\n"
        "  - Tourney Games\n"
        "  - \"TG\"\n"
        "elo_ratio:\n"
        "  Elo Quotient:\n"
        "\n"
        "  # ignored comment\n",
        encoding="utf-8",
    )
    assert load_aliases(path) == {
        "tourn_games": ["Tourney Games", "TG"],
        "elo_ratio": ["Elo Quotient"],
    }


def test_load_aliases_missing_file(tmp_path):
    assert load_aliases(tmp_path / "absent.yaml") == {}
    assert load_aliases(None) == {}


def test_merge_aliases_dedupes_by_normalized_key():
    assert merge_aliases(["t_games", "t games"], ["T-Games", "tourney"]) == ("t_games", "tourney")


def test_memo_keeps_only_the_current_row():
    index = AliasIndex()
    first = {"Wins": 1}
    for wins in range(50):
        index.lookup({"Wins": wins}, ["wins"])
    assert len(index) == 1
    assert index.lookup(first, ["wins"]) == 1
    assert len(index) == 1
