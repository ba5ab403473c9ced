import pytest

from src.normalization.goals import (
    AWAY_GOAL_KEYS,
    HOME_GOAL_KEYS,
    resolve_total_goals,
    to_number,
)


def test_home_and_away_columns_are_summed():
    assert resolve_total_goals({"FTHG": 2, "FTAG": 1}) == 3


def test_score_string_used_when_goal_columns_missing():
    assert resolve_total_goals({"Score": "2-1"}) == 3


def test_nothing_resolvable_is_invalid():
    assert resolve_total_goals({"HomeTeam": "Celtic", "odd": 1.8}) is None


@pytest.mark.parametrize("home_key,away_key", list(zip(HOME_GOAL_KEYS, AWAY_GOAL_KEYS)))
def test_every_goal_synonym_is_recognised(home_key, away_key):
    assert resolve_total_goals({home_key: 1, away_key: 4}) == 5


def test_first_present_key_wins_even_when_unusable():
    # FTHG is present but blank, so HomeGoals is never consulted
    row = {"FTHG": "", "HomeGoals": 3, "FTAG": 1, "Score": "0-0"}
    assert resolve_total_goals(row) == 0


def test_numeric_strings_are_coerced():
    assert resolve_total_goals({"HG": " 2 ", "AG": "2"}) == 4


@pytest.mark.parametrize(
    "score,expected",
    [("3:2", 5), (" 1 - 1 ", 2), ("10-0", 10)],
)
def test_score_separators_and_whitespace(score, expected):
    assert resolve_total_goals({"FTScore": score}) == expected


def test_score_fields_checked_in_order():
    row = {"FTScore": "n/a", "Score": "", "FullTimeScore": "4-0", "Result": "1-1"}
    assert resolve_total_goals(row) == 4


def test_non_score_result_falls_through_to_aggregate():
    assert resolve_total_goals({"Result": "H", "Goals": 5}) == 5


def test_aggregate_fallback_order():
    assert resolve_total_goals({"Goals": "x", "totalgoals": "3"}) == 3


def test_one_sided_goal_columns_fall_back_to_score():
    assert resolve_total_goals({"FTHG": 2, "Score": "2-2"}) == 4


def test_to_number_rejects_booleans_and_text():
    assert to_number(True) is None
    assert to_number("2a") is None
    assert to_number(None) is None
    assert to_number(float("nan")) is None
    assert to_number("1.5") == 1.5


def test_accepts_normalized_record(make_record):
    record = make_record(total=None, Score="0:3")
    assert resolve_total_goals(record) == 3
