import pytest

from src.calculation.simulator import (
    is_market_win,
    simulate,
    stake_amount,
    trade_profit,
)
from src.models.enums import MarketType, Outcome, OutcomeRule


def test_standard_market_capital_trajectory(make_record):
    records = [
        make_record(trade="t1", total=3),
        make_record(trade="t2", total=1, odd2=1.8),
    ]
    entries = simulate(records, 1000, 5, "under2.5")

    assert [e.outcome for e in entries] == [Outcome.LOSS, Outcome.WIN]
    assert [e.capital_after for e in entries] == pytest.approx([950, 990])
    assert [e.sequence_number for e in entries] == [1, 2]
    assert entries[1].odds_used == 1.8
    assert all(e.stake == 50 for e in entries)


def test_over_market_uses_odd_column(make_record):
    entries = simulate([make_record(total=3, odd=2.0, odd2=9.0)], 1000, 10, MarketType.OVER_25)
    assert entries[0].is_win
    assert entries[0].profit == pytest.approx(100)


def test_stake_is_fixed_while_capital_compounds(make_record):
    records = [make_record(trade=f"t{i}", total=4, odd=3.0) for i in range(1, 4)]
    entries = simulate(records, 1000, 10, "over2.5")
    assert {e.stake for e in entries} == {100}
    assert [e.capital_after for e in entries] == pytest.approx([1200, 1400, 1600])


def test_unresolvable_total_is_a_loss_with_zero_odds(make_record):
    entries = simulate([make_record(total=None, odd=2.0)], 1000, 5, "over2.5")
    assert entries[0].outcome == Outcome.LOSS
    assert entries[0].odds_used == 0
    assert entries[0].capital_after == pytest.approx(950)
    assert entries[0].total_goals is None


def test_win_without_odds_is_debited(make_record):
    entries = simulate([make_record(total=4, odd=0)], 1000, 5, "over2.5")
    assert entries[0].is_win
    assert entries[0].profit == -50


def test_grouped_market_single_winning_triplet(make_record):
    records = [
        make_record(trade="t4", total=1, odd3=2.5),
        make_record(trade="t5", total=5, odd3=9.0),
        make_record(trade="t6", total=0, odd3=9.0),
    ]
    entries = simulate(records, 1000, 5, "under6")

    assert len(entries) == 1
    entry = entries[0]
    assert entry.trade_id == "t1"
    assert entry.profit == pytest.approx(75)
    assert entry.capital_after == pytest.approx(1075)
    assert entry.record.trade_id == "t4"
    assert len(entry.group) == 3


def test_grouped_market_fails_on_six_goals_or_unknown_total(make_record):
    records = [
        make_record(trade="t1", total=1),
        make_record(trade="t2", total=6),
        make_record(trade="t3", total=1),
        make_record(trade="t4", total=1),
        make_record(trade="t5", total=None),
        make_record(trade="t6", total=1),
    ]
    entries = simulate(records, 1000, 5, "under6")
    assert [e.outcome for e in entries] == [Outcome.LOSS, Outcome.LOSS]
    assert [e.trade_id for e in entries] == ["t1", "t2"]
    assert entries[-1].capital_after == pytest.approx(900)


@pytest.mark.parametrize("count", [0, 1, 2, 3, 4, 5, 7, 9])
def test_grouped_market_drops_trailing_partial_group(make_record, count):
    records = [make_record(trade=f"t{i}", total=1) for i in range(1, count + 1)]
    assert len(simulate(records, 1000, 5, "under6")) == count // 3


def test_flag_rule_for_under(make_record):
    records = [
        make_record(trade="t1", total=5, odd2=2.0, **{"Under2.5": 1}),
        make_record(trade="t2", total=0, odd2=2.0, **{"Under2.5": "0"}),
    ]
    entries = simulate(records, 1000, 5, "under2.5", OutcomeRule.FLAG)
    assert [e.is_win for e in entries] == [True, False]


def test_flag_rule_for_over_uses_zero_flag(make_record):
    records = [
        make_record(trade="t1", total=0, **{"over2.5goals": 0}),
        make_record(trade="t2", total=5, **{"over2.5goals": 1}),
    ]
    entries = simulate(records, 1000, 5, "over2.5", "flag")
    assert [e.is_win for e in entries] == [True, False]


def test_grouped_market_ignores_flag_rule(make_record):
    records = [make_record(trade=f"t{i}", total=1) for i in range(1, 4)]
    entries = simulate(records, 1000, 5, "under6", OutcomeRule.FLAG)
    assert entries[0].is_win


def test_payload_merges_record_fields(make_record):
    entry = simulate([make_record(trade="t7", total=3, odd=2.0)], 1000, 5, "over2.5")[0]
    payload = entry.to_payload()
    assert payload["HomeTeam"] == "Celtic"
    assert payload["Trade"] == "t7"
    assert payload["gameNumber"] == 1
    assert payload["capitalMovement"] == pytest.approx(1050)
    assert payload["outcome"] == "win"
    assert payload["isWin"] is True
    assert payload["marketType"] == "over2.5"


def test_helpers():
    assert stake_amount(2000, 2.5) == 50
    assert trade_profit(10, True, 3.0) == 20
    assert trade_profit(10, False, 3.0) == -10
    assert is_market_win(MarketType.UNDER_25, 2)
    assert not is_market_win(MarketType.OVER_25, 2)
    assert is_market_win(MarketType.UNDER_6, 5)
    assert not is_market_win(MarketType.UNDER_6, 6)
    assert not is_market_win(MarketType.OVER_25, None)
