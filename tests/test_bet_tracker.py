"""Tests for bet_tracker: moneyline/spread settlement and the summary record."""

import pytest

from cfb_edge.schemas import EvBetRecommendation, GameResult, SpreadEvBetRecommendation
from cfb_edge.services.bet_tracker import (
    SettlementSummary,
    compare_ev_bets_to_results,
    compare_spread_ev_bets_to_results,
    moneyline_outcome,
    spread_outcome,
    summarize_results,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _make_result(home="Iowa State", away="Iowa", home_points=27, away_points=20, game_id="1"):
    return GameResult(id=game_id, home_team=home, away_team=away,
                      home_points=home_points, away_points=away_points,
                      completed=home_points is not None)


def _make_ml_bet(team="Iowa State Cyclones", odds=-110):
    return EvBetRecommendation(
        home_team="Iowa State Cyclones", away_team="Iowa Hawkeyes", team=team,
        bookmaker="DraftKings", odds=odds, model_prob=0.6, implied_prob=0.52,
        expected_value=0.1, edge=0.08,
    )


def _make_spread_bet(team="Iowa State Cyclones", line=-3.5, odds=-110):
    return SpreadEvBetRecommendation(
        home_team="Iowa State Cyclones", away_team="Iowa Hawkeyes", team=team,
        spread_line=line, bookmaker="FanDuel", odds=odds, model_spread=7.0,
        model_prob=0.6, implied_prob=0.52, expected_value=0.1, edge=0.08,
    )


# ---------------------------------------------------------------------------
# Outcome rules
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("team, home_pts, away_pts, expected", [
    ("Iowa State", 27, 20, "win"),
    ("Iowa State", 20, 27, "loss"),
    ("Iowa",       20, 27, "win"),
    ("Iowa",       27, 20, "loss"),
    ("Iowa",       24, 24, "push"),
])
def test_moneyline_outcome(team, home_pts, away_pts, expected):
    assert moneyline_outcome(team, _make_result(home_points=home_pts, away_points=away_pts)) == expected


@pytest.mark.parametrize("team, line, home_pts, away_pts, expected", [
    ("Iowa State", -3.5, 27, 20, "win"),    # wins by 7, covers -3.5
    ("Iowa State", -7.5, 27, 20, "loss"),   # wins by 7, misses -7.5
    ("Iowa State", -7.0, 27, 20, "push"),   # exactly on the number
    ("Iowa",        7.5, 27, 20, "win"),    # loses by 7 with +7.5
    ("Iowa",        3.5, 27, 20, "loss"),   # loses by 7 with +3.5
    ("Iowa",       -3.0, 17, 24, "win"),    # away favourite wins by 7
    ("Iowa",        7.0, 27, 20, "push"),
])
def test_spread_outcome(team, line, home_pts, away_pts, expected):
    result = _make_result(home_points=home_pts, away_points=away_pts)
    assert spread_outcome(team, line, result) == expected


def test_outcome_none_when_not_final():
    pending = _make_result(home_points=None, away_points=None)
    assert moneyline_outcome("Iowa State", pending) is None
    assert spread_outcome("Iowa State", -3.5, pending) is None


def test_outcome_none_for_team_not_in_game():
    assert moneyline_outcome("Kansas", _make_result()) is None


# ---------------------------------------------------------------------------
# compare_*_to_results
# ---------------------------------------------------------------------------

class TestCompareMoneyline:

    def test_win_pays_per_unit(self):
        [res] = compare_ev_bets_to_results([_make_ml_bet(odds=150)], [_make_result()])
        assert res.outcome == "win"
        assert res.bet_won is True
        assert res.actual_payout == pytest.approx(1.5)
        assert res.game_result.id == "1"

    def test_loss_pays_zero(self):
        [res] = compare_ev_bets_to_results([_make_ml_bet(team="Iowa Hawkeyes")], [_make_result()])
        assert res.bet_won is False
        assert res.actual_payout == 0.0

    def test_result_listed_other_way_round(self):
        result = _make_result(home="Iowa", away="Iowa State", home_points=20, away_points=27)
        [res] = compare_ev_bets_to_results([_make_ml_bet(odds=-200)], [result])
        assert res.bet_won is True
        assert res.actual_payout == pytest.approx(0.5)

    def test_no_result_is_pending(self):
        [res] = compare_ev_bets_to_results([_make_ml_bet()], [])
        assert res.game_result is None
        assert res.bet_won is None
        assert res.actual_payout is None
        assert res.outcome is None

    def test_incomplete_result_is_pending(self):
        pending = _make_result(home_points=None, away_points=None)
        [res] = compare_ev_bets_to_results([_make_ml_bet()], [pending])
        assert res.game_result is not None
        assert res.bet_won is None
        assert res.actual_payout is None

    def test_tie_is_push(self):
        [res] = compare_ev_bets_to_results([_make_ml_bet()], [_make_result(home_points=21, away_points=21)])
        assert res.outcome == "push"
        assert res.bet_won is None
        assert res.actual_payout == 0.0


class TestCompareSpread:

    def test_home_cover(self):
        [res] = compare_spread_ev_bets_to_results([_make_spread_bet(line=-3.5)], [_make_result()])
        assert res.outcome == "win"
        assert res.actual_payout == pytest.approx(100 / 110)

    def test_away_underdog_cover(self):
        bet = _make_spread_bet(team="Iowa Hawkeyes", line=10.5, odds=105)
        [res] = compare_spread_ev_bets_to_results([bet], [_make_result()])
        assert res.bet_won is True
        assert res.actual_payout == pytest.approx(1.05)

    def test_push_on_the_number(self):
        [res] = compare_spread_ev_bets_to_results([_make_spread_bet(line=-7.0)], [_make_result()])
        assert res.outcome == "push"
        assert res.bet_won is None
        assert res.actual_payout == 0.0

    def test_empty(self):
        assert compare_spread_ev_bets_to_results([], [_make_result()]) == []


# ---------------------------------------------------------------------------
# summarize_results
# ---------------------------------------------------------------------------

class TestSummarizeResults:

    def test_record_and_roi(self):
        results = [_make_result()]
        bets = [
            _make_ml_bet(odds=150),                      # win  +1.5
            _make_ml_bet(team="Iowa Hawkeyes", odds=200),  # loss -1.0
        ]
        settled = compare_ev_bets_to_results(bets, results)
        settled += compare_ev_bets_to_results([_make_ml_bet()], [])  # pending

        summary = summarize_results(settled)
        assert (summary.wins, summary.losses, summary.pushes, summary.pending) == (1, 1, 0, 1)
        assert summary.units_staked == 2.0
        assert summary.profit_units == pytest.approx(0.5)
        assert summary.win_rate == pytest.approx(0.5)
        assert summary.roi == pytest.approx(0.25)
        assert summary.settled == 2

    def test_push_counts_as_staked_not_decided(self):
        settled = compare_spread_ev_bets_to_results(
            [_make_spread_bet(line=-7.0), _make_spread_bet(line=-3.5)], [_make_result()],
        )
        summary = summarize_results(settled)
        assert summary.pushes == 1
        assert summary.win_rate == pytest.approx(1.0)
        assert summary.units_staked == 2.0
        assert summary.roi == pytest.approx(round((100 / 110) / 2, 4))

    def test_empty(self):
        assert summarize_results([]) == SettlementSummary()


# ---------------------------------------------------------------------------
# Live scores
# ---------------------------------------------------------------------------

class TestInProgressResults:
    """A result with points but completed=False is a live score, not final."""

    def _live(self):
        return GameResult(id="1", home_team="Iowa State", away_team="Iowa",
                          home_points=7, away_points=0, completed=False)

    def test_moneyline_stays_pending(self):
        [res] = compare_ev_bets_to_results([_make_ml_bet()], [self._live()])
        assert res.game_result is not None
        assert res.outcome is None
        assert res.bet_won is None
        assert res.actual_payout is None

    def test_spread_stays_pending(self):
        [res] = compare_spread_ev_bets_to_results([_make_spread_bet(line=-3.5)], [self._live()])
        assert res.outcome is None
        assert res.bet_won is None
        assert res.actual_payout is None

    def test_counted_as_pending_in_summary(self):
        settled = compare_ev_bets_to_results([_make_ml_bet()], [self._live()])
        summary = summarize_results(settled)
        assert summary.pending == 1
        assert summary.settled == 0
