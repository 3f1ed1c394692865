"""
End-to-end tests for analyze_slate over a small hand-built slate.

Run with:  pytest tests/test_analysis.py -v
"""

from datetime import datetime, timedelta, timezone

import pytest

from cfb_edge.core.sport_config import SportConfig
from cfb_edge.schemas import BettingOdds, Game, GamePrediction, MoneylineOdds, SpreadOdds
from cfb_edge.services.analysis import SlateReport, analyze_slate

NOW = datetime(2030, 9, 5, 12, 0, tzinfo=timezone.utc)


def _slate():
    kickoff = NOW + timedelta(days=2)
    isu = Game(id="g1", home_team="Iowa State Cyclones", away_team="Iowa Hawkeyes",
               commence_time=kickoff)
    tex = Game(id="g2", home_team="Texas Longhorns", away_team="Oklahoma Sooners",
               commence_time=kickoff)
    isu_books = [
        BettingOdds(
            bookmaker="BookA", last_update=NOW,
            moneyline=[MoneylineOdds(team=isu.home_team, price=120),
                       MoneylineOdds(team=isu.away_team, price=-140)],
            spreads=[SpreadOdds(team=isu.home_team, point=-3.0, price=110),
                     SpreadOdds(team=isu.away_team, point=3.0, price=-130)],
        ),
        BettingOdds(
            bookmaker="BookB", last_update=NOW,
            moneyline=[MoneylineOdds(team=isu.home_team, price=-150),
                       MoneylineOdds(team=isu.away_team, price=125)],
            spreads=[SpreadOdds(team=isu.home_team, point=-3.0, price=-130),
                     SpreadOdds(team=isu.away_team, point=3.0, price=110)],
        ),
    ]
    tex_books = [
        BettingOdds(
            bookmaker="BookA", last_update=NOW,
            moneyline=[MoneylineOdds(team=tex.home_team, price=-110),
                       MoneylineOdds(team=tex.away_team, price=-110)],
        ),
    ]
    return [(isu, isu_books), (tex, tex_books)]


def _predictions():
    return [GamePrediction(home_team="Iowa St.", away_team="Iowa", spread=6.0,
                           home_win_prob=0.65)]


class TestAnalyzeSlate:

    def test_report_contents(self):
        report = analyze_slate(_slate(), _predictions(), now=NOW)

        assert isinstance(report, SlateReport)
        assert report.moneyline_ev[0].team == "Iowa State Cyclones"
        assert report.moneyline_ev[0].bookmaker == "BookA"
        assert report.spread_ev[0].team == "Iowa State Cyclones"
        assert report.spread_ev[0].bookmaker == "BookA"
        assert len(report.moneyline_arbitrage) == 1
        assert report.moneyline_arbitrage[0].home_bookmaker == "BookA"
        assert report.moneyline_arbitrage[0].away_bookmaker == "BookB"
        assert len(report.spread_arbitrage) == 1

    def test_match_stats(self):
        report = analyze_slate(_slate(), _predictions(), now=NOW)
        for stats in (report.moneyline_stats, report.spread_stats):
            assert stats.total_games == 2
            assert stats.matched_games == 1
            assert stats.unmatched[0].game_key == "texas_oklahoma"

    def test_config_sd_used(self):
        tight = analyze_slate(_slate(), _predictions(), now=NOW,
                              config=SportConfig.ncaa_basketball())
        default = analyze_slate(_slate(), _predictions(), now=NOW)
        assert tight.spread_ev[0].model_prob > default.spread_ev[0].model_prob

    def test_top_n(self):
        report = analyze_slate(_slate(), _predictions(), now=NOW, top_n=1)
        assert len(report.moneyline_ev) == 1
        assert len(report.spread_ev) == 1

    def test_negative_top_n_rejected(self):
        with pytest.raises(ValueError):
            analyze_slate(_slate(), _predictions(), now=NOW, top_n=-1)

    def test_arbitrage_ignores_kickoff(self):
        report = analyze_slate(_slate(), _predictions(), now=NOW + timedelta(days=3))
        assert report.moneyline_ev == []
        assert len(report.moneyline_arbitrage) == 1

    def test_empty(self):
        report = analyze_slate([], [], now=NOW)
        assert report == SlateReport()

    def test_idempotent(self):
        assert analyze_slate(_slate(), _predictions(), now=NOW) == \
            analyze_slate(_slate(), _predictions(), now=NOW)
