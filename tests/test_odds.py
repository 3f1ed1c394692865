"""
Tests for the Odds API payload adapter (no network).

Run with:  pytest tests/test_odds.py -v
"""

import logging
from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from cfb_edge.services.odds import parse_odds_api_game, parse_odds_api_games

NOW = datetime(2030, 9, 5, 12, 0, tzinfo=timezone.utc)


def _iso(dt):
    return dt.strftime("%Y-%m-%dT%H:%M:%SZ")


def _make_game_data(game_id="abc123", days_ahead=2, bookmakers=None):
    return {
        "id": game_id,
        "sport_key": "americanfootball_ncaaf",
        "sport_title": "NCAAF",
        "commence_time": _iso(NOW + timedelta(days=days_ahead)),
        "home_team": "Iowa State Cyclones",
        "away_team": "Iowa Hawkeyes",
        "bookmakers": bookmakers if bookmakers is not None else [_make_book()],
    }


def _make_book(key="draftkings", title="DraftKings", h2h=None, spreads=None):
    markets = []
    markets.append({"key": "h2h", "outcomes": h2h if h2h is not None else [
        {"name": "Iowa State Cyclones", "price": -150},
        {"name": "Iowa Hawkeyes", "price": 130},
    ]})
    if spreads is not None:
        markets.append({"key": "spreads", "outcomes": spreads})
    return {"key": key, "title": title, "last_update": _iso(NOW), "markets": markets}


# ---------------------------------------------------------------------------
# parse_odds_api_game
# ---------------------------------------------------------------------------

class TestParseGame:

    def test_game_fields(self):
        game, books = parse_odds_api_game(_make_game_data())
        assert game.id == "abc123"
        assert game.home_team == "Iowa State Cyclones"
        assert game.sport_title == "NCAAF"
        assert game.commence_time == NOW + timedelta(days=2)
        assert len(books) == 1

    def test_moneyline_and_spreads(self):
        book = _make_book(spreads=[
            {"name": "Iowa State Cyclones", "price": -110, "point": -3.5},
            {"name": "Iowa Hawkeyes", "price": -110, "point": 3.5},
        ])
        _, [odds] = parse_odds_api_game(_make_game_data(bookmakers=[book]))

        assert odds.bookmaker == "DraftKings"
        assert odds.game_id == "abc123"
        assert [(m.team, m.price) for m in odds.moneyline] == [
            ("Iowa State Cyclones", -150), ("Iowa Hawkeyes", 130),
        ]
        assert [(s.team, s.point) for s in odds.spreads] == [
            ("Iowa State Cyclones", -3.5), ("Iowa Hawkeyes", 3.5),
        ]

    def test_float_price_with_integer_value_accepted(self):
        book = _make_book(h2h=[{"name": "Iowa State Cyclones", "price": -150.0}])
        _, [odds] = parse_odds_api_game(_make_game_data(bookmakers=[book]))
        assert odds.moneyline[0].price == -150

    def test_invalid_outcomes_dropped_with_warning(self, caplog):
        book = _make_book(
            h2h=[
                {"name": "Iowa State Cyclones", "price": 0},
                {"name": "Iowa Hawkeyes", "price": 1.91},
                {"name": "Iowa Hawkeyes", "price": 130},
            ],
            spreads=[{"name": "Iowa Hawkeyes", "price": -110}],  # no point
        )
        with caplog.at_level(logging.WARNING, logger="cfb_edge.services.odds"):
            _, [odds] = parse_odds_api_game(_make_game_data(bookmakers=[book]))

        assert [(m.team, m.price) for m in odds.moneyline] == [("Iowa Hawkeyes", 130)]
        assert odds.spreads == []
        assert sum("Dropping" in r.message for r in caplog.records) == 3

    def test_book_without_usable_markets_skipped(self):
        empty = {"key": "pinnacle", "title": "Pinnacle", "last_update": _iso(NOW),
                 "markets": [{"key": "totals", "outcomes": [{"name": "Over", "price": -110}]}]}
        _, books = parse_odds_api_game(_make_game_data(bookmakers=[empty, _make_book()]))
        assert [b.bookmaker for b in books] == ["DraftKings"]

    def test_title_falls_back_to_key(self):
        book = _make_book()
        del book["title"]
        _, [odds] = parse_odds_api_game(_make_game_data(bookmakers=[book]))
        assert odds.bookmaker == "draftkings"

    def test_malformed_game_raises(self):
        data = _make_game_data()
        del data["home_team"]
        with pytest.raises(ValidationError):
            parse_odds_api_game(data)


# ---------------------------------------------------------------------------
# parse_odds_api_games
# ---------------------------------------------------------------------------

class TestParseGames:

    def test_window_filter(self):
        payload = [
            _make_game_data("past", days_ahead=-1),
            _make_game_data("soon", days_ahead=2),
            _make_game_data("edge", days_ahead=7),
            _make_game_data("far", days_ahead=10),
        ]
        games = parse_odds_api_games(payload, now=NOW)
        assert [g.id for g, _ in games] == ["soon", "edge"]

    def test_no_horizon(self):
        payload = [_make_game_data("soon", 2), _make_game_data("far", 30)]
        games = parse_odds_api_games(payload, now=NOW, horizon_days=None)
        assert [g.id for g, _ in games] == ["soon", "far"]

    def test_malformed_game_skipped(self):
        bad = _make_game_data("bad")
        bad["commence_time"] = "not a date"
        games = parse_odds_api_games([bad, _make_game_data("ok")], now=NOW)
        assert [g.id for g, _ in games] == ["ok"]

    def test_empty_payload(self):
        assert parse_odds_api_games([], now=NOW) == []


class TestNullCollections:
    """Explicit nulls in the payload are treated as empty lists."""

    def test_null_bookmakers(self):
        data = _make_game_data()
        data["bookmakers"] = None
        game, books = parse_odds_api_game(data)
        assert game.id == "abc123"
        assert books == []

    def test_null_markets_and_outcomes(self):
        no_markets = {"key": "fanduel", "title": "FanDuel", "last_update": _iso(NOW),
                      "markets": None}
        no_outcomes = {"key": "betmgm", "title": "BetMGM", "last_update": _iso(NOW),
                       "markets": [{"key": "h2h", "outcomes": None}]}
        _, books = parse_odds_api_game(
            _make_game_data(bookmakers=[no_markets, no_outcomes, _make_book()])
        )
        assert [b.bookmaker for b in books] == ["DraftKings"]

    def test_null_game_does_not_abort_slate(self):
        bad = _make_game_data("nulls")
        bad["bookmakers"] = None
        games = parse_odds_api_games([bad, _make_game_data("ok")], now=NOW)
        assert [g.id for g, _ in games] == ["nulls", "ok"]
