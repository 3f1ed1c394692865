"""
The Odds API (v4) payload adapter.

Converts an already-fetched ``/sports/{sport}/odds`` response into the
``(Game, [BettingOdds])`` pairs the EV finder and arbitrage detector take.
Fetching, API keys, quota tracking and caching live with the caller; this
module never touches the network.

Expected game shape::

    {
        "id": "e912...",
        "sport_title": "NCAAF",
        "commence_time": "2024-09-07T19:30:00Z",
        "home_team": "Iowa State Cyclones",
        "away_team": "Iowa Hawkeyes",
        "bookmakers": [
            {"key": "draftkings", "title": "DraftKings",
             "last_update": "2024-09-05T12:00:00Z",
             "markets": [
                {"key": "h2h", "outcomes": [{"name": ..., "price": -150}, ...]},
                {"key": "spreads", "outcomes": [{"name": ..., "price": -110, "point": -3.5}, ...]},
             ]},
        ],
    }

Request ``oddsFormat=american``; decimal prices fail validation and are
dropped.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, List, Optional, Tuple

from pydantic import ValidationError

from cfb_edge.schemas import BettingOdds, Game, MoneylineOdds, SpreadOdds

logger = logging.getLogger(__name__)

#: Markets understood by the adapter; anything else is ignored.
MONEYLINE_MARKET = "h2h"
SPREAD_MARKET = "spreads"

#: Default look-ahead window, in days, for upcoming games.
DEFAULT_HORIZON_DAYS = 7


def _moneyline_outcomes(outcomes: Iterable[Dict], book: str) -> List[MoneylineOdds]:
    parsed: List[MoneylineOdds] = []
    for outcome in outcomes:
        try:
            parsed.append(MoneylineOdds(team=outcome.get("name"), price=outcome.get("price")))
        except ValidationError as exc:
            logger.warning(
                "Dropping h2h outcome %r from %s: %s",
                outcome, book, exc.errors()[0].get("msg"),
            )
    return parsed


def _spread_outcomes(outcomes: Iterable[Dict], book: str) -> List[SpreadOdds]:
    parsed: List[SpreadOdds] = []
    for outcome in outcomes:
        try:
            parsed.append(SpreadOdds(
                team=outcome.get("name"),
                point=outcome.get("point"),
                price=outcome.get("price"),
            ))
        except ValidationError as exc:
            logger.warning(
                "Dropping spread outcome %r from %s: %s",
                outcome, book, exc.errors()[0].get("msg"),
            )
    return parsed


def parse_odds_api_game(game_data: Dict) -> Tuple[Game, List[BettingOdds]]:
    """
    Parse one Odds API game dict.

    Bookmakers with neither a usable moneyline nor spread market are
    dropped.  Raises ``pydantic.ValidationError`` when the game itself
    (id, teams, kickoff) is malformed.
    """
    game = Game(
        id=game_data.get("id"),
        home_team=game_data.get("home_team"),
        away_team=game_data.get("away_team"),
        commence_time=game_data.get("commence_time"),
        sport_title=game_data.get("sport_title") or "",
    )

    books: List[BettingOdds] = []
    for bookmaker in game_data.get("bookmakers") or []:
        name = bookmaker.get("title") or bookmaker.get("key", "")
        moneyline: List[MoneylineOdds] = []
        spreads: List[SpreadOdds] = []

        for market in bookmaker.get("markets") or []:
            market_key = market.get("key")
            if market_key == MONEYLINE_MARKET:
                moneyline = _moneyline_outcomes(market.get("outcomes") or [], name)
            elif market_key == SPREAD_MARKET:
                spreads = _spread_outcomes(market.get("outcomes") or [], name)

        if not moneyline and not spreads:
            continue

        try:
            books.append(BettingOdds(
                game_id=game.id,
                bookmaker=name,
                last_update=bookmaker.get("last_update"),
                moneyline=moneyline,
                spreads=spreads,
            ))
        except ValidationError as exc:
            logger.warning("Dropping bookmaker %s for game %s: %s", name, game.id, exc)

    return game, books


def parse_odds_api_games(
    payload: Iterable[Dict],
    now: Optional[datetime] = None,
    horizon_days: Optional[int] = DEFAULT_HORIZON_DAYS,
) -> List[Tuple[Game, List[BettingOdds]]]:
    """
    Parse a full odds response, keeping games that start after ``now``
    and no later than ``now + horizon_days``.

    ``horizon_days=None`` keeps every future game.  A malformed game is
    logged and skipped rather than failing the whole slate.
    """
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    cutoff = now + timedelta(days=horizon_days) if horizon_days is not None else None

    games: List[Tuple[Game, List[BettingOdds]]] = []
    skipped = 0
    for game_data in payload:
        try:
            game, books = parse_odds_api_game(game_data)
        except ValidationError as exc:
            logger.warning("Skipping malformed game %r: %s", game_data.get("id"), exc)
            continue

        if game.commence_time <= now or (cutoff is not None and game.commence_time > cutoff):
            skipped += 1
            continue
        games.append((game, books))

    logger.info("Parsed %d games from odds payload (%d outside window)", len(games), skipped)
    return games
