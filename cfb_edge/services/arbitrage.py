"""
Cross-bookmaker arbitrage detection.

An arbitrage exists when opposing quotes, possibly from different books,
have implied probabilities summing below 1.  Staking each leg in
proportion to its implied probability locks in the same profit whichever
side wins:

    total       = p_1 + p_2
    profit_pct  = (1 / total - 1) * 100
    stake_i_pct = p_i / total * 100

Moneyline takes the single best price per side.  Spread pairs every two
quotes whose lines are equal and opposite within a tolerance, so the same
game can yield several opportunities.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from cfb_edge.core.odds_math import odds_to_probability
from cfb_edge.core.sport_config import DEFAULT_SPREAD_PAIR_TOLERANCE
from cfb_edge.schemas import MoneylineArbitrage, SpreadArbitrage
from cfb_edge.services.matcher import GamesWithOdds

logger = logging.getLogger(__name__)


def _arb_split(price_1: int, price_2: int) -> Optional[Tuple[float, float, float]]:
    """(profit_pct, stake_1_pct, stake_2_pct), or None when there is no arb."""
    p1 = odds_to_probability(price_1)
    p2 = odds_to_probability(price_2)
    total = p1 + p2
    if total >= 1.0:
        return None
    return (1.0 / total - 1.0) * 100.0, p1 / total * 100.0, p2 / total * 100.0


def find_moneyline_arbitrage(games_with_odds: GamesWithOdds) -> List[MoneylineArbitrage]:
    """
    Best home price vs best away price for each game.

    Team names are compared exactly against the game's own names; a quote
    for any other label is ignored.  On equal prices the first book seen
    keeps the slot.
    """
    found: List[MoneylineArbitrage] = []

    for game, odds_list in games_with_odds:
        best_home: Optional[Tuple[int, str]] = None
        best_away: Optional[Tuple[int, str]] = None

        for book in odds_list:
            for quote in book.moneyline:
                if quote.team == game.home_team:
                    if best_home is None or quote.price > best_home[0]:
                        best_home = (quote.price, book.bookmaker)
                elif quote.team == game.away_team:
                    if best_away is None or quote.price > best_away[0]:
                        best_away = (quote.price, book.bookmaker)

        if best_home is None or best_away is None:
            continue

        split = _arb_split(best_home[0], best_away[0])
        if split is None:
            continue

        profit, home_stake, away_stake = split
        logger.info(
            "Moneyline arb %.2f%%: %s %+d @ %s / %s %+d @ %s",
            profit, game.home_team, best_home[0], best_home[1],
            game.away_team, best_away[0], best_away[1],
        )
        found.append(MoneylineArbitrage(
            home_team=game.home_team,
            away_team=game.away_team,
            home_bookmaker=best_home[1],
            away_bookmaker=best_away[1],
            home_odds=best_home[0],
            away_odds=best_away[0],
            profit_percentage=profit,
            home_stake_percentage=home_stake,
            away_stake_percentage=away_stake,
        ))

    found.sort(key=lambda a: a.profit_percentage, reverse=True)
    return found


def find_spread_arbitrage(
    games_with_odds: GamesWithOdds,
    tolerance: float = DEFAULT_SPREAD_PAIR_TOLERANCE,
) -> List[SpreadArbitrage]:
    """
    Pairwise scan of spread quotes per game.

    Two quotes pair when their teams differ and ``|point_1 + point_2| <
    tolerance``.  Each unordered pair is visited once (i < j).  Results
    are sorted by profit and then deduplicated on (home, away, book 1,
    book 2, profit).
    """
    if tolerance < 0.0:
        raise ValueError(f"tolerance must be non-negative, got {tolerance!r}")

    found: List[SpreadArbitrage] = []

    for game, odds_list in games_with_odds:
        quotes = [
            (q.team, q.point, q.price, book.bookmaker)
            for book in odds_list
            for q in book.spreads
        ]

        for i in range(len(quotes)):
            team_1, point_1, price_1, book_1 = quotes[i]
            for j in range(i + 1, len(quotes)):
                team_2, point_2, price_2, book_2 = quotes[j]
                if team_1 == team_2 or abs(point_1 + point_2) >= tolerance:
                    continue

                split = _arb_split(price_1, price_2)
                if split is None:
                    continue

                profit, stake_1, stake_2 = split
                found.append(SpreadArbitrage(
                    home_team=game.home_team,
                    away_team=game.away_team,
                    side1_team=team_1,
                    side1_spread=point_1,
                    side1_odds=price_1,
                    side1_bookmaker=book_1,
                    side2_team=team_2,
                    side2_spread=point_2,
                    side2_odds=price_2,
                    side2_bookmaker=book_2,
                    profit_percentage=profit,
                    side1_stake_percentage=stake_1,
                    side2_stake_percentage=stake_2,
                ))

    found.sort(key=lambda a: a.profit_percentage, reverse=True)

    seen = set()
    unique: List[SpreadArbitrage] = []
    for arb in found:
        key = (arb.home_team, arb.away_team, arb.side1_bookmaker,
               arb.side2_bookmaker, arb.profit_percentage)
        if key in seen:
            continue
        seen.add(key)
        unique.append(arb)

    if unique:
        logger.info("Spread arbitrage: %d opportunities (best %.2f%%)",
                    len(unique), unique[0].profit_percentage)
    return unique
