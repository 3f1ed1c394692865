"""
Positive-EV scanner for moneyline and spread markets.

For every game that has not yet kicked off and has a matched prediction,
each bookmaker quote is priced against the model:

    moneyline:  model_prob = win probability of the quoted team
    spread:     model_prob = P(cover) with the model margin oriented to
                the quoted team (see ``matcher.oriented_spread``)

    implied_prob = odds_to_probability(price)
    EV           = expected_value(model_prob, price)
    edge         = model_prob - implied_prob

Only quotes with EV > 0 are kept.  The result is sorted by EV descending;
Python's sort is stable, so equal-EV bets keep their input order.

Games that have already started are excluded: the model inputs are
pre-game numbers and say nothing about an in-progress score.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional, Sequence, Tuple, Union

from cfb_edge.core.odds_math import expected_value, odds_to_probability
from cfb_edge.core.spread_prob import DEFAULT_SPREAD_SD, calculate_spread_cover_probability
from cfb_edge.schemas import (
    BettingOdds,
    EvBetRecommendation,
    Game,
    GamePrediction,
    SpreadEvBetRecommendation,
)
from cfb_edge.services.matcher import (
    GamesWithOdds,
    MatchStats,
    PredictionIndex,
    match_games,
    oriented_spread,
)
from cfb_edge.services.team_mapping import team_key

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EvScan:
    """Ranked positive-EV bets plus the join diagnostics for the pass."""

    bets: List[Union[EvBetRecommendation, SpreadEvBetRecommendation]] = field(default_factory=list)
    stats: MatchStats = field(default_factory=MatchStats)
    started_games: int = 0


def _upcoming(
    games_with_odds: GamesWithOdds, now: Optional[datetime]
) -> Tuple[List[Tuple[Game, Sequence[BettingOdds]]], int]:
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    upcoming = [(g, odds) for g, odds in games_with_odds if g.commence_time > now]
    return upcoming, len(games_with_odds) - len(upcoming)


def _rank(bets: list, top_n: Optional[int]) -> list:
    if top_n is not None and top_n < 0:
        raise ValueError(f"top_n must be non-negative, got {top_n!r}")
    positive = [b for b in bets if b.expected_value > 0.0]
    positive.sort(key=lambda b: b.expected_value, reverse=True)
    if top_n is not None:
        return positive[:top_n]
    return positive


# ---------------------------------------------------------------------------
# Moneyline
# ---------------------------------------------------------------------------

def scan_moneyline_ev(
    games_with_odds: GamesWithOdds,
    predictions: Sequence[GamePrediction],
    top_n: Optional[int] = None,
    now: Optional[datetime] = None,
    index: Optional[PredictionIndex] = None,
) -> EvScan:
    upcoming, started = _upcoming(games_with_odds, now)
    matched, stats = match_games(upcoming, predictions, index=index)

    candidates: List[EvBetRecommendation] = []
    for m in matched:
        win_probs = PredictionIndex.win_probabilities(m.prediction)
        for book in m.odds:
            for quote in book.moneyline:
                model_prob = win_probs.get(team_key(quote.team))
                if model_prob is None:
                    logger.debug(
                        "Moneyline quote for %s (%s) matches neither side of %s vs %s",
                        quote.team, book.bookmaker, m.game.home_team, m.game.away_team,
                    )
                    continue

                implied = odds_to_probability(quote.price)
                candidates.append(EvBetRecommendation(
                    home_team=m.game.home_team,
                    away_team=m.game.away_team,
                    team=quote.team,
                    bookmaker=book.bookmaker,
                    odds=quote.price,
                    model_prob=model_prob,
                    implied_prob=implied,
                    expected_value=expected_value(model_prob, quote.price),
                    edge=model_prob - implied,
                ))

    bets = _rank(candidates, top_n)
    logger.info(
        "Moneyline EV: %d/%d quotes positive across %d matched games (%d unmatched, %d started)",
        len(bets), len(candidates), stats.matched_games, stats.unmatched_games, started,
    )
    return EvScan(bets=bets, stats=stats, started_games=started)


def find_top_ev_bets(
    games_with_odds: GamesWithOdds,
    predictions: Sequence[GamePrediction],
    top_n: Optional[int] = None,
    now: Optional[datetime] = None,
) -> List[EvBetRecommendation]:
    """Positive-EV moneyline bets, best first (top ``top_n`` if given)."""
    return scan_moneyline_ev(games_with_odds, predictions, top_n=top_n, now=now).bets


# ---------------------------------------------------------------------------
# Spread
# ---------------------------------------------------------------------------

def scan_spread_ev(
    games_with_odds: GamesWithOdds,
    predictions: Sequence[GamePrediction],
    top_n: Optional[int] = None,
    now: Optional[datetime] = None,
    std_dev: float = DEFAULT_SPREAD_SD,
    index: Optional[PredictionIndex] = None,
) -> EvScan:
    """
    Price every spread quote with the normal margin model.

    ``std_dev`` is the margin SD in points (see ``SportConfig.spread_sd``).
    The recommendation's ``model_spread`` is the margin from the bet team's
    side, i.e. the value actually fed into the cover probability.
    """
    upcoming, started = _upcoming(games_with_odds, now)
    matched, stats = match_games(upcoming, predictions, index=index)

    candidates: List[SpreadEvBetRecommendation] = []
    for m in matched:
        for book in m.odds:
            for quote in book.spreads:
                margin = oriented_spread(m.prediction, quote.team)
                if margin is None:
                    logger.debug(
                        "Spread quote for %s (%s) matches neither side of %s vs %s",
                        quote.team, book.bookmaker, m.game.home_team, m.game.away_team,
                    )
                    continue

                cover = calculate_spread_cover_probability(margin, quote.point, std_dev)
                implied = odds_to_probability(quote.price)
                candidates.append(SpreadEvBetRecommendation(
                    home_team=m.game.home_team,
                    away_team=m.game.away_team,
                    team=quote.team,
                    spread_line=quote.point,
                    bookmaker=book.bookmaker,
                    odds=quote.price,
                    model_spread=margin,
                    model_prob=cover,
                    implied_prob=implied,
                    expected_value=expected_value(cover, quote.price),
                    edge=cover - implied,
                ))

    bets = _rank(candidates, top_n)
    logger.info(
        "Spread EV (sd=%.1f): %d/%d quotes positive across %d matched games (%d unmatched, %d started)",
        std_dev, len(bets), len(candidates), stats.matched_games, stats.unmatched_games, started,
    )
    return EvScan(bets=bets, stats=stats, started_games=started)


def find_top_spread_ev_bets(
    games_with_odds: GamesWithOdds,
    predictions: Sequence[GamePrediction],
    top_n: Optional[int] = None,
    now: Optional[datetime] = None,
    std_dev: float = DEFAULT_SPREAD_SD,
) -> List[SpreadEvBetRecommendation]:
    """Positive-EV spread bets, best first (top ``top_n`` if given)."""
    return scan_spread_ev(
        games_with_odds, predictions, top_n=top_n, now=now, std_dev=std_dev,
    ).bets
