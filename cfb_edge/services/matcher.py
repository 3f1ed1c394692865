"""
Join games from the odds feed to model predictions.

Predictions are indexed by matchup key ("<home_key>_<away_key>") in both
orders so a source that lists the teams the other way round still joins.
A game with no prediction is skipped, never guessed: there is no fuzzy
fallback.  Misses are returned as first-class ``MatchStats`` instead of
being printed, so join failures can be asserted on in tests and surfaced
by the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from cfb_edge.schemas import BettingOdds, Game, GamePrediction
from cfb_edge.services.team_mapping import matchup_key, suggest_keys, team_key

logger = logging.getLogger(__name__)

GamesWithOdds = Sequence[Tuple[Game, Sequence[BettingOdds]]]


@dataclass(frozen=True)
class UnmatchedGame:
    """A game the prediction index could not join, with fuzzy hints."""

    game_id: str
    home_team: str
    away_team: str
    game_key: str
    suggestions: Tuple[str, ...] = ()


@dataclass(frozen=True)
class MatchStats:
    """Join diagnostics for one pass over a slate."""

    total_games: int = 0
    matched_games: int = 0
    unmatched: Tuple[UnmatchedGame, ...] = ()

    @property
    def unmatched_games(self) -> int:
        return len(self.unmatched)

    @property
    def match_rate(self) -> float:
        return round(self.matched_games / self.total_games, 4) if self.total_games > 0 else 0.0


@dataclass(frozen=True)
class MatchedGame:
    game: Game
    odds: Tuple[BettingOdds, ...]
    prediction: GamePrediction


class PredictionIndex:
    """Matchup-keyed lookup over a list of predictions."""

    def __init__(self, by_key: Optional[Dict[str, GamePrediction]] = None):
        self._by_key: Dict[str, GamePrediction] = dict(by_key or {})

    @classmethod
    def build(cls, predictions: Iterable[GamePrediction]) -> "PredictionIndex":
        by_key: Dict[str, GamePrediction] = {}
        for pred in predictions:
            home_key = team_key(pred.home_team)
            away_key = team_key(pred.away_team)

            if home_key == away_key:
                logger.warning(
                    "Prediction %s vs %s collapses to one team key %r; skipped",
                    pred.home_team, pred.away_team, home_key,
                )
                continue

            forward = f"{home_key}_{away_key}"
            if forward in by_key:
                logger.info("Duplicate prediction for %s ignored (first one kept)", forward)
                continue

            by_key[forward] = pred
            by_key.setdefault(f"{away_key}_{home_key}", pred)

        logger.debug("Prediction index built: %d keys", len(by_key))
        return cls(by_key)

    def __len__(self) -> int:
        return len(self._by_key)

    def keys(self) -> List[str]:
        return list(self._by_key)

    def lookup(self, game: Game) -> Optional[GamePrediction]:
        """Prediction for ``game`` by its own home/away key pair, or None."""
        return self._by_key.get(matchup_key(game.home_team, game.away_team))

    @staticmethod
    def win_probabilities(prediction: GamePrediction) -> Dict[str, float]:
        """{team_key: win probability} for both sides of a prediction."""
        return {
            team_key(prediction.home_team): prediction.home_win_prob,
            team_key(prediction.away_team): prediction.away_win_prob,
        }


def oriented_spread(prediction: GamePrediction, team: str) -> Optional[float]:
    """
    Model margin from ``team``'s perspective (positive = team favoured).

    The prediction's spread is home-perspective, so it is negated when
    ``team`` is the prediction's away side.  Orientation is decided against
    the prediction's own home team, not the odds feed's, so a source that
    swaps home/away still prices the right side.  Returns None when
    ``team`` is neither side.
    """
    key = team_key(team)
    if key == team_key(prediction.home_team):
        return prediction.spread
    if key == team_key(prediction.away_team):
        return -prediction.spread
    return None


def match_games(
    games_with_odds: GamesWithOdds,
    predictions: Sequence[GamePrediction] = (),
    index: Optional[PredictionIndex] = None,
) -> Tuple[List[MatchedGame], MatchStats]:
    """
    Pair each game with its prediction.

    Pass a prebuilt ``index`` to reuse it across moneyline and spread
    passes; otherwise one is built from ``predictions``.
    """
    if index is None:
        index = PredictionIndex.build(predictions)

    matched: List[MatchedGame] = []
    unmatched: List[UnmatchedGame] = []
    known_keys = index.keys()

    for game, odds_list in games_with_odds:
        pred = index.lookup(game)
        if pred is None:
            game_key = matchup_key(game.home_team, game.away_team)
            hints = tuple(suggest_keys(game_key, known_keys))
            logger.info(
                "No prediction found for %s vs %s (key %s, closest: %s)",
                game.home_team, game.away_team, game_key, ", ".join(hints) or "none",
            )
            unmatched.append(UnmatchedGame(
                game_id=game.id,
                home_team=game.home_team,
                away_team=game.away_team,
                game_key=game_key,
                suggestions=hints,
            ))
            continue

        matched.append(MatchedGame(game=game, odds=tuple(odds_list), prediction=pred))

    stats = MatchStats(
        total_games=len(matched) + len(unmatched),
        matched_games=len(matched),
        unmatched=tuple(unmatched),
    )
    return matched, stats
