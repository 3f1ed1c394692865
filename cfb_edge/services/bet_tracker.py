"""
Settle EV recommendations against final scores.

Results are joined to bets by matchup key (both orders), the same join the
EV finder uses for predictions.  Every bet is settled flat at one unit:

    win   → actual_payout = payout_per_unit(odds)
    loss  → actual_payout = 0.0
    push  → actual_payout = 0.0   (stake returned, no profit)

A bet whose game is missing from the results, or whose game has no final
score yet, stays pending: ``bet_won`` and ``actual_payout`` are None.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple, Union

from cfb_edge.core.odds_math import payout_per_unit
from cfb_edge.schemas import (
    BetOutcome,
    BetResult,
    EvBetRecommendation,
    GameResult,
    SpreadBetResult,
    SpreadEvBetRecommendation,
)
from cfb_edge.services.team_mapping import matchup_key, team_key

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Outcome calculation (pure functions)
# ---------------------------------------------------------------------------

def _team_margin(team: str, result: GameResult) -> Optional[int]:
    """Final margin from ``team``'s side, or None if it played neither side."""
    key = team_key(team)
    margin = result.home_points - result.away_points
    if key == team_key(result.home_team):
        return margin
    if key == team_key(result.away_team):
        return -margin
    return None


def moneyline_outcome(team: str, result: GameResult) -> Optional[BetOutcome]:
    """
    Picked team must win outright; a tie is a push.

    Returns None if the result is not final or ``team`` is not in it.
    """
    if not result.is_final:
        return None
    margin = _team_margin(team, result)
    if margin is None:
        return None
    if margin == 0:
        return "push"
    return "win" if margin > 0 else "loss"


def spread_outcome(team: str, spread_line: float, result: GameResult) -> Optional[BetOutcome]:
    """
    Cover condition (spread bet):
        team_actual_margin + spread_line > 0  →  covers
        = 0                                   →  push
        < 0                                   →  loses
    """
    if not result.is_final:
        return None
    margin = _team_margin(team, result)
    if margin is None:
        return None

    cover_margin = margin + spread_line
    if abs(cover_margin) < 0.01:
        return "push"
    return "win" if cover_margin > 0 else "loss"


def _settle(outcome: Optional[BetOutcome], odds: int) -> Tuple[Optional[bool], Optional[float]]:
    if outcome is None:
        return None, None
    if outcome == "win":
        return True, payout_per_unit(odds)
    if outcome == "loss":
        return False, 0.0
    return None, 0.0


def _results_index(game_results: Sequence[GameResult]) -> Dict[str, GameResult]:
    index: Dict[str, GameResult] = {}
    for result in game_results:
        home_key = team_key(result.home_team)
        away_key = team_key(result.away_team)
        index.setdefault(f"{home_key}_{away_key}", result)
        index.setdefault(f"{away_key}_{home_key}", result)
    return index


# ---------------------------------------------------------------------------
# Public comparison API
# ---------------------------------------------------------------------------

def compare_ev_bets_to_results(
    bets: Sequence[EvBetRecommendation],
    game_results: Sequence[GameResult],
) -> List[BetResult]:
    index = _results_index(game_results)
    settled: List[BetResult] = []

    for bet in bets:
        result = index.get(matchup_key(bet.home_team, bet.away_team))
        outcome = moneyline_outcome(bet.team, result) if result is not None else None
        if result is None:
            logger.debug("No result for %s vs %s", bet.home_team, bet.away_team)

        bet_won, payout = _settle(outcome, bet.odds)
        settled.append(BetResult(
            bet=bet,
            game_result=result,
            bet_won=bet_won,
            actual_payout=payout,
            outcome=outcome,
        ))

    return settled


def compare_spread_ev_bets_to_results(
    bets: Sequence[SpreadEvBetRecommendation],
    game_results: Sequence[GameResult],
) -> List[SpreadBetResult]:
    index = _results_index(game_results)
    settled: List[SpreadBetResult] = []

    for bet in bets:
        result = index.get(matchup_key(bet.home_team, bet.away_team))
        outcome = (
            spread_outcome(bet.team, bet.spread_line, result)
            if result is not None else None
        )
        if result is None:
            logger.debug("No result for %s vs %s", bet.home_team, bet.away_team)

        bet_won, payout = _settle(outcome, bet.odds)
        settled.append(SpreadBetResult(
            bet=bet,
            game_result=result,
            bet_won=bet_won,
            actual_payout=payout,
            outcome=outcome,
        ))

    return settled


# ---------------------------------------------------------------------------
# Summary
# ---------------------------------------------------------------------------

def _safe_roi(profit: float, risked: float) -> float:
    return round(profit / risked, 4) if risked > 0 else 0.0


def _win_rate(wins: int, total: int) -> float:
    return round(wins / total, 4) if total > 0 else 0.0


@dataclass(frozen=True)
class SettlementSummary:
    """Flat one-unit record for a batch of settled bets."""

    wins: int = 0
    losses: int = 0
    pushes: int = 0
    pending: int = 0
    units_staked: float = 0.0
    profit_units: float = 0.0
    win_rate: float = 0.0
    roi: float = 0.0

    @property
    def settled(self) -> int:
        return self.wins + self.losses + self.pushes


def summarize_results(
    results: Sequence[Union[BetResult, SpreadBetResult]],
) -> SettlementSummary:
    """
    Aggregate win/loss/push counts and one-unit P&L.

    Win rate excludes pushes; ROI is profit over units staked (pushes
    count as staked and returned).
    """
    wins = losses = pushes = pending = 0
    profit = 0.0

    for r in results:
        if r.outcome == "win":
            wins += 1
            profit += r.actual_payout or 0.0
        elif r.outcome == "loss":
            losses += 1
            profit -= 1.0
        elif r.outcome == "push":
            pushes += 1
        else:
            pending += 1

    staked = float(wins + losses + pushes)
    summary = SettlementSummary(
        wins=wins,
        losses=losses,
        pushes=pushes,
        pending=pending,
        units_staked=staked,
        profit_units=round(profit, 4),
        win_rate=_win_rate(wins, wins + losses),
        roi=_safe_roi(profit, staked),
    )
    logger.info(
        "Settlement: %d-%d-%d (%d pending), %+.2f units, ROI %.1f%%",
        wins, losses, pushes, pending, summary.profit_units, summary.roi * 100,
    )
    return summary
