"""
One-call analysis of a slate: EV and arbitrage in a single report.

The EV passes share one prediction index; the arbitrage passes need no
predictions at all and run over every game, started or not, since an
arbitrage is a property of the quotes alone.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Sequence

from cfb_edge.core.sport_config import SportConfig
from cfb_edge.schemas import (
    EvBetRecommendation,
    GamePrediction,
    MoneylineArbitrage,
    SpreadArbitrage,
    SpreadEvBetRecommendation,
)
from cfb_edge.services.arbitrage import find_moneyline_arbitrage, find_spread_arbitrage
from cfb_edge.services.ev_finder import scan_moneyline_ev, scan_spread_ev
from cfb_edge.services.matcher import GamesWithOdds, MatchStats, PredictionIndex

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SlateReport:
    moneyline_ev: List[EvBetRecommendation] = field(default_factory=list)
    spread_ev: List[SpreadEvBetRecommendation] = field(default_factory=list)
    moneyline_arbitrage: List[MoneylineArbitrage] = field(default_factory=list)
    spread_arbitrage: List[SpreadArbitrage] = field(default_factory=list)
    moneyline_stats: MatchStats = field(default_factory=MatchStats)
    spread_stats: MatchStats = field(default_factory=MatchStats)


def analyze_slate(
    games_with_odds: GamesWithOdds,
    predictions: Sequence[GamePrediction],
    config: Optional[SportConfig] = None,
    now: Optional[datetime] = None,
    top_n: Optional[int] = None,
) -> SlateReport:
    """Run all four detectors with ``config`` (default: NCAA football)."""
    cfg = config or SportConfig.ncaa_football()
    index = PredictionIndex.build(predictions)

    ml_scan = scan_moneyline_ev(games_with_odds, predictions, top_n=top_n, now=now, index=index)
    spread_scan = scan_spread_ev(
        games_with_odds, predictions,
        top_n=top_n, now=now, std_dev=cfg.spread_sd, index=index,
    )

    report = SlateReport(
        moneyline_ev=ml_scan.bets,
        spread_ev=spread_scan.bets,
        moneyline_arbitrage=find_moneyline_arbitrage(games_with_odds),
        spread_arbitrage=find_spread_arbitrage(games_with_odds, tolerance=cfg.spread_pair_tolerance),
        moneyline_stats=ml_scan.stats,
        spread_stats=spread_scan.stats,
    )

    logger.info(
        "%s slate: %d games, %d ML EV, %d spread EV, %d ML arbs, %d spread arbs, match rate %.0f%%",
        cfg.sport_name, len(games_with_odds),
        len(report.moneyline_ev), len(report.spread_ev),
        len(report.moneyline_arbitrage), len(report.spread_arbitrage),
        ml_scan.stats.match_rate * 100,
    )
    return report
