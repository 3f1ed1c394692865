"""
Pydantic schemas for the CFB Edge computation boundary.

Every record that crosses between the core and its collaborators (odds
fetcher, predictions scraper, results client, CSV writer, web renderer) is
one of these models.  All of them are frozen: derived values are computed
fresh from an immutable snapshot and never mutated afterwards.

Collaborators serialize with ``model_dump()`` / ``model_dump_json()`` and
rebuild with ``Model.model_validate(...)``.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

FROZEN = {"frozen": True}


def _validate_american_odds(v: int) -> int:
    if v == 0:
        raise ValueError("price cannot be 0")
    if -100 < v < 100:
        raise ValueError(
            f"price={v} is not valid American odds. "
            "Must be >= +100 or <= -100."
        )
    return v


def _as_utc(v: datetime) -> datetime:
    # Naive timestamps from cache files are UTC by convention.
    if v.tzinfo is None:
        return v.replace(tzinfo=timezone.utc)
    return v


# ---------------------------------------------------------------------------
# Market inputs
# ---------------------------------------------------------------------------

class Game(BaseModel):
    """One scheduled contest as listed by the odds provider."""

    id: str
    home_team: str
    away_team: str
    commence_time: datetime
    sport_title: str = ""

    model_config = FROZEN

    @field_validator("commence_time")
    @classmethod
    def validate_commence_time(cls, v: datetime) -> datetime:
        return _as_utc(v)


class MoneylineOdds(BaseModel):
    """A single moneyline quote for one team."""

    team: str
    price: int = Field(..., description="American odds, e.g. -110 or +150")

    model_config = FROZEN

    @field_validator("price")
    @classmethod
    def validate_price(cls, v: int) -> int:
        return _validate_american_odds(v)


class SpreadOdds(BaseModel):
    """A single point-spread quote for one team (point from that team's side)."""

    team: str
    point: float = Field(..., description='Line for this team, e.g. -7.5 or +3')
    price: int

    model_config = FROZEN

    @field_validator("price")
    @classmethod
    def validate_price(cls, v: int) -> int:
        return _validate_american_odds(v)


class BettingOdds(BaseModel):
    """Everything one bookmaker quotes for one game."""

    game_id: Optional[str] = None
    bookmaker: str
    last_update: datetime
    moneyline: List[MoneylineOdds] = Field(default_factory=list)
    spreads: List[SpreadOdds] = Field(default_factory=list)

    model_config = FROZEN

    @field_validator("last_update")
    @classmethod
    def validate_last_update(cls, v: datetime) -> datetime:
        return _as_utc(v)


# ---------------------------------------------------------------------------
# Model predictions and results
# ---------------------------------------------------------------------------

class GamePrediction(BaseModel):
    """
    Model output for one matchup, in the model's own team naming.

    ``spread`` is the predicted home margin (positive = home favoured).
    ``away_win_prob`` defaults to ``1 - home_win_prob`` when omitted.
    """

    home_team: str
    away_team: str
    spread: float
    home_win_prob: float = Field(..., ge=0.0, le=1.0)
    away_win_prob: float = Field(..., ge=0.0, le=1.0)
    model_name: Optional[str] = None

    model_config = FROZEN

    @model_validator(mode="before")
    @classmethod
    def fill_away_win_prob(cls, data):
        if isinstance(data, dict) and data.get("away_win_prob") is None:
            home = data.get("home_win_prob")
            if isinstance(home, (int, float)):
                data = {**data, "away_win_prob": 1.0 - home}
        return data


class GameResult(BaseModel):
    """
    A scored (or still pending) game from the results provider.

    ``completed=None`` means the provider did not say; the result is then
    final once both scores are present.  An explicit ``completed=False``
    (a live score) is never final.
    """

    id: str
    home_team: str
    away_team: str
    home_points: Optional[int] = None
    away_points: Optional[int] = None
    completed: Optional[bool] = None

    model_config = FROZEN

    @property
    def is_final(self) -> bool:
        if self.completed is False:
            return False
        return self.home_points is not None and self.away_points is not None


# ---------------------------------------------------------------------------
# EV recommendations
# ---------------------------------------------------------------------------

class EvBetRecommendation(BaseModel):
    """A positive-EV moneyline wager."""

    home_team: str
    away_team: str
    team: str
    bookmaker: str
    odds: int
    model_prob: float
    implied_prob: float
    expected_value: float
    edge: float

    model_config = FROZEN


class SpreadEvBetRecommendation(BaseModel):
    """
    A positive-EV spread wager.

    ``model_spread`` is the model margin from the bet team's perspective and
    ``model_prob`` is the resulting cover probability.
    """

    home_team: str
    away_team: str
    team: str
    spread_line: float
    bookmaker: str
    odds: int
    model_spread: float
    model_prob: float
    implied_prob: float
    expected_value: float
    edge: float

    model_config = FROZEN


# ---------------------------------------------------------------------------
# Arbitrage
# ---------------------------------------------------------------------------

class MoneylineArbitrage(BaseModel):
    """Best home and away moneylines whose implied probabilities sum below 1."""

    home_team: str
    away_team: str
    home_bookmaker: str
    away_bookmaker: str
    home_odds: int
    away_odds: int
    profit_percentage: float
    home_stake_percentage: float
    away_stake_percentage: float

    model_config = FROZEN


class SpreadArbitrage(BaseModel):
    """Two opposing spread quotes whose implied probabilities sum below 1."""

    home_team: str
    away_team: str
    side1_team: str
    side1_spread: float
    side1_odds: int
    side1_bookmaker: str
    side2_team: str
    side2_spread: float
    side2_odds: int
    side2_bookmaker: str
    profit_percentage: float
    side1_stake_percentage: float
    side2_stake_percentage: float

    model_config = FROZEN


# ---------------------------------------------------------------------------
# Settlement
# ---------------------------------------------------------------------------

BetOutcome = Literal["win", "loss", "push"]


class BetResult(BaseModel):
    """A moneyline recommendation paired with its settled result (if any)."""

    bet: EvBetRecommendation
    game_result: Optional[GameResult] = None
    bet_won: Optional[bool] = None
    actual_payout: Optional[float] = None
    outcome: Optional[BetOutcome] = None

    model_config = FROZEN


class SpreadBetResult(BaseModel):
    """A spread recommendation paired with its settled result (if any)."""

    bet: SpreadEvBetRecommendation
    game_result: Optional[GameResult] = None
    bet_won: Optional[bool] = None
    actual_payout: Optional[float] = None
    outcome: Optional[BetOutcome] = None

    model_config = FROZEN
