"""Fundamental odds mathematics: the single source of truth.

Every function here is **pure**: no I/O, no logging, no side effects.
Import from this module; never reimplement locally in services.

The three pillars exposed are:

1. **Odds conversion**: American odds ↔ implied probability.
2. **Payout**: profit per unit staked at a given American price.
3. **Expected value**: per-unit EV of a bet under a model probability.

Design decisions
----------------
* All functions accept ``int`` American odds because The Odds API returns
  American prices when ``oddsFormat=american`` is requested.  Decimal or
  fractional odds must be converted by the caller before passing in.
* Implied probabilities here are **vig-inclusive**.  The two sides of a
  market sum to more than 1.0; a sum *below* 1.0 across books is exactly
  the arbitrage condition used by :mod:`cfb_edge.services.arbitrage`.
* :func:`probability_to_american_odds` **rounds** to the nearest integer
  rather than truncating.  The inverse is therefore only accurate to ±1
  against :func:`odds_to_probability`.

Run tests with::

    pytest tests/test_odds_math.py -v
"""

from __future__ import annotations

from typing import Final

# ---------------------------------------------------------------------------
# Module-level constants
# ---------------------------------------------------------------------------

#: American odds are quoted per 100 units of stake (underdogs) or per 100
#: units of profit (favourites).
_ODDS_BASE: Final[float] = 100.0

#: Probability at or above which a fair price is quoted as a favourite
#: (negative American odds).  Even money is quoted as -100.
_FAVOURITE_THRESHOLD: Final[float] = 0.5


# ---------------------------------------------------------------------------
# Odds conversion
# ---------------------------------------------------------------------------


def _validate_price(price: int | float) -> None:
    if price == 0:
        raise ValueError(
            f"Invalid American odds {price!r}: a price of 0 has no implied "
            "probability. Check upstream odds parsing for data errors."
        )


def odds_to_probability(price: int | float) -> float:
    """Raw implied probability from American odds (vig-inclusive).

    Args:
        price: American odds.  Sign convention: negative = favourite (risk
            more than you win), positive = underdog (win more than you risk).

    Returns:
        Implied probability in ``(0, 1)``.

    Raises:
        ValueError: If ``price == 0``.

    Examples::

        odds_to_probability(+100) → 0.5000
        odds_to_probability(+150) → 0.4000
        odds_to_probability(-150) → 0.6000
        odds_to_probability(-110) → 0.5238
    """
    _validate_price(price)
    if price > 0:
        return _ODDS_BASE / (price + _ODDS_BASE)
    magnitude = abs(price)
    return magnitude / (magnitude + _ODDS_BASE)


def probability_to_american_odds(prob: float) -> int:
    """Convert a win probability to the nearest fair American price.

    Inverse of :func:`odds_to_probability`.  Rounds to the nearest integer;
    use the result for display and comparison, not for further arithmetic.

    Args:
        prob: Win probability, strictly inside ``(0, 1)``.

    Returns:
        American odds integer.  ``prob ≥ 0.5`` is returned as a favourite
        (negative), so even money maps to ``-100``.

    Raises:
        ValueError: If ``prob`` is not in ``(0, 1)``.

    Examples::

        probability_to_american_odds(0.500) → -100
        probability_to_american_odds(0.625) → -167
        probability_to_american_odds(0.375) → +167
    """
    if not (0.0 < prob < 1.0):
        raise ValueError(
            f"prob must be in (0, 1), got {prob!r}. "
            "Certain outcomes have no finite American price."
        )
    if prob >= _FAVOURITE_THRESHOLD:
        return -round(prob / (1.0 - prob) * _ODDS_BASE)
    return round((1.0 - prob) / prob * _ODDS_BASE)


# ---------------------------------------------------------------------------
# Payout and expected value
# ---------------------------------------------------------------------------


def payout_per_unit(price: int | float) -> float:
    """Profit per unit staked when a bet at ``price`` wins.

    The stake itself is not included (this is decimal odds minus one).

    Examples::

        payout_per_unit(+150) → 1.5000
        payout_per_unit(-150) → 0.6667
        payout_per_unit(+100) → 1.0000
    """
    _validate_price(price)
    if price > 0:
        return price / _ODDS_BASE
    return _ODDS_BASE / abs(price)


def expected_value(model_prob: float, price: int | float) -> float:
    """Per-unit expected value of a bet under the model's win probability.

    ::

        EV = p · payout − (1 − p) · 1

    A positive result means the model probability exceeds the breakeven
    probability implied by ``price``; the sign of EV always agrees with
    the sign of ``model_prob − odds_to_probability(price)``.

    Args:
        model_prob: Model probability that the bet wins, in ``[0, 1]``.
        price: American odds of the bet.

    Returns:
        Expected profit per unit staked (``0.05`` = +5% EV).

    Examples::

        expected_value(0.60, +150) →  0.50
        expected_value(0.40, -150) → -0.3333
        expected_value(0.50, +100) →  0.00
    """
    win_amount = payout_per_unit(price)
    return model_prob * win_amount - (1.0 - model_prob)
