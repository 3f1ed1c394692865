"""Point-spread cover probability under a normal margin model.

All functions here are **pure**: no I/O, no logging, no side effects.

Model
-----
The final margin (home − away) is treated as ``Normal(μ, σ)`` where ``μ`` is
the model's predicted margin and ``σ`` is a per-sport constant
(:data:`DEFAULT_SPREAD_SD`, 12.0 points for FBS football).  A bet on a team
at line ``L`` covers when the team's margin exceeds the threshold implied
by the line::

    threshold = |L|   if L < 0   (favourite must win by more than |L|)
              = -L    otherwise  (underdog must not lose by more than L)

    P(cover) = 1 − Φ((threshold − μ) / σ)

``μ`` must already be oriented to the bet team: callers negate the
home-perspective model spread when pricing the away side.

Normal CDF
----------
``Φ`` is computed as ``0.5 · (1 + erf(z / √2))`` with ``erf`` from
Abramowitz & Stegun (1964), formula 7.1.26.  Maximum absolute error of the
polynomial is 1.5e-7.  The coefficients below are fixed so that outputs are
reproducible across implementations; do not swap in ``math.erf``.

Run tests with::

    pytest tests/test_spread_prob.py -v
"""

from __future__ import annotations

import math
from typing import Final

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

#: Margin standard deviation for FBS college football.  Uncalibrated
#: placeholder in the 10–14 point range commonly quoted for CFB; override
#: through :class:`~cfb_edge.core.sport_config.SportConfig`.
DEFAULT_SPREAD_SD: Final[float] = 12.0

#: Abramowitz & Stegun 7.1.26 coefficients.
_AS_P: Final[float] = 0.3275911
_AS_A1: Final[float] = 0.254829592
_AS_A2: Final[float] = -0.284496736
_AS_A3: Final[float] = 1.421413741
_AS_A4: Final[float] = -1.453152027
_AS_A5: Final[float] = 1.061405429


# ---------------------------------------------------------------------------
# Error function and normal CDF
# ---------------------------------------------------------------------------


def erf(x: float) -> float:
    """Rational approximation of the error function (A&S 7.1.26).

    Odd-symmetric: ``erf(-x) == -erf(x)``.  Absolute error ≤ 1.5e-7.
    """
    sign = -1.0 if x < 0.0 else 1.0
    x = abs(x)

    t = 1.0 / (1.0 + _AS_P * x)
    poly = ((((_AS_A5 * t + _AS_A4) * t + _AS_A3) * t + _AS_A2) * t + _AS_A1) * t
    y = 1.0 - poly * math.exp(-x * x)

    return sign * y


def normal_cdf(z: float) -> float:
    """Standard normal CDF ``Φ(z)`` via :func:`erf`."""
    return 0.5 * (1.0 + erf(z / math.sqrt(2.0)))


# ---------------------------------------------------------------------------
# Spread cover probability
# ---------------------------------------------------------------------------


def calculate_spread_cover_probability(
    model_spread: float,
    bet_spread: float,
    std_dev: float = DEFAULT_SPREAD_SD,
) -> float:
    """Probability that a team covers ``bet_spread``.

    Args:
        model_spread: Predicted margin from the bet team's perspective
            (positive = bet team expected to win by that many points).
        bet_spread: Posted line for the bet team (``-7.5`` = favoured by
            7.5, ``+3`` = getting 3 points).
        std_dev: Standard deviation of the actual margin around
            ``model_spread``.  Must be positive.

    Returns:
        Cover probability in ``[0, 1]``.  Exactly 0.5 (to within the erf
        error) when ``bet_spread == -model_spread``.

    Raises:
        ValueError: If ``std_dev <= 0``.

    Examples::

        calculate_spread_cover_probability(10.0, -7.0) → 0.599  (model likes fav)
        calculate_spread_cover_probability( 3.0, -7.0) → 0.369
        calculate_spread_cover_probability(-5.0,  5.0) → 0.500
    """
    if std_dev <= 0.0:
        raise ValueError(f"std_dev must be positive, got {std_dev!r}.")

    if bet_spread < 0.0:
        threshold = abs(bet_spread)
    else:
        threshold = -bet_spread

    z = (threshold - model_spread) / std_dev
    return 1.0 - normal_cdf(z)
