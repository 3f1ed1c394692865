"""Sport-level configuration: all tunable constants in one place.

This module is the **registry** for every constant that differs between
sports.  Nowhere else in the codebase should the margin standard deviation
or the spread-arbitrage pairing tolerance be hard-coded.

Architecture
------------
:class:`SportConfig` is a frozen dataclass carrying all per-sport constants.
Named constructors (:meth:`SportConfig.ncaa_football`,
:meth:`SportConfig.ncaa_basketball`) return pre-populated instances, and
:meth:`SportConfig.from_env` applies environment overrides on top of one of
them.

Both numeric constants are flagged for domain-expert calibration; neither
has a derivation beyond "typical published range".

Typical usage::

    from cfb_edge.core.sport_config import SportConfig

    cfg = SportConfig.ncaa_football()

    # Override a single constant for a sensitivity run:
    from dataclasses import replace
    wide_cfg = replace(cfg, spread_sd=14.0)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Final, Optional

from dotenv import load_dotenv

from cfb_edge.core.spread_prob import DEFAULT_SPREAD_SD

#: Sport identifier strings used in The Odds API and in logging.
SPORT_ID_NCAAF: Final[str] = "ncaaf"
SPORT_ID_NCAAB: Final[str] = "ncaab"

#: Absolute tolerance when pairing opposing spread quotes across books.
#: Absorbs the occasional half-point of cross-book line variance without
#: pairing genuinely different numbers (-7 vs +6.5 stays unpaired).
DEFAULT_SPREAD_PAIR_TOLERANCE: Final[float] = 0.1

#: Flat margin SD fallback for college basketball (D1 historical average).
NCAAB_SPREAD_SD: Final[float] = 11.0


@dataclass(frozen=True)
class SportConfig:
    """Immutable configuration bundle for a single sport.

    Attributes:
        sport_id: Short identifier (``"ncaaf"``, ``"ncaab"``).
        sport_name: Human-readable name for logging.
        spread_sd: Standard deviation (points) of the final margin around
            the model's predicted spread.  Used by the spread EV finder.
        spread_pair_tolerance: Maximum ``|point_a + point_b|`` for two spread
            quotes to count as opposite sides of the same line.
        odds_api_sport_key: The sport key passed to The Odds API by the
            fetch layer.  Carried here so collaborators read one registry.
    """

    sport_id: str
    sport_name: str
    spread_sd: float
    spread_pair_tolerance: float
    odds_api_sport_key: str

    def __post_init__(self) -> None:
        if self.spread_sd <= 0.0:
            raise ValueError(f"spread_sd must be positive, got {self.spread_sd!r}")
        if self.spread_pair_tolerance < 0.0:
            raise ValueError(
                f"spread_pair_tolerance must be non-negative, got {self.spread_pair_tolerance!r}"
            )

    # ------------------------------------------------------------------ #
    #  Named constructors                                                  #
    # ------------------------------------------------------------------ #

    @classmethod
    def ncaa_football(cls) -> SportConfig:
        """Return the FBS college football configuration."""
        return cls(
            sport_id=SPORT_ID_NCAAF,
            sport_name="NCAA Football",
            spread_sd=DEFAULT_SPREAD_SD,
            spread_pair_tolerance=DEFAULT_SPREAD_PAIR_TOLERANCE,
            odds_api_sport_key="americanfootball_ncaaf",
        )

    @classmethod
    def ncaa_basketball(cls) -> SportConfig:
        """Return the D1 college basketball configuration.

        Only the arbitrage detector is normally run for basketball (there is
        no spread model feed), so ``spread_sd`` is the flat D1 fallback.
        """
        return cls(
            sport_id=SPORT_ID_NCAAB,
            sport_name="NCAA D1 Basketball",
            spread_sd=NCAAB_SPREAD_SD,
            spread_pair_tolerance=DEFAULT_SPREAD_PAIR_TOLERANCE,
            odds_api_sport_key="basketball_ncaab",
        )

    @classmethod
    def from_env(cls, sport_id: Optional[str] = None) -> SportConfig:
        """Build a config from environment variables (and ``.env``).

        ``EV_SPORT`` selects the base constructor (default ``ncaaf``);
        ``SPREAD_SD`` and ``SPREAD_PAIR_TOLERANCE`` override its constants.

        Raises:
            ValueError: For an unknown sport id or a non-numeric override.
        """
        load_dotenv()

        sport_id = (sport_id or os.getenv("EV_SPORT", SPORT_ID_NCAAF)).strip().lower()
        if sport_id == SPORT_ID_NCAAF:
            base = cls.ncaa_football()
        elif sport_id == SPORT_ID_NCAAB:
            base = cls.ncaa_basketball()
        else:
            raise ValueError(
                f"Unknown sport id {sport_id!r}; expected "
                f"{SPORT_ID_NCAAF!r} or {SPORT_ID_NCAAB!r}."
            )

        return cls(
            sport_id=base.sport_id,
            sport_name=base.sport_name,
            spread_sd=float(os.getenv("SPREAD_SD", base.spread_sd)),
            spread_pair_tolerance=float(
                os.getenv("SPREAD_PAIR_TOLERANCE", base.spread_pair_tolerance)
            ),
            odds_api_sport_key=base.odds_api_sport_key,
        )

    def __repr__(self) -> str:
        return (
            f"SportConfig(sport_id={self.sport_id!r}, "
            f"spread_sd={self.spread_sd}, "
            f"pair_tol={self.spread_pair_tolerance})"
        )
