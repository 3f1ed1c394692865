"""Core mathematics and configuration for the CFB Edge framework.

This package contains pure, sport-agnostic building blocks:

- ``odds_math``    : American odds ↔ implied probability, payout, EV
- ``spread_prob``  : error-function CDF and point-spread cover probability
- ``sport_config`` : per-sport constants (spread SD, arbitrage pairing tolerance)

Nothing in this package imports from ``cfb_edge.services`` or ``cfb_edge.schemas``.
All modules are side-effect-free at import time and unit-testable in isolation.
"""
