"""
Team-name → TeamKey normalization.

The odds provider ("Iowa State Cyclones"), the predictions site ("Iowa St.")
and the results provider ("Iowa State") each spell schools differently.
Every join between those sources goes through :func:`team_key`, which maps a
display name onto a canonical school key ("iowa_st").

Resolution order:

1. ``EXACT_ALIASES``: whole normalized name → key.
2. ``PREFIX_ALIASES``: normalized school prefix (followed by ``_`` or end
   of string) → key.  Longest prefix wins.
3. Multi-token fallback rule (``_fallback_key``).

Both alias tables are plain dicts so they can be audited and extended
without touching control flow.  Fuzzy matching is used **only** to suggest
candidates for unmatched games in diagnostics; it never decides a join.
"""

from __future__ import annotations

import logging
import unicodedata
from typing import Dict, Iterable, List

from rapidfuzz import fuzz, process

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Exact overrides, checked FIRST.  Keys are normalized names (see
# normalize_team_name).  Use this dict for short forms that would collide
# with a different school under prefix matching (e.g. "mississippi" must not
# swallow "mississippi_st_bulldogs").
# ---------------------------------------------------------------------------
EXACT_ALIASES: Dict[str, str] = {
    "kent": "kent_st",
    "mississippi": "ole_miss",
}

# ---------------------------------------------------------------------------
# Prefix aliases: normalized school prefix → canonical key.  A name matches
# when it equals the prefix or starts with "<prefix>_", so mascots are
# ignored ("connecticut_huskies" → "uconn").
# ---------------------------------------------------------------------------
PREFIX_ALIASES: Dict[str, str] = {
    # Structural mismatches between odds and predictions sources
    "central_florida": "ucf",
    "ucf": "ucf",
    "texas-san_antonio": "utsa",
    "ut_san_antonio": "utsa",
    "utsa": "utsa",
    "troy": "troy",
    "connecticut": "uconn",
    "uconn": "uconn",
    "southern_miss": "southern_mississippi",
    "southern_mississippi": "southern_mississippi",
    "ole_miss": "ole_miss",

    # Initialisms vs full names
    "nc_st": "north_carolina_st",
    "lsu": "louisiana_st",
    "louisiana_st": "louisiana_st",
    "byu": "byu",
    "brigham_young": "byu",
    "tcu": "tcu",
    "texas_christian": "tcu",
    "smu": "smu",
    "southern_methodist": "smu",
    "usc": "usc",
    "southern_california": "usc",
    "usf": "south_florida",
    "south_florida": "south_florida",
    "unlv": "unlv",
    "nevada-las_vegas": "unlv",
    "uab": "uab",
    "alabama-birmingham": "uab",
    "utep": "utep",
    "texas-el_paso": "utep",
    "fiu": "fiu",
    "florida_intl": "fiu",
    "florida_international": "fiu",
    "fau": "florida_atlantic",
    "florida_atlantic": "florida_atlantic",
    "umass": "massachusetts",
    "massachusetts": "massachusetts",
    "app_st": "appalachian_st",
    "appalachian_st": "appalachian_st",
    "ul_monroe": "louisiana_monroe",
    "louisiana-monroe": "louisiana_monroe",
    "louisiana_monroe": "louisiana_monroe",
    "ul_lafayette": "louisiana",
    "louisiana-lafayette": "louisiana",
    "louisiana_ragin'": "louisiana",
    "miami_(oh)": "miami_oh",
    "miami_oh": "miami_oh",
    "miami-ohio": "miami_oh",
    "miami_ohio": "miami_oh",
    "miami_(ohio)": "miami_oh",
    "miami_(fl)": "miami",
    "miami_fl": "miami",
    "miami_florida": "miami",
    "miami_hurricanes": "miami",
    "miami_redhawks": "miami_oh",
    "sam_houston": "sam_houston_st",
    "hawaii": "hawaii",
    "hawai'i": "hawaii",

    # Directional names whose first token collides with another school
    "georgia_southern": "georgia_southern",
    "south_alabama": "south_alabama",
    "middle_tennessee": "middle_tennessee",
    "old_dominion": "old_dominion",
    "james_madison": "james_madison",
}

# Abbreviated second tokens expanded before the two-word rule.
_TOKEN_EXPANSIONS: Dict[str, str] = {
    "ill": "illinois",
    "mich": "michigan",
    "va": "virginia",
}

# Second tokens that mark a two-word school name ("wake_forest",
# "north_texas", "air_force", "texas_tech", ...).
TWO_WORD_MARKERS: frozenset = frozenset({
    "st", "dame", "forest", "texas", "force", "mexico", "kentucky",
    "virginia", "michigan", "illinois", "tech", "carolina", "mississippi",
    "monroe", "miss", "aandm",
})

# Prefixes sorted longest-first so "southern_mississippi" beats "southern_miss".
_SORTED_PREFIXES: List[str] = sorted(PREFIX_ALIASES, key=len, reverse=True)


def normalize_team_name(name: str) -> str:
    """
    Lowercase, strip accents and periods, then apply the token rewrites.

    'Ohio State'  → 'ohio_st'
    'Texas A&M'   → 'texas_aandm'
    'San José St.' → 'san_jose_st'
    """
    text = unicodedata.normalize("NFKD", name.strip())
    text = "".join(c for c in text if not unicodedata.combining(c))
    text = " ".join(text.lower().replace(".", "").split())
    return (
        text.replace("state", "st")
        .replace("&", "and")
        .replace(" ", "_")
    )


def _alias_key(normalized: str) -> str | None:
    if normalized in EXACT_ALIASES:
        return EXACT_ALIASES[normalized]
    for prefix in _SORTED_PREFIXES:
        if normalized == prefix or normalized.startswith(prefix + "_"):
            return PREFIX_ALIASES[prefix]
    return None


def _fallback_key(normalized: str) -> str:
    """Keep the school part of a '<school>_<mascot>' string."""
    parts = normalized.split("_")
    if len(parts) < 2:
        return normalized

    parts[1] = _TOKEN_EXPANSIONS.get(parts[1], parts[1])

    # "X State" where X may be several words: "san_diego_st_aztecs".
    for idx in range(1, len(parts)):
        if parts[idx] == "st":
            return "_".join(parts[: idx + 1])

    if parts[1] in TWO_WORD_MARKERS:
        return f"{parts[0]}_{parts[1]}"

    return parts[0]


def team_key(name: str) -> str:
    """
    Canonical join key for a team display name.

    'Iowa Hawkeyes'             → 'iowa'
    'Ohio State Buckeyes'       → 'ohio_st'
    'San Diego State Aztecs'    → 'san_diego_st'
    'UCF Knights'               → 'ucf'
    'Central Florida'           → 'ucf'
    """
    normalized = normalize_team_name(name)
    if not normalized:
        return ""

    aliased = _alias_key(normalized)
    if aliased is not None:
        logger.debug("Alias hit %r → %r", normalized, aliased)
        return aliased
    return _fallback_key(normalized)


def matchup_key(home_team: str, away_team: str) -> str:
    """Join key for a game: '<home_key>_<away_key>'."""
    return f"{team_key(home_team)}_{team_key(away_team)}"


def alias_table() -> Dict[str, str]:
    """Merged alias table (exact entries take precedence) for auditing."""
    merged = dict(PREFIX_ALIASES)
    merged.update(EXACT_ALIASES)
    return merged


def suggest_keys(key: str, candidates: Iterable[str], limit: int = 3,
                 score_cutoff: float = 60.0) -> List[str]:
    """
    Closest known keys to an unmatched key, best first.

    Diagnostic only: callers report these next to an unmatched game so a
    missing alias can be spotted and added.  Nothing is joined on them.
    """
    choices = sorted(set(candidates))
    if not key or not choices:
        return []
    results = process.extract(
        key, choices, scorer=fuzz.ratio, limit=limit, score_cutoff=score_cutoff,
    )
    return [match for match, _score, _idx in results]
