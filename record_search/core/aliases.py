"""Known alternate names for places, used by alias-aware location matching."""

from typing import Dict, FrozenSet, List

LOCATION_ALIASES: Dict[str, List[str]] = {
    "delhi": ["new delhi", "dilli", "ncr"],
    "mumbai": ["bombay"],
    "kolkata": ["calcutta"],
    "chennai": ["madras"],
    "bangalore": ["bengaluru", "bangaluru"],
    "hyderabad": ["secunderabad"],
    "pune": ["puna"],
    "ahmedabad": ["ahmedbad"],
    "kanpur": ["cawnpore"],
    "visakhapatnam": ["vizag"],
    "vadodara": ["baroda"],
    "gurgaon": ["gurugram"],
    "thiruvananthapuram": ["trivandrum"],
    "kochi": ["cochin"],
    "mysore": ["mysuru"],
    "puducherry": ["pondicherry"],
}


def _build_groups(aliases: Dict[str, List[str]]) -> Dict[str, FrozenSet[str]]:
    groups: Dict[str, FrozenSet[str]] = {}
    for canonical, variants in aliases.items():
        group = frozenset([canonical, *variants])
        for name in group:
            groups[name] = groups.get(name, frozenset()) | group
    return groups


_ALIAS_GROUPS = _build_groups(LOCATION_ALIASES)


def expand_location(token: str) -> FrozenSet[str]:
    """Return the token together with every known alias of the same place."""
    token = token.lower()
    return _ALIAS_GROUPS.get(token, frozenset()) | {token}
