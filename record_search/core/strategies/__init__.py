"""Retrieval strategies run by the search engine."""

from .base import SearchContext, SearchStrategy, StrategyHit, StrategyResult
from .fuzzy import FuzzySearchStrategy
from .location import LocationSearchStrategy
from .patterns import RegexSearchStrategy, WildcardSearchStrategy
from .registry import StrategyRegistry, build_default_registry
from .semantic import SemanticSearchStrategy

__all__ = [
    "SearchContext",
    "SearchStrategy",
    "StrategyHit",
    "StrategyResult",
    "FuzzySearchStrategy",
    "SemanticSearchStrategy",
    "LocationSearchStrategy",
    "WildcardSearchStrategy",
    "RegexSearchStrategy",
    "StrategyRegistry",
    "build_default_registry",
]
