"""
Search Strategy Registry

Holds one instance of each strategy, keyed by method, and hands them out in
canonical order for a call.
"""

from typing import Dict, Iterable, List, Optional

import structlog

from ...models.request import ALL_METHODS, SearchMethod
from ..fuzzy_matcher import FuzzyMatcher
from .base import SearchStrategy
from .fuzzy import FuzzySearchStrategy
from .location import LocationSearchStrategy
from .patterns import DEFAULT_TIMEOUT_SECONDS, RegexSearchStrategy, WildcardSearchStrategy
from .semantic import SemanticSearchStrategy

logger = structlog.get_logger(__name__)


class StrategyRegistry:
    """Registry for search strategies."""

    def __init__(self) -> None:
        self._strategies: Dict[SearchMethod, SearchStrategy] = {}

    def register(self, strategy: SearchStrategy) -> None:
        """
        Register a search strategy under its method.

        Args:
            strategy: SearchStrategy instance
        """
        if strategy.method in self._strategies:
            logger.warning("Overwriting existing strategy", strategy=strategy.get_name())

        self._strategies[strategy.method] = strategy
        logger.debug("Registered strategy", strategy=strategy.get_name(), weight=strategy.get_weight())

    def get(self, method: SearchMethod) -> Optional[SearchStrategy]:
        return self._strategies.get(method)

    def select(self, methods: Iterable[SearchMethod]) -> List[SearchStrategy]:
        """Registered strategies for the requested methods, in canonical order."""
        wanted = set(methods)
        return [
            self._strategies[method]
            for method in ALL_METHODS
            if method in wanted and method in self._strategies
        ]

    def list_strategy_names(self) -> List[str]:
        return [method.value for method in ALL_METHODS if method in self._strategies]

    def get_strategy_info(self) -> Dict[str, Dict[str, object]]:
        """Weight and class name per registered strategy."""
        return {
            strategy.get_name(): {
                "weight": strategy.get_weight(),
                "class_name": strategy.__class__.__name__,
            }
            for strategy in self.select(ALL_METHODS)
        }


def build_default_registry(
    enable_phonetic: bool = True,
    regex_timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
) -> StrategyRegistry:
    """Registry with the five built-in strategies."""
    registry = StrategyRegistry()
    registry.register(FuzzySearchStrategy(FuzzyMatcher(enable_phonetic=enable_phonetic)))
    registry.register(SemanticSearchStrategy())
    registry.register(LocationSearchStrategy())
    registry.register(WildcardSearchStrategy(timeout_seconds=regex_timeout_seconds))
    registry.register(RegexSearchStrategy(timeout_seconds=regex_timeout_seconds))
    return registry
