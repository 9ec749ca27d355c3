"""
Base Search Strategy Interface

Defines the interface shared by every retrieval strategy. A strategy reads an
immutable SearchContext and returns a StrategyResult; it never mutates the
context, so strategies can run concurrently within one call.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from ...models.request import SearchMethod, SearchOptions
from ...models.response import MatchedField
from ..fields import SearchableField
from ..normalizer import Query


@dataclass(frozen=True)
class SearchContext:
    """Read-only inputs shared by all strategies during one call."""

    query: Query
    records: Sequence[Any]
    fields: Sequence[Sequence[SearchableField]]
    options: SearchOptions


@dataclass
class StrategyHit:
    """
    One record matched by one strategy.

    Attributes:
        record_index: Position of the record in the call's collection
        raw_score: Strategy score before weighting
        method: Strategy that produced the hit
        weight: Cross-strategy scale applied to raw_score
        matched_fields: Fields that contributed to the score
        details: Strategy-specific extras (similarity, location bonus, ...)
    """

    record_index: int
    raw_score: float
    method: SearchMethod
    weight: float
    matched_fields: List[MatchedField] = field(default_factory=list)
    details: Dict[str, Any] = field(default_factory=dict)

    @property
    def score(self) -> float:
        return self.raw_score * self.weight


@dataclass
class StrategyResult:
    """Hits from one strategy run, plus an error message when it degraded."""

    method: SearchMethod
    hits: List[StrategyHit] = field(default_factory=list)
    error: Optional[str] = None


class SearchStrategy(ABC):
    """Abstract base class for all search strategies."""

    method: SearchMethod
    default_weight: float = 1.0

    def __init__(self, weight: Optional[float] = None) -> None:
        """
        Initialize strategy.

        Args:
            weight: Override for the strategy's cross-strategy weight
        """
        self.weight = self.default_weight if weight is None else weight

    @abstractmethod
    def search(self, context: SearchContext) -> StrategyResult:
        """
        Execute search using this strategy.

        Args:
            context: Query, records, extracted fields and options for the call

        Returns:
            StrategyResult with one hit per matching record, in record order
        """

    def get_name(self) -> str:
        return self.method.value

    def get_weight(self) -> float:
        return self.weight

    def _hit(
        self,
        record_index: int,
        raw_score: float,
        matched_fields: List[MatchedField],
        **details: Any,
    ) -> StrategyHit:
        return StrategyHit(
            record_index=record_index,
            raw_score=raw_score,
            method=self.method,
            weight=self.weight,
            matched_fields=matched_fields,
            details=details,
        )

    def _empty(self, error: Optional[str] = None) -> StrategyResult:
        return StrategyResult(method=self.method, error=error)
