"""Fuzzy strategy: token edit-distance plus phonetic matching on names."""

from typing import Optional

from ...models.request import SearchMethod
from ...models.response import MatchedField
from ..fields import FieldKind
from ..fuzzy_matcher import FuzzyMatcher
from .base import SearchContext, SearchStrategy, StrategyResult


class FuzzySearchStrategy(SearchStrategy):
    """Typo-tolerant matching of query tokens against field tokens."""

    method = SearchMethod.FUZZY
    default_weight = 100.0

    def __init__(self, matcher: Optional[FuzzyMatcher] = None, weight: Optional[float] = None) -> None:
        super().__init__(weight)
        self.matcher = matcher or FuzzyMatcher()

    def search(self, context: SearchContext) -> StrategyResult:
        query = context.query
        if query.is_empty:
            return self._empty()

        threshold = context.options.fuzzy_threshold
        result = self._empty()

        for index, fields in enumerate(context.fields):
            max_score = 0.0
            matched_fields = []

            for field in fields:
                field_score = self.matcher.score_field(
                    query.normalized,
                    query.tokens,
                    field.value,
                    is_name=field.kind == FieldKind.NAME,
                    threshold=threshold,
                )
                if field_score > 0:
                    max_score = max(max_score, field_score)
                    matched_fields.append(
                        MatchedField(field=field.name, score=field_score, value=field.value)
                    )

            if max_score > 0:
                result.hits.append(self._hit(index, max_score, matched_fields))

        return result
