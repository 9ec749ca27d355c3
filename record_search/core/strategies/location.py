"""Location-aware strategy: text matching plus a geographic proximity bonus."""

from typing import Any, Optional, Sequence

from ...models.request import GeoPoint, SearchMethod
from ...models.response import MatchedField
from ..aliases import expand_location
from ..fields import FieldKind, get_attribute
from ..normalizer import TextNormalizer
from ..similarity import haversine_km, proximity_bonus
from .base import SearchContext, SearchStrategy, StrategyResult


def record_coordinates(record: Any) -> Optional[tuple]:
    """(latitude, longitude) of a record, or None when missing or invalid."""
    lat = get_attribute(record, "latitude")
    lng = get_attribute(record, "longitude")
    if lat is None or lng is None:
        return None
    try:
        return float(lat), float(lng)
    except (TypeError, ValueError):
        return None


class LocationSearchStrategy(SearchStrategy):
    """
    Matches query tokens against place and text fields.

    The combined score may exceed 1 when the proximity bonus applies; it is
    only used for ranking after weighting.
    """

    method = SearchMethod.LOCATION
    default_weight = 60.0

    def __init__(self, weight: Optional[float] = None) -> None:
        super().__init__(weight)
        self.normalizer = TextNormalizer()

    def location_bonus(self, user_location: Optional[GeoPoint], record: Any) -> float:
        if user_location is None:
            return 0.0
        coordinates = record_coordinates(record)
        if coordinates is None:
            return 0.0
        distance = haversine_km(user_location.lat, user_location.lng, *coordinates)
        return proximity_bonus(distance)

    def location_text_match(
        self, query_tokens: Sequence[str], value: str, expand_aliases: bool = False
    ) -> float:
        """Fraction of query tokens found as substrings of a place name."""
        if not query_tokens:
            return 0.0
        text = value.lower()
        matches = 0
        for token in query_tokens:
            candidates = expand_location(token) if expand_aliases else (token,)
            if any(candidate in text for candidate in candidates):
                matches += 1
        return matches / len(query_tokens)

    def text_match(self, query_tokens: Sequence[str], value: str) -> float:
        """Fraction of query tokens present as whole tokens of the value."""
        if not query_tokens:
            return 0.0
        value_tokens = set(self.normalizer.tokenize(value))
        matches = sum(1 for token in query_tokens if token in value_tokens)
        return matches / len(query_tokens)

    def search(self, context: SearchContext) -> StrategyResult:
        query = context.query
        if query.is_empty:
            return self._empty()

        options = context.options
        result = self._empty()

        for index, fields in enumerate(context.fields):
            score = 0.0
            matched_fields = []

            for field in fields:
                if field.kind == FieldKind.LOCATION:
                    field_score = self.location_text_match(
                        query.tokens, field.value, options.expand_aliases
                    )
                else:
                    field_score = self.text_match(query.tokens, field.value)

                if field_score > 0:
                    score = max(score, field_score)
                    matched_fields.append(
                        MatchedField(field=field.name, score=field_score, value=field.value)
                    )

            if score > 0:
                bonus = self.location_bonus(options.location, context.records[index])
                result.hits.append(
                    self._hit(index, score + bonus, matched_fields, location_bonus=bonus)
                )

        return result
