"""Data models for the record search engine."""

from .request import ALL_METHODS, GeoPoint, SearchMethod, SearchOptions, SearchRequest
from .response import (
    ErrorResponse,
    FusedResult,
    HealthResponse,
    HighlightFragment,
    MatchedField,
    MetricsResponse,
    SearchMetadata,
    SearchResponse,
)

__all__ = [
    "ALL_METHODS",
    "GeoPoint",
    "SearchMethod",
    "SearchOptions",
    "SearchRequest",
    "ErrorResponse",
    "FusedResult",
    "HealthResponse",
    "HighlightFragment",
    "MatchedField",
    "MetricsResponse",
    "SearchMetadata",
    "SearchResponse",
]
