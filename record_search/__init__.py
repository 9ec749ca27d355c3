"""
Record Search - multi-strategy search and ranking over in-memory record collections.

This package runs fuzzy, phonetic, TF-IDF, location-aware, wildcard and regex
retrieval strategies over a caller-supplied collection of records and fuses
their hits into one ranked, deduplicated and highlighted result list.
"""

__version__ = "1.0.0"

from .core.engine import SearchEngine, search
from .models.request import SearchMethod, SearchOptions
from .models.response import FusedResult, SearchResponse

__all__ = [
    "SearchEngine",
    "search",
    "SearchMethod",
    "SearchOptions",
    "FusedResult",
    "SearchResponse",
]
