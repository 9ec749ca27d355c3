"""Core search engine functionality."""

from .engine import SearchEngine, search
from .fields import FieldExtractor, FieldKind, SearchableField
from .fuzzy_matcher import FuzzyMatcher
from .highlighter import Highlighter
from .normalizer import Query, TextNormalizer

__all__ = [
    "SearchEngine",
    "search",
    "FieldExtractor",
    "FieldKind",
    "SearchableField",
    "FuzzyMatcher",
    "Highlighter",
    "Query",
    "TextNormalizer",
]
