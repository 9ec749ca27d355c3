"""Text normalization utilities for queries and field values."""

import re
from dataclasses import dataclass, field
from typing import Any, List


@dataclass(frozen=True)
class Query:
    """A search query in raw, normalized and tokenized form."""

    raw: str = ""
    normalized: str = ""
    tokens: List[str] = field(default_factory=list)
    # Raw query with surrounding whitespace removed; wildcard and regex
    # strategies read their meta-characters from here.
    pattern: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.normalized


class TextNormalizer:
    """Handles text normalization for consistent query and field processing."""

    def __init__(self) -> None:
        """Initialize the normalizer."""
        # Compile regex patterns for performance
        self.whitespace_regex = re.compile(r"\s+")
        self.punctuation_regex = re.compile(r"[^\w\s]")

    def normalize(self, text: Any) -> str:
        """
        Normalize text for consistent processing.

        Args:
            text: Input text to normalize; anything that is not a string
                normalizes to the empty string

        Returns:
            Normalized text
        """
        if not text or not isinstance(text, str):
            return ""

        # Convert to lowercase and trim
        normalized = text.lower().strip()

        # Collapse runs of whitespace
        normalized = self.whitespace_regex.sub(" ", normalized)

        # Drop punctuation and other symbols
        normalized = self.punctuation_regex.sub("", normalized)

        return normalized.strip()

    def tokenize(self, text: Any) -> List[str]:
        """
        Tokenize text into words.

        Args:
            text: Input text

        Returns:
            List of tokens
        """
        normalized = self.normalize(text)
        if not normalized:
            return []

        return [token for token in normalized.split(" ") if token]

    def parse(self, text: Any) -> Query:
        """
        Build a Query from raw user input.

        Args:
            text: Raw query text

        Returns:
            Query with normalized text, tokens and the trimmed pattern
        """
        if not isinstance(text, str):
            return Query()

        normalized = self.normalize(text)
        tokens = [token for token in normalized.split(" ") if token]

        return Query(
            raw=text,
            normalized=normalized,
            tokens=tokens,
            pattern=text.strip(),
        )
