"""Fuzzy matching algorithms for typo-tolerant token and name matching."""

from typing import List, Optional, Sequence

from rapidfuzz import fuzz, process

from .normalizer import TextNormalizer
from .similarity import levenshtein_ratio, phonetic_match

PHONETIC_BONUS = 0.8


class FuzzyMatcher:
    """Handles fuzzy matching between query tokens and field values."""

    def __init__(self, threshold: float = 0.3, enable_phonetic: bool = True) -> None:
        """
        Initialize the fuzzy matcher.

        Args:
            threshold: Minimum token similarity for a match
            enable_phonetic: Whether name fields get the phonetic bonus
        """
        self.threshold = threshold
        self.enable_phonetic = enable_phonetic
        self.normalizer = TextNormalizer()

    def token_similarity(self, query_token: str, field_token: str) -> float:
        """
        Similarity between two single tokens.

        Args:
            query_token: Token from the query
            field_token: Token from a field value

        Returns:
            Similarity between 0 and 1; 0 for empty tokens
        """
        return levenshtein_ratio(query_token, field_token)

    def best_token_score(
        self,
        query_tokens: Sequence[str],
        field_tokens: Sequence[str],
        threshold: Optional[float] = None,
    ) -> float:
        """
        Best similarity over every (query token, field token) pair.

        Args:
            query_tokens: Tokens of the normalized query
            field_tokens: Tokens of the field value
            threshold: Custom threshold (uses instance threshold if None)

        Returns:
            Highest similarity meeting the threshold, or 0.0
        """
        threshold = self.threshold if threshold is None else threshold

        best = 0.0
        for query_token in query_tokens:
            if not query_token:
                continue
            for field_token in field_tokens:
                if not field_token:
                    continue
                similarity = self.token_similarity(query_token, field_token)
                if similarity >= threshold and similarity > best:
                    best = similarity
        return best

    def phonetic_score(self, query: str, value: str) -> float:
        """
        Bonus score when the query sounds like the whole field value.

        Args:
            query: Normalized query text
            value: Field value

        Returns:
            PHONETIC_BONUS on a phonetic match, else 0.0
        """
        if not self.enable_phonetic:
            return 0.0
        if phonetic_match(query, self.normalizer.normalize(value)):
            return PHONETIC_BONUS
        return 0.0

    def score_field(
        self,
        query: str,
        query_tokens: Sequence[str],
        value: str,
        is_name: bool = False,
        threshold: Optional[float] = None,
    ) -> float:
        """
        Combined fuzzy score of a field value.

        Token similarity and, for name fields, the phonetic bonus are
        combined by taking the larger of the two.
        """
        field_tokens = self.normalizer.tokenize(value)
        score = self.best_token_score(query_tokens, field_tokens, threshold)
        if is_name:
            score = max(score, self.phonetic_score(query, value))
        return score

    def suggest_corrections(
        self,
        query: str,
        candidates: List[str],
        max_suggestions: int = 5
    ) -> List[str]:
        """
        Suggest corrections for a query.

        Args:
            query: Query to get suggestions for
            candidates: List of candidate values
            max_suggestions: Maximum number of suggestions

        Returns:
            List of suggested corrections
        """
        if not query or not candidates:
            return []

        # Use rapidfuzz's extract function for suggestions
        suggestions = process.extract(
            query,
            list(dict.fromkeys(candidates)),
            limit=max_suggestions,
            scorer=fuzz.WRatio,
            processor=self.normalizer.normalize,
        )

        # Filter by threshold and return just the values
        return [suggestion[0] for suggestion in suggestions
                if suggestion[1] >= self.threshold * 100]
