"""Semantic strategy: TF-IDF cosine similarity between query and records."""

from typing import Optional

from sklearn.feature_extraction.text import TfidfVectorizer

from ...models.request import SearchMethod
from ...models.response import MatchedField
from ..normalizer import TextNormalizer
from ..similarity import cosine_scores
from .base import SearchContext, SearchStrategy, StrategyResult

SEMANTIC_THRESHOLD = 0.1


class SemanticSearchStrategy(SearchStrategy):
    """
    Term-relevance matching with a TF-IDF model.

    The model is fitted inside each call over that call's records plus the
    query as one extra document, so nothing is shared between calls.
    """

    method = SearchMethod.SEMANTIC
    default_weight = 70.0

    def __init__(self, threshold: float = SEMANTIC_THRESHOLD, weight: Optional[float] = None) -> None:
        super().__init__(weight)
        self.threshold = threshold
        self.normalizer = TextNormalizer()

    def _build_vectorizer(self) -> TfidfVectorizer:
        # Single-character tokens count as terms, like the query tokenizer
        return TfidfVectorizer(lowercase=True, token_pattern=r"(?u)\b\w+\b")

    def search(self, context: SearchContext) -> StrategyResult:
        query = context.query
        if query.is_empty or not context.fields:
            return self._empty()

        documents = [
            self.normalizer.normalize(" ".join(f.value for f in fields))
            for fields in context.fields
        ]
        documents.append(query.normalized)

        matrix = self._build_vectorizer().fit_transform(documents)
        scores = cosine_scores(matrix[-1], matrix[:-1])

        query_terms = set(query.tokens)
        result = self._empty()
        for index, similarity in enumerate(scores):
            similarity = float(similarity)
            if similarity <= self.threshold:
                continue

            matched_fields = [
                MatchedField(field=f.name, score=similarity, value=f.value)
                for f in context.fields[index]
                if query_terms.intersection(self.normalizer.tokenize(f.value))
            ]
            result.hits.append(
                self._hit(index, similarity, matched_fields, similarity=similarity)
            )

        return result
