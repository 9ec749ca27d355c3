"""Pattern strategies: glob-style wildcards and user-supplied regular expressions."""

from dataclasses import dataclass
from typing import Any, Optional

import regex
import structlog

from ...exceptions import StrategyTimeoutError
from ...models.request import SearchMethod
from ...models.response import MatchedField
from .base import SearchContext, SearchStrategy, StrategyResult

logger = structlog.get_logger(__name__)

DEFAULT_TIMEOUT_SECONDS = 0.05
WILDCARD_META = frozenset("*?.")


@dataclass(frozen=True)
class CompiledPattern:
    """Outcome of compiling a user pattern: a pattern or an error message."""

    source: str
    pattern: Optional[Any] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.pattern is not None


def compile_pattern(source: str) -> CompiledPattern:
    """Compile a case-insensitive pattern without raising on bad input."""
    try:
        return CompiledPattern(source=source, pattern=regex.compile(source, regex.IGNORECASE))
    except (regex.error, TypeError, ValueError) as e:
        return CompiledPattern(source=source, error=f"Invalid pattern {source!r}: {e}")


def translate_wildcard(text: str) -> str:
    """
    Translate a glob-style query into an unanchored regular expression.

    ``*`` matches any sequence and ``?`` any single character; everything
    else, dots included, matches literally.
    """
    parts = []
    for char in text:
        if char == "*":
            parts.append(".*")
        elif char == "?":
            parts.append(".")
        else:
            parts.append(regex.escape(char))
    return "".join(parts)


def wildcard_complexity(text: str) -> int:
    """Number of wildcard and dot meta-characters in a query."""
    return sum(1 for char in text if char in WILDCARD_META)


class _PatternStrategy(SearchStrategy):
    """Shared matching loop with a per-field time budget."""

    def __init__(
        self,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        weight: Optional[float] = None,
    ) -> None:
        super().__init__(weight)
        self.timeout_seconds = timeout_seconds

    def build_pattern(self, context: SearchContext) -> CompiledPattern:
        raise NotImplementedError

    def score_value(self, compiled: CompiledPattern, context: SearchContext, value: str) -> float:
        raise NotImplementedError

    def search(self, context: SearchContext) -> StrategyResult:
        if not context.query.pattern:
            return self._empty()

        # Compiled even for queries that normalize to nothing, so a bad
        # pattern such as "(" is still reported.
        compiled = self.build_pattern(context)
        if not compiled.ok:
            logger.warning(
                "Pattern compilation failed",
                strategy=self.get_name(),
                pattern=compiled.source,
                error=compiled.error,
            )
            return self._empty(error=compiled.error)

        if context.query.is_empty:
            return self._empty()

        result = self._empty()
        for index, fields in enumerate(context.fields):
            max_score = 0.0
            matched_fields = []

            for field in fields:
                try:
                    score = self.score_value(compiled, context, field.value)
                except TimeoutError:
                    raise StrategyTimeoutError(
                        self.get_name(),
                        f"Pattern {compiled.source!r} exceeded "
                        f"{self.timeout_seconds * 1000:.0f}ms on record {index}",
                    )

                if score > 0:
                    max_score = max(max_score, score)
                    matched_fields.append(MatchedField(field=field.name, score=score, value=field.value))

            if max_score > 0:
                result.hits.append(
                    self._hit(index, max_score, matched_fields, pattern=compiled.source)
                )

        return result


class WildcardSearchStrategy(_PatternStrategy):
    """Glob matching where ``*`` and ``?`` are the only meta-characters."""

    method = SearchMethod.WILDCARD
    default_weight = 50.0

    def build_pattern(self, context: SearchContext) -> CompiledPattern:
        return compile_pattern(translate_wildcard(context.query.pattern))

    def score_value(self, compiled: CompiledPattern, context: SearchContext, value: str) -> float:
        if compiled.pattern.search(value, timeout=self.timeout_seconds) is None:
            return 0.0
        complexity = wildcard_complexity(context.query.pattern)
        return min(1.0, (len(value) / 100) * (1 / (complexity + 1)))


class RegexSearchStrategy(_PatternStrategy):
    """Matching with the query taken as a case-insensitive regular expression."""

    method = SearchMethod.REGEX
    default_weight = 40.0

    def build_pattern(self, context: SearchContext) -> CompiledPattern:
        return compile_pattern(context.query.pattern)

    def score_value(self, compiled: CompiledPattern, context: SearchContext, value: str) -> float:
        matches = compiled.pattern.findall(value, timeout=self.timeout_seconds)
        return min(1.0, len(matches) / 10)
