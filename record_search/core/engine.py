"""Main search engine implementation."""

import threading
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

import structlog
from pydantic import ValidationError

from ..exceptions import InvalidOptionsError
from ..models.request import SearchOptions
from ..models.response import SearchMetadata, SearchResponse
from .fields import FieldExtractor
from .fuzzy_matcher import FuzzyMatcher
from .fusion import apply_filters, merge_results, rank
from .highlighter import Highlighter
from .normalizer import TextNormalizer
from .strategies.base import SearchContext, SearchStrategy, StrategyResult
from .strategies.registry import StrategyRegistry, build_default_registry

logger = structlog.get_logger(__name__)

OptionsInput = Union[SearchOptions, Mapping[str, Any], None]


class SearchEngine:
    """Multi-strategy search engine over an in-memory record collection."""

    def __init__(
        self,
        fuzzy_threshold: float = 0.3,
        max_results: int = 50,
        enable_phonetic: bool = True,
        regex_timeout_ms: float = 50.0,
        parallel_strategies: bool = True,
        highlight_tag: str = "mark",
        registry: Optional[StrategyRegistry] = None,
    ) -> None:
        """
        Initialize the search engine.

        Args:
            fuzzy_threshold: Default threshold for fuzzy matching
            max_results: Default result limit
            enable_phonetic: Whether fuzzy name matching uses phonetic codes
            regex_timeout_ms: Time budget per field for wildcard/regex matching
            parallel_strategies: Run strategies on a thread pool within a call
            highlight_tag: HTML tag wrapped around highlighted tokens
            registry: Custom strategy registry (defaults to the five built-ins)
        """
        self.fuzzy_threshold = fuzzy_threshold
        self.max_results = max_results
        self.parallel_strategies = parallel_strategies
        self.normalizer = TextNormalizer()
        self.field_extractor = FieldExtractor()
        self.fuzzy_matcher = FuzzyMatcher(fuzzy_threshold, enable_phonetic)
        self.highlighter = Highlighter(highlight_tag)
        self.registry = registry or build_default_registry(
            enable_phonetic=enable_phonetic,
            regex_timeout_seconds=regex_timeout_ms / 1000.0,
        )

        # Performance tracking, shared across concurrent calls
        self._stats_lock = threading.Lock()
        self._stats = self._empty_stats()

    def search(
        self,
        query: Any,
        records: Optional[Sequence[Any]],
        options: OptionsInput = None,
    ) -> SearchResponse:
        """
        Search records for a free-text query.

        Never raises: unexpected failures are returned as a response with
        ``success=False``.

        Args:
            query: Raw query text; non-strings are treated as empty
            records: Record collection to search; not modified
            options: SearchOptions, a dict of option fields, or None

        Returns:
            SearchResponse with ranked, fused results
        """
        start_time = time.time()
        normalized_query = ""

        try:
            options = self._resolve_options(options)
            parsed = self.normalizer.parse(query)
            normalized_query = parsed.normalized
            records = list(records or [])

            context = SearchContext(
                query=parsed,
                records=records,
                fields=[self.field_extractor.extract(record) for record in records],
                options=options,
            )
            strategies = self.registry.select(options.strategies)
            strategy_results, errors = self._run_strategies(strategies, context)

            results = merge_results(strategy_results, records)
            results = apply_filters(results, options.filters)
            results = rank(results, options.max_results)

            if options.include_highlights:
                self.highlighter.annotate(results, parsed.tokens)

            suggestions = None
            if not results and options.include_suggestions and not parsed.is_empty:
                suggestions = self.suggest(parsed.normalized, records)

            execution_time = (time.time() - start_time) * 1000
            self._record_call(execution_time, failed=False, empty=not results, strategy_errors=len(errors))

            logger.debug(
                "Search completed",
                query=parsed.normalized,
                strategies=[s.get_name() for s in strategies],
                total=len(results),
                execution_time_ms=round(execution_time, 2),
            )

            return SearchResponse(
                success=True,
                results=results,
                total=len(results),
                query=parsed.normalized,
                strategies_used=list(options.strategies),
                metadata=SearchMetadata(
                    execution_time_ms=execution_time,
                    fuzzy_threshold=options.fuzzy_threshold,
                    filters=dict(options.filters),
                    strategies_failed=[method for method in options.strategies if method.value in errors],
                    strategy_errors=errors,
                ),
                suggestions=suggestions,
            )

        except Exception as e:
            execution_time = (time.time() - start_time) * 1000
            self._record_call(execution_time, failed=True, empty=True, strategy_errors=0)
            logger.error("Search failed", query=normalized_query, error=str(e), exc_info=True)

            return SearchResponse(
                success=False,
                results=[],
                total=0,
                query=normalized_query,
                error=str(e),
                metadata=SearchMetadata(execution_time_ms=execution_time),
            )

    def suggest(
        self,
        query: str,
        records: Sequence[Any],
        max_suggestions: int = 5,
    ) -> List[str]:
        """
        Get record names close to a query.

        Args:
            query: Query to get suggestions for
            records: Records whose names are candidates
            max_suggestions: Maximum number of suggestions

        Returns:
            List of suggested names
        """
        names = []
        for record in records:
            for field in self.field_extractor.extract(record):
                if field.name == "name":
                    names.append(field.value)
        return self.fuzzy_matcher.suggest_corrections(query, names, max_suggestions)

    def _resolve_options(self, options: OptionsInput) -> SearchOptions:
        """Validate options once at call entry, filling engine defaults."""
        if isinstance(options, SearchOptions):
            return options

        values = dict(options or {})
        values.setdefault("fuzzy_threshold", self.fuzzy_threshold)
        values.setdefault("max_results", self.max_results)
        try:
            return SearchOptions(**values)
        except ValidationError as e:
            raise InvalidOptionsError(f"Invalid search options: {e}") from e

    def _run_strategies(
        self,
        strategies: List[SearchStrategy],
        context: SearchContext,
    ) -> Tuple[List[StrategyResult], Dict[str, str]]:
        """
        Run strategies and collect their results in canonical order.

        A strategy that raises is left out of the results and its error is
        reported instead; pattern errors come back on the result itself.
        """
        outcomes: List[Any] = []
        if self.parallel_strategies and len(strategies) > 1:
            with ThreadPoolExecutor(max_workers=len(strategies), thread_name_prefix="strategy") as pool:
                futures = [pool.submit(strategy.search, context) for strategy in strategies]
                for future in futures:
                    try:
                        outcomes.append(future.result())
                    except Exception as e:
                        outcomes.append(e)
        else:
            for strategy in strategies:
                try:
                    outcomes.append(strategy.search(context))
                except Exception as e:
                    outcomes.append(e)

        results: List[StrategyResult] = []
        errors: Dict[str, str] = {}
        for strategy, outcome in zip(strategies, outcomes):
            if isinstance(outcome, Exception):
                logger.error(
                    "Strategy failed",
                    strategy=strategy.get_name(),
                    error=str(outcome),
                    exc_info=outcome,
                )
                errors[strategy.get_name()] = str(outcome)
                continue

            if outcome.error:
                errors[strategy.get_name()] = outcome.error
            results.append(outcome)

        return results, errors

    def _record_call(self, execution_time: float, failed: bool, empty: bool, strategy_errors: int) -> None:
        with self._stats_lock:
            self._stats["total_queries"] += 1
            self._stats["total_execution_time"] += execution_time
            self._stats["strategy_errors"] += strategy_errors
            if failed:
                self._stats["failed_queries"] += 1
            elif empty:
                self._stats["zero_result_queries"] += 1

    @staticmethod
    def _empty_stats() -> Dict[str, Any]:
        return {
            "total_queries": 0,
            "failed_queries": 0,
            "zero_result_queries": 0,
            "strategy_errors": 0,
            "total_execution_time": 0.0,
        }

    def get_stats(self) -> Dict[str, Any]:
        """Get engine statistics."""
        with self._stats_lock:
            stats = self._stats.copy()

        # Calculate averages
        if stats["total_queries"] > 0:
            stats["average_execution_time_ms"] = (
                stats["total_execution_time"] / stats["total_queries"]
            )
            stats["error_rate"] = stats["failed_queries"] / stats["total_queries"]
            stats["zero_result_rate"] = stats["zero_result_queries"] / stats["total_queries"]
        else:
            stats["average_execution_time_ms"] = 0.0
            stats["error_rate"] = 0.0
            stats["zero_result_rate"] = 0.0

        stats["strategies"] = self.registry.get_strategy_info()
        return stats

    def reset_stats(self) -> None:
        """Reset statistics."""
        with self._stats_lock:
            self._stats = self._empty_stats()


def search(query: Any, records: Optional[Sequence[Any]], options: OptionsInput = None) -> SearchResponse:
    """Search records with a default-configured engine."""
    return SearchEngine().search(query, records, options)
