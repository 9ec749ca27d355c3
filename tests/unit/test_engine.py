"""Unit tests for the search engine core functionality."""

import copy
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from record_search import search
from record_search.core.engine import SearchEngine
from record_search.models.request import SearchMethod, SearchOptions
from record_search.models.response import SearchResponse


class TestSearchEngine:
    """Test cases for the SearchEngine class."""

    @pytest.fixture
    def engine(self):
        """Create a search engine instance for testing."""
        return SearchEngine(fuzzy_threshold=0.3)

    def test_engine_initialization(self, engine):
        """Test search engine initialization."""
        assert engine.fuzzy_threshold == 0.3
        assert engine.max_results == 50
        assert engine._stats["total_queries"] == 0
        assert engine._stats["failed_queries"] == 0
        assert engine.registry.list_strategy_names() == ["fuzzy", "semantic", "location", "wildcard", "regex"]

    def test_fuzzy_name_search(self, engine, college_records):
        """Test typo-tolerant name search with the fuzzy strategy only."""
        response = engine.search("arjun", college_records, {"strategies": ["fuzzy"]})

        assert response.success is True
        assert [r.record_index for r in response.results] == [0, 1]
        assert response.results[0].record["name"] == "Arjun Institute"
        assert response.results[0].score == pytest.approx(100.0)
        assert response.results[1].score == pytest.approx(100.0 * (1 - 1 / 6))
        assert response.strategies_used == [SearchMethod.FUZZY]

    def test_all_strategies(self, engine, college_records):
        """Test that fusion keeps the best score per record."""
        response = engine.search("arjun", college_records)

        assert response.success is True
        assert [r.record_index for r in response.results] == [0, 1]
        assert response.results[0].score == pytest.approx(100.0)
        assert response.results[0].methods[0] == SearchMethod.FUZZY
        assert SearchMethod.REGEX in response.results[0].methods
        assert response.strategies_used == list(SearchMethod)
        assert response.metadata.strategy_errors == {}

    def test_query_is_normalized(self, engine, college_records):
        """Test that the response echoes the normalized query."""
        response = engine.search("  ARJUN!! ", college_records)
        assert response.query == "arjun"

    @pytest.mark.parametrize("query", ["", "   ", None, 42])
    def test_empty_query(self, engine, college_records, query):
        """Test that empty and non-string queries return no results."""
        response = engine.search(query, college_records)

        assert response.success is True
        assert response.results == []
        assert response.total == 0
        assert response.suggestions is None

    def test_punctuation_only_query(self, engine, college_records):
        """Test a query that normalizes to nothing but is an invalid pattern."""
        response = engine.search("(", college_records)

        assert response.success is True
        assert response.results == []
        assert list(response.metadata.strategy_errors) == ["regex"]
        assert response.metadata.strategies_failed == [SearchMethod.REGEX]

    def test_catastrophic_regex_is_bounded(self, engine):
        """Test that a backtracking-heavy pattern hits the time budget."""
        records = [{"name": "a" * 40 + "!"}] * 20

        start_time = time.time()
        response = engine.search("(a+)+$", records, {"strategies": ["regex"]})
        elapsed = time.time() - start_time

        assert elapsed < 5.0
        assert response.success is True
        assert "regex" in response.metadata.strategy_errors
        assert response.results == []

    def test_range_bounds_as_strings(self, engine, college_records):
        """Test that numeric strings are accepted as range bounds."""
        response = engine.search("arjun", college_records, {"filters": {"seats": {"min": "100"}}})

        assert response.success is True
        assert [r.record_index for r in response.results] == [0]
        assert response.metadata.filters == {"seats": {"min": 100.0}}

    def test_non_numeric_range_bound(self, engine, college_records):
        """Test that a non-numeric range bound is rejected as an invalid option."""
        response = engine.search("arjun", college_records, {"filters": {"seats": {"min": "lots"}}})

        assert response.success is False
        assert "Invalid search options" in response.error
        assert "must be a number" in response.error

    def test_highlight_markup_stays_intact(self, engine):
        """Test that a single-letter token never rewrites inserted tags."""
        response = engine.search("college a", [{"name": "Arjuna College"}], {"strategies": ["fuzzy"]})
        highlighted = response.results[0].highlights[0].highlighted

        assert highlighted == "<mark>A</mark>rjun<mark>a</mark> <mark>College</mark>"

    def test_empty_collection(self, engine):
        """Test searching an empty or missing collection."""
        assert engine.search("arjun", []).results == []
        assert engine.search("arjun", None).success is True

    def test_location_bonus(self, engine, college_records):
        """Test the proximity bonus for a nearby user."""
        options = {"strategies": ["location"], "location": {"lat": 12.97, "lng": 77.59}}
        response = engine.search("bangalore", college_records, options)

        assert [r.record_index for r in response.results] == [0]
        assert response.results[0].score == pytest.approx(78.0)

    def test_location_bonus_far_away(self, engine):
        """Test that distant records get no bonus."""
        records = [{"name": "Far College", "city": "Bangalore", "latitude": 13.5, "longitude": 80.0}]
        options = {"strategies": "location", "location": {"lat": 12.97, "lng": 77.59}}
        response = engine.search("bangalore", records, options)

        assert response.results[0].score == pytest.approx(60.0)

    def test_invalid_regex_degrades(self, engine, college_records):
        """Test that a bad pattern is reported without failing the call."""
        response = engine.search("arjun(", college_records)

        assert response.success is True
        assert "regex" in response.metadata.strategy_errors
        assert response.metadata.strategies_failed == [SearchMethod.REGEX]
        assert [r.record_index for r in response.results] == [0, 1]

    def test_strategy_timeout_degrades(self, engine, college_records, monkeypatch):
        """Test that a timed-out strategy is dropped and reported."""

        def slow(*args, **kwargs):
            raise TimeoutError("regex timed out")

        monkeypatch.setattr(engine.registry.get(SearchMethod.REGEX), "score_value", slow)
        response = engine.search("arjun", college_records)

        assert response.success is True
        assert response.metadata.strategies_failed == [SearchMethod.REGEX]
        assert "exceeded" in response.metadata.strategy_errors["regex"]
        assert all(SearchMethod.REGEX not in r.methods for r in response.results)
        assert engine.get_stats()["strategy_errors"] == 1

    def test_strategy_exception_degrades(self, engine, college_records, monkeypatch):
        """Test that any strategy failure leaves the other strategies intact."""

        def broken(context):
            raise RuntimeError("model unavailable")

        monkeypatch.setattr(engine.registry.get(SearchMethod.SEMANTIC), "search", broken)
        response = engine.search("arjun", college_records)

        assert response.success is True
        assert response.metadata.strategy_errors == {"semantic": "model unavailable"}
        assert len(response.results) == 2

    def test_category_filter(self, engine, college_records):
        """Test list-membership filtering."""
        options = {"filters": {"category": ["MEDICAL", "DENTAL"]}}
        response = engine.search("college university institute", college_records, options)

        assert response.results
        assert all(r.record["category"] in ("MEDICAL", "DENTAL") for r in response.results)
        assert response.metadata.filters == {"category": ["MEDICAL", "DENTAL"]}

    def test_filter_applies_after_fusion(self, engine, college_records):
        """Test that filters drop fused results."""
        response = engine.search("arjun", college_records, {"filters": {"category": "DENTAL"}})
        assert [r.record_index for r in response.results] == [1]

    def test_max_results(self, engine, college_records):
        """Test the result limit and ordering."""
        response = engine.search("college university institute", college_records, {"max_results": 1})

        assert len(response.results) == 1
        assert response.total == 1

        full = engine.search("college university institute", college_records)
        scores = [r.score for r in full.results]
        assert scores == sorted(scores, reverse=True)
        assert len({r.record_index for r in full.results}) == len(full.results)
        assert len(full.results) <= len(college_records)

    def test_engine_default_max_results(self, college_records):
        """Test that the engine default applies when options omit a limit."""
        engine = SearchEngine(max_results=1)
        assert len(engine.search("arjun", college_records).results) == 1

    def test_highlights(self, engine, college_records):
        """Test one highlight fragment per matched field, duplicates kept."""
        response = engine.search("arjun", college_records)
        top = response.results[0]

        assert len(top.highlights) == len(top.matched_fields)
        assert [f.field for f in top.matched_fields].count("name") >= 2
        assert top.highlights[0].highlighted == "<mark>Arjun</mark> Institute"

    def test_highlights_disabled(self, engine, college_records):
        """Test that highlighting can be switched off."""
        response = engine.search("arjun", college_records, {"include_highlights": False})
        assert all(r.highlights == [] for r in response.results)

    def test_suggestions_on_zero_results(self, engine, college_records):
        """Test name suggestions when nothing matches."""
        response = engine.search("arjn", college_records, {"strategies": ["regex"]})

        assert response.results == []
        assert response.suggestions
        assert "Arjun Institute" in response.suggestions

    def test_suggestions_disabled(self, engine, college_records):
        """Test that suggestions can be switched off."""
        options = {"strategies": ["regex"], "include_suggestions": False}
        assert engine.search("arjn", college_records, options).suggestions is None

    def test_invalid_options(self, engine, college_records):
        """Test that invalid options fail the call without raising."""
        response = engine.search("arjun", college_records, {"max_results": 0})

        assert response.success is False
        assert response.results == []
        assert "Invalid search options" in response.error

    def test_unknown_strategy(self, engine, college_records):
        """Test that unknown strategy names are rejected."""
        response = engine.search("arjun", college_records, {"strategies": ["telepathy"]})
        assert response.success is False

    def test_options_model(self, engine, college_records):
        """Test passing a SearchOptions instance directly."""
        options = SearchOptions(strategies=["regex", "fuzzy", "fuzzy"])
        response = engine.search("arjun", college_records, options)

        assert response.strategies_used == [SearchMethod.FUZZY, SearchMethod.REGEX]

    def test_records_not_mutated(self, engine, college_records):
        """Test that the caller's collection is left untouched."""
        before = copy.deepcopy(college_records)
        engine.search("arjun bangalore", college_records, {"location": {"lat": 12.97, "lng": 77.59}})
        assert college_records == before

    def test_sequential_matches_parallel(self, college_records):
        """Test that running strategies in threads does not change results."""
        parallel = SearchEngine(parallel_strategies=True).search("arjun", college_records)
        sequential = SearchEngine(parallel_strategies=False).search("arjun", college_records)

        assert [(r.record_index, r.score, r.methods) for r in parallel.results] == [
            (r.record_index, r.score, r.methods) for r in sequential.results
        ]

    def test_concurrent_calls(self, engine, college_records):
        """Test that one engine serves concurrent calls independently."""
        queries = ["arjun", "pune", "chennai", "bangalore"] * 5

        with ThreadPoolExecutor(max_workers=8) as pool:
            responses = list(pool.map(lambda q: engine.search(q, college_records), queries))

        assert all(r.success for r in responses)
        assert [r.query for r in responses] == queries
        assert engine.get_stats()["total_queries"] == len(queries)

    def test_performance_metrics(self, engine, college_records):
        """Test query counters and derived rates."""
        engine.search("arjun", college_records)
        engine.search("zzzzzz", college_records, {"include_suggestions": False})
        engine.search("arjun", college_records, {"max_results": -1})

        stats = engine.get_stats()
        assert stats["total_queries"] == 3
        assert stats["failed_queries"] == 1
        assert stats["zero_result_queries"] == 1
        assert stats["error_rate"] == pytest.approx(1 / 3)
        assert stats["average_execution_time_ms"] >= 0
        assert set(stats["strategies"]) == {"fuzzy", "semantic", "location", "wildcard", "regex"}

        engine.reset_stats()
        assert engine.get_stats()["total_queries"] == 0

    def test_execution_time_reported(self, engine, college_records):
        """Test call diagnostics."""
        response = engine.search("arjun", college_records, {"fuzzy_threshold": 0.5})

        assert response.metadata.execution_time_ms >= 0
        assert response.metadata.fuzzy_threshold == 0.5

    def test_suggest(self, engine, college_records):
        """Test direct name suggestions."""
        suggestions = engine.suggest("beta univ", college_records, max_suggestions=2)

        assert suggestions[0] == "Beta University"
        assert len(suggestions) <= 2


class TestSearchFunction:
    """Test cases for the module-level search entry point."""

    def test_search_function(self, college_records):
        """Test searching without building an engine first."""
        response = search("arjun", college_records, {"strategies": "fuzzy"})

        assert isinstance(response, SearchResponse)
        assert [r.record_index for r in response.results] == [0, 1]

    def test_object_records(self):
        """Test searching records that are plain objects."""

        class College:
            def __init__(self, name, city):
                self.name = name
                self.city = city

        records = [College("Arjun Institute", "Bangalore"), College("Beta University", "Pune")]
        response = search("pune", records)

        assert [r.record_index for r in response.results] == [1]
        assert response.results[0].record is records[1]
