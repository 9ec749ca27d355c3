"""Fusion of strategy hits, post-fusion filtering and ranking."""

from numbers import Number
from typing import Any, Dict, List, Mapping, Optional, Sequence

from ..exceptions import InvalidOptionsError
from ..models.response import FusedResult
from .fields import get_attribute
from .strategies.base import StrategyResult


def merge_results(results: Sequence[StrategyResult], records: Sequence[Any]) -> List[FusedResult]:
    """
    Combine hits from every strategy into one result per record.

    Results must be given in canonical strategy order; the output keeps the
    order in which records were first hit. The fused score is the best
    weighted score, never a sum. Matched fields from different strategies
    are concatenated as-is, so the same field can appear more than once.

    Args:
        results: Strategy results for one call
        records: The call's record collection

    Returns:
        FusedResult list with at most one entry per record index
    """
    merged: Dict[int, FusedResult] = {}

    for result in results:
        for hit in result.hits:
            existing = merged.get(hit.record_index)
            if existing is None:
                merged[hit.record_index] = FusedResult(
                    record_index=hit.record_index,
                    record=records[hit.record_index],
                    score=hit.score,
                    methods=[hit.method],
                    matched_fields=list(hit.matched_fields),
                )
                continue

            existing.score = max(existing.score, hit.score)
            if hit.method not in existing.methods:
                existing.methods.append(hit.method)
            existing.matched_fields.extend(hit.matched_fields)

    return list(merged.values())


def _is_range(value: Any) -> bool:
    return isinstance(value, Mapping) and ("min" in value or "max" in value)


def _as_number(value: Any) -> Optional[float]:
    """Numeric value of an attribute or bound, None when it has none."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Number):
        return value
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _in_range(attribute: Any, bounds: Mapping) -> bool:
    attribute = _as_number(attribute)
    if attribute is None:
        return False

    for key in ("min", "max"):
        if bounds.get(key) is None:
            continue
        bound = _as_number(bounds[key])
        if bound is None:
            raise InvalidOptionsError(f"Range bound {key!r} must be a number, got {bounds[key]!r}")
        if (key == "min" and attribute < bound) or (key == "max" and attribute > bound):
            return False
    return True


def matches_filters(record: Any, filters: Mapping[str, Any]) -> bool:
    """
    Check a record against every filter (AND semantics).

    A list value requires membership, a mapping with ``min``/``max`` an
    inclusive numeric range, anything else equality. None values are skipped.
    """
    for key, value in filters.items():
        if value is None:
            continue

        attribute = get_attribute(record, key)
        if isinstance(value, (list, tuple, set, frozenset)):
            if attribute not in value:
                return False
        elif isinstance(value, Mapping):
            if _is_range(value) and not _in_range(attribute, value):
                return False
        elif attribute != value:
            return False

    return True


def apply_filters(results: List[FusedResult], filters: Mapping[str, Any]) -> List[FusedResult]:
    """Keep the fused results whose record passes every filter."""
    if not filters:
        return results
    return [result for result in results if matches_filters(result.record, filters)]


def rank(results: List[FusedResult], max_results: int) -> List[FusedResult]:
    """Stable sort by score descending, truncated to max_results."""
    return sorted(results, key=lambda result: result.score, reverse=True)[:max_results]
