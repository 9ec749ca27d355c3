"""Request and option models for the search engine and API endpoints."""

from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field, field_validator


class SearchMethod(str, Enum):
    """Retrieval strategies the engine can run."""

    FUZZY = "fuzzy"
    SEMANTIC = "semantic"
    LOCATION = "location"
    WILDCARD = "wildcard"
    REGEX = "regex"


# Canonical run and fusion order
ALL_METHODS: List[SearchMethod] = list(SearchMethod)


class GeoPoint(BaseModel):
    """User location for proximity scoring."""

    lat: float = Field(..., ge=-90.0, le=90.0, description="Latitude in degrees")
    lng: float = Field(..., ge=-180.0, le=180.0, description="Longitude in degrees")


class SearchOptions(BaseModel):
    """Per-call search configuration."""

    strategies: List[SearchMethod] = Field(
        default_factory=lambda: list(ALL_METHODS),
        description="Strategies to run, or 'all'"
    )
    max_results: int = Field(default=50, ge=1, description="Maximum number of results to return")
    fuzzy_threshold: float = Field(
        default=0.3, ge=0.0, le=1.0, description="Minimum token similarity for fuzzy matches"
    )
    location: Optional[GeoPoint] = Field(None, description="User location for proximity bonus")
    filters: Dict[str, Any] = Field(
        default_factory=dict,
        description="Attribute filters: value, list of values, or {min, max} range"
    )
    include_highlights: bool = Field(default=True, description="Whether to highlight matched tokens")
    include_suggestions: bool = Field(
        default=True, description="Whether to include suggestions for zero-result queries"
    )
    expand_aliases: bool = Field(
        default=False, description="Whether location matching also accepts known place aliases"
    )

    @field_validator("strategies", mode="before")
    @classmethod
    def validate_strategies(cls, v: Union[str, List[str], None]) -> List[str]:
        """Accept 'all', a single name, or a list of names; drop duplicates."""
        if v is None:
            return list(ALL_METHODS)
        if isinstance(v, (str, SearchMethod)):
            v = [v]

        names = []
        for item in v:
            name = item.value if isinstance(item, SearchMethod) else str(item).strip().lower()
            if name == "all":
                return list(ALL_METHODS)
            if name not in names:
                names.append(name)

        if not names:
            raise ValueError("At least one strategy must be requested")
        return names

    @field_validator("filters")
    @classmethod
    def validate_range_bounds(cls, v: Dict[str, Any]) -> Dict[str, Any]:
        """Coerce min/max range bounds to numbers."""
        filters = {}
        for key, value in v.items():
            if isinstance(value, dict):
                value = dict(value)
                for bound in ("min", "max"):
                    if value.get(bound) is None:
                        continue
                    try:
                        if isinstance(value[bound], bool):
                            raise TypeError(value[bound])
                        value[bound] = float(value[bound])
                    except (TypeError, ValueError):
                        raise ValueError(f"Range bound {bound!r} of filter {key!r} must be a number")
            filters[key] = value
        return filters

    @field_validator("strategies")
    @classmethod
    def order_strategies(cls, v: List[SearchMethod]) -> List[SearchMethod]:
        """Keep strategies in canonical order."""
        return [method for method in ALL_METHODS if method in v]


class SearchRequest(BaseModel):
    """Request model for search queries."""

    query: str = Field(..., max_length=200, description="Search query")
    records: Optional[List[Dict[str, Any]]] = Field(
        None, description="Records to search; the loaded collection is used when omitted"
    )
    options: SearchOptions = Field(default_factory=SearchOptions, description="Search options")
