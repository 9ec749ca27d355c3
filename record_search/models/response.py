"""Response models for the search engine and API endpoints."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from .request import SearchMethod


class MatchedField(BaseModel):
    """A record field that contributed to a strategy hit."""

    field: str = Field(..., description="Searchable field name")
    score: float = Field(..., ge=0.0, description="Strategy score for this field")
    value: str = Field(..., description="Field value as displayed")


class HighlightFragment(BaseModel):
    """A field value with query tokens wrapped in highlight markers."""

    field: str = Field(..., description="Searchable field name")
    original: str = Field(..., description="Original field value")
    highlighted: str = Field(..., description="Field value with highlight markers")
    score: float = Field(..., description="Score of the matched field")


class FusedResult(BaseModel):
    """One record after fusing every strategy hit on it."""

    record_index: int = Field(..., ge=0, description="Position of the record in the input collection")
    record: Any = Field(..., description="The matched record, unmodified")
    score: float = Field(..., description="Best weighted strategy score")
    methods: List[SearchMethod] = Field(..., description="Strategies that matched the record")
    matched_fields: List[MatchedField] = Field(default_factory=list, description="Matched fields from all strategies")
    highlights: List[HighlightFragment] = Field(default_factory=list, description="Highlight fragments")


class SearchMetadata(BaseModel):
    """Diagnostics for one search call."""

    execution_time_ms: float = Field(0.0, description="Pipeline execution time in milliseconds")
    fuzzy_threshold: Optional[float] = Field(None, description="Fuzzy threshold in effect")
    filters: Dict[str, Any] = Field(default_factory=dict, description="Filters applied")
    strategies_failed: List[SearchMethod] = Field(
        default_factory=list, description="Strategies excluded from fusion"
    )
    strategy_errors: Dict[str, str] = Field(
        default_factory=dict, description="Error message per strategy"
    )


class SearchResponse(BaseModel):
    """Response for search queries."""

    success: bool = Field(..., description="False only when the pipeline failed")
    results: List[FusedResult] = Field(default_factory=list, description="Ranked search results")
    total: int = Field(0, description="Number of results returned")
    query: str = Field("", description="Normalized query")
    strategies_used: List[SearchMethod] = Field(default_factory=list, description="Strategies requested")
    error: Optional[str] = Field(None, description="Failure message when success is false")
    metadata: SearchMetadata = Field(default_factory=SearchMetadata, description="Call diagnostics")
    suggestions: Optional[List[str]] = Field(None, description="Alternative suggestions if no match")
    timestamp: datetime = Field(default_factory=datetime.utcnow, description="Response timestamp")


class ErrorResponse(BaseModel):
    """Error response model."""

    error: str = Field(..., description="Error type")
    message: str = Field(..., description="Error message")
    details: Optional[Dict[str, Any]] = Field(None, description="Additional error details")
    timestamp: datetime = Field(default_factory=datetime.utcnow, description="Error timestamp")
    request_id: Optional[str] = Field(None, description="Request identifier for tracking")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Service status")
    version: str = Field(..., description="Application version")
    uptime: float = Field(..., description="Service uptime in seconds")
    timestamp: datetime = Field(default_factory=datetime.utcnow, description="Check timestamp")
    dependencies: Dict[str, str] = Field(..., description="Dependency status")


class MetricsResponse(BaseModel):
    """Performance metrics response."""

    total_queries: int = Field(..., description="Total queries processed")
    failed_queries: int = Field(..., description="Queries that returned success=false")
    zero_result_queries: int = Field(..., description="Successful queries with no results")
    strategy_errors: int = Field(..., description="Strategy runs that errored or timed out")
    average_response_time_ms: float = Field(..., description="Average response time")
    error_rate: float = Field(..., description="Failed query rate")
    loaded_records: int = Field(..., description="Records in the loaded collection")
    memory_usage_mb: float = Field(..., description="Process memory usage in MB")
    timestamp: datetime = Field(default_factory=datetime.utcnow, description="Metrics timestamp")
