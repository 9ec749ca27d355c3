"""Search API endpoints."""

from typing import Optional

from fastapi import APIRouter, HTTPException, Path, Query
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from ..config import get_settings
from ..models.request import GeoPoint, SearchOptions, SearchRequest
from ..models.response import SearchResponse
from .. import engine_instance

router = APIRouter(prefix="/api/v1", tags=["search"])
settings = get_settings()


@router.post(
    "/search",
    response_model=SearchResponse,
    summary="Search records",
    description="Search the given records, or the loaded collection, with every requested strategy"
)
async def search_with_body(request: SearchRequest) -> SearchResponse:
    """
    Search records using a structured request body.

    When the body carries no records the collection loaded at startup is
    searched. Strategy failures show up in the response metadata; the
    request itself only fails on invalid input.
    """
    if len(request.query) > settings.max_query_length:
        raise HTTPException(
            status_code=400,
            detail=f"Query too long. Maximum length is {settings.max_query_length} characters"
        )

    records = request.records if request.records is not None else engine_instance.records
    return engine_instance.search_engine.search(request.query, records, request.options)


@router.get(
    "/search/{query}",
    response_model=SearchResponse,
    summary="Search the loaded records",
    description="Search the loaded record collection with query parameters as options"
)
async def search_records(
    query: str = Path(..., description="The text to search for", min_length=1, max_length=200),
    strategies: str = Query("all", description="Comma-separated strategies, or 'all'"),
    max_results: Optional[int] = Query(None, ge=1, le=500, description="Maximum number of results"),
    fuzzy_threshold: Optional[float] = Query(
        None,
        ge=0.0,
        le=1.0,
        description="Custom fuzzy matching threshold (0.0-1.0)"
    ),
    lat: Optional[float] = Query(None, ge=-90.0, le=90.0, description="User latitude"),
    lng: Optional[float] = Query(None, ge=-180.0, le=180.0, description="User longitude"),
    include_highlights: bool = Query(True, description="Whether to highlight matched tokens"),
) -> SearchResponse:
    """
    Search the loaded records.

    Convenience endpoint for browsers and quick checks; POST /search
    accepts the full option set including filters.
    """
    if len(query) > settings.max_query_length:
        raise HTTPException(
            status_code=400,
            detail=f"Query too long. Maximum length is {settings.max_query_length} characters"
        )

    if (lat is None) != (lng is None):
        raise HTTPException(status_code=400, detail="lat and lng must be given together")

    try:
        options = SearchOptions(
            strategies=[name for name in strategies.split(",") if name.strip()],
            max_results=max_results or settings.max_results,
            fuzzy_threshold=settings.fuzzy_threshold if fuzzy_threshold is None else fuzzy_threshold,
            location=GeoPoint(lat=lat, lng=lng) if lat is not None else None,
            include_highlights=include_highlights,
        )
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=f"Invalid search options: {e.errors()}")

    return engine_instance.search_engine.search(query, engine_instance.records, options)


@router.get(
    "/suggestions/{query}",
    response_model=list[str],
    summary="Get search suggestions",
    description="Get record names close to a partial or misspelled query"
)
async def get_suggestions(
    query: str = Path(..., description="The query to get suggestions for", min_length=1),
    max_suggestions: int = Query(5, ge=1, le=20, description="Maximum number of suggestions")
) -> list[str]:
    """
    Get suggestions for a query.

    Useful for autocomplete functionality or when users need help
    finding the right record name.
    """
    engine = engine_instance.search_engine
    return engine.suggest(engine.normalizer.normalize(query), engine_instance.records, max_suggestions)


@router.get(
    "/records/count",
    summary="Count loaded records",
    description="Get the number of records in the loaded collection"
)
async def count_records() -> JSONResponse:
    """Get the size of the record collection served by the search endpoints."""
    return JSONResponse(
        status_code=200,
        content={"total_records": len(engine_instance.records)}
    )
