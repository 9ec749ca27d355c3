"""Metrics and monitoring API endpoints."""

import os

import psutil
from fastapi import APIRouter, HTTPException

from ..models.response import MetricsResponse
from .. import engine_instance

router = APIRouter(prefix="/api/v1", tags=["metrics"])


@router.get(
    "/metrics",
    response_model=MetricsResponse,
    summary="Get performance metrics",
    description="Get query counters, response times and process memory for the search engine"
)
async def get_metrics() -> MetricsResponse:
    """
    Get performance metrics for the search engine.

    Counters cover every call since startup or the last reset, including
    calls made through the health probe.
    """
    try:
        stats = engine_instance.search_engine.get_stats()

        # Resident memory of this process
        memory_usage_mb = psutil.Process(os.getpid()).memory_info().rss / (1024 * 1024)

        return MetricsResponse(
            total_queries=stats["total_queries"],
            failed_queries=stats["failed_queries"],
            zero_result_queries=stats["zero_result_queries"],
            strategy_errors=stats["strategy_errors"],
            average_response_time_ms=stats["average_execution_time_ms"],
            error_rate=stats["error_rate"],
            loaded_records=len(engine_instance.records),
            memory_usage_mb=memory_usage_mb
        )

    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to get metrics: {str(e)}"
        )


@router.post(
    "/metrics/reset",
    summary="Reset metrics",
    description="Reset the search engine's query counters"
)
async def reset_metrics() -> dict:
    """Reset engine statistics."""
    engine_instance.search_engine.reset_stats()
    return {"message": "Metrics reset successfully"}
