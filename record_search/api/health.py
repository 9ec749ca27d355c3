"""Health check and service status endpoints."""

import time
from datetime import datetime
from typing import Dict

from fastapi import APIRouter, HTTPException
from fastapi.responses import JSONResponse

from ..config import get_settings
from ..models.response import HealthResponse
from .. import engine_instance

router = APIRouter(prefix="/api/v1", tags=["health"])
settings = get_settings()

app_start_time = time.time()

# One-record collection searched by the health probe
_PROBE_RECORDS = [{"name": "Health Check Institute", "city": "Testville"}]


def _probe_engine() -> str:
    """Run a probe search; degraded when any strategy reported an error."""
    try:
        probe = engine_instance.search_engine.search("health", _PROBE_RECORDS)
    except Exception:
        return "unhealthy"
    if not probe.success:
        return "unhealthy"
    if probe.metadata.strategy_errors:
        return "degraded"
    return "healthy"


def _overall_status(dependencies: Dict[str, str]) -> str:
    statuses = set(dependencies.values())
    if "unhealthy" in statuses:
        return "unhealthy"
    if statuses == {"healthy"}:
        return "healthy"
    return "degraded"


def _uptime() -> float:
    return time.time() - app_start_time


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Probe the search pipeline and the loaded record collection"
)
async def health_check() -> HealthResponse:
    """
    Report service health.

    The engine is probed with a search over a one-record collection; an
    empty loaded collection marks the service degraded, not unhealthy.
    """
    dependencies = {
        "search_engine": _probe_engine(),
        "record_collection": "healthy" if engine_instance.records else "degraded",
    }

    return HealthResponse(
        status=_overall_status(dependencies),
        version=settings.app_version,
        uptime=_uptime(),
        dependencies=dependencies
    )


@router.get(
    "/health/ready",
    summary="Readiness check",
    description="Check whether the engine has strategies registered and can take traffic"
)
async def readiness_check() -> JSONResponse:
    """Ready once the engine reports its registered strategies."""
    timestamp = datetime.utcnow().isoformat()
    try:
        strategies = engine_instance.search_engine.registry.list_strategy_names()
    except Exception as e:
        return JSONResponse(
            status_code=503,
            content={"status": "not_ready", "error": str(e), "timestamp": timestamp}
        )

    return JSONResponse(
        status_code=200 if strategies else 503,
        content={
            "status": "ready" if strategies else "not_ready",
            "loaded_records": len(engine_instance.records),
            "strategies": strategies,
            "timestamp": timestamp
        }
    )


@router.get(
    "/health/live",
    summary="Liveness check",
    description="Check that the process is up"
)
async def liveness_check() -> dict:
    return {"status": "alive", "uptime": _uptime(), "timestamp": datetime.utcnow().isoformat()}


@router.get(
    "/status",
    summary="Service status",
    description="Engine statistics, active search defaults and uptime"
)
async def service_status() -> dict:
    """Detailed service status for operators."""
    try:
        statistics = engine_instance.search_engine.get_stats()
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to get service status: {e}")

    return {
        "service": {
            "name": settings.app_name,
            "version": settings.app_version,
            "uptime": _uptime(),
            "start_time": datetime.fromtimestamp(app_start_time).isoformat()
        },
        "configuration": {
            "fuzzy_threshold": settings.fuzzy_threshold,
            "max_results": settings.max_results,
            "max_query_length": settings.max_query_length,
            "enable_phonetic": settings.enable_phonetic,
            "regex_timeout_ms": settings.regex_timeout_ms,
            "parallel_strategies": settings.parallel_strategies,
            "records_path": settings.records_path
        },
        "statistics": statistics,
        "loaded_records": len(engine_instance.records),
        "timestamp": datetime.utcnow().isoformat()
    }
