"""FastAPI application serving the Record Search engine."""

import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from .api import health_router, metrics_router, search_router
from .config import Settings, get_settings
from .engine_instance import load_records
from .models.request import ALL_METHODS
from .models.response import ErrorResponse

DESCRIPTION = "Multi-strategy search and ranking over institution, program and location records"


def configure_logging(settings: Settings) -> None:
    """Route structlog through stdlib logging with a JSON or console renderer."""
    logging.basicConfig(format="%(message)s", level=settings.log_level.upper())

    renderer = (
        structlog.processors.JSONRenderer()
        if settings.log_format == "json"
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


settings = get_settings()
configure_logging(settings)
logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Load the served record collection before accepting requests."""
    logger.info("Starting Record Search service", version=settings.app_version)

    try:
        total = load_records(settings.records_path)
        logger.info("Records loaded", total_records=total, path=settings.records_path or "sample")
    except FileNotFoundError:
        logger.warning("Records file not found, serving an empty collection", path=settings.records_path)
    except Exception as e:
        logger.error("Failed to load records", error=str(e))
        raise

    yield

    logger.info("Shutting down Record Search service")


app = FastAPI(
    title=settings.app_name,
    description=DESCRIPTION,
    version=settings.app_version,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(GZipMiddleware, minimum_size=1000)


@app.middleware("http")
async def log_requests(request: Request, call_next) -> Response:
    """Log each request once it completes, with its latency."""
    start_time = time.time()
    response = await call_next(request)

    logger.info(
        "Request completed",
        method=request.method,
        path=request.url.path,
        query=request.url.query or None,
        client_ip=request.client.host if request.client else None,
        status_code=response.status_code,
        process_time_ms=round((time.time() - start_time) * 1000, 2)
    )
    return response


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Turn unhandled errors into a 500 ErrorResponse."""
    logger.error(
        "Unhandled exception",
        method=request.method,
        path=request.url.path,
        error=str(exc),
        exc_info=True
    )

    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            error="Internal Server Error",
            message="An unexpected error occurred",
            details={"exception": str(exc)} if settings.debug else None
        ).model_dump(mode="json")
    )


app.include_router(search_router)
app.include_router(health_router)
app.include_router(metrics_router)


@app.get("/", summary="Root endpoint", description="Basic service information")
async def root() -> dict:
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "description": DESCRIPTION,
        "docs_url": "/docs",
        "health_url": "/api/v1/health",
        "status": "running"
    }


@app.get("/api", summary="API information", description="Endpoints, strategies and search defaults")
async def api_info() -> dict:
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "endpoints": {
            "search": "/api/v1/search",
            "search_loaded": "/api/v1/search/{query}",
            "suggestions": "/api/v1/suggestions/{query}",
            "records": "/api/v1/records/count",
            "health": "/api/v1/health",
            "status": "/api/v1/status",
            "metrics": "/api/v1/metrics"
        },
        "strategies": [method.value for method in ALL_METHODS],
        "defaults": {
            "fuzzy_threshold": settings.fuzzy_threshold,
            "max_results": settings.max_results,
            "max_query_length": settings.max_query_length,
            "regex_timeout_ms": settings.regex_timeout_ms
        }
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "record_search.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        workers=1 if settings.debug else settings.workers,
        log_level=settings.log_level.lower()
    )
