"""FastAPI application."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from backend.app.api.routes.catalog import router as catalog_router
from backend.app.api.routes.clients import router as clients_router
from backend.app.api.routes.health import router as health_router
from backend.app.api.routes.itineraries import router as itineraries_router
from backend.app.api.routes.metrics import router as metrics_router
from backend.app.api.routes.planning import router as planning_router
from backend.app.api.routes.pricing import router as pricing_router
from backend.app.config import get_settings
from backend.app.errors import (
    ClientNotFoundError,
    FollowUpTransitionError,
    ItineraryNotFoundError,
    StoreError,
    VersionConflictError,
)
from backend.app.utils.logging import configure_logging

logger = logging.getLogger(__name__)

configure_logging(get_settings().log_level)

app = FastAPI(title="Travel Back-Office API", version="0.1.0")

# Register routes
app.include_router(health_router, tags=["health"])
app.include_router(metrics_router, tags=["metrics"])
app.include_router(pricing_router)
app.include_router(clients_router)
app.include_router(itineraries_router)
app.include_router(planning_router)
app.include_router(catalog_router)


@app.exception_handler(ClientNotFoundError)
@app.exception_handler(ItineraryNotFoundError)
async def not_found_handler(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


@app.exception_handler(VersionConflictError)
async def version_conflict_handler(request: Request, exc: VersionConflictError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={
            "detail": str(exc),
            "client_id": exc.client_id,
            "expected_version": exc.expected_version,
            "actual_version": exc.actual_version,
        },
    )


@app.exception_handler(FollowUpTransitionError)
async def follow_up_handler(request: Request, exc: FollowUpTransitionError) -> JSONResponse:
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    logger.error(f"[store] {exc}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content={"detail": "Store unavailable"}
    )


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {"message": "Travel Back-Office API", "version": "0.1.0"}
