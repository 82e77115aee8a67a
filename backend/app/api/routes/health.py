"""Health check endpoints.

- Checks DB connectivity when the SQL backend is configured
- Reports whether a catalog snapshot is loaded
- Returns honest status with component details
"""

import asyncio
from typing import Any

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text

from backend.app.api.deps import get_catalog_cache
from backend.app.config import Settings, get_settings
from backend.app.db.engine import get_session_factory

router = APIRouter()


def _ping_db() -> None:
    with get_session_factory()() as session:
        session.execute(text("SELECT 1"))


async def check_db(settings: Settings) -> tuple[bool, str]:
    """Check database connectivity.

    Returns:
        (is_ok, status_message)
    """
    if settings.store_backend != "sql":
        return (True, "not_configured")

    try:
        await asyncio.to_thread(_ping_db)

        return (True, "ok")
    except Exception as e:
        return (False, f"error: {type(e).__name__}")


async def check_catalog() -> tuple[bool, str]:
    """Report catalog cache state (informational, never fails the check).

    Returns:
        (is_ok, status_message)
    """
    cache = get_catalog_cache()
    if cache.peek() is None:
        return (True, "cold")
    return (True, "fresh" if cache.is_fresh() else "expired")


@router.get("/health")
async def health() -> dict[str, str]:
    """Simple health check for Docker/k8s.

    Returns:
        200 OK always (application is running)
    """
    return {"status": "ok"}


@router.get("/healthz", response_model=None)
async def healthz() -> dict[str, Any] | JSONResponse:
    """Health check endpoint.

    Returns:
        200 with component status if the store is reachable
        503 if it is not
    """
    settings = get_settings()

    db_ok, db_status = await check_db(settings)
    _, catalog_status = await check_catalog()

    response_body = {
        "status": "ok" if db_ok else "degraded",
        "components": {
            "db": db_status,
            "catalog": catalog_status,
            "store_backend": settings.store_backend,
        },
    }

    if not db_ok:
        return JSONResponse(content=response_body, status_code=503)

    return response_body
