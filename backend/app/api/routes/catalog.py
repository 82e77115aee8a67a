"""Catalog cache and lookup endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from backend.app.api.auth import get_current_context
from backend.app.api.deps import get_catalog, get_catalog_cache
from backend.app.catalog.cache import CatalogCache
from backend.app.catalog.snapshot import CatalogSnapshot
from backend.app.db.context import RequestContext
from backend.app.models.catalog import RoomType, Transportation
from backend.app.models.common import Role
from backend.app.planning.availability import hotel_places, room_types_for_hotel

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/catalog", tags=["catalog"])

REFRESH_ROLES = frozenset({Role.admin, Role.operations})


class CatalogRefreshResponse(BaseModel):
    """Row counts of the freshly loaded snapshot."""

    hotels: int
    transportation: int
    sightseeing: int
    activities: int
    entry_tickets: int
    meals: int


@router.post("/refresh", response_model=CatalogRefreshResponse)
async def refresh_catalog(
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    cache: Annotated[CatalogCache, Depends(get_catalog_cache)],
) -> CatalogRefreshResponse:
    """Invalidate the cached snapshot and load a new one."""
    if ctx.role not in REFRESH_ROLES:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Catalog refresh requires admin or operations role",
        )

    cache.invalidate()
    snapshot = await cache.get_snapshot(force_refresh=True)
    logger.info(f"[catalog] Refresh requested by {ctx.user_id}")
    return CatalogRefreshResponse(
        hotels=len(snapshot.hotels),
        transportation=len(snapshot.transportation),
        sightseeing=len(snapshot.sightseeing),
        activities=len(snapshot.activities),
        entry_tickets=len(snapshot.entry_tickets),
        meals=len(snapshot.meals),
    )


@router.get("/transportation", response_model=list[Transportation])
async def list_transportation(
    catalog: Annotated[CatalogSnapshot, Depends(get_catalog)],
) -> list[Transportation]:
    """Transportation modes a client can be booked with."""
    return catalog.list_transportation()


@router.get("/hotel-places", response_model=list[str])
async def list_hotel_places(
    catalog: Annotated[CatalogSnapshot, Depends(get_catalog)],
) -> list[str]:
    """Distinct hotel places."""
    return hotel_places(catalog)


@router.get("/hotels/{hotel_id}/room-types", response_model=list[RoomType])
async def list_room_types(
    hotel_id: str,
    catalog: Annotated[CatalogSnapshot, Depends(get_catalog)],
) -> list[RoomType]:
    """Room types of a hotel (empty for an unknown hotel)."""
    return room_types_for_hotel(catalog, hotel_id)
