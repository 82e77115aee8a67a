"""Itinerary version endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from backend.app.api.auth import get_current_context
from backend.app.api.deps import get_catalog, get_itinerary_service
from backend.app.catalog.snapshot import CatalogSnapshot
from backend.app.config import get_settings
from backend.app.db.context import RequestContext
from backend.app.models.common import ChangeType
from backend.app.models.itinerary import DayPlan, Itinerary, ItinerarySummary
from backend.app.models.pricing import StalenessReport
from backend.app.services.itinerary_service import ItineraryService

router = APIRouter(prefix="/clients/{client_id}/itinerary", tags=["itineraries"])


class SaveItineraryRequest(BaseModel):
    """Request body for POST /clients/{client_id}/itinerary."""

    day_plans: list[DayPlan] = Field(default_factory=list)
    profit_margin: float = 0
    exchange_rate: float | None = Field(None, gt=0)
    expected_version: int | None = Field(
        None, ge=0, description="Latest version the edit was based on (0 for none)"
    )
    change_type: ChangeType | None = None
    description: str | None = None


class LatestItineraryResponse(BaseModel):
    """Response for GET /clients/{client_id}/itinerary."""

    itinerary: Itinerary
    staleness: StalenessReport


@router.post("", response_model=Itinerary, status_code=status.HTTP_201_CREATED)
def save_itinerary(
    client_id: str,
    request: SaveItineraryRequest,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    catalog: Annotated[CatalogSnapshot, Depends(get_catalog)],
    service: Annotated[ItineraryService, Depends(get_itinerary_service)],
) -> Itinerary:
    """Create the first version or append the next one."""
    return service.save_itinerary(
        client_id,
        request.day_plans,
        request.profit_margin,
        request.exchange_rate or get_settings().default_exchange_rate,
        actor=ctx.user_id,
        catalog=catalog,
        change_type=request.change_type,
        description=request.description,
        expected_version=request.expected_version,
        owner=ctx.owner_filter,
    )


@router.get("", response_model=LatestItineraryResponse)
def get_latest_itinerary(
    client_id: str,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    catalog: Annotated[CatalogSnapshot, Depends(get_catalog)],
    service: Annotated[ItineraryService, Depends(get_itinerary_service)],
) -> LatestItineraryResponse:
    """Latest version with a staleness check against current catalog prices."""
    itinerary, report = service.get_latest(client_id, catalog, ctx.owner_filter)
    return LatestItineraryResponse(itinerary=itinerary, staleness=report)


@router.post("/reprice", response_model=Itinerary, status_code=status.HTTP_201_CREATED)
def reprice_itinerary(
    client_id: str,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    catalog: Annotated[CatalogSnapshot, Depends(get_catalog)],
    service: Annotated[ItineraryService, Depends(get_itinerary_service)],
) -> Itinerary:
    """Append a version priced against the current catalog."""
    return service.reprice(client_id, actor=ctx.user_id, catalog=catalog, owner=ctx.owner_filter)


@router.get("/versions", response_model=list[ItinerarySummary])
def list_versions(
    client_id: str,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    service: Annotated[ItineraryService, Depends(get_itinerary_service)],
) -> list[ItinerarySummary]:
    """Version history, newest first."""
    return service.list_versions(client_id, ctx.owner_filter)


@router.get("/versions/{version}", response_model=Itinerary)
def get_version(
    client_id: str,
    version: int,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    service: Annotated[ItineraryService, Depends(get_itinerary_service)],
) -> Itinerary:
    """One stored version."""
    return service.get_version(client_id, version, ctx.owner_filter)
