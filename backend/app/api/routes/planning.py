"""Day-planning availability endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from backend.app.api.auth import get_current_context
from backend.app.api.deps import get_catalog, get_itinerary_service
from backend.app.catalog.snapshot import CatalogSnapshot
from backend.app.db.context import RequestContext
from backend.app.models.catalog import Activity, EntryTicket, Hotel, Meal, Sightseeing
from backend.app.models.common import MealType
from backend.app.models.itinerary import DayPlan
from backend.app.planning.availability import (
    DuplicateSelection,
    available_activities_for_day,
    available_items_for_day,
    available_tickets_for_day,
    filter_sightseeing,
    find_duplicate_selections,
    hotels_for_place,
    meals_by_type,
)
from backend.app.services.itinerary_service import ItineraryService
from backend.app.versioning.manager import normalize_day_plans

router = APIRouter(prefix="/clients/{client_id}/planning", tags=["planning"])


class AvailabilityRequest(BaseModel):
    """Request body for POST /clients/{client_id}/planning/availability."""

    day: int = Field(..., ge=1)
    day_plans: list[DayPlan] = Field(default_factory=list)
    area_id: str | None = None
    search: str | None = None
    hotel_place: str | None = None


class AvailabilityResponse(BaseModel):
    """Candidates for one day given the in-progress plans."""

    day: int
    sightseeing: list[Sightseeing]
    activities: list[Activity]
    entry_tickets: list[EntryTicket]
    meals: dict[MealType, list[Meal]]
    hotels: list[Hotel]
    excluded_activity_ids: list[str]
    excluded_ticket_ids: list[str]
    duplicates: list[DuplicateSelection]


@router.post("/availability", response_model=AvailabilityResponse)
def availability(
    client_id: str,
    request: AvailabilityRequest,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    catalog: Annotated[CatalogSnapshot, Depends(get_catalog)],
    service: Annotated[ItineraryService, Depends(get_itinerary_service)],
) -> AvailabilityResponse:
    """What can still be picked on `day`.

    A day beyond the client's day count yields nothing selectable.
    """
    client = service.get_client(client_id, ctx.owner_filter)
    day_plans = normalize_day_plans(request.day_plans, client.number_of_days)

    if request.day > client.number_of_days:
        return AvailabilityResponse(
            day=request.day,
            sightseeing=[],
            activities=[],
            entry_tickets=[],
            meals={},
            hotels=[],
            excluded_activity_ids=[],
            excluded_ticket_ids=[],
            duplicates=find_duplicate_selections(day_plans),
        )

    items = available_items_for_day(request.day, day_plans, client, catalog)
    hotels = (
        hotels_for_place(catalog, request.hotel_place, request.search)
        if request.hotel_place
        else catalog.list_hotels()
    )

    return AvailabilityResponse(
        day=request.day,
        sightseeing=filter_sightseeing(items, request.area_id, request.search),
        activities=available_activities_for_day(
            request.day, day_plans, catalog, request.area_id, request.search
        ),
        entry_tickets=available_tickets_for_day(request.day, day_plans, catalog, request.search),
        meals={
            meal_type: meals_by_type(catalog, meal_type, request.area_id)
            for meal_type in MealType
        },
        hotels=hotels,
        excluded_activity_ids=sorted(items.excluded_activity_ids),
        excluded_ticket_ids=sorted(items.excluded_ticket_ids),
        duplicates=find_duplicate_selections(day_plans),
    )
