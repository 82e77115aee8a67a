"""Selection availability for the day being planned.

Sightseeing spots, activities and entry tickets are consumed by the day they
are picked on: later days never offer them again. Hotels and meals can
repeat across days.
"""

from collections.abc import Sequence

from pydantic import BaseModel, Field

from backend.app.db.repositories import CatalogRepository
from backend.app.models.catalog import Activity, EntryTicket, Hotel, Meal, RoomType, Sightseeing
from backend.app.models.client import Client
from backend.app.models.common import MealType, TransportType
from backend.app.models.itinerary import DayPlan
from backend.app.pricing.engine import resolve_transport_type


class AvailableItems(BaseModel):
    """Candidates for one day, given the selections of earlier days."""

    day: int
    sightseeing: list[Sightseeing]
    excluded_activity_ids: set[str] = Field(default_factory=set)
    excluded_ticket_ids: set[str] = Field(default_factory=set)


class DuplicateSelection(BaseModel):
    """An item selected on more than one day."""

    kind: str  # "sightseeing" | "activity" | "entry_ticket"
    item_id: str
    days: list[int]


def _matches(search: str | None, *fields: str | None) -> bool:
    if not search:
        return True
    needle = search.lower()
    return any(needle in (value or "").lower() for value in fields)


def _matches_area(area_id: str | None, item_area_id: str | None) -> bool:
    return not area_id or item_area_id == area_id


def sightseeing_for_mode(
    catalog: CatalogRepository, transport_type: TransportType | None
) -> list[Sightseeing]:
    """Spots reachable with the client's transport type; all spots if unknown."""
    return catalog.list_sightseeing(transport_type)


def consumed_before(
    day: int, day_plans: Sequence[DayPlan]
) -> tuple[set[str], set[str], set[str]]:
    """Sightseeing, activity and ticket ids used on days 1..day-1.

    Args:
        day: 1-based day index being planned
        day_plans: In-progress day plans, in day order

    Returns:
        (sightseeing ids, activity ids, entry ticket ids)
    """
    sightseeing_ids: set[str] = set()
    activity_ids: set[str] = set()
    ticket_ids: set[str] = set()

    for plan in day_plans[: max(day - 1, 0)]:
        sightseeing_ids.update(plan.sightseeing)
        activity_ids.update(plan.activity_ids)
        ticket_ids.update(plan.entry_tickets)

    return sightseeing_ids, activity_ids, ticket_ids


def available_items_for_day(
    day: int,
    day_plans: Sequence[DayPlan],
    client: Client,
    catalog: CatalogRepository,
) -> AvailableItems:
    """Sightseeing still selectable on `day` plus the ids excluded for it.

    The transport-mode pre-filter is applied first, then everything consumed
    on earlier days is removed.
    """
    used_spots, used_activities, used_tickets = consumed_before(day, day_plans)
    transport_type = resolve_transport_type(client, catalog)
    spots = [
        spot
        for spot in sightseeing_for_mode(catalog, transport_type)
        if spot.id not in used_spots
    ]
    return AvailableItems(
        day=day,
        sightseeing=spots,
        excluded_activity_ids=used_activities,
        excluded_ticket_ids=used_tickets,
    )


def filter_sightseeing(
    available: AvailableItems,
    area_id: str | None = None,
    search: str | None = None,
) -> list[Sightseeing]:
    """Narrow available spots by area and a name/description search term."""
    return [
        spot
        for spot in available.sightseeing
        if _matches_area(area_id, spot.area_id) and _matches(search, spot.name, spot.description)
    ]


def available_activities_for_day(
    day: int,
    day_plans: Sequence[DayPlan],
    catalog: CatalogRepository,
    area_id: str | None = None,
    search: str | None = None,
) -> list[Activity]:
    """Activities not yet used on earlier days."""
    _, used_activities, _ = consumed_before(day, day_plans)
    return [
        activity
        for activity in catalog.list_activities()
        if activity.id not in used_activities
        and _matches_area(area_id, activity.area_id)
        and _matches(search, activity.name, activity.location)
    ]


def available_tickets_for_day(
    day: int,
    day_plans: Sequence[DayPlan],
    catalog: CatalogRepository,
    search: str | None = None,
) -> list[EntryTicket]:
    """Entry tickets for the spots selected on `day`, minus those used earlier."""
    _, _, used_tickets = consumed_before(day, day_plans)
    selected_spots: set[str] = set()
    if 1 <= day <= len(day_plans):
        selected_spots = set(day_plans[day - 1].sightseeing)

    return [
        ticket
        for ticket in catalog.list_entry_tickets()
        if ticket.sightseeing_id in selected_spots
        and ticket.id not in used_tickets
        and _matches(search, ticket.name)
    ]


def meals_by_type(
    catalog: CatalogRepository,
    meal_type: MealType,
    area_id: str | None = None,
    search: str | None = None,
) -> list[Meal]:
    """Meals of one type; meals are never consumed by earlier days."""
    return [
        meal
        for meal in catalog.list_meals()
        if meal.type == meal_type
        and _matches_area(area_id, meal.area_id)
        and _matches(search, meal.place)
    ]


def hotel_places(catalog: CatalogRepository) -> list[str]:
    """Distinct hotel places in catalog order."""
    return list(dict.fromkeys(hotel.place for hotel in catalog.list_hotels()))


def hotels_for_place(
    catalog: CatalogRepository, place: str, search: str | None = None
) -> list[Hotel]:
    return [
        hotel
        for hotel in catalog.list_hotels()
        if hotel.place == place and _matches(search, hotel.name)
    ]


def room_types_for_hotel(catalog: CatalogRepository, hotel_id: str) -> list[RoomType]:
    hotel = catalog.get_hotel(hotel_id)
    return list(hotel.room_types) if hotel is not None else []


def find_duplicate_selections(day_plans: Sequence[DayPlan]) -> list[DuplicateSelection]:
    """Items that appear on more than one day.

    The builder prevents these going forward, but an earlier day edited
    after a later one can still collide with it.
    """
    seen: dict[tuple[str, str], list[int]] = {}
    for plan in day_plans:
        for spot_id in dict.fromkeys(plan.sightseeing):
            seen.setdefault(("sightseeing", spot_id), []).append(plan.day)
        for activity_id in dict.fromkeys(plan.activity_ids):
            seen.setdefault(("activity", activity_id), []).append(plan.day)
        for ticket_id in dict.fromkeys(plan.entry_tickets):
            seen.setdefault(("entry_ticket", ticket_id), []).append(plan.day)

    return [
        DuplicateSelection(kind=kind, item_id=item_id, days=days)
        for (kind, item_id), days in seen.items()
        if len(days) > 1
    ]
