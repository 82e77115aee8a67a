"""Itinerary pricing engine.

Pure functions: no I/O, no clock, no mutation of inputs. Every catalog
reference that cannot be resolved contributes zero, so itineraries built
against catalog rows that were later removed stay priceable.
"""

import math
from collections.abc import Sequence
from datetime import date

from backend.app.db.repositories import CatalogRepository
from backend.app.models.catalog import ActivityOption, RoomType, Sightseeing
from backend.app.models.client import Client
from backend.app.models.common import Season, TransportType
from backend.app.models.itinerary import DayPlan
from backend.app.models.pricing import CostBreakdown

# Occupancy tiers, ascending: (max pax seated, vehicle class key in Sightseeing.vehicle_costs).
# None marks the largest class, used for any party above the previous tier.
VEHICLE_TIERS: tuple[tuple[int | None, str], ...] = (
    (6, "avanza"),
    (12, "hiace"),
    (27, "miniBus"),
    (32, "bus32"),
    (None, "bus39"),
)

# Flat per-spot fuel/parking surcharge for self-drive sightseeing.
SELF_DRIVE_SURCHARGE: dict[TransportType, float] = {
    TransportType.self_drive_car: 15.0,
    TransportType.self_drive_scooter: 8.0,
}


def season_for_date(day: date | None) -> Season:
    """Classify a date into a pricing season.

    Peak: Dec 20 - Jan 5 inclusive (wraps the year boundary).
    Season: Jul 1 - Aug 31 inclusive.
    Everything else, including an unknown date, is off-season.
    """
    if day is None:
        return Season.off_season
    if (day.month == 12 and day.day >= 20) or (day.month == 1 and day.day <= 5):
        return Season.peak
    if day.month in (7, 8):
        return Season.season
    return Season.off_season


def get_seasonal_price(room_type: RoomType, start_date: date | None) -> float:
    """Nightly price of a room type for a trip starting on `start_date`."""
    season = season_for_date(start_date)
    if season == Season.peak:
        return room_type.peak_season_price
    if season == Season.season:
        return room_type.season_price
    return room_type.off_season_price


def get_vehicle_cost_by_pax(sightseeing: Sightseeing, total_pax: int) -> float:
    """Whole-vehicle cost of the smallest vehicle class seating `total_pax`.

    Returns 0 when the spot has no vehicle cost table or no price for the
    selected class.
    """
    if not sightseeing.vehicle_costs:
        return 0.0

    for max_pax, vehicle_class in VEHICLE_TIERS:
        if max_pax is None or total_pax <= max_pax:
            return float(sightseeing.vehicle_costs.get(vehicle_class, 0.0))
    return 0.0


def get_activity_option_cost(option: ActivityOption, total_pax: int) -> float:
    """Cost of an activity option for the whole party.

    An option covering at least the whole party is charged once; otherwise
    the party is split into ceil(pax / cost_for_how_many) priced groups.
    """
    if option.cost_for_how_many >= total_pax:
        return option.cost
    groups_needed = math.ceil(total_pax / option.cost_for_how_many)
    return option.cost * groups_needed


def resolve_transport_type(client: Client, catalog: CatalogRepository) -> TransportType | None:
    """Classify the client's free-form transportation label.

    Resolution order:
    1. Type of the catalog Transportation whose vehicle name matches exactly
    2. The label itself when it is a transport type value ("cab", ...)
    3. Any label containing "cab" is treated as a cab mode

    Returns None when the label cannot be classified.
    """
    label = client.transportation_mode
    if not label:
        return None

    entry = catalog.find_transportation_by_name(label)
    if entry is not None:
        return entry.type

    try:
        return TransportType(label)
    except ValueError:
        pass

    if "cab" in label.lower():
        return TransportType.cab
    return None


def compute_cost_breakdown(
    client: Client,
    day_plans: Sequence[DayPlan],
    catalog: CatalogRepository,
) -> CostBreakdown:
    """Price an itinerary and return per-category subtotals.

    Day plans are priced as given: no de-duplication of items repeated across
    days and no normalization to `client.number_of_days`.

    Args:
        client: Trip parameters (pax, start date, transportation mode, days)
        day_plans: Selections per day
        catalog: Catalog lookups

    Returns:
        Cost breakdown whose `total` is the base cost
    """
    total_pax = client.total_pax
    start_date = client.travel_dates.start_date if client.travel_dates.is_concrete else None
    transport_type = resolve_transport_type(client, catalog)
    is_cab_mode = transport_type == TransportType.cab

    transportation_cost = 0.0
    hotels_cost = 0.0
    sightseeing_cost = 0.0
    activities_cost = 0.0
    tickets_cost = 0.0
    meals_cost = 0.0

    # 1. Flat per-day charge for self-drive vehicles; cab costs go per spot
    vehicle = catalog.find_transportation_by_name(client.transportation_mode)
    if vehicle is not None and vehicle.type != TransportType.cab:
        transportation_cost += vehicle.cost_per_day * client.number_of_days

    for day_plan in day_plans:
        # 2. Hotel night, season chosen from the trip start date
        if day_plan.hotel is not None:
            room_type = catalog.get_room_type(day_plan.hotel.hotel_id, day_plan.hotel.room_type_id)
            if room_type is not None:
                hotels_cost += get_seasonal_price(room_type, start_date)

        # 3. Sightseeing
        for sightseeing_id in day_plan.sightseeing:
            spot = catalog.get_sightseeing(sightseeing_id)
            if spot is None:
                continue
            if is_cab_mode:
                if spot.transportation_mode == TransportType.cab:
                    sightseeing_cost += get_vehicle_cost_by_pax(spot, total_pax)
            else:
                sightseeing_cost += SELF_DRIVE_SURCHARGE.get(spot.transportation_mode, 0.0)

        # 4. Activities
        for selection in day_plan.activities:
            activity = catalog.get_activity(selection.activity_id)
            if activity is None:
                continue
            option = next((o for o in activity.options if o.id == selection.option_id), None)
            if option is not None:
                activities_cost += get_activity_option_cost(option, total_pax)

        # 5. Entry tickets, blended per-person cost
        for ticket_id in day_plan.entry_tickets:
            ticket = catalog.get_entry_ticket(ticket_id)
            if ticket is not None:
                tickets_cost += ticket.cost * total_pax

        # 6. Meals, per person
        for meal_id in day_plan.meals:
            meal = catalog.get_meal(meal_id)
            if meal is not None:
                meals_cost += meal.cost * total_pax

    total = (
        transportation_cost
        + hotels_cost
        + sightseeing_cost
        + activities_cost
        + tickets_cost
        + meals_cost
    )

    return CostBreakdown(
        transportation=transportation_cost,
        hotels=hotels_cost,
        sightseeing=sightseeing_cost,
        activities=activities_cost,
        entry_tickets=tickets_cost,
        meals=meals_cost,
        total=total,
    )


def compute_base_cost(
    client: Client,
    day_plans: Sequence[DayPlan],
    catalog: CatalogRepository,
) -> float:
    """Base cost (before profit margin) of an itinerary."""
    return compute_cost_breakdown(client, day_plans, catalog).total
