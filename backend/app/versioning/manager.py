"""Itinerary version manager.

Produces the next immutable itinerary version from the previous one and the
proposed trip parameters, and detects stored versions whose price no longer
matches the catalog. Pure: the caller supplies the catalog snapshot, the
actor and (optionally) the clock.
"""

import uuid
from collections.abc import Sequence
from datetime import UTC, datetime

from backend.app.db.repositories import CatalogRepository
from backend.app.models.client import Client
from backend.app.models.common import ChangeType
from backend.app.models.itinerary import DayPlan, Itinerary, ItineraryChange
from backend.app.models.pricing import StalenessReport
from backend.app.pricing.engine import compute_base_cost

STALE_TOLERANCE = 0.01


def normalize_day_plans(day_plans: Sequence[DayPlan], number_of_days: int) -> list[DayPlan]:
    """Fit day plans to the client's day count.

    Extra days are dropped, missing days are appended empty, and days are
    renumbered 1..number_of_days in their given order. Inputs are not mutated.
    """
    normalized: list[DayPlan] = []
    for index in range(number_of_days):
        if index < len(day_plans):
            normalized.append(day_plans[index].model_copy(update={"day": index + 1}, deep=True))
        else:
            normalized.append(DayPlan(day=index + 1))
    return normalized


def price(client: Client, day_plans: Sequence[DayPlan], catalog: CatalogRepository) -> float:
    """Base cost of the client's trip after normalizing the day plans."""
    return compute_base_cost(client, normalize_day_plans(day_plans, client.number_of_days), catalog)


def _hotel_signature(day_plans: Sequence[DayPlan]) -> list[tuple[str, str] | None]:
    return [
        (plan.hotel.hotel_id, plan.hotel.room_type_id) if plan.hotel is not None else None
        for plan in day_plans
    ]


def _activity_signature(day_plans: Sequence[DayPlan]) -> list[list[tuple[str, str]]]:
    return [[(a.activity_id, a.option_id) for a in plan.activities] for plan in day_plans]


def classify_change(
    previous: Itinerary | None,
    client: Client,
    day_plans: Sequence[DayPlan],
    profit_margin: float,
    exchange_rate: float,
) -> tuple[ChangeType, str]:
    """Suggest a change type and description for a proposed version.

    Checks run in priority order: creation, day count, hotels, activities,
    margin/exchange rate, then anything else.
    """
    if previous is None:
        return ChangeType.created, f"Itinerary created for {client.number_of_days} days"

    old_days = previous.client.number_of_days
    new_days = client.number_of_days
    if old_days != new_days:
        return ChangeType.days_modified, f"Days changed from {old_days} to {new_days}"

    if _hotel_signature(previous.day_plans) != _hotel_signature(day_plans):
        return ChangeType.hotels_changed, "Hotel selections changed"

    if _activity_signature(previous.day_plans) != _activity_signature(day_plans):
        return ChangeType.activities_changed, "Activity selections changed"

    if previous.profit_margin != profit_margin or previous.exchange_rate != exchange_rate:
        return (
            ChangeType.pricing_updated,
            f"Profit margin {previous.profit_margin:.2f} -> {profit_margin:.2f}, "
            f"exchange rate {previous.exchange_rate:g} -> {exchange_rate:g}",
        )

    return ChangeType.general_edit, "Itinerary details updated"


def build_next_version(
    previous: Itinerary | None,
    client: Client,
    day_plans: Sequence[DayPlan],
    profit_margin: float,
    exchange_rate: float,
    *,
    actor: str,
    change_type: ChangeType,
    description: str,
    catalog: CatalogRepository,
    now: datetime | None = None,
) -> Itinerary:
    """Build the next itinerary version.

    The base cost is always recomputed against `catalog`, never carried over
    from `previous`, so a stale price cannot propagate into a new version.

    Args:
        previous: Latest stored version, or None on first creation
        client: Proposed client parameters
        day_plans: Proposed day plans (normalized to client.number_of_days)
        profit_margin: Margin added on top of the base cost
        exchange_rate: Secondary-currency rate for display
        actor: ID of the user making the change
        change_type: Kind of change for the change log
        description: Human-readable summary of the change
        catalog: Current catalog data
        now: Timestamp override (defaults to current UTC time)

    Returns:
        New itinerary with version = previous.version + 1 (or 1)
    """
    timestamp = now or datetime.now(UTC)
    version = previous.version + 1 if previous is not None else 1
    normalized = normalize_day_plans(day_plans, client.number_of_days)
    total_base_cost = compute_base_cost(client, normalized, catalog)

    change = ItineraryChange(
        id=uuid.uuid4().hex,
        version=version,
        change_type=change_type,
        description=description,
        timestamp=timestamp,
        updated_by=actor,
    )
    previous_log = [entry.model_copy() for entry in previous.change_log] if previous else []

    return Itinerary(
        id=previous.id if previous is not None else uuid.uuid4().hex,
        client=client.model_copy(deep=True),
        day_plans=normalized,
        total_base_cost=total_base_cost,
        profit_margin=profit_margin,
        final_price=total_base_cost + profit_margin,
        exchange_rate=exchange_rate,
        version=version,
        last_updated=timestamp,
        updated_by=actor,
        change_log=[*previous_log, change],
    )


def check_staleness(
    itinerary: Itinerary,
    catalog: CatalogRepository,
    tolerance: float = STALE_TOLERANCE,
) -> StalenessReport:
    """Re-price a stored itinerary and compare with its stored base cost.

    A difference strictly greater than `tolerance` marks it stale.
    """
    current = compute_base_cost(itinerary.client, itinerary.day_plans, catalog)
    difference = current - itinerary.total_base_cost
    return StalenessReport(
        client_id=itinerary.client_id,
        version=itinerary.version,
        stored_base_cost=itinerary.total_base_cost,
        current_base_cost=current,
        difference=difference,
        is_stale=abs(difference) > tolerance,
        current_final_price=current + itinerary.profit_margin,
    )


def is_stale(
    itinerary: Itinerary,
    catalog: CatalogRepository,
    tolerance: float = STALE_TOLERANCE,
) -> bool:
    """Whether the stored base cost disagrees with current catalog prices."""
    return check_staleness(itinerary, catalog, tolerance).is_stale
