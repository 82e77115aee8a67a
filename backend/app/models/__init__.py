"""Models package - re-exports for convenience."""

from backend.app.models.catalog import (
    Activity,
    ActivityOption,
    EntryTicket,
    Hotel,
    Meal,
    RoomType,
    Sightseeing,
    Transportation,
)
from backend.app.models.client import (
    Client,
    FollowUpRecord,
    FollowUpStatus,
    PartySize,
    TravelDates,
)
from backend.app.models.common import (
    ChangeType,
    FollowUpStage,
    MealType,
    PlanningStep,
    Role,
    Season,
    StarCategory,
    TransportType,
)
from backend.app.models.itinerary import (
    ActivitySelection,
    DayPlan,
    HotelStay,
    Itinerary,
    ItineraryChange,
    ItinerarySummary,
)
from backend.app.models.pricing import CostBreakdown, PriceQuote, StalenessReport

__all__ = [
    # Common
    "TransportType",
    "MealType",
    "StarCategory",
    "Season",
    "Role",
    "ChangeType",
    "FollowUpStage",
    "PlanningStep",
    # Catalog
    "Hotel",
    "RoomType",
    "Transportation",
    "Sightseeing",
    "Activity",
    "ActivityOption",
    "EntryTicket",
    "Meal",
    # Client
    "Client",
    "TravelDates",
    "PartySize",
    "FollowUpStatus",
    "FollowUpRecord",
    # Itinerary
    "Itinerary",
    "DayPlan",
    "HotelStay",
    "ActivitySelection",
    "ItineraryChange",
    "ItinerarySummary",
    # Pricing
    "CostBreakdown",
    "PriceQuote",
    "StalenessReport",
]
