"""Itinerary models - day plans, versions and change log."""

from datetime import datetime

from pydantic import BaseModel, Field

from backend.app.models.client import Client
from backend.app.models.common import ChangeType


class HotelStay(BaseModel):
    """Hotel night booked for a day."""

    place: str
    hotel_id: str
    room_type_id: str


class ActivitySelection(BaseModel):
    """Activity chosen for a day with the option to price it by."""

    activity_id: str
    option_id: str


class DayPlan(BaseModel):
    """Catalog selections for one day of the trip."""

    day: int = Field(..., ge=1)
    area_id: str | None = None
    area_name: str | None = None
    pickup_location: str | None = None
    sightseeing: list[str] = Field(default_factory=list)
    hotel: HotelStay | None = None
    activities: list[ActivitySelection] = Field(default_factory=list)
    entry_tickets: list[str] = Field(default_factory=list)
    meals: list[str] = Field(default_factory=list)

    @property
    def activity_ids(self) -> list[str]:
        return [selection.activity_id for selection in self.activities]


class ItineraryChange(BaseModel):
    """Change log entry written on every version transition."""

    id: str
    version: int = Field(..., ge=1)
    change_type: ChangeType
    description: str
    timestamp: datetime
    updated_by: str


class Itinerary(BaseModel):
    """One immutable, priced version of a client's trip."""

    id: str
    client: Client
    day_plans: list[DayPlan]
    total_base_cost: float = Field(..., ge=0)
    profit_margin: float = 0
    final_price: float
    exchange_rate: float = Field(..., gt=0)
    version: int = Field(..., ge=1)
    last_updated: datetime
    updated_by: str
    change_log: list[ItineraryChange] = Field(default_factory=list)

    @property
    def client_id(self) -> str:
        return self.client.id


class ItinerarySummary(BaseModel):
    """Version listing entry."""

    itinerary_id: str
    client_id: str
    version: int
    total_base_cost: float
    final_price: float
    last_updated: datetime
    updated_by: str
    change_type: ChangeType | None = None
    description: str | None = None
