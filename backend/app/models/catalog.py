"""Catalog models - reference data owned outside the pricing core."""

from pydantic import BaseModel, Field

from backend.app.models.common import MealType, StarCategory, TransportType


class RoomType(BaseModel):
    """Room type with one nightly price per season."""

    id: str
    name: str
    peak_season_price: float = Field(..., ge=0)
    season_price: float = Field(..., ge=0)
    off_season_price: float = Field(..., ge=0)


class Hotel(BaseModel):
    """Hotel and its room types."""

    id: str
    name: str
    place: str
    star_category: StarCategory = StarCategory.three_star
    room_types: list[RoomType] = Field(default_factory=list)
    area_id: str | None = None
    area_name: str | None = None


class Transportation(BaseModel):
    """Transportation offering; `vehicle_name` is what clients pick as their mode."""

    id: str
    type: TransportType
    vehicle_name: str
    cost_per_day: float = Field(0, ge=0)
    min_occupancy: int = Field(1, ge=1)
    max_occupancy: int = Field(1, ge=1)
    area_id: str | None = None
    area_name: str | None = None


class Sightseeing(BaseModel):
    """Sightseeing spot.

    `vehicle_costs` maps a vehicle class name (avanza, hiace, miniBus, bus32,
    bus39) to the whole-vehicle charge for visiting this spot by cab.
    """

    id: str
    name: str
    display_name: str | None = None
    description: str = ""
    transportation_mode: TransportType
    vehicle_costs: dict[str, float] | None = None
    entry_ticket_ids: list[str] = Field(default_factory=list)
    area_id: str | None = None
    area_name: str | None = None


class ActivityOption(BaseModel):
    """Priced option of an activity; `cost` covers `cost_for_how_many` people."""

    id: str
    name: str
    cost: float = Field(..., ge=0)
    cost_for_how_many: int = Field(1, ge=1)


class Activity(BaseModel):
    """Activity with its priced options."""

    id: str
    name: str
    location: str = ""
    options: list[ActivityOption] = Field(default_factory=list)
    area_id: str | None = None
    area_name: str | None = None


class EntryTicket(BaseModel):
    """Entry ticket scoped to one sightseeing spot.

    Pricing uses the blended per-person `cost`; adult and child costs are
    carried for display.
    """

    id: str
    name: str
    cost: float = Field(0, ge=0)
    adult_cost: float | None = Field(None, ge=0)
    child_cost: float | None = Field(None, ge=0)
    sightseeing_id: str | None = None
    area_id: str | None = None
    area_name: str | None = None


class Meal(BaseModel):
    """Per-person meal at a venue."""

    id: str
    type: MealType
    place: str
    cost: float = Field(..., ge=0)
    area_id: str | None = None
    area_name: str | None = None
