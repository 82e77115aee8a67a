"""In-memory catalog snapshot implementing the catalog lookup interface."""

from typing import Any

from pydantic import BaseModel, Field, PrivateAttr

from backend.app.models.catalog import (
    Activity,
    EntryTicket,
    Hotel,
    Meal,
    RoomType,
    Sightseeing,
    Transportation,
)
from backend.app.models.common import TransportType


class CatalogSnapshot(BaseModel):
    """Point-in-time copy of the catalog, indexed by id.

    Every lookup is total: unknown ids return None. Callers must treat the
    snapshot as read-only for the duration of a pricing computation.
    """

    hotels: list[Hotel] = Field(default_factory=list)
    transportation: list[Transportation] = Field(default_factory=list)
    sightseeing: list[Sightseeing] = Field(default_factory=list)
    activities: list[Activity] = Field(default_factory=list)
    entry_tickets: list[EntryTicket] = Field(default_factory=list)
    meals: list[Meal] = Field(default_factory=list)

    _hotels: dict[str, Hotel] = PrivateAttr(default_factory=dict)
    _sightseeing: dict[str, Sightseeing] = PrivateAttr(default_factory=dict)
    _activities: dict[str, Activity] = PrivateAttr(default_factory=dict)
    _entry_tickets: dict[str, EntryTicket] = PrivateAttr(default_factory=dict)
    _meals: dict[str, Meal] = PrivateAttr(default_factory=dict)

    def model_post_init(self, __context: Any) -> None:
        self._hotels = {hotel.id: hotel for hotel in self.hotels}
        self._sightseeing = {spot.id: spot for spot in self.sightseeing}
        self._activities = {activity.id: activity for activity in self.activities}
        self._entry_tickets = {ticket.id: ticket for ticket in self.entry_tickets}
        self._meals = {meal.id: meal for meal in self.meals}

    # Hotels

    def get_hotel(self, hotel_id: str) -> Hotel | None:
        return self._hotels.get(hotel_id)

    def get_room_type(self, hotel_id: str, room_type_id: str) -> RoomType | None:
        hotel = self.get_hotel(hotel_id)
        if hotel is None:
            return None
        for room_type in hotel.room_types:
            if room_type.id == room_type_id:
                return room_type
        return None

    def list_hotels(self) -> list[Hotel]:
        return list(self.hotels)

    # Transportation

    def list_transportation(self) -> list[Transportation]:
        return list(self.transportation)

    def find_transportation_by_name(self, name: str) -> Transportation | None:
        """Exact vehicle-name match; first entry wins on duplicates."""
        for entry in self.transportation:
            if entry.vehicle_name == name:
                return entry
        return None

    # Sightseeing

    def list_sightseeing(
        self, transportation_mode: TransportType | None = None
    ) -> list[Sightseeing]:
        if transportation_mode is None:
            return list(self.sightseeing)
        return [spot for spot in self.sightseeing if spot.transportation_mode == transportation_mode]

    def get_sightseeing(self, sightseeing_id: str) -> Sightseeing | None:
        return self._sightseeing.get(sightseeing_id)

    # Activities, tickets, meals

    def get_activity(self, activity_id: str) -> Activity | None:
        return self._activities.get(activity_id)

    def list_activities(self) -> list[Activity]:
        return list(self.activities)

    def get_entry_ticket(self, ticket_id: str) -> EntryTicket | None:
        return self._entry_tickets.get(ticket_id)

    def list_entry_tickets(self) -> list[EntryTicket]:
        return list(self.entry_tickets)

    def get_meal(self, meal_id: str) -> Meal | None:
        return self._meals.get(meal_id)

    def list_meals(self) -> list[Meal]:
        return list(self.meals)
