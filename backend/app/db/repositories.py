"""Repository protocol interfaces for catalog and itinerary data access."""

from datetime import date
from typing import TYPE_CHECKING, Protocol

from backend.app.models.catalog import (
    Activity,
    EntryTicket,
    Hotel,
    Meal,
    RoomType,
    Sightseeing,
    Transportation,
)
from backend.app.models.client import Client
from backend.app.models.common import TransportType
from backend.app.models.itinerary import Itinerary, ItinerarySummary

if TYPE_CHECKING:
    from backend.app.catalog.snapshot import CatalogSnapshot


class CatalogRepository(Protocol):
    """Read-only catalog lookups used by pricing and planning.

    All lookups are total: an unknown id yields None, never an error.
    """

    def get_hotel(self, hotel_id: str) -> Hotel | None: ...

    def get_room_type(self, hotel_id: str, room_type_id: str) -> RoomType | None: ...

    def list_hotels(self) -> list[Hotel]: ...

    def list_transportation(self) -> list[Transportation]: ...

    def find_transportation_by_name(self, name: str) -> Transportation | None: ...

    def list_sightseeing(
        self, transportation_mode: TransportType | None = None
    ) -> list[Sightseeing]: ...

    def get_sightseeing(self, sightseeing_id: str) -> Sightseeing | None: ...

    def get_activity(self, activity_id: str) -> Activity | None: ...

    def list_activities(self) -> list[Activity]: ...

    def get_entry_ticket(self, ticket_id: str) -> EntryTicket | None: ...

    def list_entry_tickets(self) -> list[EntryTicket]: ...

    def get_meal(self, meal_id: str) -> Meal | None: ...

    def list_meals(self) -> list[Meal]: ...


class CatalogSource(Protocol):
    """Backing source the catalog cache reads snapshots from."""

    def fetch_snapshot(self) -> "CatalogSnapshot":
        """Load the full catalog.

        Returns:
            Fresh catalog snapshot
        """
        ...


class ItineraryStore(Protocol):
    """Versioned itinerary persistence, one version history per client."""

    def load_latest_itinerary(self, client_id: str) -> Itinerary | None:
        """Get the highest stored version for a client.

        Args:
            client_id: Client ID

        Returns:
            Latest itinerary or None if the client has none
        """
        ...

    def save_itinerary(self, itinerary: Itinerary) -> Itinerary:
        """Persist a new version.

        The store compares-and-swaps: `itinerary.version` must be exactly one
        more than the stored latest version (or 1 when none is stored).

        Args:
            itinerary: Itinerary version to persist

        Returns:
            The persisted itinerary

        Raises:
            VersionConflictError: If another version was saved since the
                caller's read
            StoreError: On any other persistence failure
        """
        ...

    def get_version(self, client_id: str, version: int) -> Itinerary | None:
        """Get a specific version.

        Args:
            client_id: Client ID
            version: Version number

        Returns:
            Itinerary or None if not found
        """
        ...

    def list_versions(self, client_id: str) -> list[ItinerarySummary]:
        """List all versions for a client, newest first.

        Args:
            client_id: Client ID

        Returns:
            Version summaries
        """
        ...


class ClientStore(Protocol):
    """Client persistence."""

    def get_client(self, client_id: str) -> Client | None:
        """Get client by ID."""
        ...

    def save_client(self, client: Client) -> Client:
        """Insert or update a client.

        Follow-up history is append-only: records already stored are kept as
        they are, new records are appended.
        """
        ...

    def list_clients(self, created_by: str | None = None) -> list[Client]:
        """List clients, optionally only those created by one actor."""
        ...

    def list_due_follow_ups(self, day: date, created_by: str | None = None) -> list[Client]:
        """List clients whose next follow-up is scheduled on `day`, earliest time first."""
        ...
