"""In-memory implementations of repository interfaces."""

import threading
from datetime import date, time

from backend.app.catalog.snapshot import CatalogSnapshot
from backend.app.errors import VersionConflictError
from backend.app.models.client import Client
from backend.app.models.itinerary import Itinerary, ItinerarySummary


def summarize(itinerary: Itinerary) -> ItinerarySummary:
    """Version listing entry for an itinerary."""
    change = itinerary.change_log[-1] if itinerary.change_log else None
    return ItinerarySummary(
        itinerary_id=itinerary.id,
        client_id=itinerary.client_id,
        version=itinerary.version,
        total_base_cost=itinerary.total_base_cost,
        final_price=itinerary.final_price,
        last_updated=itinerary.last_updated,
        updated_by=itinerary.updated_by,
        change_type=change.change_type if change else None,
        description=change.description if change else None,
    )


class InMemoryItineraryStore:
    """In-memory implementation of ItineraryStore."""

    def __init__(self) -> None:
        self._versions: dict[str, list[Itinerary]] = {}
        self._lock = threading.Lock()

    def load_latest_itinerary(self, client_id: str) -> Itinerary | None:
        """Get the highest stored version for a client."""
        with self._lock:
            versions = self._versions.get(client_id)
            if not versions:
                return None
            return versions[-1].model_copy(deep=True)

    def save_itinerary(self, itinerary: Itinerary) -> Itinerary:
        """Persist a new version, rejecting anything but latest + 1."""
        with self._lock:
            versions = self._versions.setdefault(itinerary.client_id, [])
            latest = versions[-1].version if versions else 0
            if itinerary.version != latest + 1:
                raise VersionConflictError(
                    itinerary.client_id,
                    expected_version=itinerary.version - 1,
                    actual_version=latest,
                )
            versions.append(itinerary.model_copy(deep=True))
            return itinerary

    def get_version(self, client_id: str, version: int) -> Itinerary | None:
        """Get a specific version."""
        with self._lock:
            for itinerary in self._versions.get(client_id, []):
                if itinerary.version == version:
                    return itinerary.model_copy(deep=True)
            return None

    def list_versions(self, client_id: str) -> list[ItinerarySummary]:
        """List all versions for a client, newest first."""
        with self._lock:
            versions = list(self._versions.get(client_id, []))
        return [summarize(itinerary) for itinerary in reversed(versions)]


class InMemoryClientStore:
    """In-memory implementation of ClientStore."""

    def __init__(self) -> None:
        self._clients: dict[str, Client] = {}
        self._lock = threading.Lock()

    def get_client(self, client_id: str) -> Client | None:
        """Get client by ID."""
        with self._lock:
            client = self._clients.get(client_id)
            return client.model_copy(deep=True) if client is not None else None

    def save_client(self, client: Client) -> Client:
        """Insert or update a client, keeping already stored history records."""
        with self._lock:
            existing = self._clients.get(client.id)
            history = list(existing.follow_up_history) if existing is not None else []
            known = {record.id for record in history}
            history.extend(
                record for record in client.follow_up_history if record.id not in known
            )
            stored = client.model_copy(update={"follow_up_history": history}, deep=True)
            self._clients[client.id] = stored
            return stored.model_copy(deep=True)

    def list_clients(self, created_by: str | None = None) -> list[Client]:
        """List clients, newest first."""
        with self._lock:
            clients = [
                client.model_copy(deep=True)
                for client in self._clients.values()
                if created_by is None or client.created_by == created_by
            ]
        clients.sort(key=lambda c: (c.created_at is not None, c.created_at), reverse=True)
        return clients

    def list_due_follow_ups(self, day: date, created_by: str | None = None) -> list[Client]:
        """Clients whose next follow-up falls on `day`, earliest time first."""
        due = [
            client
            for client in self.list_clients(created_by)
            if client.follow_up_status is not None
            and client.follow_up_status.next_follow_up_date == day
        ]
        due.sort(key=lambda c: c.follow_up_status.next_follow_up_time or time.min)  # type: ignore[union-attr]
        return due


class InMemoryCatalogSource:
    """In-memory implementation of CatalogSource."""

    def __init__(self, snapshot: CatalogSnapshot | None = None) -> None:
        self._snapshot = snapshot or CatalogSnapshot()
        self.fetch_count = 0

    def replace(self, snapshot: CatalogSnapshot) -> None:
        """Swap in new catalog data (simulates an upstream price change)."""
        self._snapshot = snapshot

    def fetch_snapshot(self) -> CatalogSnapshot:
        """Return the current catalog data."""
        self.fetch_count += 1
        return self._snapshot
