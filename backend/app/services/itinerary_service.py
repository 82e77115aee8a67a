"""Itinerary application service - runs the pricing and versioning core against the stores."""

import logging
import time
from collections.abc import Sequence
from datetime import UTC, datetime

from backend.app.catalog.snapshot import CatalogSnapshot
from backend.app.errors import ClientNotFoundError, ItineraryNotFoundError, VersionConflictError
from backend.app.db.repositories import ClientStore, ItineraryStore
from backend.app.models.client import Client
from backend.app.models.common import ChangeType
from backend.app.models.itinerary import DayPlan, Itinerary, ItinerarySummary
from backend.app.models.pricing import PriceQuote, StalenessReport
from backend.app.pricing.currency import build_quote
from backend.app.pricing.engine import compute_cost_breakdown
from backend.app.utils.logging import ItineraryLogger
from backend.app.utils.metrics import BackofficeMetrics
from backend.app.versioning.manager import (
    STALE_TOLERANCE,
    build_next_version,
    check_staleness,
    classify_change,
    normalize_day_plans,
)

logger = logging.getLogger(__name__)


class ItineraryService:
    """Client and itinerary operations over injected stores.

    Every method takes the catalog snapshot to price against, so one request
    never mixes two catalog states.
    """

    def __init__(
        self,
        itinerary_store: ItineraryStore,
        client_store: ClientStore,
        metrics: BackofficeMetrics | None = None,
        event_logger: ItineraryLogger | None = None,
        stale_tolerance: float = STALE_TOLERANCE,
        backend: str = "memory",
    ) -> None:
        self._itineraries = itinerary_store
        self._clients = client_store
        self._metrics = metrics or BackofficeMetrics()
        self._events = event_logger or ItineraryLogger()
        self._stale_tolerance = stale_tolerance
        self._backend = backend

    # Clients

    def create_client(self, client: Client, actor: str) -> Client:
        """Store a new client, stamping creator and creation time."""
        stamped = client.model_copy(
            update={
                "created_at": client.created_at or datetime.now(UTC),
                "created_by": client.created_by or actor,
            }
        )
        saved = self._clients.save_client(stamped)
        logger.info(f"[clients] Created client {saved.id} by {actor}")
        return saved

    def get_client(self, client_id: str, owner: str | None = None) -> Client:
        """Load a client.

        Args:
            client_id: Client ID
            owner: When set, clients created by someone else are treated as
                missing

        Raises:
            ClientNotFoundError: If the client does not exist or is not visible
        """
        client = self._clients.get_client(client_id)
        if client is None or (owner is not None and client.created_by != owner):
            raise ClientNotFoundError(client_id)
        return client

    def list_clients(self, owner: str | None = None) -> list[Client]:
        return self._clients.list_clients(owner)

    def update_client(
        self,
        client_id: str,
        changes: Client,
        *,
        actor: str,
        catalog: CatalogSnapshot,
        owner: str | None = None,
        expected_version: int | None = None,
    ) -> tuple[Client, Itinerary | None]:
        """Edit trip parameters and re-version the itinerary if one exists.

        The client's follow-up trail and creation stamp are kept; everything
        else comes from `changes`. A changed day count re-normalizes the day
        plans (truncated or padded) in the new version. The itinerary version
        is written before the client, so a version conflict leaves both stores
        untouched.

        Args:
            client_id: Client ID
            changes: New client parameters
            actor: Acting user
            catalog: Catalog snapshot to price against
            owner: Visibility scope for the client lookup
            expected_version: Latest itinerary version the caller edited

        Returns:
            (updated client, new itinerary version or None)

        Raises:
            ClientNotFoundError: If the client is missing
            VersionConflictError: If the stored latest version moved on
        """
        current = self.get_client(client_id, owner)
        updated = changes.model_copy(
            update={
                "id": current.id,
                "created_at": current.created_at,
                "created_by": current.created_by,
                "follow_up_status": current.follow_up_status,
                "follow_up_history": current.follow_up_history,
            }
        )

        previous = self._itineraries.load_latest_itinerary(client_id)
        self._check_expected_version(client_id, previous, expected_version)
        if previous is None:
            return self._clients.save_client(updated), None

        change_type, description = classify_change(
            previous, updated, previous.day_plans, previous.profit_margin, previous.exchange_rate
        )
        if change_type == ChangeType.general_edit:
            description = "Client details updated"

        itinerary = self._save_version(
            previous,
            updated,
            previous.day_plans,
            previous.profit_margin,
            previous.exchange_rate,
            actor=actor,
            change_type=change_type,
            description=description,
            catalog=catalog,
        )
        return self._clients.save_client(updated), itinerary

    # Itineraries

    def save_itinerary(
        self,
        client_id: str,
        day_plans: Sequence[DayPlan],
        profit_margin: float,
        exchange_rate: float,
        *,
        actor: str,
        catalog: CatalogSnapshot,
        change_type: ChangeType | None = None,
        description: str | None = None,
        expected_version: int | None = None,
        owner: str | None = None,
    ) -> Itinerary:
        """Create the first itinerary version or append the next one.

        Args:
            client_id: Client ID
            day_plans: Proposed day plans
            profit_margin: Margin on top of the base cost
            exchange_rate: Secondary-currency rate
            actor: Acting user
            catalog: Catalog snapshot to price against
            change_type: Change log type (classified from the diff when omitted)
            description: Change log text (generated when omitted)
            expected_version: Latest version the caller edited; a mismatch
                raises before anything is written
            owner: Visibility scope for the client lookup

        Returns:
            Persisted itinerary version

        Raises:
            ClientNotFoundError: If the client is missing
            VersionConflictError: If the stored latest version moved on
        """
        client = self.get_client(client_id, owner)
        previous = self._itineraries.load_latest_itinerary(client_id)

        self._check_expected_version(client_id, previous, expected_version)

        suggested_type, suggested_description = classify_change(
            previous, client, day_plans, profit_margin, exchange_rate
        )
        if change_type is None:
            change_type = suggested_type
        if description is None:
            description = (
                suggested_description if change_type == suggested_type else change_type.value
            )

        return self._save_version(
            previous,
            client,
            day_plans,
            profit_margin,
            exchange_rate,
            actor=actor,
            change_type=change_type,
            description=description,
            catalog=catalog,
        )

    def get_latest(
        self, client_id: str, catalog: CatalogSnapshot, owner: str | None = None
    ) -> tuple[Itinerary, StalenessReport]:
        """Latest version plus a staleness report against `catalog`.

        Raises:
            ClientNotFoundError: If the client is missing
            ItineraryNotFoundError: If the client has no itinerary
        """
        self.get_client(client_id, owner)
        itinerary = self._itineraries.load_latest_itinerary(client_id)
        if itinerary is None:
            raise ItineraryNotFoundError(client_id)

        report = check_staleness(itinerary, catalog, self._stale_tolerance)
        if report.is_stale:
            self._metrics.inc_stale()
            self._events.log_stale(report)
        return itinerary, report

    def reprice(
        self, client_id: str, *, actor: str, catalog: CatalogSnapshot, owner: str | None = None
    ) -> Itinerary:
        """Append a version whose base cost reflects current catalog prices."""
        self.get_client(client_id, owner)
        previous = self._itineraries.load_latest_itinerary(client_id)
        if previous is None:
            raise ItineraryNotFoundError(client_id)

        report = check_staleness(previous, catalog, self._stale_tolerance)
        description = (
            f"Prices refreshed from catalog: {report.stored_base_cost:.2f} -> "
            f"{report.current_base_cost:.2f}"
        )
        return self._save_version(
            previous,
            previous.client,
            previous.day_plans,
            previous.profit_margin,
            previous.exchange_rate,
            actor=actor,
            change_type=ChangeType.pricing_updated,
            description=description,
            catalog=catalog,
        )

    def list_versions(self, client_id: str, owner: str | None = None) -> list[ItinerarySummary]:
        self.get_client(client_id, owner)
        return self._itineraries.list_versions(client_id)

    def get_version(self, client_id: str, version: int, owner: str | None = None) -> Itinerary:
        self.get_client(client_id, owner)
        itinerary = self._itineraries.get_version(client_id, version)
        if itinerary is None:
            raise ItineraryNotFoundError(client_id, version)
        return itinerary

    def quote(
        self,
        client: Client,
        day_plans: Sequence[DayPlan],
        profit_margin: float,
        exchange_rate: float,
        *,
        catalog: CatalogSnapshot,
        secondary_currency: str,
    ) -> PriceQuote:
        """Price a draft itinerary without storing anything."""
        started = time.perf_counter()
        normalized = normalize_day_plans(day_plans, client.number_of_days)
        breakdown = compute_cost_breakdown(client, normalized, catalog)
        self._metrics.record_pricing_latency((time.perf_counter() - started) * 1000)
        return build_quote(breakdown, profit_margin, exchange_rate, secondary_currency)

    # Internals

    def _save_version(
        self,
        previous: Itinerary | None,
        client: Client,
        day_plans: Sequence[DayPlan],
        profit_margin: float,
        exchange_rate: float,
        *,
        actor: str,
        change_type: ChangeType,
        description: str,
        catalog: CatalogSnapshot,
    ) -> Itinerary:
        started = time.perf_counter()
        itinerary = build_next_version(
            previous,
            client,
            day_plans,
            profit_margin,
            exchange_rate,
            actor=actor,
            change_type=change_type,
            description=description,
            catalog=catalog,
        )
        self._metrics.record_pricing_latency((time.perf_counter() - started) * 1000)

        try:
            saved = self._itineraries.save_itinerary(itinerary)
        except VersionConflictError as exc:
            self._record_conflict(exc.client_id, exc.expected_version, exc.actual_version)
            raise

        self._metrics.inc_version(change_type.value)
        self._events.log_version_saved(saved, self._backend)
        return saved

    def _check_expected_version(
        self, client_id: str, previous: Itinerary | None, expected_version: int | None
    ) -> None:
        if expected_version is None:
            return
        actual = previous.version if previous is not None else 0
        if actual != expected_version:
            self._record_conflict(client_id, expected_version, actual)
            raise VersionConflictError(client_id, expected_version, actual)

    def _record_conflict(self, client_id: str, expected: int, actual: int) -> None:
        self._metrics.inc_conflict()
        self._events.log_conflict(client_id, expected, actual)
