"""Dependency wiring - picks the store backend once, at composition time."""

from collections.abc import Generator
from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends

from backend.app.catalog.cache import CatalogCache
from backend.app.catalog.fixtures import load_fixture_catalog
from backend.app.catalog.snapshot import CatalogSnapshot
from backend.app.config import Settings, get_settings
from backend.app.db.engine import get_session_factory
from backend.app.db.inmemory import (
    InMemoryCatalogSource,
    InMemoryClientStore,
    InMemoryItineraryStore,
)
from backend.app.db.repositories import CatalogSource, ClientStore, ItineraryStore
from backend.app.db.sql_repositories import SqlCatalogSource, SqlClientStore, SqlItineraryStore
from backend.app.services.followup_service import FollowUpService
from backend.app.services.itinerary_service import ItineraryService
from backend.app.utils.logging import StructuredItineraryLogger
from backend.app.utils.metrics import PrometheusBackofficeMetrics


@dataclass
class Stores:
    """Stores for one request; SQL stores share one session."""

    itineraries: ItineraryStore
    clients: ClientStore
    backend: str


_memory_stores: Stores | None = None
_catalog_cache: CatalogCache | None = None


def build_catalog_source(settings: Settings) -> CatalogSource:
    if settings.store_backend == "sql":
        return SqlCatalogSource(get_session_factory())
    snapshot = load_fixture_catalog() if settings.seed_fixture_catalog else CatalogSnapshot()
    return InMemoryCatalogSource(snapshot)


def get_catalog_cache() -> CatalogCache:
    """Process-wide catalog cache."""
    global _catalog_cache
    if _catalog_cache is None:
        settings = get_settings()
        _catalog_cache = CatalogCache(
            build_catalog_source(settings),
            ttl_seconds=settings.catalog_cache_ttl_seconds,
            metrics=PrometheusBackofficeMetrics(),
        )
    return _catalog_cache


async def get_catalog(
    cache: Annotated[CatalogCache, Depends(get_catalog_cache)],
) -> CatalogSnapshot:
    """Catalog snapshot for the current request."""
    return await cache.get_snapshot()


def get_stores() -> Generator[Stores, None, None]:
    """Yield the configured stores for one request."""
    global _memory_stores
    settings = get_settings()

    if settings.store_backend == "sql":
        with get_session_factory()() as session:
            yield Stores(
                itineraries=SqlItineraryStore(session),
                clients=SqlClientStore(session),
                backend="sql",
            )
        return

    if _memory_stores is None:
        _memory_stores = Stores(
            itineraries=InMemoryItineraryStore(),
            clients=InMemoryClientStore(),
            backend="memory",
        )
    yield _memory_stores


def get_itinerary_service(
    stores: Annotated[Stores, Depends(get_stores)],
) -> ItineraryService:
    return ItineraryService(
        stores.itineraries,
        stores.clients,
        metrics=PrometheusBackofficeMetrics(),
        event_logger=StructuredItineraryLogger(),
        stale_tolerance=get_settings().stale_tolerance,
        backend=stores.backend,
    )


def get_followup_service(
    stores: Annotated[Stores, Depends(get_stores)],
) -> FollowUpService:
    return FollowUpService(stores.clients)
