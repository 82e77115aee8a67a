"""Read-through catalog snapshot cache.

Pricing and staleness checks read from one snapshot at a time; the cache
refreshes it from the backing source after a TTL, on explicit invalidation,
or on a forced refresh. Concurrent requests for a refresh share one fetch.
"""

import asyncio
import logging
import time
from collections.abc import Callable

from backend.app.catalog.snapshot import CatalogSnapshot
from backend.app.db.repositories import CatalogSource
from backend.app.utils.metrics import BackofficeMetrics

logger = logging.getLogger(__name__)


class CatalogCache:
    """TTL cache over a CatalogSource."""

    def __init__(
        self,
        source: CatalogSource,
        ttl_seconds: float = 300,
        clock: Callable[[], float] | None = None,
        metrics: BackofficeMetrics | None = None,
    ) -> None:
        """Initialize cache.

        Args:
            source: Backing catalog source
            ttl_seconds: Snapshot lifetime; 0 disables caching
            clock: Injectable monotonic clock (default: time.monotonic)
            metrics: Metrics recorder (optional, defaults to no-op)
        """
        self._source = source
        self._ttl_seconds = ttl_seconds
        self._clock = clock or time.monotonic
        self._metrics = metrics or BackofficeMetrics()
        self._snapshot: CatalogSnapshot | None = None
        self._fetched_at: float | None = None
        self._inflight: asyncio.Task[CatalogSnapshot] | None = None

    def is_fresh(self) -> bool:
        if self._snapshot is None or self._fetched_at is None:
            return False
        return self._clock() - self._fetched_at < self._ttl_seconds

    def peek(self) -> CatalogSnapshot | None:
        """Cached snapshot without triggering a fetch (may be expired)."""
        return self._snapshot

    def invalidate(self) -> None:
        """Drop the cached snapshot; the next read fetches from the source."""
        self._snapshot = None
        self._fetched_at = None
        logger.info("[catalog] Cache invalidated")

    async def get_snapshot(self, force_refresh: bool = False) -> CatalogSnapshot:
        """Return a fresh snapshot, fetching from the source if needed.

        Args:
            force_refresh: Skip the cached snapshot even if still fresh

        Returns:
            Catalog snapshot

        Raises:
            Exception: Whatever the source raised; the previous snapshot is
                kept and the next call retries
        """
        snapshot = self._snapshot
        if not force_refresh and snapshot is not None and self.is_fresh():
            self._metrics.inc_catalog_cache_hit()
            return snapshot

        if self._inflight is None:
            self._inflight = asyncio.create_task(self._fetch())

        return await asyncio.shield(self._inflight)

    async def _fetch(self) -> CatalogSnapshot:
        started = time.perf_counter()
        try:
            snapshot = await asyncio.to_thread(self._source.fetch_snapshot)
        except Exception:
            self._metrics.inc_catalog_fetch("error")
            logger.exception("[catalog] Snapshot fetch failed")
            raise
        finally:
            self._inflight = None

        self._snapshot = snapshot
        self._fetched_at = self._clock()
        self._metrics.inc_catalog_fetch("success")
        logger.info(
            f"[catalog] Snapshot refreshed in {(time.perf_counter() - started) * 1000:.1f}ms"
        )
        return snapshot
