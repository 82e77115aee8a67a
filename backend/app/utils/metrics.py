"""Prometheus metrics for itinerary versioning and catalog access."""

from prometheus_client import Counter, Histogram

itinerary_versions_total = Counter(
    "itinerary_versions_total",
    "Itinerary versions persisted",
    ["change_type"],
)

itinerary_version_conflicts_total = Counter(
    "itinerary_version_conflicts_total",
    "Itinerary saves rejected because a newer version already existed",
)

itinerary_stale_total = Counter(
    "itinerary_stale_total",
    "Stored itineraries whose base cost disagreed with current catalog prices",
)

catalog_fetches_total = Counter(
    "catalog_fetches_total",
    "Catalog snapshot fetches from the backing source",
    ["outcome"],
)

catalog_cache_hits_total = Counter(
    "catalog_cache_hits_total",
    "Catalog snapshot requests served from cache",
)

pricing_latency_ms = Histogram(
    "pricing_latency_ms",
    "Itinerary pricing latency in milliseconds",
    buckets=[0.5, 1, 2, 5, 10, 25, 50, 100, 250],
)


class BackofficeMetrics:
    """Interface for back-office metrics (no-op)."""

    def inc_version(self, change_type: str) -> None:
        pass

    def inc_conflict(self) -> None:
        pass

    def inc_stale(self) -> None:
        pass

    def inc_catalog_fetch(self, outcome: str) -> None:
        pass

    def inc_catalog_cache_hit(self) -> None:
        pass

    def record_pricing_latency(self, latency_ms: float) -> None:
        pass


class PrometheusBackofficeMetrics(BackofficeMetrics):
    """Prometheus-based metrics implementation."""

    def inc_version(self, change_type: str) -> None:
        itinerary_versions_total.labels(change_type=change_type).inc()

    def inc_conflict(self) -> None:
        itinerary_version_conflicts_total.inc()

    def inc_stale(self) -> None:
        itinerary_stale_total.inc()

    def inc_catalog_fetch(self, outcome: str) -> None:
        catalog_fetches_total.labels(outcome=outcome).inc()

    def inc_catalog_cache_hit(self) -> None:
        catalog_cache_hits_total.inc()

    def record_pricing_latency(self, latency_ms: float) -> None:
        pricing_latency_ms.observe(latency_ms)
