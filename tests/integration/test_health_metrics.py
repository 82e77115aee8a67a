"""Integration tests for /healthz and /metrics endpoints."""

from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient
from prometheus_client import REGISTRY

from backend.app.main import app


@pytest.fixture
def client() -> TestClient:
    """Create test client."""
    return TestClient(app)


class TestHealthEndpoint:
    """Test /healthz endpoint."""

    @patch("backend.app.api.routes.health.check_db")
    @patch("backend.app.api.routes.health.check_catalog")
    def test_healthz_returns_200_when_all_ok(
        self,
        mock_check_catalog: MagicMock,
        mock_check_db: MagicMock,
        client: TestClient,
    ) -> None:
        """Test /healthz returns 200 when the store is reachable."""
        mock_check_db.return_value = (True, "ok")
        mock_check_catalog.return_value = (True, "fresh")

        response = client.get("/healthz")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["components"]["db"] == "ok"
        assert data["components"]["catalog"] == "fresh"

    @patch("backend.app.api.routes.health.check_db")
    @patch("backend.app.api.routes.health.check_catalog")
    def test_healthz_returns_503_when_db_fails(
        self,
        mock_check_catalog: MagicMock,
        mock_check_db: MagicMock,
        client: TestClient,
    ) -> None:
        """Test /healthz returns 503 when DB is down."""
        mock_check_db.return_value = (False, "error: OperationalError")
        mock_check_catalog.return_value = (True, "cold")

        response = client.get("/healthz")

        assert response.status_code == 503
        data = response.json()
        assert data["status"] == "degraded"
        assert "error" in data["components"]["db"]

    def test_healthz_memory_backend(self, client: TestClient) -> None:
        """Test the in-memory backend reports no database."""
        response = client.get("/healthz")

        assert response.status_code == 200
        data = response.json()
        assert data["components"]["db"] == "not_configured"
        assert data["components"]["store_backend"] == "memory"
        assert data["components"]["catalog"] in {"cold", "fresh", "expired"}

    def test_health_always_ok(self, client: TestClient) -> None:
        """Test /health liveness endpoint."""
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}


class TestMetricsEndpoint:
    """Test /metrics endpoint."""

    def test_metrics_returns_prometheus_format(self, client: TestClient) -> None:
        """Test /metrics returns Prometheus text format."""
        response = client.get("/metrics")

        assert response.status_code == 200
        assert "text/plain" in response.headers["content-type"]

        content = response.text
        assert "itinerary_versions_total" in content
        assert "itinerary_version_conflicts_total" in content
        assert "catalog_fetches_total" in content
        assert "pricing_latency_ms" in content

    def test_metrics_count_saved_versions(self, client: TestClient) -> None:
        """Test saving an itinerary increments the version counter."""

        def created_count() -> float:
            return REGISTRY.get_sample_value(
                "itinerary_versions_total", {"change_type": "created"}
            ) or 0.0

        before = created_count()
        client_id = client.post(
            "/clients",
            json={
                "name": "Metrics Client",
                "travel_dates": {"is_flexible": True, "flexible_month": "2024-09"},
                "number_of_days": 1,
            },
        ).json()["id"]
        response = client.post(f"/clients/{client_id}/itinerary", json={"day_plans": []})

        assert response.status_code == 201
        assert created_count() == before + 1
