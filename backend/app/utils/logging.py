"""Structured logging for itinerary versioning events."""

import logging
from typing import Any

from backend.app.models.itinerary import Itinerary
from backend.app.models.pricing import StalenessReport

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once for the application process."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


class ItineraryLogger:
    """Interface for itinerary event logging (no-op)."""

    def log_version_saved(self, itinerary: Itinerary, backend: str) -> None:
        pass

    def log_stale(self, report: StalenessReport) -> None:
        pass

    def log_conflict(self, client_id: str, expected_version: int, actual_version: int) -> None:
        pass


class StructuredItineraryLogger(ItineraryLogger):
    """Structured logger for itinerary version events."""

    def log_version_saved(self, itinerary: Itinerary, backend: str) -> None:
        """Log a persisted itinerary version."""
        change = itinerary.change_log[-1] if itinerary.change_log else None
        log_data: dict[str, Any] = {
            "client_id": itinerary.client_id,
            "itinerary_id": itinerary.id,
            "version": itinerary.version,
            "change_type": change.change_type.value if change else None,
            "total_base_cost": round(itinerary.total_base_cost, 2),
            "final_price": round(itinerary.final_price, 2),
            "updated_by": itinerary.updated_by,
            "backend": backend,
        }
        logger.info(
            f"Itinerary saved: client={itinerary.client_id} v{itinerary.version}",
            extra={"structured": log_data},
        )

    def log_stale(self, report: StalenessReport) -> None:
        """Log a stored version whose price drifted from the catalog."""
        log_data: dict[str, Any] = {
            "client_id": report.client_id,
            "version": report.version,
            "stored_base_cost": round(report.stored_base_cost, 2),
            "current_base_cost": round(report.current_base_cost, 2),
            "difference": round(report.difference, 2),
        }
        logger.warning(
            f"Stale itinerary price: client={report.client_id} v{report.version}",
            extra={"structured": log_data},
        )

    def log_conflict(self, client_id: str, expected_version: int, actual_version: int) -> None:
        """Log a rejected concurrent save."""
        log_data: dict[str, Any] = {
            "client_id": client_id,
            "expected_version": expected_version,
            "actual_version": actual_version,
        }
        logger.warning(
            f"Itinerary version conflict: client={client_id}",
            extra={"structured": log_data},
        )
