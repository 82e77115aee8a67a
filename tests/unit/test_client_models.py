"""Unit tests for client, day plan and catalog models."""

from datetime import date

import pytest
from pydantic import ValidationError

from backend.app.catalog.fixtures import load_fixture_catalog
from backend.app.config import Settings
from backend.app.models.client import Client, PartySize, TravelDates
from backend.app.models.common import TransportType
from backend.app.models.itinerary import DayPlan


class TestTravelDates:
    def test_concrete_dates_fix_number_of_days(self) -> None:
        """Concrete dates override whatever day count was supplied."""
        client = Client(
            id="c1",
            name="Asha",
            travel_dates=TravelDates(start_date=date(2024, 3, 10), end_date=date(2024, 3, 14)),
            number_of_days=2,
        )

        assert client.number_of_days == 5

    def test_span_days(self) -> None:
        same_day = TravelDates(start_date=date(2024, 3, 10), end_date=date(2024, 3, 10))
        flexible_with_dates = TravelDates(
            is_flexible=True,
            flexible_month="2024-03",
            start_date=date(2024, 3, 10),
            end_date=date(2024, 3, 14),
        )

        assert same_day.span_days() == 1
        assert flexible_with_dates.span_days() is None

    def test_flexible_dates_keep_number_of_days(self) -> None:
        client = Client(
            id="c1",
            name="Asha",
            travel_dates=TravelDates(is_flexible=True, flexible_month="2024-09"),
            number_of_days=6,
        )

        assert client.number_of_days == 6
        assert client.travel_dates.span_days() is None

    def test_end_before_start_rejected(self) -> None:
        with pytest.raises(ValidationError, match="end_date"):
            TravelDates(start_date=date(2024, 3, 10), end_date=date(2024, 3, 9))

    def test_missing_dates_rejected(self) -> None:
        with pytest.raises(ValidationError):
            TravelDates(start_date=date(2024, 3, 10))

    def test_flexible_requires_month(self) -> None:
        with pytest.raises(ValidationError, match="flexible_month"):
            TravelDates(is_flexible=True)


class TestPartySize:
    def test_total(self) -> None:
        assert PartySize(adults=2, children=3).total == 5

    def test_at_least_one_adult(self) -> None:
        with pytest.raises(ValidationError):
            PartySize(adults=0)

    def test_children_non_negative(self) -> None:
        with pytest.raises(ValidationError):
            PartySize(adults=1, children=-1)


def test_day_numbers_start_at_one() -> None:
    with pytest.raises(ValidationError):
        DayPlan(day=0)


def test_bundled_fixture_catalog_loads() -> None:
    """Test the demo catalog parses and resolves its cross references."""
    catalog = load_fixture_catalog()

    assert catalog.hotels
    assert catalog.find_transportation_by_name("Toyota Avanza") is not None
    assert catalog.list_sightseeing(TransportType.cab)
    for ticket in catalog.entry_tickets:
        if ticket.sightseeing_id is not None:
            assert catalog.get_sightseeing(ticket.sightseeing_id) is not None


def test_settings_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test settings defaults and environment overrides."""
    monkeypatch.delenv("STORE_BACKEND", raising=False)
    monkeypatch.setenv("CATALOG_CACHE_TTL_SECONDS", "30")

    settings = Settings(_env_file=None)

    assert settings.store_backend == "memory"
    assert settings.catalog_cache_ttl_seconds == 30
    assert settings.stale_tolerance == 0.01
    assert settings.secondary_currency == "INR"


def test_settings_rejects_unknown_backend(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STORE_BACKEND", "redis")

    with pytest.raises(ValidationError):
        Settings(_env_file=None)
