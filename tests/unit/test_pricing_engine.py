"""Unit tests for the itinerary pricing engine."""

from datetime import date

import pytest

from backend.app.catalog.snapshot import CatalogSnapshot
from backend.app.models.catalog import ActivityOption, RoomType, Sightseeing
from backend.app.models.common import Season, TransportType
from backend.app.models.itinerary import ActivitySelection, DayPlan, HotelStay
from backend.app.pricing.engine import (
    compute_base_cost,
    compute_cost_breakdown,
    get_activity_option_cost,
    get_seasonal_price,
    get_vehicle_cost_by_pax,
    resolve_transport_type,
    season_for_date,
)
from tests.factories import e2e_day_plans, make_catalog, make_client, rafting


@pytest.fixture
def room() -> RoomType:
    return RoomType(
        id="r", name="Deluxe", peak_season_price=300, season_price=200, off_season_price=100
    )


class TestSeasonalPrice:
    """Season boundaries for hotel nightly prices."""

    @pytest.mark.parametrize(
        ("start", "expected"),
        [
            (date(2024, 12, 20), 300),
            (date(2024, 1, 5), 300),
            (date(2024, 12, 31), 300),
            (date(2024, 12, 19), 100),
            (date(2024, 1, 6), 100),
            (date(2024, 7, 15), 200),
            (date(2024, 7, 1), 200),
            (date(2024, 8, 31), 200),
            (date(2024, 9, 1), 100),
        ],
    )
    def test_price_by_start_date(self, room: RoomType, start: date, expected: float) -> None:
        assert get_seasonal_price(room, start) == expected

    def test_unknown_date_is_off_season(self, room: RoomType) -> None:
        assert season_for_date(None) == Season.off_season
        assert get_seasonal_price(room, None) == 100

    def test_flexible_trip_priced_off_season(self) -> None:
        """Flexible dates have no start date, so rooms use the off-season price."""
        client = make_client(start=None, days=1)
        plans = [DayPlan(day=1, hotel=HotelStay(place="Ubud", hotel_id="h1", room_type_id="r1"))]

        breakdown = compute_cost_breakdown(client, plans, make_catalog())

        assert breakdown.hotels == 80

    def test_whole_trip_uses_start_date_season(self) -> None:
        """A trip starting Dec 19 stays off-season even for nights inside the peak window."""
        client = make_client(start=date(2024, 12, 19), days=2)
        stay = HotelStay(place="Ubud", hotel_id="h1", room_type_id="r1")
        plans = [DayPlan(day=1, hotel=stay), DayPlan(day=2, hotel=stay)]

        breakdown = compute_cost_breakdown(client, plans, make_catalog())

        assert breakdown.hotels == 160


class TestVehicleTiering:
    """Cab cost follows the smallest vehicle class seating the party."""

    @pytest.fixture
    def spot(self) -> Sightseeing:
        return Sightseeing(
            id="s",
            name="Volcano",
            transportation_mode=TransportType.cab,
            vehicle_costs={"avanza": 100, "hiace": 150},
        )

    def test_six_pax_uses_first_tier(self, spot: Sightseeing) -> None:
        assert get_vehicle_cost_by_pax(spot, 6) == 100

    def test_seven_pax_uses_second_tier(self, spot: Sightseeing) -> None:
        assert get_vehicle_cost_by_pax(spot, 7) == 150

    def test_missing_tier_price_is_zero(self, spot: Sightseeing) -> None:
        assert get_vehicle_cost_by_pax(spot, 13) == 0

    def test_large_party_uses_largest_class(self) -> None:
        spot = Sightseeing(
            id="s",
            name="Volcano",
            transportation_mode=TransportType.cab,
            vehicle_costs={"bus32": 250, "bus39": 300},
        )

        assert get_vehicle_cost_by_pax(spot, 32) == 250
        assert get_vehicle_cost_by_pax(spot, 33) == 300
        assert get_vehicle_cost_by_pax(spot, 60) == 300

    def test_no_cost_table(self) -> None:
        spot = Sightseeing(id="s", name="Beach", transportation_mode=TransportType.cab)

        assert get_vehicle_cost_by_pax(spot, 2) == 0


class TestActivityProration:
    """Activity options are charged per group of `cost_for_how_many`."""

    @pytest.mark.parametrize(("pax", "expected"), [(5, 150), (2, 50), (1, 50), (4, 100)])
    def test_groups_rounded_up(self, pax: int, expected: float) -> None:
        option = ActivityOption(id="o", name="Raft", cost=50, cost_for_how_many=2)

        assert get_activity_option_cost(option, pax) == expected


class TestResolveTransportType:
    """Client transportation labels map onto transport types."""

    def test_catalog_vehicle_name(self, catalog: CatalogSnapshot) -> None:
        client = make_client(transportation_mode="Island Scooter")

        assert resolve_transport_type(client, catalog) == TransportType.self_drive_scooter

    def test_enum_value(self, catalog: CatalogSnapshot) -> None:
        client = make_client(transportation_mode="self-drive-car")

        assert resolve_transport_type(client, catalog) == TransportType.self_drive_car

    def test_cab_substring(self, catalog: CatalogSnapshot) -> None:
        client = make_client(transportation_mode="Airport Cab Transfer")

        assert resolve_transport_type(client, catalog) == TransportType.cab

    def test_unknown_label(self, catalog: CatalogSnapshot) -> None:
        assert resolve_transport_type(make_client(transportation_mode="Hot air balloon"), catalog) is None
        assert resolve_transport_type(make_client(transportation_mode=""), catalog) is None


class TestComputeCostBreakdown:
    """Whole-itinerary pricing."""

    def test_end_to_end_scenario(self, catalog: CatalogSnapshot) -> None:
        """2 pax, 20/day car for 2 days, one 80 hotel night, one spot, one 10/pax ticket."""
        client = make_client(adults=2, days=2)

        breakdown = compute_cost_breakdown(client, e2e_day_plans(), catalog)

        assert breakdown.transportation == 40
        assert breakdown.hotels == 80
        assert breakdown.sightseeing == 15
        assert breakdown.entry_tickets == 20
        assert breakdown.activities == 0
        assert breakdown.meals == 0
        assert breakdown.total == 155

    def test_deterministic(self, catalog: CatalogSnapshot) -> None:
        client = make_client()
        plans = e2e_day_plans()
        plans[1].activities.append(rafting())
        plans[1].meals.append("m-2")

        results = {compute_base_cost(client, plans, catalog) for _ in range(5)}

        assert len(results) == 1

    def test_does_not_mutate_inputs(self, catalog: CatalogSnapshot) -> None:
        client = make_client()
        plans = e2e_day_plans()
        before = [plan.model_dump() for plan in plans]

        compute_base_cost(client, plans, catalog)

        assert [plan.model_dump() for plan in plans] == before

    def test_cab_mode_prices_cab_spots_by_vehicle(self, catalog: CatalogSnapshot) -> None:
        """Cab clients pay the vehicle tier per cab spot and no daily vehicle charge."""
        client = make_client(adults=7, transportation_mode="City Cab", days=1)
        plans = [DayPlan(day=1, sightseeing=["cab-a", "car-a"])]

        breakdown = compute_cost_breakdown(client, plans, catalog)

        assert breakdown.transportation == 0
        assert breakdown.sightseeing == 150

    def test_scooter_surcharge(self, catalog: CatalogSnapshot) -> None:
        client = make_client(transportation_mode="Island Scooter", days=1)
        plans = [DayPlan(day=1, sightseeing=["scooter-a"])]

        breakdown = compute_cost_breakdown(client, plans, catalog)

        assert breakdown.transportation == 8
        assert breakdown.sightseeing == 8

    def test_unresolved_mode_still_adds_surcharge(self, catalog: CatalogSnapshot) -> None:
        """An unknown transport label has no daily charge but spots keep their surcharge."""
        client = make_client(adults=7, transportation_mode="Bicycle", days=1)
        plans = [DayPlan(day=1, sightseeing=["car-a", "scooter-a", "cab-a"])]

        breakdown = compute_cost_breakdown(client, plans, catalog)

        assert breakdown.transportation == 0
        assert breakdown.sightseeing == 15 + 8

    def test_activities_meals_per_party(self, catalog: CatalogSnapshot) -> None:
        client = make_client(adults=3, children=2, days=1)
        plans = [
            DayPlan(
                day=1,
                activities=[rafting("opt-1a"), ActivitySelection(activity_id="act-2", option_id="opt-2a")],
                meals=["m-1", "m-3"],
            )
        ]

        breakdown = compute_cost_breakdown(client, plans, catalog)

        # Rafting 50 x ceil(5/2) + surf 30 x 5
        assert breakdown.activities == 150 + 150
        assert breakdown.meals == (12 + 25) * 5

    def test_dangling_references_contribute_zero(self, catalog: CatalogSnapshot) -> None:
        client = make_client(days=1)
        plans = [
            DayPlan(
                day=1,
                sightseeing=["gone"],
                hotel=HotelStay(place="Ubud", hotel_id="h1", room_type_id="gone"),
                activities=[
                    ActivitySelection(activity_id="gone", option_id="x"),
                    ActivitySelection(activity_id="act-1", option_id="gone"),
                ],
                entry_tickets=["gone"],
                meals=["gone"],
            )
        ]

        breakdown = compute_cost_breakdown(client, plans, catalog)

        # Only the daily vehicle charge remains
        assert breakdown.total == 20

    def test_unknown_vehicle_has_no_daily_charge(self, catalog: CatalogSnapshot) -> None:
        client = make_client(transportation_mode="self-drive-car", days=3)

        breakdown = compute_cost_breakdown(client, [], catalog)

        assert breakdown.transportation == 0
        assert breakdown.total == 0

    def test_repeated_items_are_priced_each_time(self, catalog: CatalogSnapshot) -> None:
        client = make_client(days=2)
        plans = [DayPlan(day=1, meals=["m-1"]), DayPlan(day=2, meals=["m-1"])]

        breakdown = compute_cost_breakdown(client, plans, catalog)

        assert breakdown.meals == 12 * 2 * 2
