"""Unit tests for the day-plan builder."""

import pytest

from backend.app.catalog.snapshot import CatalogSnapshot
from backend.app.models.common import PlanningStep
from backend.app.models.itinerary import DayPlan
from backend.app.planning.builder import DayPlanBuilder, can_leave_step, is_step_complete
from tests.factories import make_client


@pytest.fixture
def builder(catalog: CatalogSnapshot) -> DayPlanBuilder:
    return DayPlanBuilder(client=make_client(days=2), catalog=catalog)


class TestNavigation:
    """Step and day movement through the wizard."""

    def test_starts_on_day_one_sightseeing(self, builder: DayPlanBuilder) -> None:
        assert builder.current_day == 1
        assert builder.current_step == PlanningStep.sightseeing
        assert [plan.day for plan in builder.day_plans] == [1, 2]

    def test_sightseeing_gate_blocks_without_selection(self, builder: DayPlanBuilder) -> None:
        assert builder.next_step() is False
        assert builder.current_step == PlanningStep.sightseeing

    def test_steps_roll_over_to_next_day(self, builder: DayPlanBuilder) -> None:
        builder.toggle_sightseeing("car-a")

        for expected in (
            PlanningStep.hotel,
            PlanningStep.activities,
            PlanningStep.tickets,
            PlanningStep.meals,
        ):
            assert builder.next_step() is True
            assert builder.current_step == expected

        assert builder.next_step() is True
        assert builder.current_day == 2
        assert builder.current_step == PlanningStep.sightseeing
        assert builder.completed_days == {1}

    def test_previous_step_crosses_day_boundary(self, builder: DayPlanBuilder) -> None:
        builder.go_to(2)

        builder.previous_step()

        assert builder.current_day == 1
        assert builder.current_step == PlanningStep.meals

    def test_day_bounds(self, builder: DayPlanBuilder) -> None:
        assert builder.previous_day() is False
        assert builder.next_day() is True
        assert builder.next_day() is False
        assert builder.go_to(3) is False
        assert builder.go_to(1, PlanningStep.hotel) is True
        assert builder.current_step == PlanningStep.hotel

    def test_review_after_last_meals_step(self, builder: DayPlanBuilder) -> None:
        assert builder.can_proceed_to_review() is False

        builder.go_to(2, PlanningStep.meals)

        assert builder.can_proceed_to_review() is True

    def test_incomplete_days(self, builder: DayPlanBuilder) -> None:
        builder.toggle_sightseeing("car-a")

        assert builder.incomplete_days() == [2]


class TestSelections:
    """Selections respect availability and catalog membership."""

    def test_spot_consumed_by_earlier_day(self, builder: DayPlanBuilder) -> None:
        assert builder.toggle_sightseeing("car-a", day=1) is True

        assert builder.toggle_sightseeing("car-a", day=2) is False
        assert builder.day_plans[1].sightseeing == []

    def test_spot_for_other_mode_rejected(self, builder: DayPlanBuilder) -> None:
        assert builder.toggle_sightseeing("cab-a") is False

    def test_removing_spot_drops_its_tickets(self, builder: DayPlanBuilder) -> None:
        builder.toggle_sightseeing("car-a")
        builder.toggle_sightseeing("car-b")
        assert builder.toggle_ticket("tk-1") is True
        assert builder.toggle_ticket("tk-2") is True

        builder.toggle_sightseeing("car-a")

        assert builder.current_plan.sightseeing == ["car-b"]
        assert builder.current_plan.entry_tickets == ["tk-2"]

    def test_ticket_requires_its_spot_on_the_day(self, builder: DayPlanBuilder) -> None:
        assert builder.toggle_ticket("tk-1") is False

    def test_hotel_and_same_as_yesterday(self, builder: DayPlanBuilder) -> None:
        assert builder.same_hotel_as_yesterday(day=2) is False
        assert builder.set_hotel("h1", "r2") is False
        assert builder.set_hotel("h1", "r1") is True

        assert builder.same_hotel_as_yesterday(day=2) is True
        assert builder.day_plans[1].hotel == builder.day_plans[0].hotel

        builder.clear_hotel(day=2)
        assert builder.day_plans[1].hotel is None

    def test_activity_defaults_to_first_option(self, builder: DayPlanBuilder) -> None:
        assert builder.toggle_activity("act-1") is True
        assert builder.current_plan.activities[0].option_id == "opt-1a"

        assert builder.set_activity_option("act-1", "opt-1b") is True
        assert builder.current_plan.activities[0].option_id == "opt-1b"
        assert builder.set_activity_option("act-1", "opt-2a") is False

    def test_activity_consumed_by_earlier_day(self, builder: DayPlanBuilder) -> None:
        builder.toggle_activity("act-1", day=1)

        assert builder.toggle_activity("act-1", day=2) is False
        assert builder.toggle_activity("act-1", day=1) is True
        assert builder.day_plans[0].activities == []

    def test_meals_can_repeat(self, builder: DayPlanBuilder) -> None:
        assert builder.toggle_meal("m-1", day=1) is True
        assert builder.toggle_meal("m-1", day=2) is True
        assert builder.toggle_meal("nope") is False

    def test_to_day_plans_is_a_copy(self, builder: DayPlanBuilder) -> None:
        builder.toggle_sightseeing("car-a")

        plans = builder.to_day_plans()
        plans[0].sightseeing.clear()

        assert builder.day_plans[0].sightseeing == ["car-a"]


def test_existing_plans_normalized(catalog: CatalogSnapshot) -> None:
    builder = DayPlanBuilder(
        client=make_client(days=2),
        catalog=catalog,
        day_plans=[DayPlan(day=1), DayPlan(day=2), DayPlan(day=3)],
    )

    assert len(builder.day_plans) == 2


def test_step_gates() -> None:
    empty = DayPlan(day=1)

    assert can_leave_step(empty, PlanningStep.sightseeing) is False
    assert can_leave_step(empty, PlanningStep.hotel) is True
    assert is_step_complete(empty, PlanningStep.hotel) is False
    assert is_step_complete(DayPlan(day=1, sightseeing=["car-a"]), PlanningStep.sightseeing) is True


@pytest.mark.parametrize("day", [0, -1, 3])
def test_selections_outside_trip_are_rejected(builder: DayPlanBuilder, day: int) -> None:
    """Test days outside 1..number_of_days change nothing and never raise."""
    builder.set_hotel("h1", "r1", day=1)

    assert builder.toggle_sightseeing("car-a", day=day) is False
    assert builder.set_hotel("h2", "r2", day=day) is False
    assert builder.same_hotel_as_yesterday(day=day) is False
    assert builder.toggle_activity("act-1", day=day) is False
    assert builder.set_activity_option("act-1", "opt-1b", day=day) is False
    assert builder.toggle_ticket("tk-1", day=day) is False
    assert builder.toggle_meal("m-1", day=day) is False
    builder.clear_hotel(day=day)

    assert [plan.sightseeing for plan in builder.day_plans] == [[], []]
    assert [plan.meals for plan in builder.day_plans] == [[], []]
    assert builder.day_plans[0].hotel is not None
    assert builder.day_plans[0].hotel.hotel_id == "h1"
    assert builder.day_plans[1].hotel is None
