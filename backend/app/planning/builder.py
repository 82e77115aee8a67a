"""Day-plan builder - stepwise construction of an itinerary's day plans."""

from dataclasses import dataclass, field

from backend.app.db.repositories import CatalogRepository
from backend.app.models.client import Client
from backend.app.models.common import PlanningStep
from backend.app.models.itinerary import ActivitySelection, DayPlan, HotelStay
from backend.app.planning.availability import (
    AvailableItems,
    available_activities_for_day,
    available_items_for_day,
    available_tickets_for_day,
)
from backend.app.versioning.manager import normalize_day_plans

STEP_ORDER: tuple[PlanningStep, ...] = (
    PlanningStep.sightseeing,
    PlanningStep.hotel,
    PlanningStep.activities,
    PlanningStep.tickets,
    PlanningStep.meals,
)


def can_leave_step(day_plan: DayPlan, step: PlanningStep) -> bool:
    """Completion gate: only sightseeing needs at least one selection."""
    if step == PlanningStep.sightseeing:
        return len(day_plan.sightseeing) > 0
    return True


def is_step_complete(day_plan: DayPlan, step: PlanningStep) -> bool:
    """Progress indicator for a step (hotel counts as done once one is chosen)."""
    if step == PlanningStep.sightseeing:
        return len(day_plan.sightseeing) > 0
    if step == PlanningStep.hotel:
        return day_plan.hotel is not None
    return True


@dataclass
class DayPlanBuilder:
    """Wizard state over days 1..number_of_days and the five planning steps.

    Selection methods return False instead of raising when an id is unknown
    or no longer available; nothing is changed in that case.
    """

    client: Client
    catalog: CatalogRepository
    day_plans: list[DayPlan] = field(default_factory=list)
    current_day: int = 1
    current_step: PlanningStep = PlanningStep.sightseeing
    completed_days: set[int] = field(default_factory=set)

    def __post_init__(self) -> None:
        self.day_plans = normalize_day_plans(self.day_plans, self.client.number_of_days)

    @property
    def number_of_days(self) -> int:
        return self.client.number_of_days

    @property
    def current_plan(self) -> DayPlan:
        return self.day_plans[self.current_day - 1]

    def _plan(self, day: int | None) -> DayPlan | None:
        """Day plan for `day` (current day when None), or None outside 1..number_of_days."""
        if day is None:
            day = self.current_day
        if not 1 <= day <= self.number_of_days:
            return None
        return self.day_plans[day - 1]

    # Availability

    def available_items(self, day: int | None = None) -> AvailableItems:
        return available_items_for_day(
            self.current_day if day is None else day, self.day_plans, self.client, self.catalog
        )

    # Navigation

    def can_proceed(self) -> bool:
        return can_leave_step(self.current_plan, self.current_step)

    def next_step(self) -> bool:
        """Advance one step, rolling over to the next day after meals.

        Returns:
            False if the current step's gate is not satisfied
        """
        if not self.can_proceed():
            return False

        index = STEP_ORDER.index(self.current_step)
        if index < len(STEP_ORDER) - 1:
            self.current_step = STEP_ORDER[index + 1]
            return True

        self.completed_days.add(self.current_day)
        if self.current_day < self.number_of_days:
            self.current_day += 1
            self.current_step = PlanningStep.sightseeing
        return True

    def previous_step(self) -> None:
        index = STEP_ORDER.index(self.current_step)
        if index > 0:
            self.current_step = STEP_ORDER[index - 1]
        elif self.current_day > 1:
            self.current_day -= 1
            self.current_step = STEP_ORDER[-1]

    def next_day(self) -> bool:
        if self.current_day >= self.number_of_days:
            return False
        self.completed_days.add(self.current_day)
        self.current_day += 1
        self.current_step = PlanningStep.sightseeing
        return True

    def previous_day(self) -> bool:
        if self.current_day <= 1:
            return False
        self.current_day -= 1
        self.current_step = PlanningStep.sightseeing
        return True

    def go_to(self, day: int, step: PlanningStep = PlanningStep.sightseeing) -> bool:
        if not 1 <= day <= self.number_of_days:
            return False
        self.current_day = day
        self.current_step = step
        return True

    def can_proceed_to_review(self) -> bool:
        return len(self.completed_days) >= self.number_of_days or (
            self.current_day == self.number_of_days and self.current_step == PlanningStep.meals
        )

    def incomplete_days(self) -> list[int]:
        """Days with no sightseeing selected."""
        return [plan.day for plan in self.day_plans if not plan.sightseeing]

    # Selections

    def toggle_sightseeing(self, sightseeing_id: str, day: int | None = None) -> bool:
        plan = self._plan(day)
        if plan is None:
            return False
        if sightseeing_id in plan.sightseeing:
            plan.sightseeing = [s for s in plan.sightseeing if s != sightseeing_id]
            # Tickets are scoped to the day's spots
            plan.entry_tickets = [
                t
                for t in plan.entry_tickets
                if (ticket := self.catalog.get_entry_ticket(t)) is None
                or ticket.sightseeing_id != sightseeing_id
            ]
            return True

        available_ids = {spot.id for spot in self.available_items(plan.day).sightseeing}
        if sightseeing_id not in available_ids:
            return False
        plan.sightseeing = [*plan.sightseeing, sightseeing_id]
        return True

    def set_hotel(
        self, hotel_id: str, room_type_id: str, day: int | None = None
    ) -> bool:
        plan = self._plan(day)
        if plan is None:
            return False
        hotel = self.catalog.get_hotel(hotel_id)
        if hotel is None or self.catalog.get_room_type(hotel_id, room_type_id) is None:
            return False
        plan.hotel = HotelStay(place=hotel.place, hotel_id=hotel_id, room_type_id=room_type_id)
        return True

    def clear_hotel(self, day: int | None = None) -> None:
        plan = self._plan(day)
        if plan is not None:
            plan.hotel = None

    def same_hotel_as_yesterday(self, day: int | None = None) -> bool:
        """Copy the previous day's hotel onto `day`."""
        plan = self._plan(day)
        if plan is None:
            return False
        if plan.day <= 1:
            return False
        previous = self.day_plans[plan.day - 2].hotel
        if previous is None:
            return False
        plan.hotel = previous.model_copy()
        return True

    def toggle_activity(self, activity_id: str, day: int | None = None) -> bool:
        """Add an activity with its first option, or remove it if already selected."""
        plan = self._plan(day)
        if plan is None:
            return False
        if activity_id in plan.activity_ids:
            plan.activities = [a for a in plan.activities if a.activity_id != activity_id]
            return True

        candidates = {
            a.id: a for a in available_activities_for_day(plan.day, self.day_plans, self.catalog)
        }
        activity = candidates.get(activity_id)
        if activity is None:
            return False
        option_id = activity.options[0].id if activity.options else ""
        plan.activities = [
            *plan.activities,
            ActivitySelection(activity_id=activity_id, option_id=option_id),
        ]
        return True

    def set_activity_option(
        self, activity_id: str, option_id: str, day: int | None = None
    ) -> bool:
        plan = self._plan(day)
        if plan is None:
            return False
        activity = self.catalog.get_activity(activity_id)
        if activity is None or all(o.id != option_id for o in activity.options):
            return False
        for selection in plan.activities:
            if selection.activity_id == activity_id:
                selection.option_id = option_id
                return True
        return False

    def toggle_ticket(self, ticket_id: str, day: int | None = None) -> bool:
        plan = self._plan(day)
        if plan is None:
            return False
        if ticket_id in plan.entry_tickets:
            plan.entry_tickets = [t for t in plan.entry_tickets if t != ticket_id]
            return True

        candidates = {
            t.id for t in available_tickets_for_day(plan.day, self.day_plans, self.catalog)
        }
        if ticket_id not in candidates:
            return False
        plan.entry_tickets = [*plan.entry_tickets, ticket_id]
        return True

    def toggle_meal(self, meal_id: str, day: int | None = None) -> bool:
        plan = self._plan(day)
        if plan is None:
            return False
        if meal_id in plan.meals:
            plan.meals = [m for m in plan.meals if m != meal_id]
            return True
        if self.catalog.get_meal(meal_id) is None:
            return False
        plan.meals = [*plan.meals, meal_id]
        return True

    def to_day_plans(self) -> list[DayPlan]:
        """Snapshot of the day plans built so far."""
        return [plan.model_copy(deep=True) for plan in self.day_plans]
