"""Common types and enums shared across all models."""

from enum import Enum


class TransportType(str, Enum):
    """How the party moves between sightseeing spots."""

    cab = "cab"
    self_drive_car = "self-drive-car"
    self_drive_scooter = "self-drive-scooter"


class MealType(str, Enum):
    """Meal slot."""

    breakfast = "breakfast"
    lunch = "lunch"
    dinner = "dinner"


class StarCategory(str, Enum):
    """Hotel star category."""

    three_star = "3-star"
    four_star = "4-star"
    five_star = "5-star"


class Season(str, Enum):
    """Hotel pricing season."""

    peak = "peak"
    season = "season"
    off_season = "off-season"


class Role(str, Enum):
    """Back-office actor role."""

    admin = "admin"
    sales = "sales"
    operations = "operations"
    agent = "agent"


class ChangeType(str, Enum):
    """Kind of edit recorded in an itinerary change log entry."""

    created = "created"
    days_modified = "days_modified"
    activities_changed = "activities_changed"
    hotels_changed = "hotels_changed"
    pricing_updated = "pricing_updated"
    general_edit = "general_edit"


class FollowUpStage(str, Enum):
    """Sales pipeline stage."""

    itinerary_created = "itinerary-created"
    itinerary_sent = "itinerary-sent"
    first_follow_up = "1st-follow-up"
    second_follow_up = "2nd-follow-up"
    third_follow_up = "3rd-follow-up"
    fourth_follow_up = "4th-follow-up"
    itinerary_edited = "itinerary-edited"
    updated_itinerary_sent = "updated-itinerary-sent"
    advance_paid_confirmed = "advance-paid-confirmed"
    dead = "dead"


class PlanningStep(str, Enum):
    """Day-plan builder step, in wizard order."""

    sightseeing = "sightseeing"
    hotel = "hotel"
    activities = "activities"
    tickets = "tickets"
    meals = "meals"
