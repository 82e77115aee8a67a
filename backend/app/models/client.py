"""Client models - trip parameters and the sales follow-up trail."""

from datetime import date, datetime, time

from pydantic import BaseModel, Field, model_validator

from backend.app.models.common import FollowUpStage


class TravelDates(BaseModel):
    """Concrete start/end dates, or a flexible target month."""

    start_date: date | None = None
    end_date: date | None = None
    is_flexible: bool = False
    flexible_month: str | None = None

    @model_validator(mode="after")
    def validate_dates(self) -> "TravelDates":
        """Ensure the fields selected by `is_flexible` are present and ordered."""
        if self.is_flexible:
            if not self.flexible_month:
                raise ValueError("flexible_month is required when is_flexible is true")
            return self

        if self.start_date is None or self.end_date is None:
            raise ValueError("start_date and end_date are required unless is_flexible is true")
        if self.end_date < self.start_date:
            raise ValueError("end_date must be >= start_date")
        return self

    @property
    def is_concrete(self) -> bool:
        return not self.is_flexible and self.start_date is not None and self.end_date is not None

    def span_days(self) -> int | None:
        """Inclusive day count between start and end, or None for flexible dates."""
        if self.is_flexible or self.start_date is None or self.end_date is None:
            return None
        return (self.end_date - self.start_date).days + 1


class PartySize(BaseModel):
    """Travelling party composition."""

    adults: int = Field(1, ge=1)
    children: int = Field(0, ge=0)

    @property
    def total(self) -> int:
        return self.adults + self.children


class FollowUpStatus(BaseModel):
    """Current follow-up snapshot on a client."""

    status: FollowUpStage
    updated_at: datetime
    remarks: str
    next_follow_up_date: date | None = None
    next_follow_up_time: time | None = None


class FollowUpRecord(BaseModel):
    """Immutable follow-up history entry."""

    id: str
    client_id: str
    status: FollowUpStage
    remarks: str
    updated_at: datetime
    updated_by: str
    next_follow_up_date: date | None = None
    next_follow_up_time: time | None = None


class Client(BaseModel):
    """Trip-level parameters for one client."""

    id: str
    name: str
    whatsapp: str = ""
    country_code: str = ""
    travel_dates: TravelDates
    pax: PartySize = Field(default_factory=PartySize)
    number_of_days: int = Field(1, ge=1)
    transportation_mode: str = ""
    created_at: datetime | None = None
    created_by: str | None = None
    follow_up_status: FollowUpStatus | None = None
    follow_up_history: list[FollowUpRecord] = Field(default_factory=list)

    @model_validator(mode="after")
    def derive_number_of_days(self) -> "Client":
        """Concrete travel dates fix the day count; flexible dates leave it editable."""
        span = self.travel_dates.span_days()
        if span is not None:
            self.number_of_days = span
        return self

    @property
    def total_pax(self) -> int:
        return self.pax.total

    @property
    def current_stage(self) -> FollowUpStage:
        if self.follow_up_status is None:
            return FollowUpStage.itinerary_created
        return self.follow_up_status.status
