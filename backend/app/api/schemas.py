"""Request bodies shared by several routers."""

from pydantic import BaseModel, Field

from backend.app.models.client import Client, PartySize, TravelDates


class ClientInput(BaseModel):
    """Editable client fields (identity, audit and follow-up fields are server-owned)."""

    name: str = Field(..., min_length=1)
    whatsapp: str = ""
    country_code: str = ""
    travel_dates: TravelDates
    pax: PartySize = Field(default_factory=PartySize)
    number_of_days: int = Field(1, ge=1)
    transportation_mode: str = ""

    def to_client(self, client_id: str) -> Client:
        return Client(id=client_id, **self.model_dump())
