"""Pricing quote endpoint - prices a draft itinerary without storing it."""

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from backend.app.api.deps import get_catalog, get_itinerary_service
from backend.app.api.schemas import ClientInput
from backend.app.catalog.snapshot import CatalogSnapshot
from backend.app.config import get_settings
from backend.app.models.itinerary import DayPlan
from backend.app.models.pricing import PriceQuote
from backend.app.pricing.currency import format_currency
from backend.app.services.itinerary_service import ItineraryService

router = APIRouter(prefix="/pricing", tags=["pricing"])


class QuoteRequest(BaseModel):
    """Request body for POST /pricing/quote."""

    client: ClientInput
    day_plans: list[DayPlan] = Field(default_factory=list)
    profit_margin: float = 0
    exchange_rate: float | None = Field(None, gt=0)


class QuoteResponse(BaseModel):
    """Quote plus display strings."""

    quote: PriceQuote
    final_price_display: str
    final_price_secondary_display: str


@router.post("/quote", response_model=QuoteResponse)
def create_quote(
    request: QuoteRequest,
    catalog: Annotated[CatalogSnapshot, Depends(get_catalog)],
    service: Annotated[ItineraryService, Depends(get_itinerary_service)],
) -> QuoteResponse:
    """Price a draft itinerary."""
    settings = get_settings()
    quote = service.quote(
        request.client.to_client("draft"),
        request.day_plans,
        request.profit_margin,
        request.exchange_rate or settings.default_exchange_rate,
        catalog=catalog,
        secondary_currency=settings.secondary_currency,
    )
    return QuoteResponse(
        quote=quote,
        final_price_display=format_currency(quote.final_price, "USD"),
        final_price_secondary_display=format_currency(
            quote.final_price_secondary, quote.secondary_currency
        ),
    )
