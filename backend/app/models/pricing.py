"""Pricing result models."""

from pydantic import BaseModel


class CostBreakdown(BaseModel):
    """Base cost split by category; `total` is the base cost."""

    transportation: float = 0
    hotels: float = 0
    sightseeing: float = 0
    activities: float = 0
    entry_tickets: float = 0
    meals: float = 0
    total: float = 0


class PriceQuote(BaseModel):
    """Priced trip with the margin applied and a secondary-currency figure."""

    breakdown: CostBreakdown
    total_base_cost: float
    profit_margin: float
    final_price: float
    exchange_rate: float
    final_price_secondary: float
    secondary_currency: str


class StalenessReport(BaseModel):
    """Result of re-pricing a stored itinerary against current catalog data.

    When `is_stale` is true, `current_base_cost` is the authoritative figure.
    """

    client_id: str
    version: int
    stored_base_cost: float
    current_base_cost: float
    difference: float
    is_stale: bool
    current_final_price: float
