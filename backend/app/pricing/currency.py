"""Secondary-currency conversion and display formatting."""

from backend.app.models.pricing import CostBreakdown, PriceQuote


def convert_to_secondary(amount: float, exchange_rate: float) -> float:
    """Convert a primary-currency (USD) amount using the itinerary exchange rate."""
    return amount * exchange_rate


def _group_indian(digits: str) -> str:
    # 1234567 -> 12,34,567
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups) + "," + tail


def format_currency(amount: float, currency: str = "USD") -> str:
    """Format an amount for display.

    USD: "$" with two decimals. INR: "₹" with Indian digit grouping and no
    decimals.
    """
    if currency.upper() == "INR":
        rounded = round(amount)
        sign = "-" if rounded < 0 else ""
        return f"{sign}₹{_group_indian(str(abs(rounded)))}"
    return f"${amount:.2f}"


def build_quote(
    breakdown: CostBreakdown,
    profit_margin: float,
    exchange_rate: float,
    secondary_currency: str,
) -> PriceQuote:
    """Apply the profit margin to a cost breakdown."""
    final_price = breakdown.total + profit_margin
    return PriceQuote(
        breakdown=breakdown,
        total_base_cost=breakdown.total,
        profit_margin=profit_margin,
        final_price=final_price,
        exchange_rate=exchange_rate,
        final_price_secondary=convert_to_secondary(final_price, exchange_rate),
        secondary_currency=secondary_currency,
    )
