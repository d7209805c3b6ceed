"""Currency display helpers.

Prices are Decimal with two places end to end. No float.
"""

from decimal import ROUND_HALF_UP, Decimal

_CENT = Decimal("0.01")


def quantize_price(price: Decimal) -> Decimal:
    """Round a price to whole cents (half-up)."""
    return price.quantize(_CENT, rounding=ROUND_HALF_UP)


def format_currency(price: Decimal) -> str:
    """Decimal to display string: 999.99 -> '$999.99', -12 -> '-$12.00'."""
    amount = quantize_price(price)
    if amount < 0:
        return f"-${-amount:,.2f}"
    return f"${amount:,.2f}"
