from decimal import Decimal, ROUND_HALF_UP

from billcycle.utils.constants import CURRENCY_SYMBOL

_CENT = Decimal("0.01")


def to_decimal(amount) -> Decimal:
    """Convert an int, float, str or Decimal amount to Decimal.

    Floats go through str() so 19.99 stays 19.99 instead of its binary expansion.
    """
    if amount is None:
        return Decimal("0")
    if isinstance(amount, Decimal):
        return amount
    if isinstance(amount, float):
        return Decimal(str(amount))
    return Decimal(amount)


def quantize(amount: Decimal) -> Decimal:
    return to_decimal(amount).quantize(_CENT, rounding=ROUND_HALF_UP)


def format_currency(amount, symbol: str = CURRENCY_SYMBOL) -> str:
    """Format an amount as currency string, e.g. '$1,234.56'."""
    return f"{symbol}{quantize(amount):,.2f}"


def format_signed(amount, symbol: str = CURRENCY_SYMBOL) -> str:
    """Format with +/- sign."""
    value = quantize(amount)
    sign = "+" if value >= 0 else "-"
    return f"{sign}{symbol}{abs(value):,.2f}"
