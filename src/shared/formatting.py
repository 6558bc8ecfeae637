"""Display formatting for currency and count values."""

import math
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Union

Number = Union[int, float]

_CENTS = Decimal("0.01")


def format_currency(value: Number) -> str:
    """
    Render a value as US-dollar currency with exactly two fractional digits.

    Rounding is half away from zero on the decimal representation, so
    ``0.125`` renders as ``$0.13`` rather than following binary float rounding.

    Args:
        value: Monetary amount

    Returns:
        String such as ``$1,234.50``
    """
    if not math.isfinite(value):
        return f"${value}"

    amount = Decimal(str(value))
    with localcontext() as ctx:
        # quantize needs room for every integer digit plus the two cents digits
        ctx.prec = max(ctx.prec, amount.adjusted() + 3)
        amount = amount.quantize(_CENTS, rounding=ROUND_HALF_UP)
        sign = "-" if amount < 0 else ""
        return f"{sign}${abs(amount):,.2f}"


def format_integer(value: Number) -> str:
    """Floor a value and group it with thousands separators (never rounds up)."""
    if not math.isfinite(value):
        return str(value)
    return f"{math.floor(value):,}"


def format_plain_number(value: Number) -> str:
    """Render a number without a trailing ``.0`` for whole floats."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
