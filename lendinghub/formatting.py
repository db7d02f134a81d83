"""Display helpers matching the widget's en-US number formatting."""
from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP


def _round_half_up(value: float, places: int) -> Decimal:
    quantum = Decimal(1).scaleb(-places)
    return Decimal(repr(float(value))).quantize(quantum, rounding=ROUND_HALF_UP)


def _currency(amount: float, places: int) -> str:
    rounded = _round_half_up(amount, places)
    sign = "-" if rounded < 0 else ""
    return f"{sign}${abs(rounded):,.{places}f}"


def format_currency(amount: float) -> str:
    """Whole dollars with thousands separators, e.g. ``$1,234``."""
    return _currency(amount, 0)


def format_currency_with_cents(amount: float) -> str:
    """Dollars and cents, e.g. ``$1,234.56``."""
    return _currency(amount, 2)


def format_percent(value: float) -> str:
    """Three decimal places and a percent sign, e.g. ``6.500%``."""
    return f"{_round_half_up(value, 3):.3f}%"
