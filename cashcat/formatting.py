"""Display helpers for money, percentages and budget descriptions."""

from __future__ import annotations

from decimal import Decimal
from typing import Union

from cashcat.aggregate import STATUS_LIMIT, STATUS_OVER, STATUS_WARNING
from cashcat.config import CURRENCY_SYMBOL
from cashcat.domain import Budget, Period, to_decimal
from cashcat.resolver import FIXED, HYBRID, PERCENTAGE, budget_kind

Amount = Union[Decimal, float, int]

PROGRESS_COLORS = {
    STATUS_OVER: "red",
    STATUS_LIMIT: "red",
    STATUS_WARNING: "orange",
}


def format_currency(amount: Amount, symbol: str = CURRENCY_SYMBOL) -> str:
    """Format an amount as currency, e.g. ``$1,234.56`` or ``-$10.00``."""
    value = to_decimal(amount)
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol}{abs(value):,.2f}"


def format_percent(value: Amount, digits: int = 1) -> str:
    return f"{to_decimal(value):.{digits}f}%"


def _plain(value: Amount) -> str:
    """Drop trailing zeros: 20.00 -> '20', 12.50 -> '12.5'."""
    text = f"{to_decimal(value):f}"
    return text.rstrip("0").rstrip(".") if "." in text else text


def budget_type_text(budget: Budget, symbol: str = CURRENCY_SYMBOL) -> str:
    kind = budget_kind(budget)
    if kind == HYBRID:
        return (
            f"{symbol}{_plain(budget.fixed_amount)} or "
            f"{_plain(budget.percentage_amount)}% (whichever is less)"
        )
    if kind == FIXED:
        return f"{symbol}{_plain(budget.fixed_amount)} fixed"
    if kind == PERCENTAGE:
        return f"{_plain(budget.percentage_amount)}% of income"
    return ""


def period_label(period: Period) -> str:
    """Short label such as ``Feb 15 - Mar 14``."""
    start, end = period.start_date, period.end_date
    return f"{start:%b} {start.day} - {end:%b} {end.day}"


def progress_color(status: str) -> str:
    return PROGRESS_COLORS.get(status, "green")
