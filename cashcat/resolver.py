from decimal import ROUND_HALF_UP, Decimal
from functools import lru_cache
from typing import Iterable, Optional

from cashcat.domain import CENTS, HUNDRED, ZERO, Budget, Number, to_decimal

FIXED = "fixed"
PERCENTAGE = "percentage"
HYBRID = "hybrid"
UNSET = "unset"


def money(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def fixed_part(budget: Budget) -> Optional[Decimal]:
    if budget.fixed_amount is None:
        return None
    return money(to_decimal(budget.fixed_amount))


def percent_part(budget: Budget, monthly_income: Number) -> Optional[Decimal]:
    if budget.percentage_amount is None:
        return None
    income = to_decimal(monthly_income)
    return money(income * to_decimal(budget.percentage_amount) / HUNDRED)


def budget_kind(budget: Budget) -> str:
    has_fixed = budget.fixed_amount is not None
    has_percent = budget.percentage_amount is not None
    if has_fixed and has_percent:
        return HYBRID
    if has_fixed:
        return FIXED
    if has_percent:
        return PERCENTAGE
    return UNSET


@lru_cache(maxsize=1024)
def resolve_ceiling(budget: Budget, monthly_income: Number) -> Decimal:
    """Effective spending limit of ``budget`` for the given income.

    A hybrid budget takes whichever of its two limits is tighter; a budget
    with neither limit set has a ceiling of zero. Results are rounded to
    cents so comparisons near equality stay exact.
    """
    fixed = fixed_part(budget)
    percent = percent_part(budget, monthly_income)
    if fixed is not None and percent is not None:
        return min(fixed, percent)
    if fixed is not None:
        return fixed
    if percent is not None:
        return percent
    return money(ZERO)


def total_budgeted(budgets: Iterable[Budget], monthly_income: Number) -> Decimal:
    return sum((resolve_ceiling(b, monthly_income) for b in budgets), money(ZERO))


def exceeds_income(budgets: Iterable[Budget], monthly_income: Number) -> Decimal:
    """Amount by which the summed ceilings overshoot income, or zero."""
    excess = total_budgeted(budgets, monthly_income) - money(to_decimal(monthly_income))
    return excess if excess > ZERO else money(ZERO)
