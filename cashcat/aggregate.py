from collections import defaultdict
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Iterable, Iterator, Tuple

from cashcat.config import WARNING_THRESHOLD
from cashcat.domain import HUNDRED, ZERO, Budget, Number, PaymentMethod, Purchase, to_decimal
from cashcat.resolver import money, resolve_ceiling

STATUS_OK = "ok"
STATUS_WARNING = "warning"
STATUS_LIMIT = "limit"
STATUS_OVER = "over"


@dataclass(frozen=True)
class Aggregate:
    per_budget_spent: Dict[str, Decimal] = field(default_factory=dict)
    per_method_totals: Dict[PaymentMethod, Decimal] = field(
        default_factory=lambda: {m: money(ZERO) for m in PaymentMethod}
    )
    total_spent: Decimal = money(ZERO)

    def spent_for(self, budget_id: str) -> Decimal:
        return self.per_budget_spent.get(budget_id, money(ZERO))


@dataclass(frozen=True)
class BudgetUsage:
    budget_id: str
    ceiling: Decimal
    spent: Decimal
    remaining: Decimal   # negative when over budget
    percent_used: Decimal
    status: str

    @property
    def progress(self) -> Decimal:
        """Percent used capped at 100 for progress bars."""
        return min(self.percent_used, HUNDRED)


def aggregate(purchases: Iterable[Purchase], budgets: Iterable[Budget] = ()) -> Aggregate:
    """Sum purchase amounts per budget, per payment method and overall.

    Every budget in ``budgets`` gets an entry even when nothing was spent.
    Purchases pointing at a budget id that is not in ``budgets`` are kept
    under their own id rather than dropped.
    """
    per_budget: Dict[str, Decimal] = defaultdict(lambda: money(ZERO))
    per_method: Dict[PaymentMethod, Decimal] = {m: money(ZERO) for m in PaymentMethod}
    total = money(ZERO)

    for b in budgets:
        per_budget[b.id] = money(ZERO)

    for p in purchases:
        amount = to_decimal(p.amount)
        per_budget[p.budget_id] += amount
        per_method[PaymentMethod(p.payment_method)] += amount
        total += amount

    return Aggregate(
        per_budget_spent=dict(per_budget),
        per_method_totals=per_method,
        total_spent=total,
    )


def usage_status(spent: Number, ceiling: Number) -> str:
    """Classify spending against a ceiling using the exact amounts.

    A zero ceiling is always "ok"; its percentage is reported as 0.
    """
    spent, ceiling = to_decimal(spent), to_decimal(ceiling)
    if ceiling <= ZERO:
        return STATUS_OK
    if spent > ceiling:
        return STATUS_OVER
    if spent == ceiling:
        return STATUS_LIMIT
    if spent * HUNDRED >= WARNING_THRESHOLD * ceiling:
        return STATUS_WARNING
    return STATUS_OK


def percent_used(spent: Number, ceiling: Number) -> Decimal:
    """Percent of the ceiling spent, rounded to cents for display."""
    spent, ceiling = to_decimal(spent), to_decimal(ceiling)
    if ceiling <= ZERO:
        return money(ZERO)
    return money(spent / ceiling * HUNDRED)


def budget_usage(budget: Budget, spent: Number, monthly_income: Number) -> BudgetUsage:
    ceiling = resolve_ceiling(budget, monthly_income)
    spent = to_decimal(spent)
    return BudgetUsage(
        budget_id=budget.id,
        ceiling=ceiling,
        spent=spent,
        remaining=ceiling - spent,
        percent_used=percent_used(spent, ceiling),
        status=usage_status(spent, ceiling),
    )


def usage_by_budget(
    budgets: Iterable[Budget], totals: Aggregate, monthly_income: Number
) -> Dict[str, BudgetUsage]:
    return {b.id: budget_usage(b, totals.spent_for(b.id), monthly_income) for b in budgets}


def top_budgets(
    totals: Aggregate, budgets: Iterable[Budget], k: int
) -> Iterator[Tuple[str, Decimal]]:
    name_by_id: Dict[str, str] = {b.id: b.name for b in budgets}

    ordered = sorted(
        ((name_by_id.get(bid, bid), spent) for bid, spent in totals.per_budget_spent.items()),
        key=lambda item: item[1],
        reverse=True,
    )

    for name, spent in ordered[: max(0, k)]:
        yield name, spent
