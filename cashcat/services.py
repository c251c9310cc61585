from datetime import datetime
from typing import Any, Callable, Dict, Optional, Sequence, Tuple

from cashcat.aggregate import aggregate, usage_by_budget
from cashcat.domain import Budget, Purchase, UserProfile
from cashcat.filters import by_period, iter_purchases
from cashcat.formatting import format_currency
from cashcat.period import current_period
from cashcat.resolver import exceeds_income, resolve_ceiling, total_budgeted

Validator = Callable[[UserProfile, Tuple[Budget, ...], Tuple[Purchase, ...]], Sequence[str]]
Calculator = Callable[..., Dict[str, Any]]


class BudgetService:
    """Facade that turns a snapshot into a dashboard report.

    validators: functions taking (profile, budgets, purchases) -> Sequence[str]
    calculators: functions taking (profile, budgets, purchases, now, acc) -> dict;
        ``acc`` holds the merged output of the calculators before it.
    """

    def __init__(self, validators: Sequence[Validator], calculators: Sequence[Calculator]):
        self.validators = validators
        self.calculators = calculators

    def period_report(
        self,
        profile: UserProfile,
        budgets: Sequence[Budget],
        purchases: Sequence[Purchase],
        now: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        now = now or datetime.now()
        budgets, purchases = tuple(budgets), tuple(purchases)
        report = {"now": now, "validation": [], "steps": [], "result": {}}

        for v in self.validators:
            try:
                msgs = v(profile, budgets, purchases)
            except Exception as e:
                msgs = [f"validator_error: {e}"]
            report["validation"].append({"validator": v.__name__, "messages": list(msgs)})

        acc: Dict[str, Any] = {}
        for calc in self.calculators:
            out = calc(profile, budgets, purchases, now, acc)
            report["steps"].append({"calculator": calc.__name__, "output": out})
            acc.update(out)

        report["result"] = acc
        return report


def unknown_budget_refs(profile, budgets, purchases) -> Sequence[str]:
    known = {b.id for b in budgets}
    return [
        f"Purchase {p.id} refers to unknown budget {p.budget_id}"
        for p in purchases
        if p.budget_id not in known
    ]


def income_allocation(profile, budgets, purchases) -> Sequence[str]:
    excess = exceeds_income(budgets, profile.monthly_income)
    if excess:
        return [f"Budgets exceed your monthly income by {format_currency(excess)}"]
    return []


def calc_period(profile, budgets, purchases, now, acc) -> Dict[str, Any]:
    return {"period": current_period(now, profile.tracking_start_day)}


def calc_period_purchases(profile, budgets, purchases, now, acc) -> Dict[str, Any]:
    period = acc.get("period") or current_period(now, profile.tracking_start_day)
    return {"purchases": tuple(iter_purchases(purchases, by_period(period)))}


def calc_totals(profile, budgets, purchases, now, acc) -> Dict[str, Any]:
    return {"totals": aggregate(acc.get("purchases", purchases), budgets)}


def calc_ceilings(profile, budgets, purchases, now, acc) -> Dict[str, Any]:
    income = profile.monthly_income
    return {
        "ceilings": {b.id: resolve_ceiling(b, income) for b in budgets},
        "total_budgeted": total_budgeted(budgets, income),
    }


def calc_usage(profile, budgets, purchases, now, acc) -> Dict[str, Any]:
    totals = acc.get("totals") or aggregate(purchases, budgets)
    usage = usage_by_budget(budgets, totals, profile.monthly_income)
    return {
        "usage": usage,
        "left_this_month": profile.monthly_income - totals.total_spent,
    }


DEFAULT_VALIDATORS: Tuple[Validator, ...] = (unknown_budget_refs, income_allocation)
DEFAULT_CALCULATORS: Tuple[Calculator, ...] = (
    calc_period,
    calc_period_purchases,
    calc_totals,
    calc_ceilings,
    calc_usage,
)


def default_service() -> BudgetService:
    return BudgetService(DEFAULT_VALIDATORS, DEFAULT_CALCULATORS)
