from datetime import date, datetime
from decimal import Decimal

from cashcat.aggregate import STATUS_OK, STATUS_OVER
from cashcat.config import SEED_PATH
from cashcat.domain import Budget, PaymentMethod, Purchase, UserProfile
from cashcat.services import (
    DEFAULT_CALCULATORS,
    BudgetService,
    calc_period,
    calc_totals,
    default_service,
    income_allocation,
    unknown_budget_refs,
)
from cashcat.transforms import load_seed

NOW = datetime(2024, 3, 22, 9, 30)


def seed_report():
    profile, budgets, purchases = load_seed(SEED_PATH)
    return default_service().period_report(profile, budgets, purchases, NOW)


def test_period_report_on_seed():
    report = seed_report()
    result = report["result"]

    assert report["now"] == NOW
    assert result["period"].start_date == date(2024, 3, 15)
    assert result["period"].end_date == date(2024, 4, 14)
    assert {p.id for p in result["purchases"]} == {"p1", "p2", "p3", "p6"}

    totals = result["totals"]
    assert totals.per_budget_spent == {
        "b1": Decimal("120"),
        "b2": Decimal("50"),
        "b3": Decimal("310"),
        "b4": Decimal("18.75"),
    }
    assert totals.total_spent == Decimal("498.75")
    assert totals.per_method_totals == {
        PaymentMethod.BANK: Decimal("120"),
        PaymentMethod.CREDIT: Decimal("68.75"),
        PaymentMethod.CASH: Decimal("310"),
    }


def test_period_report_ceilings_and_usage():
    result = seed_report()["result"]

    assert result["ceilings"] == {
        "b1": Decimal("500"),
        "b2": Decimal("600"),
        "b3": Decimal("300"),
        "b4": Decimal("150"),
    }
    assert result["total_budgeted"] == Decimal("1550")
    assert result["left_this_month"] == Decimal("2501.25")
    assert result["usage"]["b3"].status == STATUS_OVER
    assert result["usage"]["b3"].remaining == Decimal("-10")
    assert result["usage"]["b1"].status == STATUS_OK


def test_steps_follow_calculator_order():
    report = seed_report()
    assert [s["calculator"] for s in report["steps"]] == [c.__name__ for c in DEFAULT_CALCULATORS]
    assert all(entry["messages"] == [] for entry in report["validation"])


def test_validators_flag_problems():
    profile = UserProfile("u1", "a@b.c", monthly_income=Decimal("1000"))
    budgets = (Budget("b1", "Rent", fixed_amount=Decimal("900")), Budget("b2", "Food", percentage_amount=Decimal("20")))
    purchases = (Purchase("p1", "gone", Decimal("5"), "x", PaymentMethod.CASH, date(2024, 3, 1)),)

    assert unknown_budget_refs(profile, budgets, purchases) == ["Purchase p1 refers to unknown budget gone"]
    assert income_allocation(profile, budgets, purchases) == ["Budgets exceed your monthly income by $100.00"]


def test_validator_errors_are_reported_not_raised():
    def broken(profile, budgets, purchases):
        raise RuntimeError("boom")

    profile, budgets, purchases = load_seed(SEED_PATH)
    service = BudgetService([broken], [calc_period, calc_totals])
    report = service.period_report(profile, budgets, purchases, NOW)

    assert report["validation"] == [{"validator": "broken", "messages": ["validator_error: boom"]}]
    assert report["result"]["totals"].total_spent > 0


def test_calculators_see_earlier_output():
    seen = []

    def spy(profile, budgets, purchases, now, acc):
        seen.append(dict(acc))
        return {}

    profile, budgets, purchases = load_seed(SEED_PATH)
    BudgetService([], [calc_period, spy]).period_report(profile, budgets, purchases, NOW)
    assert "period" in seen[0]
