import asyncio
from datetime import date
from decimal import Decimal

import pytest

from cashcat.domain import Budget, MonthlySummary, PaymentMethod, Purchase
from cashcat.summaries import monthly_summaries, summaries_by_month, summary_id


def make_purchase(id, budget_id, amount, day):
    return Purchase(id, budget_id, Decimal(amount), "item", PaymentMethod.CASH, day)


BUDGETS = [Budget(id="b1", name="Food"), Budget(id="b2", name="Fun")]
PURCHASES = [
    make_purchase("p1", "b1", "100", date(2024, 1, 2)),
    make_purchase("p2", "b1", "200", date(2024, 1, 31)),
    make_purchase("p3", "b2", "50", date(2024, 2, 5)),
    make_purchase("p4", "b1", "25.50", date(2024, 2, 1)),
]


@pytest.mark.asyncio
async def test_monthly_summaries_per_budget_and_month():
    result = await monthly_summaries(PURCHASES, BUDGETS, ["2024-01", "2024-02"])
    by_key = {(s.budget_id, s.year, s.month): s.total_spent for s in result}

    assert len(result) == 4
    assert by_key[("b1", 2024, 1)] == Decimal("300")
    assert by_key[("b1", 2024, 2)] == Decimal("25.50")
    assert by_key[("b2", 2024, 1)] == Decimal("0")
    assert by_key[("b2", 2024, 2)] == Decimal("50")


@pytest.mark.asyncio
async def test_summary_ids_are_unique_per_budget_month():
    result = await monthly_summaries(PURCHASES, BUDGETS, ["2024-01", "2024-02", "2024-03"])
    assert len({s.id for s in result}) == len(result) == 6
    assert summary_id("b1", "2024-03") in {s.id for s in result}


def test_summaries_by_month_groups_results():
    result = asyncio.run(monthly_summaries(iter(PURCHASES), BUDGETS, ["2024-01", "2024-02"]))
    grouped = summaries_by_month(result)
    assert grouped["2024-01"] == {"b1": Decimal("300"), "b2": Decimal("0")}
    assert grouped["2024-02"]["b1"] == Decimal("25.50")


def test_summaries_by_month_from_records():
    grouped = summaries_by_month([MonthlySummary("x", "b9", 12, 2023, Decimal("9.99"))])
    assert grouped == {"2023-12": {"b9": Decimal("9.99")}}


@pytest.mark.asyncio
async def test_no_budgets_no_summaries():
    assert await monthly_summaries(PURCHASES, [], ["2024-01"]) == []
