import asyncio
from collections import defaultdict
from decimal import Decimal
from typing import Dict, Iterable, List

from cashcat.domain import ZERO, Budget, MonthlySummary, Purchase, to_decimal
from cashcat.period import month_key
from cashcat.resolver import money


def summary_id(budget_id: str, month: str) -> str:
    return f"{budget_id}:{month}"


async def monthly_summaries(
    purchases: Iterable[Purchase], budgets: Iterable[Budget], months: List[str]
) -> List[MonthlySummary]:
    """Build one summary per budget per month, computed concurrently.

    months: list of YYYY-MM strings (e.g. '2024-03'), calendar months of
    the purchase date. Budgets with no purchases in a month still get a
    zero summary so the (budget, month, year) set is complete.
    """
    purchases = tuple(purchases)

    async def month_total(budget: Budget, month: str) -> MonthlySummary:
        total = money(ZERO)
        for p in purchases:
            if p.budget_id == budget.id and month_key(p.purchase_date) == month:
                total += to_decimal(p.amount)
        await asyncio.sleep(0)
        year, mon = (int(part) for part in month.split("-"))
        return MonthlySummary(
            id=summary_id(budget.id, month),
            budget_id=budget.id,
            month=mon,
            year=year,
            total_spent=total,
        )

    tasks = [month_total(b, m) for b in budgets for m in months]
    return list(await asyncio.gather(*tasks))


def summaries_by_month(summaries: Iterable[MonthlySummary]) -> Dict[str, Dict[str, Decimal]]:
    grouped: Dict[str, Dict[str, Decimal]] = defaultdict(dict)
    for s in summaries:
        grouped[f"{s.year:04d}-{s.month:02d}"][s.budget_id] = s.total_spent
    return dict(grouped)
