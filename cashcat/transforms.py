import json
import logging
from dataclasses import replace
from datetime import date, timedelta
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Union
from uuid import uuid4

import pandas as pd

from cashcat.config import DEFAULT_BUDGET_COLOR, DEFAULT_TRACKING_START_DAY, SEED_PATH
from cashcat.domain import ZERO, Budget, PaymentMethod, Purchase, UserProfile, to_decimal
from cashcat.validation import BudgetDraft, ProfileDraft, PurchaseDraft

logger = logging.getLogger(__name__)

Snapshot = Tuple[UserProfile, Tuple[Budget, ...], Tuple[Purchase, ...]]


def _optional_decimal(value: Any):
    return None if value is None else to_decimal(value)


def parse_purchase_date(value: Union[str, date]) -> date:
    """Calendar date of a stored purchase.

    Rows written by the web client hold midnight-UTC timestamps such as
    ``2024-03-10T00:00:00.000Z``; only the date part is meaningful.
    """
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def profile_from_row(row: Mapping[str, Any]) -> UserProfile:
    return UserProfile(
        id=str(row["id"]),
        email=row.get("email", ""),
        monthly_income=to_decimal(row.get("monthly_income") or 0),
        tracking_start_day=int(row.get("tracking_start_day") or DEFAULT_TRACKING_START_DAY),
        display_name=row.get("display_name"),
    )


def budget_from_row(row: Mapping[str, Any]) -> Budget:
    return Budget(
        id=str(row["id"]),
        name=row["name"],
        color=row.get("color") or DEFAULT_BUDGET_COLOR,
        fixed_amount=_optional_decimal(row.get("fixed_amount")),
        percentage_amount=_optional_decimal(row.get("percentage_amount")),
    )


def purchase_from_row(row: Mapping[str, Any]) -> Purchase:
    return Purchase(
        id=str(row["id"]),
        budget_id=str(row["budget_id"]),
        amount=to_decimal(row["amount"]),
        description=row["description"],
        payment_method=PaymentMethod(row["payment_method"]),
        purchase_date=parse_purchase_date(row["purchase_date"]),
    )


def snapshot_from_dict(data: Mapping[str, Any]) -> Snapshot:
    profile = profile_from_row(data["profile"])
    budgets = tuple(budget_from_row(b) for b in data.get("budgets", []))
    purchases = tuple(purchase_from_row(p) for p in data.get("purchases", []))
    return profile, budgets, purchases


def shift_purchases(purchases: Tuple[Purchase, ...], days: int) -> Tuple[Purchase, ...]:
    return tuple(
        replace(p, purchase_date=p.purchase_date + timedelta(days=days)) for p in purchases
    )


def load_seed(
    path: Optional[Union[str, Path]] = None, today: Optional[date] = None
) -> Snapshot:
    """Load a snapshot from JSON.

    When ``today`` is given and the file records an ``as_of`` date, purchase
    dates move by the same number of days so the demo data stays current.
    """
    target = Path(path or SEED_PATH)
    with open(target, "r", encoding="utf-8") as f:
        data = json.load(f)

    snapshot = snapshot_from_dict(data)
    if today is not None and data.get("as_of"):
        offset = (today - parse_purchase_date(data["as_of"])).days
        snapshot = (snapshot[0], snapshot[1], shift_purchases(snapshot[2], offset))
        logger.debug("Shifted seed purchases by %d days", offset)
    logger.info(
        "Loaded %d budgets and %d purchases from %s",
        len(snapshot[1]), len(snapshot[2]), target,
    )
    return snapshot


def new_id() -> str:
    return str(uuid4())


def update_profile(profile: UserProfile, draft: ProfileDraft) -> UserProfile:
    return replace(
        profile,
        monthly_income=draft.monthly_income,
        tracking_start_day=draft.tracking_start_day,
        display_name=draft.display_name,
    )


def add_budget(budgets: Tuple[Budget, ...], draft: BudgetDraft) -> Tuple[Budget, ...]:
    budget = Budget(
        id=new_id(),
        name=draft.name,
        color=draft.color,
        fixed_amount=draft.fixed_amount,
        percentage_amount=draft.percentage_amount,
    )
    return budgets + (budget,)


def update_budget(
    budgets: Tuple[Budget, ...], bid: str, draft: BudgetDraft
) -> Tuple[Budget, ...]:
    return tuple(
        replace(
            b,
            name=draft.name,
            color=draft.color,
            fixed_amount=draft.fixed_amount,
            percentage_amount=draft.percentage_amount,
        )
        if b.id == bid
        else b
        for b in budgets
    )


def remove_budget(
    budgets: Tuple[Budget, ...], purchases: Tuple[Purchase, ...], bid: str
) -> Tuple[Tuple[Budget, ...], Tuple[Purchase, ...]]:
    """Drop a budget together with every purchase logged against it."""
    return (
        tuple(b for b in budgets if b.id != bid),
        tuple(p for p in purchases if p.budget_id != bid),
    )


def add_purchase(purchases: Tuple[Purchase, ...], draft: PurchaseDraft) -> Tuple[Purchase, ...]:
    purchase = Purchase(
        id=new_id(),
        budget_id=draft.budget_id,
        amount=draft.amount,
        description=draft.description,
        payment_method=draft.payment_method,
        purchase_date=draft.purchase_date,
    )
    return purchases + (purchase,)


def remove_purchase(purchases: Tuple[Purchase, ...], pid: str) -> Tuple[Purchase, ...]:
    return tuple(p for p in purchases if p.id != pid)


def purchases_to_frame(
    purchases: Tuple[Purchase, ...], budgets: Tuple[Budget, ...] = ()
) -> pd.DataFrame:
    names: Dict[str, str] = {b.id: b.name for b in budgets}
    rows = [
        {
            "date": pd.Timestamp(p.purchase_date),
            "description": p.description,
            "budget": names.get(p.budget_id, p.budget_id),
            "method": PaymentMethod(p.payment_method).value,
            "amount": float(p.amount),
        }
        for p in purchases
    ]
    return pd.DataFrame(rows, columns=["date", "description", "budget", "method", "amount"])


def spent_frame(per_budget: Mapping[str, Any], budgets: Tuple[Budget, ...]) -> pd.DataFrame:
    names = {b.id: b.name for b in budgets}
    return pd.DataFrame(
        [
            {"budget": names.get(bid, bid), "spent": float(amount or ZERO)}
            for bid, amount in per_budget.items()
        ],
        columns=["budget", "spent"],
    )
