"""Input checks for budget, purchase and profile forms.

Each ``validate_*`` function takes raw form values and returns an
``Either``: ``Right(draft)`` with normalised values ready to send to the
backend, or ``Left([...])`` with one ``ValidationError`` per offending
field. Nothing is ever half-applied and nothing raises.

Creating a budget is stricter than editing one: new fixed amounts must be
above zero and new percentages in (0, 100], while an edit accepts zero for
both.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any, List, Optional

from cashcat.config import DEFAULT_BUDGET_COLOR
from cashcat.domain import HUNDRED, ZERO, PaymentMethod, ValidationError, to_decimal
from cashcat.functional import Either, Left, Right
from cashcat.resolver import FIXED, HYBRID, PERCENTAGE

logger = logging.getLogger(__name__)

BUDGET_MODES = (FIXED, PERCENTAGE, HYBRID)


@dataclass(frozen=True)
class BudgetDraft:
    name: str
    color: str
    fixed_amount: Optional[Decimal]
    percentage_amount: Optional[Decimal]


@dataclass(frozen=True)
class PurchaseDraft:
    budget_id: str
    amount: Decimal
    description: str
    payment_method: PaymentMethod
    purchase_date: date


@dataclass(frozen=True)
class ProfileDraft:
    monthly_income: Decimal
    tracking_start_day: int
    display_name: Optional[str]


def _blank(raw: Any) -> bool:
    return raw is None or (isinstance(raw, str) and not raw.strip())


def _number(raw: Any) -> Optional[Decimal]:
    try:
        return to_decimal(raw)
    except ValueError:
        return None


def _whole_number(raw: Any) -> Optional[int]:
    """Integer value of ``raw``; fractional numbers like 15.7 or "15.7" are rejected."""
    if isinstance(raw, bool):
        return None
    value = _number(raw)
    if value is None or value != value.to_integral_value():
        return None
    return int(value)


def _result(kind: str, errors: List[ValidationError], draft) -> Either:
    if errors:
        logger.debug("Rejected %s: %s", kind, ", ".join(e.field for e in errors))
        return Left(errors)
    return Right(draft)


def _check_name(name: Any, errors: List[ValidationError]) -> str:
    cleaned = name.strip() if isinstance(name, str) else ""
    if not cleaned:
        errors.append(ValidationError("name", "Please enter a budget name"))
    return cleaned


def validate_budget_create(
    name: Any,
    mode: str,
    fixed_amount: Any = None,
    percentage_amount: Any = None,
    color: str = DEFAULT_BUDGET_COLOR,
) -> Either[List[ValidationError], BudgetDraft]:
    errors: List[ValidationError] = []
    cleaned = _check_name(name, errors)

    if mode not in BUDGET_MODES:
        errors.append(ValidationError("mode", f"Unknown budget type: {mode}"))
        return _result("budget", errors, None)

    fixed = percent = None
    if mode in (FIXED, HYBRID):
        fixed = _number(fixed_amount)
        if fixed is None or fixed <= ZERO:
            errors.append(ValidationError("fixed_amount", "Please enter a valid fixed amount"))
    if mode in (PERCENTAGE, HYBRID):
        percent = _number(percentage_amount)
        if percent is None or percent <= ZERO or percent > HUNDRED:
            errors.append(
                ValidationError("percentage_amount", "Please enter a percentage between 1 and 100")
            )

    return _result("budget", errors, BudgetDraft(cleaned, color, fixed, percent))


def validate_budget_edit(
    name: Any,
    fixed_amount: Any = None,
    percentage_amount: Any = None,
    color: str = DEFAULT_BUDGET_COLOR,
) -> Either[List[ValidationError], BudgetDraft]:
    """Blank amount fields clear that limit; both may end up unset."""
    errors: List[ValidationError] = []
    cleaned = _check_name(name, errors)

    fixed = None
    if not _blank(fixed_amount):
        fixed = _number(fixed_amount)
        if fixed is None or fixed < ZERO:
            errors.append(ValidationError("fixed_amount", "Fixed amount must be a positive number"))

    percent = None
    if not _blank(percentage_amount):
        percent = _number(percentage_amount)
        if percent is None or percent < ZERO or percent > HUNDRED:
            errors.append(
                ValidationError("percentage_amount", "Percentage must be between 0 and 100")
            )

    return _result("budget", errors, BudgetDraft(cleaned, color, fixed, percent))


def _purchase_date(raw: Any) -> Optional[date]:
    if raw is None:
        return date.today()
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    try:
        return date.fromisoformat(str(raw).strip()[:10])
    except ValueError:
        return None


def validate_purchase(
    budget_id: str,
    amount: Any,
    description: Any,
    payment_method: Any,
    purchase_date: Any = None,
) -> Either[List[ValidationError], PurchaseDraft]:
    errors: List[ValidationError] = []

    value = _number(amount)
    if value is None or value <= ZERO:
        errors.append(ValidationError("amount", "Please enter a valid amount"))

    text = description.strip() if isinstance(description, str) else ""
    if not text:
        errors.append(ValidationError("description", "Please enter a description"))

    method = None
    try:
        method = PaymentMethod(payment_method)
    except ValueError:
        errors.append(ValidationError("payment_method", f"Unknown payment method: {payment_method}"))

    day = _purchase_date(purchase_date)
    if day is None:
        errors.append(ValidationError("purchase_date", "Please enter a valid date"))

    return _result("purchase", errors, PurchaseDraft(budget_id, value, text, method, day))


def validate_profile(
    monthly_income: Any,
    tracking_start_day: Any,
    display_name: Any = None,
) -> Either[List[ValidationError], ProfileDraft]:
    errors: List[ValidationError] = []

    income = _number(monthly_income)
    if income is None or income <= ZERO:
        errors.append(ValidationError("monthly_income", "Please enter a valid monthly income"))

    day = _whole_number(tracking_start_day)
    if day is None or not 1 <= day <= 31:
        errors.append(
            ValidationError("tracking_start_day", "Tracking start day must be between 1 and 31")
        )

    name = display_name.strip() if isinstance(display_name, str) else None
    return _result("profile", errors, ProfileDraft(income, day, name or None))
