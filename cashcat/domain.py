from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Optional, Union

ZERO = Decimal("0")
CENTS = Decimal("0.01")
HUNDRED = Decimal("100")

Number = Union[Decimal, int, float, str]


def to_decimal(value: Number) -> Decimal:
    """Coerce a money or percentage value to Decimal without float drift.

    Floats go through ``str`` so 0.1 becomes Decimal("0.1"), not its
    binary expansion. Raises ValueError for anything unparsable.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Not a number: {value!r}")
    try:
        result = Decimal(str(value).strip())
    except (InvalidOperation, AttributeError) as e:
        raise ValueError(f"Not a number: {value!r}") from e
    if not result.is_finite():
        raise ValueError(f"Not a finite number: {value!r}")
    return result


class PaymentMethod(str, Enum):
    BANK = "bank"
    CREDIT = "credit"
    CASH = "cash"


@dataclass(frozen=True)
class UserProfile:
    id: str
    email: str
    monthly_income: Decimal = ZERO
    tracking_start_day: int = 1   # 1..31, clamped per month
    display_name: Optional[str] = None


@dataclass(frozen=True)
class Budget:
    id: str
    name: str
    color: str = "#FF6B35"
    fixed_amount: Optional[Decimal] = None
    percentage_amount: Optional[Decimal] = None   # 0..100


@dataclass(frozen=True)
class Purchase:
    id: str
    budget_id: str
    amount: Decimal
    description: str
    payment_method: PaymentMethod
    purchase_date: date   # calendar date, no time of day


@dataclass(frozen=True)
class MonthlySummary:
    id: str
    budget_id: str
    month: int
    year: int
    total_spent: Decimal = ZERO


# An accounting window anchored on the user's tracking start day
@dataclass(frozen=True)
class Period:
    start: datetime
    end: datetime

    @property
    def start_date(self) -> date:
        return self.start.date()

    @property
    def end_date(self) -> date:
        return self.end.date()


@dataclass(frozen=True)
class ValidationError:
    field: str
    reason: str
