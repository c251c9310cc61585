from dataclasses import dataclass
from datetime import date, timedelta
from typing import Callable, Iterable, Iterator, Optional, Tuple, Union

from cashcat.domain import PaymentMethod, Period, Purchase
from cashcat.period import in_period

ALL = "all"
TODAY = "today"
WEEK = "week"
MONTH = "month"

WINDOWS = (ALL, TODAY, WEEK, MONTH)
# rolling windows, not calendar weeks or months
_WINDOW_DAYS = {TODAY: 0, WEEK: 7, MONTH: 30}

Predicate = Callable[[Purchase], bool]


@dataclass(frozen=True)
class FilterCriteria:
    text: Optional[str] = None
    method: Union[PaymentMethod, str] = ALL
    window: str = ALL

    def __post_init__(self):
        if self.method != ALL:
            object.__setattr__(self, "method", PaymentMethod(self.method))
        if self.window not in WINDOWS:
            raise ValueError(f"Unknown date window: {self.window!r}")

    @property
    def is_default(self) -> bool:
        return not self.text and self.method == ALL and self.window == ALL


def by_text(text: str) -> Predicate:
    needle = text.lower()

    def _filter(p: Purchase) -> bool:
        return needle in p.description.lower()

    return _filter


def by_method(method: Union[PaymentMethod, str]) -> Predicate:
    method = PaymentMethod(method)

    def _filter(p: Purchase) -> bool:
        return PaymentMethod(p.payment_method) is method

    return _filter


def window_start(window: str, today: date) -> Optional[date]:
    if window == ALL:
        return None
    return today - timedelta(days=_WINDOW_DAYS[window])


def by_window(window: str, today: date) -> Predicate:
    start = window_start(window, today)

    def _filter(p: Purchase) -> bool:
        return start is None or p.purchase_date >= start

    return _filter


def by_budget(budget_id: str) -> Predicate:
    def _filter(p: Purchase) -> bool:
        return p.budget_id == budget_id

    return _filter


def by_period(period: Period) -> Predicate:
    def _filter(p: Purchase) -> bool:
        return in_period(p.purchase_date, period)

    return _filter


def predicates_for(criteria: FilterCriteria, today: date) -> Tuple[Predicate, ...]:
    preds = []
    if criteria.text:
        preds.append(by_text(criteria.text))
    if criteria.method != ALL:
        preds.append(by_method(criteria.method))
    if criteria.window != ALL:
        preds.append(by_window(criteria.window, today))
    return tuple(preds)


def iter_purchases(purchases: Iterable[Purchase], *preds: Predicate) -> Iterator[Purchase]:
    for p in purchases:
        if all(pred(p) for pred in preds):
            yield p


def filter_purchases(
    purchases: Iterable[Purchase],
    criteria: FilterCriteria = FilterCriteria(),
    today: Optional[date] = None,
) -> Tuple[Purchase, ...]:
    """Purchases matching every active criterion, in their original order."""
    preds = predicates_for(criteria, today or date.today())
    return tuple(iter_purchases(purchases, *preds))
