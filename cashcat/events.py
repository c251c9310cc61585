import logging
from datetime import datetime
from decimal import Decimal
from typing import Callable, Dict, List, NamedTuple

from cashcat.aggregate import STATUS_LIMIT, STATUS_OK, STATUS_OVER, percent_used, usage_status
from cashcat.domain import to_decimal
from cashcat.formatting import format_currency, format_percent

__all__ = [
    'event_bus', 'PURCHASE_ADDED', 'INCOME_ALERT', 'Event', 'EventBus',
    'budget_status_handler', 'allocation_handler', 'register_default_handlers',
]

logger = logging.getLogger(__name__)

PURCHASE_ADDED = "PURCHASE_ADDED"
INCOME_ALERT = "INCOME_ALERT"

Handler = Callable[['Event', dict], dict]


class Event(NamedTuple):
    name: str
    ts: str
    payload: dict


class EventBus:
    def __init__(self):
        self._subscribers: Dict[str, List[Handler]] = {}

    def subscribe(self, name: str, handler: Handler) -> None:
        self._subscribers.setdefault(name, [])
        if handler not in self._subscribers[name]:
            self._subscribers[name].append(handler)

    def unsubscribe(self, name: str, handler: Handler) -> None:
        handlers = self._subscribers.get(name, [])
        if handler in handlers:
            handlers.remove(handler)

    def publish(self, name: str, payload: dict) -> List[dict]:
        handlers = list(self._subscribers.get(name, []))
        if not handlers:
            return []

        event = Event(name=name, ts=datetime.now().isoformat(), payload=payload)
        results = [handler(event, payload) for handler in handlers]
        alerts = [r["alert"] for r in results if r.get("alert")]
        for alert in alerts:
            logger.info("%s: %s", name, alert)
        return results


def budget_status_handler(event: Event, payload: dict) -> dict:
    """Report how a new purchase moves its budget against the ceiling.

    Expects ``amount``, ``spent`` (before the purchase), ``ceiling`` and
    ``budget_name``. Returns the new spent figure, and an ``alert`` once
    usage reaches the warning threshold.
    """
    amount = to_decimal(payload.get("amount", 0))
    ceiling = to_decimal(payload.get("ceiling", 0))
    new_spent = to_decimal(payload.get("spent", 0)) + amount
    name = payload.get("budget_name") or payload.get("budget_id", "")

    percent = percent_used(new_spent, ceiling)
    status = usage_status(new_spent, ceiling)
    result = {"spent": new_spent, "percent_used": percent, "status": status}

    if status == STATUS_OVER:
        result["alert"] = (
            f"Over budget! {name} is {format_currency(new_spent - ceiling)} over its limit"
        )
    elif status == STATUS_LIMIT:
        result["alert"] = f"Budget limit reached for {name}"
    elif status != STATUS_OK:
        result["alert"] = f"Approaching limit: {name} has used {format_percent(percent)}"
    return result


def allocation_handler(event: Event, payload: dict) -> dict:
    total: Decimal = to_decimal(payload.get("total_budgeted", 0))
    income: Decimal = to_decimal(payload.get("monthly_income", 0))
    if total > income:
        excess = total - income
        return {
            "alert": f"Adding this budget will exceed your monthly income by {format_currency(excess)}",
            "excess": excess,
        }
    return {}


def register_default_handlers(bus: EventBus) -> EventBus:
    bus.subscribe(PURCHASE_ADDED, budget_status_handler)
    bus.subscribe(INCOME_ALERT, allocation_handler)
    return bus


event_bus = register_default_handlers(EventBus())
