"""Tracking-period arithmetic.

A tracking period runs from the user's start day in one month up to the
moment before the start day in the next month. Start days past the end of a
short month (29-31) clamp to that month's last day, so consecutive periods
always tile the calendar with no gaps and no overlap.
"""

from __future__ import annotations

import calendar
from datetime import date, datetime, time, timedelta
from typing import Tuple, Union

from cashcat.domain import Period

Instant = Union[datetime, date]

_ONE_MS = timedelta(milliseconds=1)


def clamp_day(year: int, month: int, day: int) -> int:
    """Clamp ``day`` to the valid range for the given year/month."""
    last_day = calendar.monthrange(year, month)[1]
    return max(1, min(day, last_day))


def add_months(year: int, month: int, n: int) -> Tuple[int, int]:
    index = year * 12 + (month - 1) + n
    return index // 12, index % 12 + 1


def anchor_date(year: int, month: int, tracking_start_day: int) -> date:
    return date(year, month, clamp_day(year, month, tracking_start_day))


def current_period(now: Instant, tracking_start_day: int) -> Period:
    """Return the tracking period that contains ``now``.

    ``now`` may be a date or a datetime; a timezone on the datetime is kept
    on both bounds. The end bound is 23:59:59.999 on the day before the next
    period starts.
    """
    if isinstance(now, datetime):
        today, tz = now.date(), now.tzinfo
    else:
        today, tz = now, None

    this_anchor = anchor_date(today.year, today.month, tracking_start_day)
    if today >= this_anchor:
        start = this_anchor
        next_year, next_month = add_months(today.year, today.month, 1)
        next_start = anchor_date(next_year, next_month, tracking_start_day)
    else:
        prev_year, prev_month = add_months(today.year, today.month, -1)
        start = anchor_date(prev_year, prev_month, tracking_start_day)
        next_start = this_anchor

    return Period(
        start=datetime.combine(start, time.min, tzinfo=tz),
        end=datetime.combine(next_start, time.min, tzinfo=tz) - _ONE_MS,
    )


def previous_period(period: Period, tracking_start_day: int) -> Period:
    return current_period(period.start_date - timedelta(days=1), tracking_start_day)


def in_period(day: Instant, period: Period) -> bool:
    if isinstance(day, datetime):
        day = day.date()
    return period.start_date <= day <= period.end_date


def month_key(day: Instant) -> str:
    return f"{day.year:04d}-{day.month:02d}"
