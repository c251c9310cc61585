from datetime import date, datetime, timedelta, timezone

from cashcat.domain import Period
from cashcat.period import (
    add_months,
    clamp_day,
    current_period,
    in_period,
    month_key,
    previous_period,
)


def days_of(year: int):
    d = date(year, 1, 1)
    while d.year == year:
        yield d
        d += timedelta(days=1)


def test_period_before_start_day_uses_previous_month():
    period = current_period(datetime(2024, 3, 10, 12, 30), 15)

    assert period.start == datetime(2024, 2, 15)
    assert period.end == datetime(2024, 3, 14, 23, 59, 59, 999000)


def test_period_on_or_after_start_day_uses_current_month():
    period = current_period(datetime(2024, 3, 20), 15)
    assert period.start == datetime(2024, 3, 15)
    assert period.end == datetime(2024, 4, 14, 23, 59, 59, 999000)

    on_the_day = current_period(datetime(2024, 3, 15, 0, 0), 15)
    assert on_the_day.start == datetime(2024, 3, 15)


def test_period_wraps_year_boundary():
    period = current_period(date(2024, 1, 5), 15)
    assert period.start_date == date(2023, 12, 15)
    assert period.end_date == date(2024, 1, 14)

    december = current_period(date(2023, 12, 20), 15)
    assert december.end_date == date(2024, 1, 14)


def test_start_day_one_is_the_calendar_month():
    period = current_period(date(2024, 2, 10), 1)
    assert period.start_date == date(2024, 2, 1)
    assert period.end == datetime(2024, 2, 29, 23, 59, 59, 999000)


def test_start_day_past_month_end_clamps_to_last_day():
    mid_feb = current_period(date(2024, 2, 15), 31)
    assert mid_feb.start_date == date(2024, 1, 31)
    assert mid_feb.end_date == date(2024, 2, 28)

    leap_day = current_period(date(2024, 2, 29), 31)
    assert leap_day.start_date == date(2024, 2, 29)
    assert leap_day.end_date == date(2024, 3, 30)

    late_march = current_period(date(2024, 3, 30), 31)
    assert late_march == leap_day

    non_leap = current_period(date(2023, 2, 28), 30)
    assert non_leap.start_date == date(2023, 2, 28)
    assert non_leap.end_date == date(2023, 3, 29)


def test_now_always_inside_its_period_for_common_start_days():
    for start_day in range(1, 29):
        for day in days_of(2024):
            now = datetime(day.year, day.month, day.day, 18, 45)
            period = current_period(now, start_day)
            assert period.start <= now <= period.end

            y, m = add_months(period.start.year, period.start.month, 1)
            assert period.end_date + timedelta(days=1) == date(y, m, start_day)


def test_clamped_periods_tile_without_gaps():
    for start_day in (29, 30, 31):
        for year in (2023, 2024):
            for day in days_of(year):
                period = current_period(day, start_day)
                assert in_period(day, period)
                following = current_period(period.end_date + timedelta(days=1), start_day)
                assert following.start_date == period.end_date + timedelta(days=1)


def test_timezone_is_kept_on_both_bounds():
    now = datetime(2024, 3, 20, 9, 0, tzinfo=timezone.utc)
    period = current_period(now, 15)
    assert period.start.tzinfo is timezone.utc
    assert period.end.tzinfo is timezone.utc
    assert period.start <= now <= period.end


def test_previous_period():
    period = current_period(date(2024, 3, 20), 15)
    prev = previous_period(period, 15)
    assert prev.start_date == date(2024, 2, 15)
    assert prev.end_date == date(2024, 3, 14)


def test_in_period_accepts_dates_and_datetimes():
    period = Period(datetime(2024, 2, 15), datetime(2024, 3, 14, 23, 59, 59, 999000))
    assert in_period(date(2024, 2, 15), period)
    assert in_period(datetime(2024, 3, 14, 23, 0), period)
    assert not in_period(date(2024, 3, 15), period)
    assert not in_period(date(2024, 2, 14), period)


def test_helpers():
    assert clamp_day(2023, 2, 31) == 28
    assert clamp_day(2024, 2, 31) == 29
    assert clamp_day(2024, 4, 31) == 30
    assert clamp_day(2024, 5, 0) == 1
    assert add_months(2024, 12, 1) == (2025, 1)
    assert add_months(2024, 1, -1) == (2023, 12)
    assert month_key(date(2024, 3, 5)) == "2024-03"
