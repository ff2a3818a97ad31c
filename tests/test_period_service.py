import random
from datetime import date, timedelta

import pytest

from billcycle.errors import InvalidSpec
from billcycle.models.schedule import BudgetPeriodSpec, ResolvedWindow
from billcycle.services.period_service import PeriodWindowResolver, resolve_window

START = date(2020, 1, 1)


def test_monthly_window_is_calendar_month():
    w = resolve_window("monthly", START, None, date(2024, 2, 10))
    assert w == ResolvedWindow(date(2024, 2, 1), date(2024, 2, 29))


def test_weekly_window_sunday_to_saturday():
    # 2024-06-12 is a Wednesday
    w = resolve_window("weekly", START, None, date(2024, 6, 12))
    assert w.window_start == date(2024, 6, 9)
    assert w.window_start.weekday() == 6
    assert w.window_end == date(2024, 6, 15)
    assert w.window_end.weekday() == 5


def test_weekly_window_spanning_year_end():
    w = resolve_window("weekly", START, None, date(2025, 1, 1))
    assert w == ResolvedWindow(date(2024, 12, 29), date(2025, 1, 4))


def test_yearly_window():
    w = resolve_window("yearly", START, None, date(2024, 7, 4))
    assert w == ResolvedWindow(date(2024, 1, 1), date(2024, 12, 31))


def test_daily_window_is_the_day_itself():
    w = resolve_window("daily", START, None, date(2024, 7, 4))
    assert w == ResolvedWindow(date(2024, 7, 4), date(2024, 7, 4))
    assert w.days == 1


def test_custom_window_ignores_as_of():
    w = resolve_window("custom", date(2024, 3, 1), date(2024, 3, 15), date(2024, 6, 1))
    assert w == ResolvedWindow(date(2024, 3, 1), date(2024, 3, 15))
    assert not w.contains(date(2024, 6, 1))


def test_custom_without_end_date_raises():
    with pytest.raises(InvalidSpec):
        resolve_window("custom", date(2024, 3, 1), None, date(2024, 3, 5))


@pytest.mark.parametrize("kind", ["monthly", "weekly", "yearly", "custom"])
def test_start_after_end_raises_for_every_kind(kind):
    with pytest.raises(InvalidSpec):
        resolve_window(kind, date(2024, 5, 1), date(2024, 4, 1), date(2024, 4, 15))


def test_unknown_period_kind_raises():
    with pytest.raises(InvalidSpec):
        BudgetPeriodSpec("fortnightly", START)


@pytest.mark.parametrize("kind", ["monthly", "weekly", "yearly", "daily"])
def test_window_contains_as_of(kind):
    rng = random.Random(f"containment-{kind}")
    resolver = PeriodWindowResolver()
    spec = BudgetPeriodSpec(kind, START)
    # 2020-2026 covers the 2020 and 2024 leap years
    for _ in range(1000):
        as_of = START + timedelta(days=rng.randrange(365 * 7))
        w = resolver.resolve_window(spec, as_of)
        assert w.window_start <= as_of <= w.window_end


def test_leap_february_window():
    for as_of in (date(2024, 2, 29), date(2024, 2, 1)):
        w = resolve_window("monthly", START, None, as_of)
        assert w.window_end == date(2024, 2, 29)
        assert w.days == 29


def test_is_active():
    resolver = PeriodWindowResolver()
    open_ended = BudgetPeriodSpec("monthly", date(2024, 1, 1))
    bounded = BudgetPeriodSpec("monthly", date(2024, 1, 1), date(2024, 6, 30))
    assert resolver.is_active(open_ended, date(2030, 1, 1))
    assert not resolver.is_active(open_ended, date(2023, 12, 31))
    assert resolver.is_active(bounded, date(2024, 6, 30))
    assert not resolver.is_active(bounded, date(2024, 7, 1))


def test_resolved_window_rejects_inverted_range():
    with pytest.raises(InvalidSpec):
        ResolvedWindow(date(2024, 2, 2), date(2024, 2, 1))
