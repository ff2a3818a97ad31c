import random
from datetime import date, timedelta

import pytest

from billcycle.errors import InvalidFrequency
from billcycle.models.schedule import RecurrenceSpec, ScheduleQuery
from billcycle.services.recurrence_service import RecurrenceResolver, resolve_next
from billcycle.utils.date_helpers import add_days, add_months_clamped, add_weeks, add_years

RECURRING = ["daily", "weekly", "monthly", "yearly"]

_STEP = {
    "daily": add_days,
    "weekly": add_weeks,
    "monthly": add_months_clamped,
    "yearly": add_years,
}


def _naive_next(anchor: date, frequency: str, as_of: date) -> date:
    """One period at a time, each step measured from the anchor."""
    if frequency == "one-time" or anchor >= as_of:
        return anchor
    k = 0
    current = anchor
    while current < as_of:
        k += 1
        current = _STEP[frequency](anchor, k)
    return current


def _random_date(rng: random.Random, start: date, span_days: int) -> date:
    return start + timedelta(days=rng.randrange(span_days))


def test_one_time_returns_anchor_for_any_as_of():
    anchor = date(2024, 3, 10)
    for as_of in (date(2020, 1, 1), anchor, date(2024, 3, 11), date(2030, 12, 31)):
        assert resolve_next(anchor, "one-time", as_of) == anchor


@pytest.mark.parametrize("frequency", RECURRING)
def test_future_anchor_is_returned_unchanged(frequency):
    anchor = date(2024, 8, 20)
    assert resolve_next(anchor, frequency, date(2024, 8, 1)) == anchor
    assert resolve_next(anchor, frequency, anchor) == anchor


def test_occurrence_on_as_of_counts_as_due():
    assert resolve_next(date(2024, 1, 15), "monthly", date(2024, 3, 15)) == date(2024, 3, 15)
    assert resolve_next(date(2024, 1, 1), "weekly", date(2024, 1, 15)) == date(2024, 1, 15)
    assert resolve_next(date(2024, 1, 1), "daily", date(2024, 2, 10)) == date(2024, 2, 10)


def test_month_end_clamp():
    assert resolve_next(date(2024, 1, 31), "monthly", date(2024, 2, 15)) == date(2024, 2, 29)
    assert resolve_next(date(2023, 1, 31), "monthly", date(2023, 2, 15)) == date(2023, 2, 28)


def test_monthly_reanchors_to_original_day():
    # after clamping to Feb 29 the series returns to the 31st, then clamps to the 30th
    assert resolve_next(date(2024, 1, 31), "monthly", date(2024, 3, 1)) == date(2024, 3, 31)
    assert resolve_next(date(2024, 1, 31), "monthly", date(2024, 4, 1)) == date(2024, 4, 30)
    assert resolve_next(date(2024, 1, 31), "monthly", date(2024, 4, 30)) == date(2024, 4, 30)
    assert resolve_next(date(2024, 1, 31), "monthly", date(2024, 5, 1)) == date(2024, 5, 31)


def test_yearly_leap_day_clamps():
    assert resolve_next(date(2024, 2, 29), "yearly", date(2025, 1, 1)) == date(2025, 2, 28)
    assert resolve_next(date(2024, 2, 29), "yearly", date(2027, 3, 1)) == date(2028, 2, 29)


def test_weekly_steps_from_anchor():
    # anchor on a Friday, as_of the following Monday
    assert resolve_next(date(2024, 6, 7), "weekly", date(2024, 6, 10)) == date(2024, 6, 14)


@pytest.mark.parametrize("frequency", RECURRING)
def test_result_never_before_as_of(frequency):
    rng = random.Random(f"monotonic-{frequency}")
    for _ in range(300):
        anchor = _random_date(rng, date(2019, 1, 1), 365 * 3)
        as_of = anchor + timedelta(days=rng.randrange(1, 365 * 4))
        result = resolve_next(anchor, frequency, as_of)
        assert result >= as_of


@pytest.mark.parametrize("frequency", RECURRING)
def test_closed_form_matches_naive_stepping(frequency):
    rng = random.Random(f"closed-form-{frequency}")
    # keep daily spans short enough for the naive loop
    span = 400 if frequency == "daily" else 365 * 8
    for _ in range(300):
        anchor = _random_date(rng, date(2018, 1, 1), 365 * 4)
        as_of = anchor + timedelta(days=rng.randrange(-30, span))
        assert resolve_next(anchor, frequency, as_of) == _naive_next(anchor, frequency, as_of)


def test_month_end_anchors_match_naive_stepping():
    for anchor in (date(2023, 1, 31), date(2024, 1, 30), date(2024, 5, 31), date(2023, 8, 29)):
        as_of = anchor
        for _ in range(60):
            as_of += timedelta(days=9)
            assert resolve_next(anchor, "monthly", as_of) == _naive_next(anchor, "monthly", as_of)


def test_occurrences_between_monthly():
    spec = RecurrenceSpec(date(2024, 1, 31), "monthly")
    got = RecurrenceResolver().occurrences_between(spec, date(2024, 1, 1), date(2024, 5, 31))
    assert got == [
        date(2024, 1, 31),
        date(2024, 2, 29),
        date(2024, 3, 31),
        date(2024, 4, 30),
        date(2024, 5, 31),
    ]


def test_occurrences_between_weekly_mid_series():
    spec = RecurrenceSpec(date(2024, 1, 5), "weekly")
    got = RecurrenceResolver().occurrences_between(spec, date(2024, 2, 1), date(2024, 2, 20))
    assert got == [date(2024, 2, 2), date(2024, 2, 9), date(2024, 2, 16)]


def test_occurrences_between_one_time_and_empty_ranges():
    resolver = RecurrenceResolver()
    spec = RecurrenceSpec(date(2024, 4, 1), "one-time")
    assert resolver.occurrences_between(spec, date(2024, 3, 1), date(2024, 4, 30)) == [date(2024, 4, 1)]
    assert resolver.occurrences_between(spec, date(2024, 5, 1), date(2024, 5, 30)) == []
    monthly = RecurrenceSpec(date(2024, 4, 1), "monthly")
    assert resolver.occurrences_between(monthly, date(2024, 6, 2), date(2024, 6, 1)) == []


def test_occurrence_rejects_negative_index():
    with pytest.raises(ValueError):
        RecurrenceResolver().occurrence(RecurrenceSpec(date(2024, 1, 1), "daily"), -1)


@pytest.mark.parametrize("value", ["fortnightly", "", None, 7, "month"])
def test_invalid_frequency_rejected_at_construction(value):
    with pytest.raises(InvalidFrequency):
        RecurrenceSpec(date(2024, 1, 1), value)


def test_frequency_is_normalised():
    assert RecurrenceSpec(date(2024, 1, 1), " Monthly ").frequency == "monthly"
    assert RecurrenceSpec(date(2024, 1, 1), "one_time").frequency == "one-time"


def test_invalid_frequency_is_a_value_error():
    with pytest.raises(ValueError):
        resolve_next(date(2024, 1, 1), "hourly", date(2024, 2, 1))


def test_schedule_query_next_occurrence():
    query = ScheduleQuery(RecurrenceSpec(date(2024, 1, 31), "monthly"), as_of=date(2024, 2, 15))
    assert query.next_occurrence == date(2024, 2, 29)
