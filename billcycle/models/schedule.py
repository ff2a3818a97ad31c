from dataclasses import dataclass, field
from datetime import date, datetime

from billcycle.errors import InvalidFrequency, InvalidSpec
from billcycle.utils.constants import FREQUENCIES, FREQUENCY_ALIASES, PERIOD_KINDS, PERIOD_CUSTOM
from billcycle.utils.date_helpers import today


def normalize_frequency(value) -> str:
    """Return the canonical frequency name or raise InvalidFrequency."""
    if not isinstance(value, str):
        raise InvalidFrequency(value)
    key = value.strip().lower()
    key = FREQUENCY_ALIASES.get(key, key)
    if key not in FREQUENCIES:
        raise InvalidFrequency(value)
    return key


def normalize_period_kind(value) -> str:
    if not isinstance(value, str) or value.strip().lower() not in PERIOD_KINDS:
        raise InvalidSpec(f"Invalid period kind: {value!r}")
    return value.strip().lower()


def _calendar_date(value, name: str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    raise TypeError(f"{name} must be a date, got {type(value).__name__}")


@dataclass(frozen=True)
class RecurrenceSpec:
    anchor_date: date
    frequency: str          # 'one-time' | 'daily' | 'weekly' | 'monthly' | 'yearly'

    def __post_init__(self):
        object.__setattr__(self, "anchor_date", _calendar_date(self.anchor_date, "anchor_date"))
        object.__setattr__(self, "frequency", normalize_frequency(self.frequency))

    @property
    def is_recurring(self) -> bool:
        return self.frequency != "one-time"


@dataclass(frozen=True)
class ScheduleQuery:
    spec: RecurrenceSpec
    as_of: date = field(default_factory=today)

    def __post_init__(self):
        object.__setattr__(self, "as_of", _calendar_date(self.as_of, "as_of"))

    @property
    def next_occurrence(self) -> date:
        from billcycle.services.recurrence_service import RecurrenceResolver
        return RecurrenceResolver().resolve_next(self.spec, self.as_of)


@dataclass(frozen=True)
class ResolvedWindow:
    window_start: date
    window_end: date

    def __post_init__(self):
        if self.window_start > self.window_end:
            raise InvalidSpec(
                f"Window start {self.window_start} is after window end {self.window_end}"
            )

    def contains(self, d: date) -> bool:
        return self.window_start <= d <= self.window_end

    @property
    def days(self) -> int:
        """Inclusive length in days."""
        return (self.window_end - self.window_start).days + 1


@dataclass(frozen=True)
class BudgetPeriodSpec:
    period_kind: str        # 'monthly' | 'weekly' | 'yearly' | 'custom'
    start_date: date
    end_date: date | None = None

    def __post_init__(self):
        object.__setattr__(self, "period_kind", normalize_period_kind(self.period_kind))
        object.__setattr__(self, "start_date", _calendar_date(self.start_date, "start_date"))
        if self.end_date is not None:
            object.__setattr__(self, "end_date", _calendar_date(self.end_date, "end_date"))

    @property
    def is_custom(self) -> bool:
        return self.period_kind == PERIOD_CUSTOM
