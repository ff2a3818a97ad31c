from datetime import date, datetime, timedelta
import calendar

from dateutil.relativedelta import relativedelta

from billcycle.utils.constants import DATE_FORMAT

# Python's weekday(): 0=Mon..6=Sun. Weeks here run Sunday..Saturday.
_SUNDAY = 6


def today() -> date:
    return date.today()


# ── Boundary conversion ──────────────────────────────────────────────────────

def parse_date(date_str: str) -> date | None:
    """Parse a date string in YYYY-MM-DD format, returning None on failure.

    ISO timestamps ('2024-03-01T10:15:00Z') are truncated to the day.
    """
    if not date_str:
        return None
    date_str = date_str.strip()
    if "T" in date_str:
        date_str = date_str.split("T", 1)[0]
    for fmt in ("%Y-%m-%d", "%Y/%m/%d", "%Y.%m.%d"):
        try:
            return datetime.strptime(date_str, fmt).date()
        except ValueError:
            continue
    return None


def to_date(value) -> date:
    """Coerce a date, datetime or date string to a calendar date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        d = parse_date(value)
        if d is None:
            raise ValueError(f"Invalid date: {value!r}")
        return d
    raise TypeError(f"Unsupported type for date: {type(value).__name__}")


def optional_date(value) -> date | None:
    """Like to_date, but blank or missing values give None."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return to_date(value)


def format_date(d: date) -> str:
    return d.strftime(DATE_FORMAT)


# ── Arithmetic ───────────────────────────────────────────────────────────────

def add_days(d: date, n: int) -> date:
    return d + timedelta(days=n)


def add_weeks(d: date, n: int) -> date:
    return add_days(d, 7 * n)


def add_months_clamped(d: date, n: int) -> date:
    """Add n months to date d, clamping day to month end.

    Jan 31 + 1 month is Feb 28 (Feb 29 in a leap year), never Mar 3.
    """
    return d + relativedelta(months=n)


def add_years(d: date, n: int) -> date:
    """Add n years to date d; Feb 29 becomes Feb 28 in a non-leap target year."""
    return d + relativedelta(years=n)


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def clamp_day_to_month(year: int, month: int, day: int) -> int:
    """Clamp day to valid range for the given year/month."""
    return min(day, days_in_month(year, month))


def months_between(start: date, end: date) -> int:
    """Whole calendar months from start's month to end's month (days ignored)."""
    return (end.year - start.year) * 12 + (end.month - start.month)


# ── Calendar bounds ──────────────────────────────────────────────────────────

def first_day_of_month(d: date) -> date:
    return d.replace(day=1)


def last_day_of_month(d: date) -> date:
    return d.replace(day=days_in_month(d.year, d.month))


def start_of_week(d: date) -> date:
    """Sunday on or before d."""
    return d - timedelta(days=(d.weekday() - _SUNDAY) % 7)


def end_of_week(d: date) -> date:
    """Saturday on or after d."""
    return start_of_week(d) + timedelta(days=6)


def first_day_of_year(d: date) -> date:
    return date(d.year, 1, 1)


def last_day_of_year(d: date) -> date:
    return date(d.year, 12, 31)


def friendly_date(d: date) -> str:
    """e.g. 'Feb 03'."""
    return d.strftime("%b %d")
