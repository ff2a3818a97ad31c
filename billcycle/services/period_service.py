import logging
from datetime import date

from billcycle.errors import InvalidSpec
from billcycle.models.schedule import BudgetPeriodSpec, ResolvedWindow
from billcycle.utils.constants import (
    PERIOD_CUSTOM, PERIOD_DAILY, PERIOD_MONTHLY, PERIOD_WEEKLY, PERIOD_YEARLY,
)
from billcycle.utils.date_helpers import (
    end_of_week, first_day_of_month, first_day_of_year, last_day_of_month,
    last_day_of_year, start_of_week, today,
)

logger = logging.getLogger(__name__)


class PeriodWindowResolver:
    """Resolves the calendar window a budget's spending is measured over.

    Weeks run Sunday through Saturday regardless of locale.
    """

    def resolve_window(self, spec: BudgetPeriodSpec, as_of: date | None = None) -> ResolvedWindow:
        ref = as_of or today()
        self.validate(spec)

        if spec.period_kind == PERIOD_CUSTOM:
            window = ResolvedWindow(spec.start_date, spec.end_date)
        elif spec.period_kind == PERIOD_DAILY:
            window = ResolvedWindow(ref, ref)
        elif spec.period_kind == PERIOD_MONTHLY:
            window = ResolvedWindow(first_day_of_month(ref), last_day_of_month(ref))
        elif spec.period_kind == PERIOD_WEEKLY:
            window = ResolvedWindow(start_of_week(ref), end_of_week(ref))
        elif spec.period_kind == PERIOD_YEARLY:
            window = ResolvedWindow(first_day_of_year(ref), last_day_of_year(ref))
        else:
            raise InvalidSpec(f"Invalid period kind: {spec.period_kind!r}")

        logger.debug("resolve_window %s as of %s -> %s", spec.period_kind, ref, window)
        return window

    def is_active(self, spec: BudgetPeriodSpec, as_of: date | None = None) -> bool:
        """True when start_date <= as_of <= end_date (open-ended if no end_date)."""
        ref = as_of or today()
        if ref < spec.start_date:
            return False
        return spec.end_date is None or ref <= spec.end_date

    def validate(self, spec: BudgetPeriodSpec):
        if spec.end_date is not None and spec.start_date > spec.end_date:
            logger.warning("Rejecting budget period %s > %s", spec.start_date, spec.end_date)
            raise InvalidSpec(
                f"Start date {spec.start_date} is after end date {spec.end_date}"
            )
        if spec.period_kind == PERIOD_CUSTOM and spec.end_date is None:
            logger.warning("Rejecting custom budget period without end date")
            raise InvalidSpec("Custom budget period requires an end date")


def resolve_window(
    period_kind: str,
    start_date: date,
    end_date: date | None,
    as_of: date,
) -> ResolvedWindow:
    """Window of `period_kind` containing `as_of`; custom periods return their own range."""
    spec = BudgetPeriodSpec(period_kind, start_date, end_date)
    return PeriodWindowResolver().resolve_window(spec, as_of)
