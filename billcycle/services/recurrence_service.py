import logging
from datetime import date

from billcycle.models.schedule import RecurrenceSpec
from billcycle.utils.constants import (
    FREQ_DAILY, FREQ_MONTHLY, FREQ_ONE_TIME, FREQ_WEEKLY, FREQ_YEARLY,
)
from billcycle.utils.date_helpers import (
    add_days, add_months_clamped, add_weeks, add_years, months_between, today,
)

logger = logging.getLogger(__name__)

_DAYS_PER_STEP = {FREQ_DAILY: 1, FREQ_WEEKLY: 7}


class RecurrenceResolver:
    """Next-occurrence arithmetic for bill due dates.

    Occurrence k of a spec is always derived from the anchor date
    (``anchor + k periods``), so a Jan 31 monthly bill lands on Feb 28/29,
    then Mar 31, never sticking at the 28th.
    """

    def resolve_next(self, spec: RecurrenceSpec, as_of: date | None = None) -> date:
        """Return the first occurrence on or after `as_of` (default: today).

        One-time specs return their anchor unchanged, even when it is in the past.
        """
        ref = as_of or today()
        anchor = spec.anchor_date

        if spec.frequency == FREQ_ONE_TIME or anchor >= ref:
            return anchor

        k = self._elapsed_periods(spec, ref)
        candidate = self.occurrence(spec, k)
        if candidate < ref:
            k += 1
            candidate = self.occurrence(spec, k)
        logger.debug(
            "resolve_next %s %s as of %s -> %s (k=%d)",
            spec.frequency, anchor, ref, candidate, k,
        )
        return candidate

    def occurrence(self, spec: RecurrenceSpec, k: int) -> date:
        """Return the k-th occurrence (k=0 is the anchor)."""
        if k < 0:
            raise ValueError("Occurrence index must be non-negative.")
        anchor = spec.anchor_date
        if spec.frequency == FREQ_ONE_TIME or k == 0:
            return anchor
        if spec.frequency == FREQ_DAILY:
            return add_days(anchor, k)
        if spec.frequency == FREQ_WEEKLY:
            return add_weeks(anchor, k)
        if spec.frequency == FREQ_MONTHLY:
            return add_months_clamped(anchor, k)
        if spec.frequency == FREQ_YEARLY:
            return add_years(anchor, k)
        # RecurrenceSpec rejects anything else at construction.
        raise AssertionError(f"unhandled frequency {spec.frequency!r}")

    def occurrences_between(self, spec: RecurrenceSpec, start: date, end: date) -> list[date]:
        """Return every occurrence in [start, end], ascending."""
        if start > end:
            return []
        if spec.frequency == FREQ_ONE_TIME:
            anchor = spec.anchor_date
            return [anchor] if start <= anchor <= end else []

        result = []
        current = self.resolve_next(spec, start)
        k = self._elapsed_periods(spec, current)
        while current <= end:
            result.append(current)
            k += 1
            current = self.occurrence(spec, k)
        return result

    def _elapsed_periods(self, spec: RecurrenceSpec, ref: date) -> int:
        """Whole periods from the anchor up to ref; may undershoot by one."""
        anchor = spec.anchor_date
        if spec.frequency in _DAYS_PER_STEP:
            return (ref - anchor).days // _DAYS_PER_STEP[spec.frequency]
        if spec.frequency == FREQ_MONTHLY:
            return months_between(anchor, ref)
        if spec.frequency == FREQ_YEARLY:
            return ref.year - anchor.year
        return 0


def resolve_next(anchor_date: date, frequency: str, as_of: date) -> date:
    """Next occurrence of `anchor_date` repeating at `frequency`, on or after `as_of`."""
    return RecurrenceResolver().resolve_next(RecurrenceSpec(anchor_date, frequency), as_of)
