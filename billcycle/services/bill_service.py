import logging
from dataclasses import replace
from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable

from billcycle.models.bill import Bill, BillPayment
from billcycle.models.schedule import normalize_frequency
from billcycle.services.recurrence_service import RecurrenceResolver
from billcycle.utils.constants import BILL_STATUSES, FREQ_ONE_TIME, UPCOMING_BILL_DAYS
from billcycle.utils.currency import to_decimal
from billcycle.utils.date_helpers import today

logger = logging.getLogger(__name__)


class BillService:
    def __init__(self, resolver: RecurrenceResolver | None = None):
        self._resolver = resolver or RecurrenceResolver()

    def next_due_date(self, bill: Bill, as_of: date | None = None) -> date | None:
        """Next occurrence of the bill's due date on or after `as_of` (default: today)."""
        spec = bill.recurrence
        if spec is None:
            return None
        return self._resolver.resolve_next(spec, as_of or today())

    def current_due_date(self, bill: Bill, as_of: date | None = None) -> date | None:
        """The stored next due date, or a freshly resolved one if none was stored."""
        if bill.next_due_date is not None:
            return bill.next_due_date
        return self.next_due_date(bill, as_of)

    def refresh(self, bill: Bill, as_of: date | None = None) -> Bill:
        """Return a copy of `bill` with next_due_date recomputed."""
        return replace(bill, next_due_date=self.next_due_date(bill, as_of))

    def get_upcoming(
        self,
        bills: Iterable[Bill],
        days: int = UPCOMING_BILL_DAYS,
        ref_date: date | None = None,
        limit: int | None = None,
    ) -> list[Bill]:
        """Active bills due within [ref_date, ref_date + days], soonest first."""
        ref = ref_date or today()
        horizon = ref + timedelta(days=days)
        due: list[tuple[date, Bill]] = []
        for bill in bills:
            if not bill.is_active or self.is_settled(bill):
                continue
            next_due = self.current_due_date(bill, ref)
            if next_due is not None and ref <= next_due <= horizon:
                due.append((next_due, bill))
        due.sort(key=lambda pair: pair[0])
        result = [replace(bill, next_due_date=d) for d, bill in due]
        return result[:limit] if limit is not None else result

    def is_overdue(self, bill: Bill, ref_date: date | None = None) -> bool:
        ref = ref_date or today()
        if not bill.is_active:
            return False
        next_due = self.current_due_date(bill, ref)
        if next_due is None or next_due >= ref:
            return False
        return not self.is_settled(bill)

    def is_settled(self, bill: Bill) -> bool:
        """One-time bills are done once paid; recurring bills always have a next occurrence."""
        if bill.payment_status != "paid":
            return False
        return normalize_frequency(bill.frequency) == FREQ_ONE_TIME

    def mark_paid(
        self,
        bill: Bill,
        payment_date: date | None = None,
        amount=None,
        payment_method: str | None = None,
        notes: str | None = None,
    ) -> tuple[Bill, BillPayment]:
        """Record a payment and roll the bill to its following occurrence.

        The new next due date is the first occurrence strictly after both the
        occurrence being paid and the payment date. One-time bills keep their
        due date.
        """
        paid_on = payment_date or today()
        payment = BillPayment(
            bill_id=bill.id,
            amount=to_decimal(amount) if amount is not None else bill.amount,
            payment_date=paid_on,
            payment_method=payment_method or bill.payment_method,
            notes=notes,
        )
        if payment.amount <= Decimal("0"):
            raise ValueError("Payment amount must be positive.")

        spec = bill.recurrence
        next_due = None
        if spec is not None:
            if spec.is_recurring:
                paying_for = self.current_due_date(bill, paid_on)
                next_due = self._resolver.resolve_next(
                    spec, max(paying_for, paid_on) + timedelta(days=1)
                )
            else:
                next_due = spec.anchor_date

        logger.debug("bill %s paid on %s, next due %s", bill.id, paid_on, next_due)
        updated = replace(
            bill,
            last_paid_date=paid_on,
            next_due_date=next_due,
            payment_status="paid",
        )
        return updated, payment

    def validate(self, bill: Bill):
        if not bill.name.strip():
            raise ValueError("Name cannot be empty.")
        if bill.amount <= 0:
            raise ValueError("Amount must be positive.")
        if bill.status not in BILL_STATUSES:
            raise ValueError("Status must be active, paused or cancelled.")
        if bill.reminder_days < 0:
            raise ValueError("Reminder days cannot be negative.")
        normalize_frequency(bill.frequency)
