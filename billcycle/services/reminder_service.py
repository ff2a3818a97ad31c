from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable

from billcycle.models.bill import Bill
from billcycle.models.budget import Budget
from billcycle.models.transaction import Transaction
from billcycle.services.bill_service import BillService
from billcycle.services.budget_service import BudgetService
from billcycle.utils import app_config
from billcycle.utils.constants import REMINDER_EXPIRY_FALLBACK_DAYS, SEVERITY_ORDER
from billcycle.utils.currency import format_currency
from billcycle.utils.date_helpers import friendly_date, today


@dataclass
class Reminder:
    type: str       # 'upcoming_bill' | 'overdue_bill' | 'over_budget' | 'near_budget'
    severity: str   # 'info' | 'warning' | 'error'
    title: str
    detail: str
    key: str = ""   # e.g. "budget:3" or "bill:5"; empty = not dismissable
    due_date: date | None = None


class ReminderService:
    def __init__(
        self,
        bill_service: BillService | None = None,
        budget_service: BudgetService | None = None,
    ):
        self._bills = bill_service or BillService()
        self._budgets = budget_service or BudgetService()

    def get_reminders(
        self,
        bills: Iterable[Bill],
        budgets: Iterable[Budget],
        transactions: Iterable[Transaction],
        ref_date: date | None = None,
        upcoming_days: int | None = None,
        threshold: float | None = None,
        dismissed_keys: set[str] | None = None,
    ) -> list[Reminder]:
        ref = ref_date or today()
        if upcoming_days is None:
            upcoming_days = app_config.get_upcoming_days()
        if threshold is None:
            threshold = app_config.get_alert_threshold()

        reminders: list[Reminder] = []
        reminders += self._check_bills(bills, ref, upcoming_days)
        reminders += self._check_budgets(budgets, transactions, ref, threshold)
        sorted_reminders = sorted(reminders, key=lambda r: SEVERITY_ORDER[r.severity])
        if dismissed_keys:
            sorted_reminders = [r for r in sorted_reminders if r.key not in dismissed_keys]
        return sorted_reminders

    def compute_expiry(
        self,
        reminder: Reminder,
        bills: Iterable[Bill] = (),
        budgets: Iterable[Budget] = (),
        ref_date: date | None = None,
    ) -> date:
        """Date a dismissed reminder should resurface.

        Budget alerts expire the day after their spending window ends.
        Bill reminders expire at the occurrence after the one reminded about.
        Anything else falls back to 30 days from ref_date.
        """
        ref = ref_date or today()
        kind, _, ident = reminder.key.partition(":")

        if kind == "budget":
            for budget in budgets:
                if budget.id == ident:
                    window = budget.window or self._budgets.window_for(budget, ref)
                    return window.window_end + timedelta(days=1)

        if kind == "bill" and reminder.due_date is not None:
            for bill in bills:
                if bill.id == ident:
                    following = self._bills.next_due_date(
                        bill, reminder.due_date + timedelta(days=1)
                    )
                    if following is not None and following > reminder.due_date:
                        return following

        return ref + timedelta(days=REMINDER_EXPIRY_FALLBACK_DAYS)

    def _check_bills(self, bills: Iterable[Bill], ref: date, upcoming_days: int) -> list[Reminder]:
        reminders = []
        for bill in bills:
            if not bill.is_active or self._bills.is_settled(bill):
                continue
            next_due = self._bills.current_due_date(bill, ref)
            if next_due is None:
                continue

            if self._bills.is_overdue(bill, ref):
                reminders.append(Reminder(
                    type="overdue_bill",
                    severity="error",
                    title=f"{bill.name} is overdue",
                    detail=(
                        f"Was due on {friendly_date(next_due)} · "
                        f"{format_currency(bill.amount)}"
                        + (f" · {bill.category_name}" if bill.category_name else "")
                    ),
                    key=f"bill:{bill.id}",
                    due_date=next_due,
                ))
            elif ref <= next_due <= ref + timedelta(days=upcoming_days):
                days_away = (next_due - ref).days
                day_label = "today" if days_away == 0 else (
                    "tomorrow" if days_away == 1 else f"in {days_away} days"
                )
                reminders.append(Reminder(
                    type="upcoming_bill",
                    severity="warning" if days_away <= bill.reminder_days else "info",
                    title=f"{bill.name} due {day_label}",
                    detail=(
                        f"Due on {friendly_date(next_due)} · "
                        f"{format_currency(bill.amount)}"
                        + (" · Auto-pay" if bill.auto_pay else "")
                    ),
                    key=f"bill:{bill.id}",
                    due_date=next_due,
                ))
        return reminders

    def _check_budgets(
        self,
        budgets: Iterable[Budget],
        transactions: Iterable[Transaction],
        ref: date,
        threshold: float,
    ) -> list[Reminder]:
        reminders = []
        for budget in self._budgets.get_budget_status(budgets, transactions, ref):
            if budget.amount <= 0:
                continue
            pct = budget.percentage
            label = budget.name or budget.category_name
            detail = (
                f"Spent {format_currency(budget.spent_amount)} of "
                f"{format_currency(budget.amount)} limit "
                f"({pct*100:.0f}%)"
            )
            if pct >= 1.0:
                reminders.append(Reminder(
                    type="over_budget",
                    severity="error",
                    title=f"{label} is over budget",
                    detail=detail,
                    key=f"budget:{budget.id}",
                ))
            elif pct >= threshold:
                reminders.append(Reminder(
                    type="near_budget",
                    severity="warning",
                    title=f"{label} near budget limit",
                    detail=detail,
                    key=f"budget:{budget.id}",
                ))
        return reminders
