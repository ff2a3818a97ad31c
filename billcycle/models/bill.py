from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from billcycle.models.schedule import RecurrenceSpec
from billcycle.utils.currency import to_decimal
from billcycle.utils.constants import DEFAULT_REMINDER_DAYS
from billcycle.utils.date_helpers import optional_date, to_date


@dataclass
class Bill:
    id: str
    name: str
    amount: Decimal
    frequency: str              # 'one-time' | 'daily' | 'weekly' | 'monthly' | 'yearly'
    due_date: Optional[date]    # configured anchor
    status: str = "active"      # 'active' | 'paused' | 'cancelled'
    category_id: Optional[str] = None
    category_name: str = ""
    next_due_date: Optional[date] = None
    last_paid_date: Optional[date] = None
    payment_status: Optional[str] = None   # 'pending' | 'paid'
    reminder_days: int = DEFAULT_REMINDER_DAYS
    auto_pay: bool = False
    payment_method: Optional[str] = None
    notes: Optional[str] = None

    def __post_init__(self):
        self.amount = to_decimal(self.amount)

    @property
    def recurrence(self) -> RecurrenceSpec | None:
        if self.due_date is None:
            return None
        return RecurrenceSpec(self.due_date, self.frequency)

    @property
    def is_active(self) -> bool:
        return self.status == "active"

    @classmethod
    def from_row(cls, row: dict) -> "Bill":
        """Build from a storage row with 'YYYY-MM-DD' date strings.

        Blank dates become None; malformed ones raise ValueError.
        """
        reminder_days = row.get("reminder_days")
        return cls(
            id=str(row["id"]),
            name=row.get("name", ""),
            amount=to_decimal(row.get("amount")),
            frequency=row.get("frequency") or "one-time",
            due_date=optional_date(row.get("due_date")),
            status=row.get("status") or "active",
            category_id=row.get("category_id"),
            category_name=row.get("category_name") or "",
            next_due_date=optional_date(row.get("next_due_date")),
            last_paid_date=optional_date(row.get("last_paid_date")),
            payment_status=row.get("payment_status"),
            reminder_days=DEFAULT_REMINDER_DAYS if reminder_days is None else int(reminder_days),
            auto_pay=bool(row.get("auto_pay", False)),
            payment_method=row.get("payment_method"),
            notes=row.get("notes"),
        )


@dataclass
class BillPayment:
    bill_id: str
    amount: Decimal
    payment_date: date
    payment_method: Optional[str] = None
    notes: Optional[str] = None

    def __post_init__(self):
        self.amount = to_decimal(self.amount)
        self.payment_date = to_date(self.payment_date)
