from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from billcycle.utils.currency import to_decimal
from billcycle.utils.date_helpers import to_date


@dataclass
class Transaction:
    id: str
    type: str               # 'income' | 'expense' | 'transfer'
    amount: Decimal
    date: date
    category_id: Optional[str] = None
    description: str = ""

    def __post_init__(self):
        self.amount = to_decimal(self.amount)

    @property
    def is_expense(self) -> bool:
        return self.type == "expense"

    @classmethod
    def from_row(cls, row: dict) -> "Transaction":
        return cls(
            id=str(row["id"]),
            type=row.get("type", ""),
            amount=to_decimal(row.get("amount")),
            date=to_date(row["date"]),
            category_id=row.get("category_id"),
            description=row.get("description") or "",
        )
