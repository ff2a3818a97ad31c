from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from billcycle.models.schedule import BudgetPeriodSpec, ResolvedWindow
from billcycle.utils.currency import to_decimal
from billcycle.utils.date_helpers import optional_date


@dataclass
class Budget:
    id: str
    name: str
    amount: Decimal             # limit for one period
    period: str                 # 'daily' | 'monthly' | 'weekly' | 'yearly' | 'custom'
    start_date: date
    end_date: Optional[date] = None
    category_id: Optional[str] = None   # None = all expense categories
    category_name: str = ""
    color_hex: str = "#888888"
    spent_amount: Decimal = Decimal("0")
    window: Optional[ResolvedWindow] = None

    def __post_init__(self):
        self.amount = to_decimal(self.amount)
        self.spent_amount = to_decimal(self.spent_amount)

    @property
    def period_spec(self) -> BudgetPeriodSpec:
        return BudgetPeriodSpec(self.period, self.start_date, self.end_date)

    @property
    def percentage(self) -> float:
        if self.amount <= 0:
            return 0.0
        return float(self.spent_amount / self.amount)

    @property
    def remaining(self) -> Decimal:
        return max(Decimal("0"), self.amount - self.spent_amount)

    @classmethod
    def from_row(cls, row: dict) -> "Budget":
        start = optional_date(row.get("start_date"))
        if start is None:
            raise ValueError(f"Budget {row.get('id')!r} has no start_date")
        return cls(
            id=str(row["id"]),
            name=row.get("name", ""),
            amount=to_decimal(row.get("amount")),
            period=row.get("period") or "monthly",
            start_date=start,
            end_date=optional_date(row.get("end_date")),
            category_id=row.get("category_id"),
            category_name=row.get("category_name") or "",
            color_hex=row.get("category_color") or "#888888",
        )
