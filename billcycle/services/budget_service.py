import logging
from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Iterable

from billcycle.models.budget import Budget
from billcycle.models.schedule import ResolvedWindow
from billcycle.models.transaction import Transaction
from billcycle.services.period_service import PeriodWindowResolver
from billcycle.utils.constants import UNCATEGORIZED_COLOR, UNCATEGORIZED_LABEL
from billcycle.utils.currency import to_decimal
from billcycle.utils.date_helpers import today

logger = logging.getLogger(__name__)


def spent_in_window(
    transactions: Iterable[Transaction],
    window: ResolvedWindow,
    category_id: str | None = None,
    expense_category_ids: set[str] | None = None,
) -> Decimal:
    """Sum of expense amounts dated inside `window` (inclusive).

    With a category_id only that category counts. Without one every expense
    counts, optionally narrowed to `expense_category_ids`.
    """
    total = Decimal("0")
    for tx in transactions:
        if not tx.is_expense or not window.contains(tx.date):
            continue
        if category_id is not None:
            if tx.category_id != category_id:
                continue
        elif expense_category_ids is not None and tx.category_id not in expense_category_ids:
            continue
        total += to_decimal(tx.amount)
    return total


class BudgetService:
    def __init__(self, window_resolver: PeriodWindowResolver | None = None):
        self._windows = window_resolver or PeriodWindowResolver()

    def get_active(self, budgets: Iterable[Budget], as_of: date | None = None) -> list[Budget]:
        ref = as_of or today()
        return [b for b in budgets if self._windows.is_active(b.period_spec, ref)]

    def window_for(self, budget: Budget, as_of: date | None = None) -> ResolvedWindow:
        return self._windows.resolve_window(budget.period_spec, as_of or today())

    def get_budget_status(
        self,
        budgets: Iterable[Budget],
        transactions: Iterable[Transaction],
        as_of: date | None = None,
        expense_category_ids: set[str] | None = None,
    ) -> list[Budget]:
        """Return active budgets with window and spent amounts filled in."""
        ref = as_of or today()
        transactions = list(transactions)
        result = []
        for b in self.get_active(budgets, ref):
            window = self.window_for(b, ref)
            spent = spent_in_window(
                transactions, window, b.category_id, expense_category_ids
            )
            result.append(replace(b, window=window, spent_amount=spent))
            logger.debug("budget %s window %s spent %s", b.id, window, spent)
        return result

    def budget_vs_actual(
        self,
        budgets: Iterable[Budget],
        transactions: Iterable[Transaction],
        as_of: date | None = None,
        expense_category_ids: set[str] | None = None,
    ) -> list[dict]:
        """[{name, budget, actual, category, color}] for each active budget."""
        rows = []
        statuses = self.get_budget_status(budgets, transactions, as_of, expense_category_ids)
        for b in statuses:
            rows.append({
                "name": b.name,
                "budget": b.amount,
                "actual": b.spent_amount,
                "category": b.category_name or UNCATEGORIZED_LABEL,
                "color": b.color_hex if b.category_id else UNCATEGORIZED_COLOR,
            })
        return rows

    def validate(self, budget: Budget):
        if not budget.name.strip():
            raise ValueError("Budget name cannot be empty.")
        if budget.amount < 0:
            raise ValueError("Budget limit must be non-negative.")
        self._windows.validate(budget.period_spec)
