"""Monthly roll-ups of the expense collection."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Tuple

from .models import Expense

EMPTY_SUMMARY = "No expenses recorded."
DEFAULT_CURRENCY_SYMBOL = "$"


@dataclass(frozen=True)
class MonthlyTotal:
    year: int
    month: int
    total: Decimal
    count: int

    @property
    def label(self) -> str:
        return date(self.year, self.month, 1).strftime("%B %Y")


def format_currency(amount: Decimal, symbol: str = DEFAULT_CURRENCY_SYMBOL) -> str:
    """Render an amount as ``$1,234.50`` with half-up rounding to cents."""
    rounded = Decimal(amount).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if rounded < 0 else ""
    return f"{sign}{symbol}{abs(rounded):,.2f}"


def monthly_totals(expenses: Iterable[Expense]) -> List[MonthlyTotal]:
    """Group expenses by calendar month, most recent month first."""
    buckets: Dict[Tuple[int, int], List[Decimal]] = {}
    for expense in expenses:
        key = (expense.date.year, expense.date.month)
        buckets.setdefault(key, []).append(expense.amount)
    return [
        MonthlyTotal(
            year=year,
            month=month,
            total=sum(amounts, Decimal("0")),
            count=len(amounts),
        )
        for (year, month), amounts in sorted(buckets.items(), reverse=True)
    ]


def build_summary(expenses: Iterable[Expense], currency_symbol: str = DEFAULT_CURRENCY_SYMBOL) -> str:
    lines = [
        f"{group.label}: {format_currency(group.total, currency_symbol)}"
        for group in monthly_totals(expenses)
    ]
    if not lines:
        return EMPTY_SUMMARY
    return "\n".join(lines)
