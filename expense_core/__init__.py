"""Core business logic package for the expense tracker."""

from .commands import Command
from .exceptions import ConfigurationError, PersistenceError, RecordNotFoundError, ValidationError
from .ledger import Ledger
from .models import Expense
from .observable import Observable, ObservableList
from .reports import MonthlyTotal, build_summary, format_currency, monthly_totals
from .storage import ExpenseStore, ensure_data_dir

__all__ = [
    "Command",
    "Expense",
    "ExpenseStore",
    "Ledger",
    "MonthlyTotal",
    "Observable",
    "ObservableList",
    "build_summary",
    "ensure_data_dir",
    "format_currency",
    "monthly_totals",
    "ConfigurationError",
    "PersistenceError",
    "RecordNotFoundError",
    "ValidationError",
]
