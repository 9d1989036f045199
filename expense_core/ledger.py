"""In-memory expense ledger bound to a form and a JSON store."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Callable, Dict, List, Optional

import structlog

from .commands import Command
from .exceptions import PersistenceError, RecordNotFoundError, ValidationError
from .models import Expense
from .observable import Observable, ObservableList
from .reports import DEFAULT_CURRENCY_SYMBOL, MonthlyTotal, build_summary, monthly_totals
from .storage import ExpenseStore
from .validators import validate_expense_input

logger = structlog.get_logger(__name__)


class Ledger(Observable):
    """Owns the expense collection and the editing state around it.

    A front-end binds to ``expenses``, ``selected``, the three pending
    input attributes and ``summary``; it invokes the operations directly or
    through ``commands``. Attribute changes are announced to subscribers
    registered with ``subscribe`` as ``(ledger, attribute_name)``.

    Mutations are written to the store immediately. When that write fails
    the ``PersistenceError`` reaches the caller, but the in-memory change
    is kept, so the file may lag behind until the next successful save.
    """

    def __init__(
        self,
        store: ExpenseStore,
        *,
        clock: Callable[[], datetime] = datetime.now,
        currency_symbol: str = DEFAULT_CURRENCY_SYMBOL,
    ) -> None:
        self._store = store
        self._clock = clock
        self.currency_symbol = currency_symbol
        self.expenses: ObservableList[Expense] = ObservableList()
        self.load_error: Optional[PersistenceError] = None

        self._selected: Optional[Expense] = None
        self._selecting = False
        self._description_input = ""
        self._amount_input: Decimal = Decimal("0")
        self._date_input: datetime = clock()
        self._summary = ""

        self.commands: Dict[str, Command] = {
            "add": Command("add", self.add),
            "update": Command("update", self.update, self.can_mutate_selection),
            "delete": Command("delete", self.delete, self.can_mutate_selection),
            "clear_selection": Command("clear_selection", self.clear_selection),
            "compute_summary": Command("compute_summary", self.compute_summary),
        }

        try:
            self.reload()
        except PersistenceError as exc:
            # Keep the application usable with an empty collection.
            self.load_error = exc
            logger.warning("load_failed", path=str(store.path), error=str(exc))
            self.expenses.replace_all([])
            self.compute_summary()

    # Bindable state -------------------------------------------------------
    @property
    def selected(self) -> Optional[Expense]:
        return self._selected

    @selected.setter
    def selected(self, expense: Optional[Expense]) -> None:
        self.select(expense)

    @property
    def description_input(self) -> str:
        return self._description_input

    @description_input.setter
    def description_input(self, value: str) -> None:
        self._description_input = value
        self._notify("description_input")

    @property
    def amount_input(self) -> Decimal:
        return self._amount_input

    @amount_input.setter
    def amount_input(self, value: Decimal) -> None:
        self._amount_input = value
        self._notify("amount_input")

    @property
    def date_input(self) -> datetime:
        return self._date_input

    @date_input.setter
    def date_input(self, value: datetime) -> None:
        self._date_input = value
        self._notify("date_input")

    @property
    def summary(self) -> str:
        return self._summary

    @summary.setter
    def summary(self, value: str) -> None:
        self._summary = value
        self._notify("summary")

    @property
    def store(self) -> ExpenseStore:
        return self._store

    # Operations -----------------------------------------------------------
    def reload(self) -> None:
        """Replace the collection with the store's contents."""
        records = self._store.load()
        self.select(None)
        self.expenses.replace_all(records)
        logger.info("expenses_loaded", path=str(self._store.path), count=len(records))
        self.compute_summary()

    def select(self, expense: Optional[Expense]) -> None:
        """Make ``expense`` the record being edited and copy it into the form."""
        if self._selecting or expense is self._selected:
            return
        if expense is not None and not any(item is expense for item in self.expenses):
            raise RecordNotFoundError(f"Expense {expense.id} is not part of this ledger")

        self._selecting = True
        try:
            self._selected = expense
            self._notify("selected")
            if expense is not None:
                self.description_input = expense.description
                self.amount_input = expense.amount
                self.date_input = expense.date
        finally:
            self._selecting = False

        self.commands["update"].raise_can_execute_changed()
        self.commands["delete"].raise_can_execute_changed()

    def add(self) -> Expense:
        amount = self._validated_amount()
        expense = Expense(
            description=self.description_input,
            amount=amount,
            date=self.date_input,
        )
        self.expenses.append(expense)
        logger.info("expense_added", expense_id=expense.id, amount=str(expense.amount))
        try:
            self._persist()
        finally:
            self._complete_mutation()
        return expense

    def update(self) -> Optional[Expense]:
        expense = self._selected
        if expense is None:
            return None
        amount = self._validated_amount()
        expense.description = self.description_input
        expense.amount = amount
        expense.date = self.date_input
        self.expenses.refresh(expense)
        logger.info("expense_updated", expense_id=expense.id, amount=str(expense.amount))
        try:
            self._persist()
        finally:
            self._complete_mutation()
        return expense

    def delete(self) -> Optional[Expense]:
        """Remove the selected record. Callers must obtain confirmation first."""
        expense = self._selected
        if expense is None:
            return None
        self.expenses.remove(expense)
        logger.info("expense_deleted", expense_id=expense.id)
        try:
            self._persist()
        finally:
            self._complete_mutation()
        return expense

    def clear_selection(self) -> None:
        self.select(None)
        self._reset_inputs()

    def compute_summary(self) -> str:
        text = build_summary(self.expenses, self.currency_symbol)
        self.summary = text
        return text

    def can_mutate_selection(self) -> bool:
        return self._selected is not None

    # Queries --------------------------------------------------------------
    def find(self, expense_id: str) -> Expense:
        for expense in self.expenses:
            if expense.id == expense_id:
                return expense
        raise RecordNotFoundError(f"Expense {expense_id} not found")

    def total(self) -> Decimal:
        return sum((expense.amount for expense in self.expenses), Decimal("0"))

    def monthly_totals(self) -> List[MonthlyTotal]:
        return monthly_totals(self.expenses)

    # Internal helpers -----------------------------------------------------
    def _validated_amount(self) -> Decimal:
        try:
            return validate_expense_input(self.description_input, self.amount_input)
        except ValidationError as exc:
            logger.info("validation_failed", field=exc.field, reason=exc.message)
            raise

    def _persist(self) -> None:
        try:
            self._store.save(list(self.expenses))
        except PersistenceError as exc:
            logger.error("save_failed", path=str(self._store.path), error=str(exc))
            raise
        except Exception as exc:  # pragma: no cover - defensive guard
            logger.error("save_failed", path=str(self._store.path), error=str(exc))
            raise PersistenceError("Unexpected error while saving expenses") from exc

    def _complete_mutation(self) -> None:
        self.compute_summary()
        self._reset_inputs()
        self.select(None)

    def _reset_inputs(self) -> None:
        self.description_input = ""
        self.amount_input = Decimal("0")
        self.date_input = self._clock()
