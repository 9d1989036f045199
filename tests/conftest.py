"""Shared fixtures for the expense tracker tests."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Iterable, List

import pytest

from expense_core.config import get_settings
from expense_core.exceptions import PersistenceError
from expense_core.ledger import Ledger
from expense_core.logging_setup import configure_logging
from expense_core.models import Expense
from expense_core.storage import ExpenseStore

FIXED_NOW = datetime(2024, 3, 10, 9, 30)


class RecordingStore(ExpenseStore):
    """Store that counts writes and can be told to fail them."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.saves: List[List[Expense]] = []
        self.fail_saves = False

    def save(self, records: Iterable[Expense]) -> None:
        snapshot = list(records)
        self.saves.append(snapshot)
        if self.fail_saves:
            raise PersistenceError("disk unavailable")
        super().save(snapshot)


@pytest.fixture(autouse=True)
def quiet_logging():
    configure_logging("CRITICAL")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def clock():
    return lambda: FIXED_NOW


@pytest.fixture
def store(tmp_path):
    return RecordingStore(base_dir=tmp_path)


@pytest.fixture
def ledger(store, clock):
    return Ledger(store, clock=clock)


def make_expense(description: str, amount: str, when: datetime) -> Expense:
    return Expense(description=description, amount=Decimal(amount), date=when)


def fill_form(ledger: Ledger, description: str, amount: str, when: datetime = FIXED_NOW) -> None:
    ledger.description_input = description
    ledger.amount_input = Decimal(amount)
    ledger.date_input = when
