from datetime import datetime
from decimal import Decimal

import pytest

from expense_core.models import Expense, parse_datetime


class TestExpense:
    def test_defaults(self):
        before = datetime.now()
        expense = Expense()
        assert expense.description == ""
        assert expense.amount == Decimal("0")
        assert expense.date >= before
        assert expense.id

    def test_ids_are_unique(self):
        assert Expense().id != Expense().id

    def test_id_cannot_be_reassigned(self):
        expense = Expense(description="Rent", amount=Decimal("900"))
        with pytest.raises(AttributeError):
            expense.id = "other"

    def test_display_date(self):
        expense = Expense(date=datetime(2024, 1, 5, 18, 45))
        assert expense.display_date == "01/05/2024"

    def test_field_changes_notify_subscribers(self):
        expense = Expense(description="Gas", amount=Decimal("40"))
        seen = []
        expense.subscribe(lambda source, name: seen.append((source, name)))

        expense.amount = Decimal("42.10")
        expense.description = "Fuel"

        assert seen == [(expense, "amount"), (expense, "description")]

    def test_unsubscribe(self):
        expense = Expense()
        seen = []
        unsubscribe = expense.subscribe(lambda source, name: seen.append(name))
        unsubscribe()
        expense.description = "Coffee"
        assert seen == []

    def test_to_dict(self):
        expense = Expense(
            description="Groceries",
            amount=Decimal("19.99"),
            date=datetime(2024, 1, 15, 10, 30),
        )
        payload = expense.to_dict()
        assert payload == {
            "id": expense.id,
            "description": "Groceries",
            "amount": Decimal("19.99"),
            "date": "2024-01-15T10:30:00",
        }

    def test_to_dict_omits_null_values(self):
        expense = Expense(amount=Decimal("1"))
        expense.description = None
        assert "description" not in expense.to_dict()


class TestExpenseFromDict:
    def test_field_names_are_case_insensitive(self):
        expense = Expense.from_dict(
            {
                "Id": "2f1c",
                "Description": "Gas",
                "AMOUNT": 12.5,
                "date": "2024-01-15T10:30:00",
            }
        )
        assert expense.id == "2f1c"
        assert expense.description == "Gas"
        assert expense.amount == Decimal("12.5")
        assert expense.date == datetime(2024, 1, 15, 10, 30)

    def test_missing_fields_take_defaults(self):
        expense = Expense.from_dict({"description": "Lunch"})
        assert expense.description == "Lunch"
        assert expense.amount == Decimal("0")
        assert expense.id

    def test_unknown_fields_are_ignored(self):
        expense = Expense.from_dict({"id": "a", "category": "food"})
        assert expense.id == "a"

    def test_string_amounts_are_accepted(self):
        assert Expense.from_dict({"amount": "7.25"}).amount == Decimal("7.25")

    @pytest.mark.parametrize(
        "payload",
        [
            {"amount": "lots"},
            {"amount": True},
            {"date": "yesterday"},
            {"date": 20240115},
            {"description": 12},
        ],
    )
    def test_rejects_malformed_values(self, payload):
        with pytest.raises((TypeError, ValueError)):
            Expense.from_dict(payload)

    def test_rejects_non_objects(self):
        with pytest.raises(TypeError):
            Expense.from_dict(["not", "an", "object"])


def test_parse_datetime_naive_is_kept_as_is():
    assert parse_datetime(" 2024-02-01T08:00:00 ") == datetime(2024, 2, 1, 8, 0)


def test_parse_datetime_with_offset_returns_naive_local():
    parsed = parse_datetime("2024-02-01T08:00:00Z")
    assert parsed.tzinfo is None
