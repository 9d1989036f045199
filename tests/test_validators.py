from datetime import datetime
from decimal import Decimal

import pytest

from expense_core.exceptions import ValidationError
from expense_core.validators import (
    AMOUNT_NOT_POSITIVE,
    DESCRIPTION_REQUIRED,
    parse_amount,
    validate_datetime,
    validate_expense_input,
)


def test_accepts_valid_input():
    validate_expense_input("Coffee", Decimal("3.20"))


@pytest.mark.parametrize("description", ["", "   ", "\t\n", None])
def test_description_is_required(description):
    with pytest.raises(ValidationError) as excinfo:
        validate_expense_input(description, Decimal("1"))
    assert excinfo.value.field == "description"
    assert str(excinfo.value) == DESCRIPTION_REQUIRED == "description required"


@pytest.mark.parametrize(
    "amount",
    [
        Decimal("0"),
        Decimal("-0.01"),
        0,
        -3,
        Decimal("NaN"),
        Decimal("Infinity"),
        float("inf"),
        float("nan"),
        "10",
        None,
    ],
)
def test_amount_must_be_positive(amount):
    with pytest.raises(ValidationError) as excinfo:
        validate_expense_input("Coffee", amount)
    assert excinfo.value.field == "amount"
    assert str(excinfo.value) == AMOUNT_NOT_POSITIVE == "amount must be positive"


def test_returns_amount_as_decimal():
    assert validate_expense_input("Coffee", Decimal("3.20")) == Decimal("3.20")
    assert validate_expense_input("Coffee", 2.5) == Decimal("2.5")
    assert validate_expense_input("Coffee", 4) == Decimal("4")


def test_description_is_checked_first():
    with pytest.raises(ValidationError) as excinfo:
        validate_expense_input(" ", Decimal("0"))
    assert excinfo.value.field == "description"


def test_parse_amount():
    assert parse_amount(" 12.40 ") == Decimal("12.40")
    assert parse_amount(7) == Decimal("7")


@pytest.mark.parametrize("raw", ["abc", "", None, True, "Infinity"])
def test_parse_amount_rejects_non_numbers(raw):
    with pytest.raises(ValidationError):
        parse_amount(raw)


def test_validate_datetime():
    when = datetime(2024, 1, 1, 12, 0)
    assert validate_datetime(when) is when
    assert validate_datetime("2024-01-01T12:00:00") == when
    with pytest.raises(ValidationError):
        validate_datetime("soon")
    with pytest.raises(ValidationError):
        validate_datetime(42)
