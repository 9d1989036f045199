"""Validation helpers shared by the ledger operations and front-ends."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal, InvalidOperation

from .exceptions import ValidationError
from .models import parse_datetime

DESCRIPTION_REQUIRED = "description required"
AMOUNT_NOT_POSITIVE = "amount must be positive"


def validate_expense_input(description: object, amount: object) -> Decimal:
    """Check pending form input before it is applied to a record.

    Returns the amount as a Decimal. Raises ``ValidationError`` naming the
    offending field. The description check runs first so a form with both
    problems reports the description.
    """
    if not isinstance(description, str) or not description.strip():
        raise ValidationError(DESCRIPTION_REQUIRED, field="description")
    if isinstance(amount, bool) or not isinstance(amount, (Decimal, int, float)):
        raise ValidationError(AMOUNT_NOT_POSITIVE, field="amount")
    value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    if not value.is_finite() or value <= 0:
        raise ValidationError(AMOUNT_NOT_POSITIVE, field="amount")
    return value


def parse_amount(raw: object, field: str = "amount") -> Decimal:
    """Convert raw input to a Decimal without enforcing its sign."""
    if isinstance(raw, bool) or raw is None:
        raise ValidationError(f"{field} must be a numeric value", field=field)
    try:
        amount = raw if isinstance(raw, Decimal) else Decimal(str(raw).strip())
    except InvalidOperation as exc:
        raise ValidationError(f"{field} must be a numeric value", field=field) from exc
    if not amount.is_finite():
        raise ValidationError(f"{field} must be a finite number", field=field)
    return amount


def validate_datetime(value: object, field: str = "date") -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        try:
            return parse_datetime(value)
        except ValueError as exc:
            raise ValidationError(f"{field} must be an ISO 8601 datetime", field=field) from exc
    raise ValidationError(f"{field} must be a datetime or ISO 8601 string", field=field)
