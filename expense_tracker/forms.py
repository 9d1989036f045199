"""Parsing and formatting of raw form text for the front-ends."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Optional, Tuple, Union

from expense_core.exceptions import ValidationError
from expense_core.validators import parse_amount, validate_datetime

DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M"
TIME_FORMATS = (TIME_FORMAT, "%H:%M:%S", "%H:%M:%S.%f")


def sanitize_amount_input(raw: Optional[str]) -> str:
    if raw is None:
        return ""
    return raw.replace(",", "").replace("$", "").strip()


def parse_amount_input(raw: Optional[str]) -> Decimal:
    """Turn text such as ``"1,250.00"`` into a Decimal; blank text means zero."""
    sanitized = sanitize_amount_input(raw)
    if not sanitized:
        return Decimal("0")
    return parse_amount(sanitized)


def _format_decimal(amount: Decimal) -> str:
    # At least two places; longer fractions are shown in full, never rounded.
    if amount.is_finite() and amount.as_tuple().exponent < -2:
        return f"{amount:,f}"
    return f"{amount:,.2f}"


def format_amount_display(value: Union[Decimal, str]) -> str:
    if isinstance(value, Decimal):
        return _format_decimal(value)
    sanitized = sanitize_amount_input(value)
    if not sanitized:
        return ""
    try:
        amount = Decimal(sanitized)
    except InvalidOperation:
        return value.strip()
    return _format_decimal(amount)


def split_datetime(value: datetime) -> Tuple[str, str]:
    """Split into date and time text; seconds appear only when the value has them."""
    if value.microsecond:
        time_format = TIME_FORMATS[2]
    elif value.second:
        time_format = TIME_FORMATS[1]
    else:
        time_format = TIME_FORMAT
    return value.strftime(DATE_FORMAT), value.strftime(time_format)


def combine_date_time(date_str: str, time_str: Optional[str]) -> datetime:
    date_text = (date_str or "").strip()
    if not date_text:
        raise ValidationError("date is required", field="date")
    time_text = (time_str or "00:00").strip() or "00:00"
    for time_format in TIME_FORMATS:
        try:
            return datetime.strptime(f"{date_text} {time_text}", f"{DATE_FORMAT} {time_format}")
        except ValueError:
            continue
    raise ValidationError("Invalid date or time", field="date")


def parse_date_argument(value: str) -> datetime:
    """Accept ``YYYY-MM-DD``, ``YYYY-MM-DD HH:MM`` or a full ISO 8601 datetime."""
    text = value.strip()
    if " " in text and "T" not in text:
        date_part, _, time_part = text.partition(" ")
        return combine_date_time(date_part, time_part)
    return validate_datetime(text)
