"""Data models for the expense tracker domain."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Mapping
from uuid import uuid4

from .observable import Observable

__all__ = ["Expense", "isoformat_local", "parse_datetime", "new_expense_id"]

DISPLAY_DATE_FORMAT = "%m/%d/%Y"


def new_expense_id() -> str:
    return str(uuid4())


def isoformat_local(dt: datetime) -> str:
    """Return an ISO 8601 string for a wall-clock datetime."""
    return dt.isoformat()


def parse_datetime(value: str) -> datetime:
    """Parse ISO 8601 datetime strings into naive local wall-clock datetimes."""
    value = value.strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    dt = datetime.fromisoformat(value)
    if dt.tzinfo is not None:
        # Offsets are folded into local time so grouping by month follows the user's calendar.
        dt = dt.astimezone().replace(tzinfo=None)
    return dt


def _to_decimal(raw: object) -> Decimal:
    if isinstance(raw, bool) or raw is None:
        raise TypeError(f"amount must be numeric, got {raw!r}")
    try:
        return Decimal(str(raw))
    except InvalidOperation as exc:
        raise ValueError(f"amount must be numeric, got {raw!r}") from exc


@dataclass
class Expense(Observable):
    """A single expense entry.

    Field assignments notify subscribers registered through ``subscribe``.
    The identifier is fixed once the record has been created.
    """

    description: str = ""
    amount: Decimal = Decimal("0")
    date: datetime = field(default_factory=datetime.now)
    id: str = field(default_factory=new_expense_id)

    def __setattr__(self, name: str, value: Any) -> None:
        if name == "id" and "id" in self.__dict__:
            raise AttributeError("Expense id is read-only once assigned")
        super().__setattr__(name, value)
        self._notify(name)

    @property
    def display_date(self) -> str:
        return self.date.strftime(DISPLAY_DATE_FORMAT)

    def to_dict(self) -> Dict[str, Any]:
        """Serialise the expense to a mapping, dropping null values.

        The amount stays a Decimal; the store writes it as an exact JSON number.
        """
        payload = {
            "id": self.id,
            "description": self.description,
            "amount": self.amount,
            "date": isoformat_local(self.date),
        }
        return {key: value for key, value in payload.items() if value is not None}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Expense":
        """Hydrate an Expense from JSON-native data with case-insensitive keys."""
        if not isinstance(data, Mapping):
            raise TypeError(f"expected an object, got {type(data).__name__}")
        known = {item.name for item in fields(cls)}
        normalized = {
            str(key).lower(): value
            for key, value in data.items()
            if str(key).lower() in known and value is not None
        }

        kwargs: Dict[str, Any] = {}
        if "id" in normalized:
            kwargs["id"] = str(normalized["id"])
        if "description" in normalized:
            description = normalized["description"]
            if not isinstance(description, str):
                raise TypeError("description must be a string")
            kwargs["description"] = description
        if "amount" in normalized:
            kwargs["amount"] = _to_decimal(normalized["amount"])
        if "date" in normalized:
            raw_date = normalized["date"]
            if not isinstance(raw_date, str):
                raise TypeError("date must be an ISO 8601 string")
            kwargs["date"] = parse_datetime(raw_date)
        return cls(**kwargs)
