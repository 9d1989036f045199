"""Persistence of the expense collection as a JSON file."""

from __future__ import annotations

import json
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Iterable, List, Optional, Union

import structlog

from .exceptions import ConfigurationError, PersistenceError
from .models import Expense

DEFAULT_FILE_NAME = "expenses.json"

logger = structlog.get_logger(__name__)


def _encode_value(value: object) -> str:
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise ValueError(f"amount must be finite, got {value}")
        # Exact digits, never routed through float.
        return format(value, "f")
    return json.dumps(value, allow_nan=False)


def _encode_records(records: Iterable[Expense]) -> str:
    entries = []
    for record in records:
        members = [
            f"    {json.dumps(key)}: {_encode_value(value)}"
            for key, value in record.to_dict().items()
        ]
        entries.append("  {\n" + ",\n".join(members) + "\n  }")
    if not entries:
        return "[]"
    return "[\n" + ",\n".join(entries) + "\n]"


def ensure_data_dir(data_dir: Union[str, Path]) -> Path:
    """Create the directory holding the expenses file if it is missing."""
    path = Path(data_dir)
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise PersistenceError(f"Unable to create data directory {path}: {exc}") from exc
    return path


class ExpenseStore:
    """Reads and writes the full expense collection to a single JSON file.

    The store keeps no state besides the file location; every ``load``
    reads the file again and every ``save`` rewrites it completely.
    """

    def __init__(
        self,
        file_name: str = DEFAULT_FILE_NAME,
        base_dir: Optional[Union[str, Path]] = None,
    ) -> None:
        if file_name is None or not str(file_name).strip():
            raise ConfigurationError("File name cannot be null or empty.")
        root = Path(base_dir) if base_dir is not None else Path.cwd()
        self._path = (root / str(file_name).strip()).resolve()

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.exists()

    def load(self) -> List[Expense]:
        path = self._path
        if not path.exists():
            logger.debug("expenses_file_missing", path=str(path))
            return []
        try:
            text = path.read_text(encoding="utf-8-sig")
        except UnicodeDecodeError as exc:
            raise PersistenceError(f"File is not valid UTF-8 text: {path}") from exc
        except PermissionError as exc:
            raise PersistenceError(f"Access denied when reading file: {path}") from exc
        except OSError as exc:
            raise PersistenceError(f"Unable to read from {path}") from exc

        if not text.strip():
            return []
        try:
            payload = json.loads(text, parse_float=Decimal)
        except json.JSONDecodeError as exc:
            raise PersistenceError(
                f"Error deserializing expenses data. File may be corrupted: {exc}"
            ) from exc

        if payload is None:
            return []
        if not isinstance(payload, list):
            raise PersistenceError(f"Expected list payload in {path}")

        expenses: List[Expense] = []
        for position, item in enumerate(payload):
            try:
                expenses.append(Expense.from_dict(item))
            except (TypeError, ValueError, InvalidOperation) as exc:
                raise PersistenceError(
                    f"Invalid expense entry at index {position} in {path}: {exc}"
                ) from exc
        logger.debug("expenses_loaded", path=str(path), count=len(expenses))
        return expenses

    def save(self, records: Iterable[Expense]) -> None:
        if records is None:
            raise PersistenceError("Expenses collection cannot be null.")
        path = self._path
        try:
            text = _encode_records(records)
        except (TypeError, ValueError, AttributeError) as exc:
            raise PersistenceError(f"Error serializing expenses data: {exc}") from exc

        temp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            with temp_path.open("w", encoding="utf-8") as handle:
                handle.write(text)
                handle.flush()
            # replace is an atomic rename on POSIX and Windows alike.
            temp_path.replace(path)
        except FileNotFoundError as exc:
            raise PersistenceError(f"Directory not found for file: {path}") from exc
        except PermissionError as exc:
            raise PersistenceError(f"Access denied when saving to file: {path}") from exc
        except OSError as exc:
            raise PersistenceError(f"Error saving data to file: {path}") from exc
        logger.debug("expenses_saved", path=str(path), bytes=len(text))
