"""Console interface for the expense tracker."""

from __future__ import annotations

import argparse
import sys
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Callable, List, Optional

from expense_core.config import get_settings
from expense_core.exceptions import (
    ConfigurationError,
    PersistenceError,
    RecordNotFoundError,
    ValidationError,
)
from expense_core.ledger import Ledger
from expense_core.logging_setup import configure_logging
from expense_core.models import Expense
from expense_core.reports import format_currency
from expense_core.storage import ExpenseStore, ensure_data_dir

from .forms import parse_amount_input, parse_date_argument


def _parse_date(value: str) -> datetime:
    try:
        return parse_date_argument(value)
    except ValidationError as exc:
        raise argparse.ArgumentTypeError(
            f"Invalid date '{value}'. Expected YYYY-MM-DD, 'YYYY-MM-DD HH:MM' or ISO 8601."
        ) from exc


def _parse_amount(value: str) -> Decimal:
    try:
        return parse_amount_input(value)
    except ValidationError as exc:
        raise argparse.ArgumentTypeError("Amount must be a numeric value") from exc


def _load_ledger(data_dir: Path, file_name: str, currency_symbol: str) -> Ledger:
    store = ExpenseStore(file_name, base_dir=ensure_data_dir(data_dir))
    return Ledger(store, currency_symbol=currency_symbol)


def _format_expense(expense: Expense, currency_symbol: str) -> str:
    return (
        f"[{expense.id}] {expense.display_date} "
        f"{format_currency(expense.amount, currency_symbol)}  {expense.description}"
    )


def handle_list(args: argparse.Namespace, ledger: Ledger) -> None:
    expenses = sorted(ledger.expenses, key=lambda exp: exp.date)
    if not expenses:
        print("No expenses found.")
        return
    total = format_currency(ledger.total(), ledger.currency_symbol)
    print(f"Found {len(expenses)} expenses (total {total}):")
    for expense in expenses:
        print(_format_expense(expense, ledger.currency_symbol))


def handle_add(args: argparse.Namespace, ledger: Ledger) -> None:
    ledger.clear_selection()
    ledger.description_input = args.description
    ledger.amount_input = args.amount
    if args.date is not None:
        ledger.date_input = args.date
    expense = ledger.commands["add"].execute()
    print("Expense added:\n" + _format_expense(expense, ledger.currency_symbol))


def handle_edit(args: argparse.Namespace, ledger: Ledger) -> None:
    ledger.select(ledger.find(args.id))
    if args.description is not None:
        ledger.description_input = args.description
    if args.amount is not None:
        ledger.amount_input = args.amount
    if args.date is not None:
        ledger.date_input = args.date
    expense = ledger.commands["update"].execute()
    print("Expense updated:\n" + _format_expense(expense, ledger.currency_symbol))


def handle_delete(
    args: argparse.Namespace,
    ledger: Ledger,
    confirm: Optional[Callable[[str], str]] = None,
) -> bool:
    expense = ledger.find(args.id)
    if not args.yes:
        prompt = confirm or input
        answer = prompt(f"Are you sure you want to delete '{expense.description}'? [y/N] ")
        if answer.strip().lower() not in {"y", "yes"}:
            print("Delete cancelled.")
            return False
    ledger.select(expense)
    ledger.commands["delete"].execute()
    print(f"Expense {args.id} deleted.")
    return True


def handle_summary(args: argparse.Namespace, ledger: Ledger) -> None:
    print(ledger.commands["compute_summary"].execute())


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Expense Tracker CLI")
    parser.add_argument(
        "--data-dir",
        default=settings.data_dir,
        type=Path,
        help=f"Directory holding the expenses file (default: {settings.data_dir})",
    )
    parser.add_argument(
        "--file",
        dest="file_name",
        default=settings.file_name,
        help=f"Name of the expenses file (default: {settings.file_name})",
    )
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level")

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("list", help="List expenses")

    add_parser = subparsers.add_parser("add", help="Add a new expense")
    add_parser.add_argument("description")
    add_parser.add_argument("amount", type=_parse_amount)
    add_parser.add_argument("--date", type=_parse_date, help="Defaults to now")

    edit_parser = subparsers.add_parser("edit", help="Edit an existing expense")
    edit_parser.add_argument("id")
    edit_parser.add_argument("--description")
    edit_parser.add_argument("--amount", type=_parse_amount)
    edit_parser.add_argument("--date", type=_parse_date)

    delete_parser = subparsers.add_parser("delete", help="Delete an expense")
    delete_parser.add_argument("id")
    delete_parser.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")

    subparsers.add_parser("summary", help="Show totals per month")

    return parser


HANDLERS = {
    "list": handle_list,
    "add": handle_add,
    "edit": handle_edit,
    "delete": handle_delete,
    "summary": handle_summary,
}


def main(argv: Optional[List[str]] = None) -> int:
    settings = get_settings()
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level, json=settings.log_json)

    try:
        ledger = _load_ledger(args.data_dir, args.file_name, settings.currency_symbol)
    except ConfigurationError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2
    except PersistenceError as exc:
        print(f"Storage error: {exc}", file=sys.stderr)
        return 1
    if ledger.load_error is not None:
        print(f"Storage error: {ledger.load_error}", file=sys.stderr)
        return 1

    try:
        HANDLERS[args.command](args, ledger)
    except ValidationError as exc:
        print(f"Validation error: {exc}", file=sys.stderr)
        return 1
    except RecordNotFoundError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    except PersistenceError as exc:
        print(f"Storage error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
