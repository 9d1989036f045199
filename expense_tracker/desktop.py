"""Tkinter desktop application for the expense tracker."""

from __future__ import annotations

import argparse
import sys
import tkinter as tk
from pathlib import Path
from tkinter import messagebox, ttk
from typing import Any, Dict, Iterable, Optional

import structlog

from expense_core.commands import Command
from expense_core.config import get_settings
from expense_core.exceptions import PersistenceError, ValidationError
from expense_core.ledger import Ledger
from expense_core.logging_setup import configure_logging
from expense_core.models import Expense
from expense_core.reports import format_currency
from expense_core.storage import ExpenseStore, ensure_data_dir

from .forms import (
    combine_date_time,
    format_amount_display,
    parse_amount_input,
    split_datetime,
)

PRIMARY_BG = "#0f172a"
SECONDARY_BG = "#1e293b"
ACCENT_BG = "#1d4ed8"
ACCENT_ACTIVE_BG = "#2563eb"
TEXT_PRIMARY = "#e2e8f0"
TEXT_MUTED = "#94a3b8"

logger = structlog.get_logger(__name__)


class ExpenseForm(ttk.Frame):
    """Form and list bound to a ``Ledger``."""

    def __init__(self, master: tk.Misc, ledger: Ledger) -> None:
        super().__init__(master, padding=16, style="Panel.TFrame")
        self.ledger = ledger

        self.description_var = tk.StringVar()
        self.amount_var = tk.StringVar()
        self.date_var = tk.StringVar()
        self.time_var = tk.StringVar()
        self.summary_var = tk.StringVar()
        self.buttons: Dict[str, ttk.Button] = {}
        self._syncing_tree = False

        self._build_form()
        self._build_table()
        self._build_summary()
        self.columnconfigure(0, weight=1)
        self.rowconfigure(1, weight=1)

        ledger.subscribe(self._on_ledger_changed)
        ledger.expenses.subscribe(self._on_collection_changed)
        for command in ledger.commands.values():
            command.subscribe(self._on_can_execute_changed)

        self._pull_inputs()
        self.summary_var.set(ledger.summary)
        self.populate()
        self._refresh_buttons()

    def _build_form(self) -> None:
        form = ttk.LabelFrame(self, text="Expense", style="Card.TLabelframe")
        form.grid(row=0, column=0, sticky="ew", padx=4, pady=(0, 12))
        form.columnconfigure(0, weight=1)
        form.columnconfigure(1, weight=1)

        def add_field(label: str, var: tk.StringVar, column: int, row: int) -> ttk.Entry:
            ttk.Label(form, text=label, style="FormLabel.TLabel").grid(
                column=column, row=row, sticky="w", padx=4, pady=4
            )
            entry = ttk.Entry(form, textvariable=var, style="App.TEntry")
            entry.grid(column=column, row=row + 1, sticky="ew", padx=4, pady=(0, 8))
            return entry

        add_field("Description", self.description_var, 0, 0)
        amount_entry = add_field("Amount", self.amount_var, 1, 0)
        amount_entry.bind("<FocusOut>", self._handle_amount_focus_out)
        add_field("Date (YYYY-MM-DD)", self.date_var, 0, 2)
        add_field("Time (HH:MM)", self.time_var, 1, 2)

        button_row = ttk.Frame(form, style="Panel.TFrame")
        button_row.grid(column=0, row=4, columnspan=2, sticky="e", padx=4, pady=4)
        actions = (
            ("clear_selection", "Clear", self.clear, "Secondary.TButton"),
            ("delete", "Delete", self.delete_selected, "Secondary.TButton"),
            ("update", "Update", self.update_selected, "Secondary.TButton"),
            ("add", "Add Expense", self.submit, "Primary.TButton"),
        )
        for column, (name, text, handler, style) in enumerate(actions):
            button = ttk.Button(button_row, text=text, command=handler, style=style)
            button.grid(column=column, row=0, padx=4)
            self.buttons[name] = button

    def _build_table(self) -> None:
        table_frame = ttk.Frame(self, style="Panel.TFrame")
        table_frame.grid(row=1, column=0, sticky="nsew")
        table_frame.columnconfigure(0, weight=1)
        table_frame.rowconfigure(0, weight=1)

        columns = ("date", "description", "amount")
        self.tree = ttk.Treeview(
            table_frame,
            columns=columns,
            show="headings",
            height=10,
            selectmode="browse",
            style="App.Treeview",
        )
        headings = {"date": "Date", "description": "Description", "amount": "Amount"}
        for key, label in headings.items():
            width = 260 if key == "description" else 120
            self.tree.heading(key, text=label, anchor="w")
            self.tree.column(key, width=width, anchor="w")
        self.tree.bind("<<TreeviewSelect>>", self._handle_tree_select)

        vsb = ttk.Scrollbar(table_frame, orient="vertical", command=self.tree.yview)
        self.tree.configure(yscroll=vsb.set)
        self.tree.grid(row=0, column=0, sticky="nsew")
        vsb.grid(row=0, column=1, sticky="ns")

    def _build_summary(self) -> None:
        summary = ttk.LabelFrame(self, text="Monthly Summary", style="Card.TLabelframe")
        summary.grid(row=2, column=0, sticky="ew", padx=4, pady=(12, 0))
        ttk.Label(
            summary,
            textvariable=self.summary_var,
            style="Summary.TLabel",
            justify="left",
        ).grid(row=0, column=0, sticky="w", padx=8, pady=8)
        ttk.Button(
            summary,
            text="Recalculate",
            command=lambda: self._run("compute_summary"),
            style="Secondary.TButton",
        ).grid(row=0, column=1, sticky="ne", padx=8, pady=8)
        summary.columnconfigure(0, weight=1)

    # Actions ----------------------------------------------------------------
    def submit(self) -> None:
        if self._push_inputs():
            self._run("add")

    def update_selected(self) -> None:
        if not self._push_inputs():
            return
        if self._run("update") is not None:
            messagebox.showinfo("Success", "Expense updated successfully.", parent=self)

    def delete_selected(self) -> None:
        expense = self.ledger.selected
        if expense is None:
            messagebox.showinfo("No selection", "Please select an expense to delete.", parent=self)
            return
        confirm = messagebox.askyesno(
            "Confirm Delete",
            f"Are you sure you want to delete '{expense.description}'?",
            parent=self,
        )
        if not confirm:
            return
        if self._run("delete") is not None:
            messagebox.showinfo("Success", "Expense deleted successfully.", parent=self)

    def clear(self) -> None:
        self._run("clear_selection")

    def _run(self, name: str) -> Any:
        try:
            return self.ledger.commands[name].execute()
        except ValidationError as exc:
            messagebox.showwarning("Validation Error", str(exc), parent=self)
        except PersistenceError as exc:
            messagebox.showerror("Save Error", f"Error saving expenses: {exc}", parent=self)
        return None

    def _push_inputs(self) -> bool:
        """Copy widget text into the ledger's pending inputs."""
        try:
            amount = parse_amount_input(self.amount_var.get())
            when = combine_date_time(self.date_var.get(), self.time_var.get())
        except ValidationError as exc:
            messagebox.showwarning("Validation Error", str(exc), parent=self)
            return False
        self.ledger.description_input = self.description_var.get()
        self.ledger.amount_input = amount
        self.ledger.date_input = when
        return True

    def _pull_inputs(self) -> None:
        self.description_var.set(self.ledger.description_input)
        amount = self.ledger.amount_input
        self.amount_var.set(format_amount_display(amount) if amount else "")
        date_part, time_part = split_datetime(self.ledger.date_input)
        self.date_var.set(date_part)
        self.time_var.set(time_part)

    # Binding ----------------------------------------------------------------
    def _on_ledger_changed(self, _ledger: Ledger, name: str) -> None:
        if name in {"description_input", "amount_input", "date_input"}:
            self._pull_inputs()
        elif name == "summary":
            self.summary_var.set(self.ledger.summary)
        elif name == "selected":
            self._sync_tree_selection()

    def _on_collection_changed(self, _action: str, _item: Optional[Expense]) -> None:
        self.populate()

    def _on_can_execute_changed(self, _command: Command) -> None:
        self._refresh_buttons()

    def _refresh_buttons(self) -> None:
        for name, button in self.buttons.items():
            enabled = self.ledger.commands[name].can_execute()
            button.configure(state="normal" if enabled else "disabled")

    def _handle_tree_select(self, _event: object) -> None:
        if self._syncing_tree:
            return
        selection = self.tree.selection()
        expense = self.ledger.find(selection[0]) if selection else None
        self.ledger.select(expense)

    def _sync_tree_selection(self) -> None:
        self._syncing_tree = True
        try:
            expense = self.ledger.selected
            if expense is None:
                self.tree.selection_set(())
            elif self.tree.exists(expense.id):
                self.tree.selection_set((expense.id,))
        finally:
            self._syncing_tree = False

    def populate(self) -> None:
        self.tree.delete(*self.tree.get_children())
        for expense in self.ledger.expenses:
            values = (
                expense.display_date,
                expense.description,
                format_currency(expense.amount, self.ledger.currency_symbol),
            )
            self.tree.insert("", "end", iid=expense.id, values=values)
        self._sync_tree_selection()

    def _handle_amount_focus_out(self, _event: object) -> None:
        self.amount_var.set(format_amount_display(self.amount_var.get()))


class ExpenseTrackerApp(tk.Tk):
    """Main application window."""

    def __init__(self, ledger: Ledger) -> None:
        super().__init__()
        self.title("Expense Tracker")
        self.geometry("760x640")
        self.minsize(640, 520)
        self.configure(bg=PRIMARY_BG)
        self.ledger = ledger

        self._configure_styles()
        self._build_layout()

        if ledger.load_error is not None:
            self.after(
                0,
                lambda: messagebox.showerror(
                    "Load Error", f"Error loading expenses: {ledger.load_error}", parent=self
                ),
            )

    def _configure_styles(self) -> None:
        style = ttk.Style(self)
        try:
            style.theme_use("clam")
        except tk.TclError:
            pass

        style.configure("TFrame", background=PRIMARY_BG)
        style.configure("TLabel", background=PRIMARY_BG, foreground=TEXT_PRIMARY)
        style.configure("Panel.TFrame", background=SECONDARY_BG, relief="flat")
        style.configure("Card.TLabelframe", background=SECONDARY_BG, foreground=TEXT_PRIMARY)
        style.configure("Card.TLabelframe.Label", background=SECONDARY_BG, foreground=TEXT_PRIMARY)
        style.configure("Header.TFrame", background=PRIMARY_BG)
        style.configure("FormLabel.TLabel", background=SECONDARY_BG, foreground=TEXT_MUTED, font=("Segoe UI", 9))
        style.configure("Header.TLabel", background=PRIMARY_BG, foreground=TEXT_PRIMARY, font=("Segoe UI", 20, "bold"))
        style.configure("Summary.TLabel", background=SECONDARY_BG, foreground=TEXT_PRIMARY, font=("Segoe UI", 11))

        style.configure(
            "App.TEntry",
            fieldbackground=SECONDARY_BG,
            background=SECONDARY_BG,
            foreground=TEXT_PRIMARY,
            insertcolor=TEXT_PRIMARY,
            bordercolor=ACCENT_BG,
        )
        style.configure(
            "Primary.TButton",
            background=ACCENT_BG,
            foreground=TEXT_PRIMARY,
            bordercolor=ACCENT_BG,
            padding=(18, 6),
        )
        style.map(
            "Primary.TButton",
            background=[("active", ACCENT_ACTIVE_BG)],
            foreground=[("disabled", TEXT_MUTED)],
        )
        style.configure(
            "Secondary.TButton",
            background=SECONDARY_BG,
            foreground=TEXT_PRIMARY,
            bordercolor=SECONDARY_BG,
            padding=(14, 6),
        )
        style.map(
            "Secondary.TButton",
            background=[("active", ACCENT_BG)],
            foreground=[("disabled", TEXT_MUTED)],
        )
        style.configure(
            "App.Treeview",
            background=SECONDARY_BG,
            fieldbackground=SECONDARY_BG,
            foreground=TEXT_PRIMARY,
            bordercolor=SECONDARY_BG,
            rowheight=28,
        )
        style.map(
            "App.Treeview",
            background=[("selected", ACCENT_BG)],
            foreground=[("selected", TEXT_PRIMARY)],
        )

    def _build_layout(self) -> None:
        self.columnconfigure(0, weight=1)
        self.rowconfigure(1, weight=1)

        header = ttk.Frame(self, padding=20, style="Header.TFrame")
        header.grid(row=0, column=0, sticky="ew")
        ttk.Label(header, text="Expense Tracker", style="Header.TLabel").grid(row=0, column=0, sticky="w")

        self.form = ExpenseForm(self, self.ledger)
        self.form.grid(row=1, column=0, sticky="nsew", padx=12, pady=(0, 12))


def main(argv: Optional[Iterable[str]] = None) -> int:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Tkinter desktop app for the expense tracker")
    parser.add_argument(
        "--data-dir",
        default=settings.data_dir,
        type=Path,
        help=f"Directory holding the expenses file (default: {settings.data_dir})",
    )
    parser.add_argument("--file", dest="file_name", default=settings.file_name)
    parser.add_argument("--log-level", default=settings.log_level)
    args = parser.parse_args(list(argv) if argv is not None else None)

    configure_logging(args.log_level, json=settings.log_json)
    try:
        data_dir = ensure_data_dir(args.data_dir)
    except PersistenceError as exc:
        logger.error("data_dir_unavailable", path=str(args.data_dir), error=str(exc))
        print(f"Storage error: {exc}", file=sys.stderr)
        return 1
    store = ExpenseStore(args.file_name, base_dir=data_dir)
    ledger = Ledger(store, currency_symbol=settings.currency_symbol)
    logger.info("desktop_started", path=str(store.path), count=len(ledger.expenses))

    app = ExpenseTrackerApp(ledger)
    app.mainloop()
    return 0


if __name__ == "__main__":  # pragma: no cover - manual execution
    raise SystemExit(main())
