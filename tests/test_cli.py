import json
from decimal import Decimal

import pytest

from expense_core.storage import ExpenseStore
from expense_tracker.cli import main


@pytest.fixture
def run(tmp_path, capsys):
    def _run(*argv):
        code = main(["--data-dir", str(tmp_path), *argv])
        captured = capsys.readouterr()
        return code, captured.out, captured.err

    return _run


def stored(tmp_path):
    return ExpenseStore(base_dir=tmp_path).load()


def test_list_empty(run):
    code, out, _ = run("list")
    assert code == 0
    assert "No expenses found." in out


def test_add_then_list_and_summary(run, tmp_path):
    assert run("add", "Groceries", "50", "--date", "2024-01-15")[0] == 0
    assert run("add", "Gas", "30", "--date", "2024-01-20 08:15")[0] == 0
    assert run("add", "Books", "1,020.5", "--date", "2024-02-01T10:00:00")[0] == 0

    records = stored(tmp_path)
    assert [(item.description, item.amount) for item in records] == [
        ("Groceries", Decimal("50")),
        ("Gas", Decimal("30")),
        ("Books", Decimal("1020.5")),
    ]

    code, out, _ = run("list")
    assert code == 0
    assert "Found 3 expenses (total $1,100.50):" in out
    assert "01/20/2024 $30.00  Gas" in out

    code, out, _ = run("summary")
    assert code == 0
    assert out.strip() == "February 2024: $1,020.50\nJanuary 2024: $80.00"


def test_summary_without_expenses(run):
    code, out, _ = run("summary")
    assert code == 0
    assert out.strip() == "No expenses recorded."


def test_add_validation_error(run, tmp_path):
    code, _, err = run("add", "   ", "10")
    assert code == 1
    assert "Validation error: description required" in err
    assert stored(tmp_path) == []


def test_add_rejects_non_positive_amount(run, tmp_path):
    code, _, err = run("add", "Refund", "0")
    assert code == 1
    assert "amount must be positive" in err


def test_edit_keeps_id(run, tmp_path):
    run("add", "Gas", "30", "--date", "2024-01-20")
    (expense,) = stored(tmp_path)

    code, out, _ = run("edit", expense.id, "--amount", "32.5")

    assert code == 0
    assert "Expense updated:" in out
    (updated,) = stored(tmp_path)
    assert updated.id == expense.id
    assert updated.description == "Gas"
    assert updated.amount == Decimal("32.5")
    assert updated.date == expense.date


def test_edit_unknown_id(run):
    code, _, err = run("edit", "nope", "--amount", "1")
    assert code == 1
    assert "nope" in err


def test_delete_with_confirmation_flag(run, tmp_path):
    run("add", "Gas", "30", "--date", "2024-01-20")
    run("add", "Tea", "4", "--date", "2024-01-21")
    gas, tea = stored(tmp_path)

    code, out, _ = run("delete", gas.id, "--yes")

    assert code == 0
    assert f"Expense {gas.id} deleted." in out
    assert stored(tmp_path) == [tea]


def test_delete_declined(run, tmp_path, monkeypatch):
    run("add", "Gas", "30", "--date", "2024-01-20")
    (gas,) = stored(tmp_path)
    monkeypatch.setattr("builtins.input", lambda prompt: "n")

    code, out, _ = run("delete", gas.id)

    assert code == 0
    assert "Delete cancelled." in out
    assert stored(tmp_path) == [gas]


def test_delete_confirmed_interactively(run, tmp_path, monkeypatch):
    run("add", "Gas", "30", "--date", "2024-01-20")
    (gas,) = stored(tmp_path)
    monkeypatch.setattr("builtins.input", lambda prompt: "yes")

    assert run("delete", gas.id)[0] == 0
    assert stored(tmp_path) == []


def test_corrupted_file_is_reported(run, tmp_path):
    (tmp_path / "expenses.json").write_text("{broken", encoding="utf-8")
    code, _, err = run("list")
    assert code == 1
    assert "Storage error" in err


def test_custom_file_name(run, tmp_path):
    assert run("--file", "travel.json", "add", "Taxi", "18")[0] == 0
    payload = json.loads((tmp_path / "travel.json").read_text(encoding="utf-8"))
    assert payload[0]["description"] == "Taxi"


def test_invalid_amount_argument(tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        main(["--data-dir", str(tmp_path), "add", "Taxi", "abc"])
    assert excinfo.value.code == 2


def test_data_dir_that_is_a_file(tmp_path, capsys):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("", encoding="utf-8")
    code = main(["--data-dir", str(blocker / "data"), "list"])
    assert code == 1
    assert "Storage error" in capsys.readouterr().err


def test_edit_description_keeps_precise_amount(run, tmp_path):
    assert run("add", "Parking", "10.125", "--date", "2024-01-15 08:15")[0] == 0
    (parking,) = stored(tmp_path)
    assert run("edit", parking.id, "--description", "Garage")[0] == 0
    (edited,) = stored(tmp_path)
    assert (edited.description, edited.amount) == ("Garage", Decimal("10.125"))
