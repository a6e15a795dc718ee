"""End-to-end tests for the fintrack command line."""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from fintrack.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def xdg_dirs(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setenv("COLUMNS", "200")
    return tmp_path


class TestInit:
    """Tests for the init command."""

    def test_creates_config_and_database(self, xdg_dirs: Path) -> None:
        """Should create both files on first run."""
        result = runner.invoke(app, ["init"])

        assert result.exit_code == 0
        assert (xdg_dirs / "config" / "fintrack" / "config.toml").exists()
        assert (xdg_dirs / "data" / "fintrack" / "fintrack.db").exists()

    def test_refuses_to_overwrite(self) -> None:
        """Should fail when a config already exists and --force is not given."""
        runner.invoke(app, ["init"])

        result = runner.invoke(app, ["init"])

        assert result.exit_code == 1
        assert "already exists" in result.output


class TestTransactionCommands:
    """Tests for add, list, edit and delete."""

    def test_add_and_list(self) -> None:
        """Should show an added transaction in the list."""
        result = runner.invoke(app, ["add", "42.50", "Weekly shop", "-c", "Groceries", "-d", "2024-01-15"])
        assert result.exit_code == 0
        assert "Transaction added" in result.output

        result = runner.invoke(app, ["list"])
        assert result.exit_code == 0
        assert "Weekly shop" in result.output
        assert "$42.50" in result.output

    def test_add_invalid(self) -> None:
        """Should exit with an error for invalid fields."""
        result = runner.invoke(app, ["add", "10", "x", "-c", "Groceries", "-d", "2024-01-15"])

        assert result.exit_code == 1
        assert "description must be between 2 and 50 characters" in result.output

    def test_add_oversized_amount(self) -> None:
        """Should print a validation error instead of crashing on huge amounts."""
        result = runner.invoke(app, ["add", "100000000000000000", "Big one", "-c", "Rent", "-d", "2024-01-15"])

        assert result.exit_code == 1
        assert result.exception is None or isinstance(result.exception, SystemExit)
        assert "amount is too large" in result.output

    def test_edit_keeps_unchanged_fields(self) -> None:
        """Should only change the fields that are given."""
        runner.invoke(app, ["add", "42.50", "Weekly shop", "-c", "Groceries", "-d", "2024-01-15"])

        result = runner.invoke(app, ["edit", "1", "--amount", "50"])

        assert result.exit_code == 0
        assert "$50.00" in result.output
        assert "Weekly shop" in result.output

    def test_delete_missing(self) -> None:
        """Should report an unknown transaction id."""
        result = runner.invoke(app, ["delete", "99"])

        assert result.exit_code == 1
        assert "Transaction 99 not found" in result.output


class TestBudgetCommands:
    """Tests for the budget sub-commands."""

    def test_duplicate_budget(self) -> None:
        """Should refuse a second budget for the same month and category."""
        first = runner.invoke(app, ["budget", "set", "Rent", "1200", "--month", "2024-01"])
        second = runner.invoke(app, ["budget", "set", "Rent", "900", "--month", "2024-01"])

        assert first.exit_code == 0
        assert second.exit_code == 1
        assert "already exists" in second.output

    def test_list_for_month(self) -> None:
        """Should list budgets for the requested month."""
        runner.invoke(app, ["budget", "set", "Rent", "1200", "--month", "2024-01"])

        result = runner.invoke(app, ["budget", "list", "--month", "2024-01"])

        assert result.exit_code == 0
        assert "Rent" in result.output
        assert "$1,200.00" in result.output

    def test_months_marks_budgeted(self) -> None:
        """Should list selectable months and mark budgeted ones."""
        runner.invoke(app, ["budget", "set", "Rent", "1200"])

        result = runner.invoke(app, ["budget", "months"])

        assert result.exit_code == 0
        assert "(budgeted)" in result.output
        assert len(result.output.strip().splitlines()) == 25


class TestReportCommands:
    """Tests for summary, compare and insights."""

    def test_summary(self) -> None:
        """Should show income, expenses and net balance."""
        runner.invoke(app, ["add", "3000", "Salary", "-c", "Salary", "-d", "2024-01-01", "-t", "income"])
        runner.invoke(app, ["add", "1200", "Rent", "-c", "Rent", "-d", "2024-01-02"])

        result = runner.invoke(app, ["summary"])

        assert result.exit_code == 0
        assert "$3,000.00" in result.output
        assert "$1,800.00" in result.output

    def test_compare_over_budget(self) -> None:
        """Should show the overspent difference for a month."""
        runner.invoke(app, ["budget", "set", "Rent", "120", "--month", "2024-01"])
        runner.invoke(app, ["add", "150", "January rent", "-c", "Rent", "-d", "2024-01-10"])

        result = runner.invoke(app, ["compare", "--month", "2024-01"])

        assert result.exit_code == 0
        assert "-$30.00" in result.output

    def test_insights_with_no_data(self) -> None:
        """Should explain that there is not enough data yet."""
        result = runner.invoke(app, ["insights", "--as-of", "2024-02-15"])

        assert result.exit_code == 0
        assert "Not enough data" in result.output

    def test_insights_spending_increase(self) -> None:
        """Should report a month-over-month increase."""
        runner.invoke(app, ["add", "100", "Shop one", "-c", "Groceries", "-d", "2024-01-10"])
        runner.invoke(app, ["add", "130", "Shop two", "-c", "Groceries", "-d", "2024-02-10"])

        result = runner.invoke(app, ["insights", "--as-of", "2024-02-15"])

        assert result.exit_code == 0
        assert "increased by" in result.output
        assert "30%" in result.output

    def test_invalid_month_option(self) -> None:
        """Should reject months not in YYYY-MM form."""
        result = runner.invoke(app, ["compare", "--month", "January"])

        assert result.exit_code == 1


class TestBackup:
    """Tests for the backup command."""

    def test_requires_database(self) -> None:
        """Should fail before the database has been created."""
        result = runner.invoke(app, ["backup"])

        assert result.exit_code == 1
        assert "Database not found" in result.output

    def test_copies_database_and_config(self, xdg_dirs: Path) -> None:
        """Should copy both files into the output directory."""
        runner.invoke(app, ["init"])
        output = xdg_dirs / "backups"

        result = runner.invoke(app, ["backup", "--output", str(output)])

        assert result.exit_code == 0
        assert len(list(output.glob("fintrack_*.db"))) == 1
        assert len(list(output.glob("config_*.toml"))) == 1
