"""CLI entry point for fintrack."""

import logging
from datetime import date

import typer
from rich.console import Console
from rich.logging import RichHandler

from fintrack.commands import budget as budget_commands
from fintrack.commands.admin import backup_command, init_command
from fintrack.commands.report import (
    categories_command,
    compare_command,
    insights_command,
    monthly_command,
    summary_command,
)
from fintrack.commands.transactions import add_command, delete_command, edit_command, list_command

app = typer.Typer(
    name="fintrack",
    help="fintrack - Track your income, expenses and monthly budgets",
    add_completion=False,
)

budget_app = typer.Typer(help="Manage your monthly category budgets.")
app.add_typer(budget_app, name="budget")


def configure_logging(verbose: bool) -> None:
    """Route log records through rich on stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """fintrack - Track your income, expenses and monthly budgets."""
    configure_logging(verbose)


@app.command(name="init")
def init(
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing config"),
) -> None:
    """Initialize fintrack database and configuration."""
    init_command(force)


@app.command(name="backup")
def backup(
    output_dir: str = typer.Option(None, "--output", "-o", help="Backup directory (default: beside the database)"),
) -> None:
    """Backup your database and configuration files."""
    backup_command(output_dir)


@app.command()
def add(
    amount: float = typer.Argument(..., help="Amount (always positive)"),
    description: str = typer.Argument(..., help="Description (2-50 characters)"),
    category: str = typer.Option(..., "--category", "-c", help="Category name"),
    txn_date: str = typer.Option(None, "--date", "-d", help="Date (default: today)"),
    txn_type: str = typer.Option("expense", "--type", "-t", help="'expense' or 'income'"),
) -> None:
    """Add an income or expense transaction."""
    add_command(amount, txn_date or date.today().isoformat(), description, category, txn_type)


@app.command()
def edit(
    txn_id: int = typer.Argument(..., help="Transaction ID (from 'fintrack list')"),
    amount: float = typer.Option(None, "--amount", help="New amount"),
    description: str = typer.Option(None, "--description", help="New description"),
    category: str = typer.Option(None, "--category", "-c", help="New category"),
    txn_date: str = typer.Option(None, "--date", "-d", help="New date"),
    txn_type: str = typer.Option(None, "--type", "-t", help="'expense' or 'income'"),
) -> None:
    """Edit a transaction."""
    edit_command(txn_id, amount, txn_date, description, category, txn_type)


@app.command()
def delete(
    txn_id: int = typer.Argument(..., help="Transaction ID (from 'fintrack list')"),
) -> None:
    """Delete a transaction."""
    delete_command(txn_id)


@app.command(name="list")
def list_transactions(
    limit: int = typer.Option(50, help="Maximum transactions to show"),
    all: bool = typer.Option(False, "--all", "-a", help="Show all your transactions"),
) -> None:
    """List your transactions."""
    list_command(limit, all)


@budget_app.command(name="set")
def budget_set(
    category: str = typer.Argument(..., help="Category name"),
    amount: float = typer.Argument(..., help="Budget amount"),
    month: str = typer.Option(None, "--month", help="Month to budget for (YYYY-MM, default: this month)"),
) -> None:
    """Set a budget for a category."""
    budget_commands.set_command(category, amount, month)


@budget_app.command(name="edit")
def budget_edit(
    budget_id: int = typer.Argument(..., help="Budget ID (from 'fintrack budget list')"),
    amount: float = typer.Option(None, "--amount", help="New budget amount"),
    category: str = typer.Option(None, "--category", "-c", help="New category"),
    month: str = typer.Option(None, "--month", help="New month (YYYY-MM)"),
) -> None:
    """Edit a budget."""
    budget_commands.edit_command(budget_id, amount, category, month)


@budget_app.command(name="delete")
def budget_delete(
    budget_id: int = typer.Argument(..., help="Budget ID (from 'fintrack budget list')"),
) -> None:
    """Delete a budget."""
    budget_commands.delete_command(budget_id)


@budget_app.command(name="list")
def budget_list(
    month: str = typer.Option(None, "--month", help="Only show this month (YYYY-MM)"),
) -> None:
    """List your budgets."""
    budget_commands.list_command(month)


@budget_app.command(name="months")
def budget_months() -> None:
    """List the months you can budget for."""
    budget_commands.months_command()


@app.command()
def summary() -> None:
    """Show your total income, expenses and net balance."""
    summary_command()


@app.command()
def monthly(
    expenses_only: bool = typer.Option(False, "--expenses-only", help="Only count expense transactions"),
    histogram: bool = typer.Option(True, help="Show histogram bars"),
) -> None:
    """Show your totals per month."""
    monthly_command(expenses_only, histogram)


@app.command()
def categories(
    month: str = typer.Option(None, "--month", help="Specific month (YYYY-MM, default: this month)"),
    all: bool = typer.Option(False, "--all", "-a", help="Show all time"),
    sort_by: str = typer.Option("value", help="Sort by 'value' or 'alpha'"),
) -> None:
    """Show your spending by category."""
    categories_command(month, all, sort_by)


@app.command()
def compare(
    month: str = typer.Option(None, "--month", help="Specific month (YYYY-MM, default: this month)"),
) -> None:
    """Compare your budgets with actual spending."""
    compare_command(month)


@app.command()
def insights(
    as_of: str = typer.Option(None, "--as-of", help="Reference date (YYYY-MM-DD, default: today)"),
) -> None:
    """Show insights about your spending this month."""
    insights_command(as_of)


if __name__ == "__main__":
    app()
