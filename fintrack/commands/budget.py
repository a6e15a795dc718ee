"""Budget commands for managing monthly category budgets."""

import sys
from typing import Any

from rich.console import Console
from rich.table import Table

from fintrack.commands.formatting import format_money, to_major_units
from fintrack.commands.transactions import warn_if_unsuggested
from fintrack.config import load_settings
from fintrack.dates import current_month, is_month_key, month_display, month_options
from fintrack.domain.budget import sort_budgets
from fintrack.domain.models import Month
from fintrack.errors import FintrackError
from fintrack.store.client import open_store

console = Console()


def set_command(category: str, amount: float, month: str | None = None) -> None:
    """Create a budget for a category in a month (defaults to this month)."""
    settings = load_settings()
    target_month = month or current_month()
    fields: dict[str, Any] = {"month": target_month, "category": category, "budgetAmount": amount}

    try:
        with open_store(settings.database) as store:
            budget = store.create_budget(fields)
    except FintrackError as e:
        console.print(f"[red]Could not set budget: {e}[/red]", style="bold")
        sys.exit(1)

    console.print(
        f"[green]✓[/green] Budget for {budget.category} in {budget.month}: "
        f"{format_money(budget.budget_amount, settings.currency)} (ID: {budget.id})"
    )
    warn_if_unsuggested(budget.category, settings)


def edit_command(
    budget_id: int,
    amount: float | None = None,
    category: str | None = None,
    month: str | None = None,
) -> None:
    """Update a budget, keeping any field that is not given."""
    settings = load_settings()

    try:
        with open_store(settings.database) as store:
            existing = store.get_budget(budget_id)
            fields: dict[str, Any] = {
                "month": month if month is not None else existing.month,
                "category": category if category is not None else existing.category,
                "budgetAmount": amount if amount is not None else to_major_units(existing.budget_amount),
            }
            budget = store.update_budget(budget_id, fields)
    except FintrackError as e:
        console.print(f"[red]Could not update budget: {e}[/red]", style="bold")
        sys.exit(1)

    console.print(
        f"[green]✓[/green] Budget {budget.id} updated: {budget.category} in {budget.month}: "
        f"{format_money(budget.budget_amount, settings.currency)}"
    )


def delete_command(budget_id: int) -> None:
    """Delete a budget by id."""
    settings = load_settings()

    try:
        with open_store(settings.database) as store:
            budget = store.delete_budget(budget_id)
    except FintrackError as e:
        console.print(f"[red]Could not delete budget: {e}[/red]", style="bold")
        sys.exit(1)

    console.print(f"[green]✓[/green] Deleted budget for {budget.category} in {budget.month}")


def list_command(month: str | None = None) -> None:
    """List budgets, newest month first."""
    settings = load_settings()

    if month is not None and not is_month_key(month):
        console.print("[red]Month must be in YYYY-MM format[/red]", style="bold")
        sys.exit(1)

    try:
        with open_store(settings.database) as store:
            budgets = sort_budgets(store.list_budgets())
    except FintrackError as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)

    if month is not None:
        budgets = [b for b in budgets if b.month == month]

    if not budgets:
        if month is not None:
            console.print(f"[yellow]No budgets set for {month_display(Month(month))}[/yellow]")
        else:
            console.print("[yellow]No budgets set yet[/yellow]")
        return

    table = Table(title="Budgets")
    table.add_column("ID", style="dim", justify="right")
    table.add_column("Month", style="cyan")
    table.add_column("Category", style="magenta")
    table.add_column("Budget", justify="right")

    for budget in budgets:
        table.add_row(
            str(budget.id),
            budget.month,
            budget.category,
            format_money(budget.budget_amount, settings.currency),
        )

    console.print(table)


def months_command() -> None:
    """List the months a budget can be set for, marking those already budgeted."""
    settings = load_settings()

    try:
        with open_store(settings.database) as store:
            budgeted = {b.month for b in store.list_budgets()}
    except FintrackError as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)

    this_month = current_month()
    for month in month_options():
        marker = "[cyan]*[/cyan]" if month == this_month else " "
        note = " [dim](budgeted)[/dim]" if month in budgeted else ""
        console.print(f" {marker} {month}  {month_display(month)}{note}")
