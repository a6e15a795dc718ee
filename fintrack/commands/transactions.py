"""Transaction management commands (add, edit, delete, list)."""

import sys
from typing import Any

from rich.console import Console
from rich.table import Table

from fintrack.commands.formatting import format_money, to_major_units
from fintrack.config import Settings, load_settings
from fintrack.domain.transactions import (
    Transaction,
    TransactionType,
    is_suggested_category,
    sort_transactions_newest_first,
)
from fintrack.errors import FintrackError
from fintrack.store.client import open_store

console = Console()


def print_transaction(txn: Transaction, settings: Settings) -> None:
    """Print the persisted fields of a transaction."""
    console.print(f"  ID: {txn.id}")
    console.print(f"  Date: {txn.date}")
    console.print(f"  Description: {txn.description}")
    console.print(f"  Amount: {format_money(txn.amount, settings.currency)}")
    console.print(f"  Category: {txn.category}")
    console.print(f"  Type: {TransactionType(txn.type).value}")


def warn_if_unsuggested(category: str, settings: Settings) -> None:
    """Note categories outside the suggested palette (they are still saved)."""
    if not is_suggested_category(category, settings.categories):
        console.print(f"[dim]'{category}' is not one of your suggested categories[/dim]")


def add_command(
    amount: float,
    date: str,
    description: str,
    category: str,
    txn_type: str = "expense",
) -> None:
    """Add a transaction.

    Args:
        amount: Amount in major currency units (always positive).
        date: Transaction date (YYYY-MM-DD or other common formats).
        description: Transaction description (2-50 characters).
        category: Category name.
        txn_type: "expense" or "income".
    """
    settings = load_settings()
    fields: dict[str, Any] = {
        "amount": amount,
        "date": date,
        "description": description,
        "category": category,
        "type": txn_type,
    }

    try:
        with open_store(settings.database) as store:
            txn = store.create_transaction(fields)
    except FintrackError as e:
        console.print(f"[red]Could not add transaction: {e}[/red]", style="bold")
        sys.exit(1)

    console.print("[green]✓[/green] Transaction added:")
    print_transaction(txn, settings)
    warn_if_unsuggested(txn.category, settings)


def edit_command(
    txn_id: int,
    amount: float | None = None,
    date: str | None = None,
    description: str | None = None,
    category: str | None = None,
    txn_type: str | None = None,
) -> None:
    """Update a transaction, keeping any field that is not given."""
    settings = load_settings()

    try:
        with open_store(settings.database) as store:
            existing = store.get_transaction(txn_id)
            fields: dict[str, Any] = {
                "amount": amount if amount is not None else to_major_units(existing.amount),
                "date": date if date is not None else existing.date,
                "description": description if description is not None else existing.description,
                "category": category if category is not None else existing.category,
                "type": txn_type if txn_type is not None else existing.type,
            }
            txn = store.update_transaction(txn_id, fields)
    except FintrackError as e:
        console.print(f"[red]Could not update transaction: {e}[/red]", style="bold")
        sys.exit(1)

    console.print("[green]✓[/green] Transaction updated:")
    print_transaction(txn, settings)
    warn_if_unsuggested(txn.category, settings)


def delete_command(txn_id: int) -> None:
    """Delete a transaction by id."""
    settings = load_settings()

    try:
        with open_store(settings.database) as store:
            txn = store.delete_transaction(txn_id)
    except FintrackError as e:
        console.print(f"[red]Could not delete transaction: {e}[/red]", style="bold")
        sys.exit(1)

    console.print(f"[green]✓[/green] Deleted transaction {txn.id}: {txn.description}")


def list_command(limit: int = 50, all: bool = False) -> None:
    """List transactions, newest first."""
    settings = load_settings()

    try:
        with open_store(settings.database) as store:
            transactions = sort_transactions_newest_first(store.list_transactions())
    except FintrackError as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)

    if not transactions:
        console.print("[yellow]No transactions found[/yellow]")
        return

    if not all:
        transactions = transactions[:limit]

    title = f"Transactions (showing all {len(transactions)})" if all else f"Transactions (showing {len(transactions)})"
    table = Table(title=title)
    table.add_column("ID", style="dim", justify="right")
    table.add_column("Date", style="cyan")
    table.add_column("Description", style="white")
    table.add_column("Category", style="magenta")
    table.add_column("Amount", justify="right")

    for txn in transactions:
        if txn.type == TransactionType.INCOME:
            amount_display = f"[green]+{format_money(txn.amount, settings.currency)}[/green]"
        else:
            amount_display = f"[red]-{format_money(txn.amount, settings.currency)}[/red]"

        table.add_row(str(txn.id), txn.date, txn.description, txn.category, amount_display)

    console.print(table)
