"""Report commands: summary, monthly trend, categories, budget comparison, insights."""

import sys
from datetime import date, datetime

from rich.console import Console
from rich.table import Table

from fintrack.commands.formatting import format_money
from fintrack.config import Settings, load_settings
from fintrack.dates import current_month, is_month_key, month_display
from fintrack.domain.budget import Budget, compare_budget_to_actual
from fintrack.domain.insights import Insight, InsightKind, generate_insights
from fintrack.domain.models import Money, Month
from fintrack.domain.report import (
    aggregate_by_category,
    aggregate_monthly,
    calculate_histogram_bar_length,
    calculate_summary_totals,
)
from fintrack.domain.transactions import Transaction, TransactionType
from fintrack.errors import FintrackError
from fintrack.store.client import open_store

console = Console()

BAR_WIDTH = 30


def load_records(settings: Settings) -> tuple[list[Transaction], list[Budget]]:
    """Fetch every transaction and budget, exiting on store errors."""
    try:
        with open_store(settings.database) as store:
            return store.list_transactions(), store.list_budgets()
    except FintrackError as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)


def resolve_month(month: str | None) -> Month:
    """Validate a --month option, defaulting to the current month."""
    if month is None:
        return current_month()
    if not is_month_key(month):
        console.print("[red]Month must be in YYYY-MM format[/red]", style="bold")
        sys.exit(1)
    return Month(month)


def resolve_reference_date(as_of: str | None) -> date:
    """Validate an --as-of option, defaulting to today."""
    if as_of is None:
        return date.today()
    try:
        return datetime.strptime(as_of, "%Y-%m-%d").date()
    except ValueError:
        console.print("[red]Date must be in YYYY-MM-DD format[/red]", style="bold")
        sys.exit(1)


def describe_insight(insight: Insight, currency: str = "$") -> str:
    """Render an insight as a sentence with rich markup."""
    month_name = month_display(insight.month)

    if insight.kind == InsightKind.OVER_BUDGET:
        return (
            f"You are [bold red]over budget[/bold red] in {insight.category} by "
            f"{format_money(insight.amount or Money(0), currency)}. Consider reviewing spending in this area."
        )
    if insight.kind == InsightKind.UNDER_BUDGET:
        return (
            f"Great job! You are [bold green]under budget[/bold green] in {insight.category} by "
            f"{format_money(insight.amount or Money(0), currency)}."
        )
    if insight.kind == InsightKind.ON_TRACK:
        return f"You are currently [bold]on track[/bold] with your budgets for {month_name}. Keep it up!"
    if insight.kind == InsightKind.NO_BUDGETS:
        return f"No budgets set for {month_name}. Set some budgets to get personalized insights!"
    if insight.kind in (InsightKind.SPENDING_INCREASE, InsightKind.SPENDING_DECREASE):
        direction = "increased" if insight.kind == InsightKind.SPENDING_INCREASE else "decreased"
        change = abs(insight.percent_change or 0.0)
        return (
            f"Your spending in [bold]{insight.category}[/bold] has {direction} by "
            f"[bold]{change:.0f}%[/bold] compared to last month."
        )
    if insight.kind == InsightKind.STABLE_SPENDING:
        return "Your spending patterns are relatively stable compared to last month."
    return "Not enough data for insights yet. Add transactions and budgets to get started."


def summary_command() -> None:
    """Show total income, total expenses and net balance."""
    settings = load_settings()
    transactions, _ = load_records(settings)

    totals = calculate_summary_totals(transactions)

    console.print(f"[bold green]Total income:[/bold green]   {format_money(totals.total_income, settings.currency)}")
    console.print(f"[bold red]Total expenses:[/bold red] {format_money(totals.total_expenses, settings.currency)}")

    net_style = "green" if totals.net_balance >= 0 else "red"
    console.print(
        f"[bold cyan]Net balance:[/bold cyan]    [{net_style}]"
        f"{format_money(totals.net_balance, settings.currency)}[/{net_style}]"
    )


def monthly_command(expenses_only: bool = False, histogram: bool = True) -> None:
    """Show totals per calendar month, oldest first."""
    settings = load_settings()
    transactions, _ = load_records(settings)

    points = aggregate_monthly(transactions, TransactionType.EXPENSE if expenses_only else None)

    if not points:
        console.print("[dim]No monthly data available yet[/dim]")
        return

    title = "Monthly expenses" if expenses_only else "Monthly totals"
    console.print(f"[bold cyan]{title}[/bold cyan]\n")

    max_amount = Money(max(abs(point.total_expense) for point in points))
    for point in points:
        amount_display = format_money(point.total_expense, settings.currency)
        if histogram:
            bar = "█" * calculate_histogram_bar_length(point.total_expense, max_amount, BAR_WIDTH)
            console.print(f"  {point.month_label:10} {amount_display:>14} {bar}")
        else:
            console.print(f"  {point.month_label}: {amount_display}")


def categories_command(month: str | None = None, all: bool = False, sort_by: str = "value") -> None:
    """Show expenses by category for a month or for all time."""
    settings = load_settings()

    if sort_by not in ("value", "alpha"):
        console.print("[red]Sort must be 'value' or 'alpha'[/red]", style="bold")
        sys.exit(1)

    target_month = None if all else resolve_month(month)
    transactions, _ = load_records(settings)

    slices = aggregate_by_category(transactions, target_month, sort_by)
    period = "All Time" if target_month is None else month_display(target_month)

    if not slices:
        console.print(f"[dim]No expense data available for {period}[/dim]")
        return

    console.print(f"[bold cyan]{period}[/bold cyan]\n")
    console.print("[bold red]Expenses by category:[/bold red]\n")

    max_amount = Money(max(s.total_amount for s in slices))
    total = Money(sum(s.total_amount for s in slices))
    for cat_slice in slices:
        amount_display = format_money(cat_slice.total_amount, settings.currency)
        share = cat_slice.total_amount / total * 100 if total else 0
        bar = "█" * calculate_histogram_bar_length(cat_slice.total_amount, max_amount, BAR_WIDTH)
        console.print(f"  {cat_slice.category:20} {amount_display:>14} {share:5.1f}% {bar}")

    console.print(f"\n  [bold]Total expenses:[/bold] {format_money(total, settings.currency)}")


def compare_command(month: str | None = None) -> None:
    """Show budgeted vs actual spending per category for a month."""
    settings = load_settings()
    target_month = resolve_month(month)
    transactions, budgets = load_records(settings)

    rows = compare_budget_to_actual(transactions, budgets, target_month)

    if not rows:
        console.print(f"[yellow]No budget or expense data for {month_display(target_month)}[/yellow]")
        return

    table = Table(title=f"Budget vs Actual - {month_display(target_month)}")
    table.add_column("Category", style="white")
    table.add_column("Budgeted", justify="right")
    table.add_column("Actual", justify="right")
    table.add_column("Difference", justify="right")

    for row in rows:
        if row.is_over_budget:
            difference_display = f"[red]{format_money(row.difference, settings.currency)}[/red]"
        elif row.budgeted == 0:
            difference_display = "[dim]not tracked[/dim]"
        else:
            difference_display = f"[green]{format_money(row.difference, settings.currency)}[/green]"

        table.add_row(
            row.category,
            format_money(row.budgeted, settings.currency),
            format_money(row.actual, settings.currency),
            difference_display,
        )

    console.print(table)


def insights_command(as_of: str | None = None) -> None:
    """Show spending insights for the current month."""
    settings = load_settings()
    today = resolve_reference_date(as_of)
    transactions, budgets = load_records(settings)

    insights = generate_insights(transactions, budgets, today)

    console.print(f"[bold cyan]Spending insights - {month_display(current_month(today))}[/bold cyan]\n")
    for insight in insights:
        console.print(f"  • {describe_insight(insight, settings.currency)}")
