"""Pure functions for report calculations and aggregations.

This module contains the functional core for reporting operations:
- No I/O operations (no database, no console, no files)
- No side effects
- Pure data transformations
- Easy to test

Records with malformed dates or amounts are skipped rather than aborting the
whole aggregation, since stored data may predate current validation.

All monetary amounts are in cents (Money type).
"""

import math
from collections.abc import Iterable
from dataclasses import dataclass

from fintrack.dates import month_label, month_of, parse_month_label
from fintrack.domain.models import UNCATEGORIZED, CategoryName, Money, Month
from fintrack.domain.transactions import Transaction, TransactionType

SORT_OPTIONS = ("value", "alpha")


@dataclass(frozen=True)
class MonthlyExpensePoint:
    """Immutable total for one calendar month."""

    month_label: str
    total_expense: Money


@dataclass(frozen=True)
class CategorySlice:
    """Immutable expense total for one category."""

    category: CategoryName
    total_amount: Money


@dataclass(frozen=True)
class SummaryTotals:
    """Immutable income, expense and net totals."""

    total_income: Money
    total_expenses: Money
    net_balance: Money


def usable_amount(amount: object) -> Money | None:
    """Return a stored amount if it is a finite number, else None."""
    if isinstance(amount, bool):
        return None
    if isinstance(amount, int):
        return Money(amount)
    if isinstance(amount, float) and math.isfinite(amount):
        return Money(amount)  # type: ignore[arg-type]
    return None


def normalize_category(category: object) -> CategoryName:
    """Map missing or blank categories to the Uncategorized bucket."""
    if not isinstance(category, str) or not category.strip():
        return UNCATEGORIZED
    return CategoryName(category)


def category_sort_key(category: str) -> tuple[str, str]:
    """Sort key approximating locale-aware ordering (case-insensitive first)."""
    return category.casefold(), category


def aggregate_monthly(
    transactions: Iterable[Transaction],
    transaction_type: TransactionType | None = None,
) -> list[MonthlyExpensePoint]:
    """Total transaction amounts per calendar month.

    Args:
        transactions: Transactions to aggregate.
        transaction_type: Optional type filter. When None every transaction
            contributes, income included.

    Returns:
        One point per month present, ordered by calendar time.
    """
    totals: dict[str, Money] = {}

    for txn in transactions:
        if transaction_type is not None and txn.type != transaction_type:
            continue
        month = month_of(txn.date)
        amount = usable_amount(txn.amount)
        if month is None or amount is None:
            continue
        label = month_label(month)
        totals[label] = Money(totals.get(label, 0) + amount)

    ordered = sorted(totals.items(), key=lambda item: parse_month_label(item[0]))
    return [MonthlyExpensePoint(month_label=label, total_expense=total) for label, total in ordered]


def expenses_by_category(
    transactions: Iterable[Transaction],
    month: Month | None = None,
) -> dict[CategoryName, Money]:
    """Sum positive expense amounts per category.

    Args:
        transactions: Transactions to aggregate.
        month: Optional YYYY-MM filter. When None all months are included.

    Returns:
        Dictionary mapping category names to totals in cents.
    """
    totals: dict[CategoryName, Money] = {}

    for txn in transactions:
        if txn.type != TransactionType.EXPENSE:
            continue
        amount = usable_amount(txn.amount)
        if amount is None or amount <= 0:
            continue
        if month is not None and month_of(txn.date) != month:
            continue
        category = normalize_category(txn.category)
        totals[category] = Money(totals.get(category, 0) + amount)

    return totals


def sort_category_totals(
    totals: dict[CategoryName, Money],
    sort_by: str = "value",
) -> list[tuple[CategoryName, Money]]:
    """Sort category totals by value or alphabetically.

    Args:
        totals: Dictionary of category totals.
        sort_by: "value" (largest first) or "alpha" (by category name).

    Returns:
        Sorted list of (category, total) tuples.

    Raises:
        ValueError: If sort_by is not a known option.
    """
    if sort_by == "alpha":
        return sorted(totals.items(), key=lambda x: category_sort_key(x[0]))
    if sort_by == "value":
        return sorted(totals.items(), key=lambda x: (-x[1], category_sort_key(x[0])))
    raise ValueError(f"sort_by must be one of {', '.join(SORT_OPTIONS)}")


def aggregate_by_category(
    transactions: Iterable[Transaction],
    month: Month | None = None,
    sort_by: str = "value",
) -> list[CategorySlice]:
    """Create the category breakdown of expenses.

    Args:
        transactions: Transactions to aggregate.
        month: Optional YYYY-MM filter.
        sort_by: "value" for the breakdown view, "alpha" for comparisons.

    Returns:
        One slice per category with a positive expense total.
    """
    totals = expenses_by_category(transactions, month)
    return [
        CategorySlice(category=category, total_amount=total)
        for category, total in sort_category_totals(totals, sort_by)
    ]


def calculate_summary_totals(transactions: Iterable[Transaction]) -> SummaryTotals:
    """Calculate total income, total expenses and net balance."""
    income = 0
    expenses = 0

    for txn in transactions:
        amount = usable_amount(txn.amount)
        if amount is None:
            continue
        if txn.type == TransactionType.INCOME:
            income += amount
        elif txn.type == TransactionType.EXPENSE:
            expenses += amount

    return SummaryTotals(
        total_income=Money(income),
        total_expenses=Money(expenses),
        net_balance=Money(income - expenses),
    )


def calculate_histogram_bar_length(
    amount: Money,
    max_amount: Money,
    bar_width: int,
) -> int:
    """Calculate histogram bar length.

    Args:
        amount: Amount to display.
        max_amount: Maximum amount in dataset.
        bar_width: Maximum bar width in characters.

    Returns:
        Bar length in characters.
    """
    if max_amount <= 0:
        return 0
    return int((abs(amount) / max_amount) * bar_width)
