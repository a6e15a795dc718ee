"""Pure functions for budget records and budget-vs-actual comparison.

This module contains the functional core for budget operations:
- No I/O operations (no database, no console, no files)
- No side effects
- Pure data transformations
- Easy to test

All monetary amounts are in cents (Money type).
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from typing import Any

from fintrack.dates import current_month, is_month_key
from fintrack.domain.models import CategoryName, Money, Month
from fintrack.domain.report import category_sort_key, expenses_by_category, usable_amount
from fintrack.domain.transactions import Transaction
from fintrack.domain.validation import check_amount, check_text, is_missing, to_money
from fintrack.errors import ValidationError


@dataclass(frozen=True)
class Budget:
    """Immutable persisted budget for one category in one month."""

    id: int
    month: Month
    category: CategoryName
    budget_amount: Money
    created_at: str = ""


@dataclass(frozen=True)
class BudgetFields:
    """Validated budget fields ready for persistence."""

    month: Month
    category: CategoryName
    budget_amount: Money


@dataclass(frozen=True)
class BudgetComparisonRow:
    """Immutable budgeted vs actual spending for a category."""

    category: CategoryName
    budgeted: Money
    actual: Money
    difference: Money  # budgeted - actual, negative when overspent
    is_over_budget: bool


def parse_budget_fields(fields: dict[str, Any]) -> BudgetFields:
    """Validate raw budget fields.

    Args:
        fields: Mapping with month (YYYY-MM), category and budgetAmount
            (major units). budget_amount is accepted as an alias.

    Returns:
        BudgetFields with the amount converted to cents.

    Raises:
        ValidationError: Listing every violated field.
    """
    errors: list[str] = []

    month = fields.get("month")
    if is_missing(month):
        errors.append("month is required")
    elif not is_month_key(month):
        errors.append("month must be in YYYY-MM format")

    category = fields.get("category")
    category_error = check_text("category", category)
    if category_error:
        errors.append(category_error)

    amount = fields.get("budgetAmount", fields.get("budget_amount"))
    amount_error = check_amount("budgetAmount", amount, allow_zero=True)
    if amount_error:
        errors.append(amount_error)

    if errors:
        raise ValidationError(errors)

    return BudgetFields(
        month=Month(month),
        category=CategoryName(category.strip()),
        budget_amount=to_money(amount),
    )


def budgets_for_month(budgets: Iterable[Budget], month: Month) -> dict[CategoryName, Money]:
    """Build the category to budgeted amount mapping for a month.

    Args:
        budgets: All budgets.
        month: Month in YYYY-MM format.

    Returns:
        Dictionary mapping category names to budget amounts in cents.
    """
    mapping: dict[CategoryName, Money] = {}
    for budget in budgets:
        if budget.month != month:
            continue
        amount = usable_amount(budget.budget_amount)
        if amount is None:
            continue
        mapping[budget.category] = amount
    return mapping


def is_over_budget(budgeted: Money, actual: Money) -> bool:
    """Check whether spending exceeds a tracked budget.

    A budget of zero means the category is not tracked, so it is never
    reported as over budget.
    """
    return actual > budgeted and budgeted > 0


def compare_budget_to_actual(
    transactions: Iterable[Transaction],
    budgets: Iterable[Budget],
    month: Month | None = None,
    today: date | None = None,
) -> list[BudgetComparisonRow]:
    """Compare budgeted amounts against actual expenses for a month.

    Args:
        transactions: All transactions.
        budgets: All budgets.
        month: Month in YYYY-MM format. Defaults to the month of today.
        today: Reference date. If None, uses the system clock.

    Returns:
        One row per category budgeted or spent in the month, sorted by
        category name. Empty when the month has neither.
    """
    if month is None:
        month = current_month(today)

    budget_map = budgets_for_month(budgets, month)
    actual_map = expenses_by_category(transactions, month)

    rows: list[BudgetComparisonRow] = []
    for category in set(budget_map) | set(actual_map):
        budgeted = budget_map.get(category, Money(0))
        actual = actual_map.get(category, Money(0))
        rows.append(
            BudgetComparisonRow(
                category=category,
                budgeted=budgeted,
                actual=actual,
                difference=Money(budgeted - actual),
                is_over_budget=is_over_budget(budgeted, actual),
            )
        )

    return sorted(rows, key=lambda row: category_sort_key(row.category))


def sort_budgets(budgets: Iterable[Budget]) -> list[Budget]:
    """Order budgets by month (newest first), then category name."""
    by_category = sorted(budgets, key=lambda b: category_sort_key(b.category))
    return sorted(by_category, key=lambda b: b.month, reverse=True)
