"""Pure functions deriving spending insights from transactions and budgets.

Insights compare the reference month against its budgets and against the
previous month. The reference date is always a parameter so results are
reproducible; callers pass date.today() at the edge.

All monetary amounts are in cents (Money type).
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from enum import Enum

from fintrack.dates import current_month, previous_month
from fintrack.domain.budget import Budget, budgets_for_month
from fintrack.domain.models import CategoryName, Money, Month
from fintrack.domain.report import category_sort_key, expenses_by_category
from fintrack.domain.transactions import Transaction

# Month-over-month change (in percent) that counts as significant
SIGNIFICANT_CHANGE_PERCENT = 20.0


class InsightKind(str, Enum):
    """Kinds of finding the insight generator can produce."""

    OVER_BUDGET = "over_budget"
    UNDER_BUDGET = "under_budget"
    ON_TRACK = "on_track"
    NO_BUDGETS = "no_budgets"
    SPENDING_INCREASE = "spending_increase"
    SPENDING_DECREASE = "spending_decrease"
    STABLE_SPENDING = "stable_spending"
    INSUFFICIENT_DATA = "insufficient_data"


@dataclass(frozen=True)
class Insight:
    """Immutable qualitative finding.

    amount carries the overage (over budget) or margin (under budget);
    percent_change is set for spending increase/decrease findings.
    """

    kind: InsightKind
    month: Month
    category: CategoryName | None = None
    amount: Money | None = None
    percent_change: float | None = None


def calculate_percent_change(previous: Money, current: Money) -> float:
    """Calculate month-over-month change in percent.

    Args:
        previous: Previous month total in cents.
        current: Current month total in cents.

    Returns:
        Percentage change; 100 when spending appears from nothing, 0 when
        both months are empty.
    """
    if previous > 0:
        return (current - previous) / previous * 100
    return 100.0 if current > 0 else 0.0


def find_budget_variances(
    budgets: dict[CategoryName, Money],
    actuals: dict[CategoryName, Money],
    month: Month,
) -> tuple[list[Insight], list[Insight]]:
    """Split budgeted categories into over-budget and under-budget findings.

    Zero budgets mean "not tracked" and produce neither finding.

    Returns:
        Tuple of (over_budget, under_budget), each sorted largest first.
    """
    over: list[Insight] = []
    under: list[Insight] = []

    for category, budgeted in budgets.items():
        if budgeted <= 0:
            continue
        actual = actuals.get(category, Money(0))
        if actual > budgeted:
            over.append(
                Insight(InsightKind.OVER_BUDGET, month, category=category, amount=Money(actual - budgeted))
            )
        elif actual < budgeted:
            under.append(
                Insight(InsightKind.UNDER_BUDGET, month, category=category, amount=Money(budgeted - actual))
            )

    over.sort(key=lambda i: (-(i.amount or 0), category_sort_key(i.category or "")))
    under.sort(key=lambda i: (-(i.amount or 0), category_sort_key(i.category or "")))
    return over, under


def find_significant_changes(
    current: dict[CategoryName, Money],
    previous: dict[CategoryName, Money],
    month: Month,
) -> list[Insight]:
    """Find categories whose spending moved by more than the threshold.

    Returns:
        Increase/decrease findings sorted by absolute change, largest first.
    """
    changes: list[Insight] = []

    for category in set(current) | set(previous):
        change = calculate_percent_change(previous.get(category, Money(0)), current.get(category, Money(0)))
        if change > SIGNIFICANT_CHANGE_PERCENT:
            kind = InsightKind.SPENDING_INCREASE
        elif change < -SIGNIFICANT_CHANGE_PERCENT:
            kind = InsightKind.SPENDING_DECREASE
        else:
            continue
        changes.append(Insight(kind, month, category=category, percent_change=change))

    changes.sort(key=lambda i: (-abs(i.percent_change or 0.0), category_sort_key(i.category or "")))
    return changes


def generate_insights(
    transactions: Iterable[Transaction],
    budgets: Iterable[Budget],
    today: date | None = None,
) -> list[Insight]:
    """Generate spending insights for the month containing today.

    Args:
        transactions: All transactions.
        budgets: All budgets.
        today: Reference date. If None, uses the system clock.

    Returns:
        Budget findings (over, under, or a single on-track/no-budgets fact)
        followed by trend findings (significant changes or a single stable
        fact). A single INSUFFICIENT_DATA insight is returned when the month
        has no budgets and neither month has expenses.
    """
    transactions = list(transactions)
    month = current_month(today)
    last_month = previous_month(month)

    current_expenses = expenses_by_category(transactions, month)
    previous_expenses = expenses_by_category(transactions, last_month)
    month_budgets = budgets_for_month(budgets, month)

    if not month_budgets and not current_expenses and not previous_expenses:
        return [Insight(InsightKind.INSUFFICIENT_DATA, month)]

    insights: list[Insight] = []

    if month_budgets:
        over, under = find_budget_variances(month_budgets, current_expenses, month)
        insights.extend(over)
        insights.extend(under)
        if not over and not under:
            insights.append(Insight(InsightKind.ON_TRACK, month))
    else:
        insights.append(Insight(InsightKind.NO_BUDGETS, month))

    changes = find_significant_changes(current_expenses, previous_expenses, month)
    if changes:
        insights.extend(changes)
    elif current_expenses and previous_expenses:
        insights.append(Insight(InsightKind.STABLE_SPENDING, month))

    return insights
