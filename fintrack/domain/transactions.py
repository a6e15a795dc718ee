"""Pure functions for transaction records and field validation.

This module contains the functional core for transaction operations:
- No I/O operations (no database, no console, no files)
- No side effects
- Pure data transformations
- Easy to test

All monetary amounts are in cents (Money type).
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any

import pandas as pd

from fintrack.domain.models import CategoryName, Money
from fintrack.domain.validation import check_amount, check_text, is_missing, to_money
from fintrack.errors import ValidationError

DESCRIPTION_MIN_LENGTH = 2
DESCRIPTION_MAX_LENGTH = 50

SUGGESTED_CATEGORIES: list[str] = [
    "Groceries",
    "Rent",
    "Utilities",
    "Transportation",
    "F&B",
    "Entertainment",
    "Salary",
    "Freelance",
    "Investments",
    "Other Income",
    "Health",
    "Education",
    "Shopping",
    "Miscellaneous",
]


class TransactionType(str, Enum):
    """Direction of a transaction."""

    EXPENSE = "expense"
    INCOME = "income"


@dataclass(frozen=True)
class Transaction:
    """Immutable persisted transaction."""

    id: int
    amount: Money
    date: str
    description: str
    category: CategoryName
    type: TransactionType
    created_at: str = ""


@dataclass(frozen=True)
class TransactionFields:
    """Validated transaction fields ready for persistence."""

    amount: Money
    date: str
    description: str
    category: CategoryName
    type: TransactionType


def normalize_date(raw_date: Any) -> str:
    """Normalize a date value to ISO format (YYYY-MM-DD).

    Uses pandas.to_datetime so typed dates, ISO strings and the other
    common formats are all accepted.

    Args:
        raw_date: Date string, date or datetime.

    Returns:
        Normalized date in YYYY-MM-DD format.

    Raises:
        ValueError: If date cannot be parsed.
    """
    if not isinstance(raw_date, (str, date)):
        raise ValueError(f"Could not parse date '{raw_date}'")
    try:
        parsed_date = pd.to_datetime(raw_date)
    except (ValueError, TypeError, OverflowError, pd.errors.ParserError) as e:
        raise ValueError(f"Could not parse date '{raw_date}': {e}") from e
    if pd.isna(parsed_date):
        raise ValueError(f"Could not parse date '{raw_date}'")
    return parsed_date.strftime("%Y-%m-%d")


def parse_transaction_type(value: Any) -> TransactionType | None:
    """Interpret a transaction type value, or None if it is not recognised."""
    if isinstance(value, TransactionType):
        return value
    try:
        return TransactionType(value)
    except ValueError:
        return None


def parse_transaction_fields(fields: dict[str, Any]) -> TransactionFields:
    """Validate raw transaction fields.

    Args:
        fields: Mapping with amount (major units), date, description,
            category and type.

    Returns:
        TransactionFields with amount converted to cents and date normalized.

    Raises:
        ValidationError: Listing every violated field.
    """
    errors: list[str] = []

    amount = fields.get("amount")
    amount_error = check_amount("amount", amount, allow_zero=False)
    if amount_error:
        errors.append(amount_error)

    normalized_date = ""
    raw_date = fields.get("date")
    if is_missing(raw_date):
        errors.append("date is required")
    else:
        try:
            normalized_date = normalize_date(raw_date)
        except ValueError:
            errors.append("date is not a valid date")

    description = fields.get("description")
    description_error = check_text("description", description)
    if description_error:
        errors.append(description_error)
    else:
        description = description.strip()
        if not DESCRIPTION_MIN_LENGTH <= len(description) <= DESCRIPTION_MAX_LENGTH:
            errors.append(
                f"description must be between {DESCRIPTION_MIN_LENGTH} and {DESCRIPTION_MAX_LENGTH} characters"
            )

    category = fields.get("category")
    category_error = check_text("category", category)
    if category_error:
        errors.append(category_error)

    txn_type = None
    if is_missing(fields.get("type")):
        errors.append("type is required")
    else:
        txn_type = parse_transaction_type(fields.get("type"))
        if txn_type is None:
            errors.append('type must be "expense" or "income"')

    if errors:
        raise ValidationError(errors)

    return TransactionFields(
        amount=to_money(amount),
        date=normalized_date,
        description=description,
        category=CategoryName(category.strip()),
        type=txn_type,
    )


def is_suggested_category(category: str, palette: list[str] | None = None) -> bool:
    """Check whether a category is part of the suggested palette.

    Categories outside the palette are still valid; this only drives hints.
    """
    if palette is None:
        palette = SUGGESTED_CATEGORIES
    return category.strip().casefold() in {name.casefold() for name in palette}


def sort_transactions_newest_first(transactions: list[Transaction]) -> list[Transaction]:
    """Order transactions by date descending, newest id first within a day."""
    return sorted(transactions, key=lambda t: (t.date, t.id), reverse=True)
