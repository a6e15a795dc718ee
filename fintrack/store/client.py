"""Record store client over SQLite.

The store is constructed explicitly with a database path and has an explicit
lifecycle: open() before use, close() when done (or use it as a context
manager). There is no process-wide cached connection.
"""

import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from types import TracebackType
from typing import Any

from fintrack.dates import month_of
from fintrack.domain.budget import Budget, parse_budget_fields
from fintrack.domain.models import CategoryName, Month
from fintrack.domain.report import usable_amount
from fintrack.domain.transactions import Transaction, parse_transaction_fields, parse_transaction_type
from fintrack.errors import DuplicateBudgetError, NotFoundError, StoreUnavailableError
from fintrack.store.schema import get_db_path, init_database

logger = logging.getLogger(__name__)

TRANSACTION_COLUMNS = "id, amount, date, description, category, type, created_at"
BUDGET_COLUMNS = "id, month, category, budget_amount, created_at"


def row_to_transaction(row: sqlite3.Row) -> Transaction:
    """Convert a transactions row to a Transaction, keeping unknown types as-is."""
    return Transaction(
        id=row["id"],
        amount=row["amount"],
        date=row["date"],
        description=row["description"],
        category=CategoryName(row["category"]),
        type=parse_transaction_type(row["type"]) or row["type"],
        created_at=row["created_at"],
    )


def row_to_budget(row: sqlite3.Row) -> Budget:
    """Convert a budgets row to a Budget."""
    return Budget(
        id=row["id"],
        month=Month(row["month"]),
        category=CategoryName(row["category"]),
        budget_amount=row["budget_amount"],
        created_at=row["created_at"],
    )


class RecordStore:
    """CRUD access to transactions and budgets."""

    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path
        self._conn: sqlite3.Connection | None = None

    def __enter__(self) -> "RecordStore":
        return self.open()

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    def open(self) -> "RecordStore":
        """Connect to the database, creating it and its schema if needed.

        Raises:
            StoreUnavailableError: If the database cannot be opened.
        """
        if self._conn is not None:
            return self

        conn: sqlite3.Connection | None = None
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(self.db_path)
            conn.row_factory = sqlite3.Row
            init_database(conn)
        except (sqlite3.Error, OSError) as e:
            if conn is not None:
                conn.close()
            raise StoreUnavailableError(f"Could not open database at {self.db_path}: {e}") from e

        self._conn = conn
        logger.info("Opened record store at %s", self.db_path)
        return self

    def close(self) -> None:
        """Close the connection. Closing a closed store does nothing."""
        if self._conn is None:
            return
        self._conn.close()
        self._conn = None
        logger.info("Closed record store at %s", self.db_path)

    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            raise StoreUnavailableError("Record store is not open")
        return self._conn

    def _query(self, sql: str, params: tuple[Any, ...] = ()) -> list[sqlite3.Row]:
        try:
            return self._connection().execute(sql, params).fetchall()
        except sqlite3.OperationalError as e:
            raise StoreUnavailableError(f"Database error: {e}") from e

    def _write(self, sql: str, params: tuple[Any, ...]) -> sqlite3.Cursor:
        conn = self._connection()
        try:
            cursor = conn.execute(sql, params)
            conn.commit()
            return cursor
        except sqlite3.OperationalError as e:
            conn.rollback()
            raise StoreUnavailableError(f"Database error: {e}") from e
        except sqlite3.Error:
            conn.rollback()
            raise

    # Transactions

    def list_transactions(self) -> list[Transaction]:
        """Get all transactions, newest first."""
        rows = self._query(f"SELECT {TRANSACTION_COLUMNS} FROM transactions ORDER BY date DESC, id DESC")
        transactions = [row_to_transaction(row) for row in rows]
        for txn in transactions:
            if month_of(txn.date) is None or usable_amount(txn.amount) is None:
                logger.warning("Transaction %s has a malformed date or amount and will be skipped in reports", txn.id)
        return transactions

    def get_transaction(self, txn_id: int) -> Transaction:
        """Get a single transaction.

        Raises:
            NotFoundError: If no transaction has this id.
        """
        rows = self._query(f"SELECT {TRANSACTION_COLUMNS} FROM transactions WHERE id = ?", (txn_id,))
        if not rows:
            raise NotFoundError("transaction", txn_id)
        return row_to_transaction(rows[0])

    def create_transaction(self, fields: dict[str, Any]) -> Transaction:
        """Validate and insert a transaction.

        Returns:
            The persisted transaction, including its id and created_at.

        Raises:
            ValidationError: If any field is invalid.
        """
        parsed = parse_transaction_fields(fields)
        cursor = self._write(
            "INSERT INTO transactions (amount, date, description, category, type) VALUES (?, ?, ?, ?, ?)",
            (parsed.amount, parsed.date, parsed.description, parsed.category, parsed.type.value),
        )
        txn_id = cursor.lastrowid
        logger.debug("Created transaction %s", txn_id)
        return self.get_transaction(txn_id)

    def update_transaction(self, txn_id: int, fields: dict[str, Any]) -> Transaction:
        """Replace every field of an existing transaction.

        Raises:
            ValidationError: If any field is invalid.
            NotFoundError: If no transaction has this id.
        """
        parsed = parse_transaction_fields(fields)
        cursor = self._write(
            "UPDATE transactions SET amount = ?, date = ?, description = ?, category = ?, type = ? WHERE id = ?",
            (parsed.amount, parsed.date, parsed.description, parsed.category, parsed.type.value, txn_id),
        )
        if cursor.rowcount == 0:
            raise NotFoundError("transaction", txn_id)
        logger.debug("Updated transaction %s", txn_id)
        return self.get_transaction(txn_id)

    def delete_transaction(self, txn_id: int) -> Transaction:
        """Delete a transaction.

        Returns:
            The transaction as it was before deletion.

        Raises:
            NotFoundError: If no transaction has this id.
        """
        existing = self.get_transaction(txn_id)
        self._write("DELETE FROM transactions WHERE id = ?", (txn_id,))
        logger.debug("Deleted transaction %s", txn_id)
        return existing

    # Budgets

    def list_budgets(self) -> list[Budget]:
        """Get all budgets, newest month first then by category."""
        rows = self._query(f"SELECT {BUDGET_COLUMNS} FROM budgets ORDER BY month DESC, category ASC")
        return [row_to_budget(row) for row in rows]

    def get_budget(self, budget_id: int) -> Budget:
        """Get a single budget.

        Raises:
            NotFoundError: If no budget has this id.
        """
        rows = self._query(f"SELECT {BUDGET_COLUMNS} FROM budgets WHERE id = ?", (budget_id,))
        if not rows:
            raise NotFoundError("budget", budget_id)
        return row_to_budget(rows[0])

    def create_budget(self, fields: dict[str, Any]) -> Budget:
        """Validate and insert a budget.

        Raises:
            ValidationError: If any field is invalid.
            DuplicateBudgetError: If the month already has a budget for the category.
        """
        parsed = parse_budget_fields(fields)
        try:
            cursor = self._write(
                "INSERT INTO budgets (month, category, budget_amount) VALUES (?, ?, ?)",
                (parsed.month, parsed.category, parsed.budget_amount),
            )
        except sqlite3.IntegrityError as e:
            raise DuplicateBudgetError(parsed.month, parsed.category) from e
        budget_id = cursor.lastrowid
        logger.debug("Created budget %s for %s in %s", budget_id, parsed.category, parsed.month)
        return self.get_budget(budget_id)

    def update_budget(self, budget_id: int, fields: dict[str, Any]) -> Budget:
        """Replace every field of an existing budget.

        Raises:
            ValidationError: If any field is invalid.
            DuplicateBudgetError: If another budget already covers the month and category.
            NotFoundError: If no budget has this id.
        """
        parsed = parse_budget_fields(fields)
        try:
            cursor = self._write(
                "UPDATE budgets SET month = ?, category = ?, budget_amount = ? WHERE id = ?",
                (parsed.month, parsed.category, parsed.budget_amount, budget_id),
            )
        except sqlite3.IntegrityError as e:
            raise DuplicateBudgetError(parsed.month, parsed.category) from e
        if cursor.rowcount == 0:
            raise NotFoundError("budget", budget_id)
        logger.debug("Updated budget %s", budget_id)
        return self.get_budget(budget_id)

    def delete_budget(self, budget_id: int) -> Budget:
        """Delete a budget.

        Returns:
            The budget as it was before deletion.

        Raises:
            NotFoundError: If no budget has this id.
        """
        existing = self.get_budget(budget_id)
        self._write("DELETE FROM budgets WHERE id = ?", (budget_id,))
        logger.debug("Deleted budget %s", budget_id)
        return existing


@contextmanager
def open_store(db_path: Path | None = None) -> Iterator[RecordStore]:
    """Open a record store for the duration of a block.

    Args:
        db_path: Path to the database file. If None, uses default location.
    """
    store = RecordStore(db_path if db_path is not None else get_db_path())
    store.open()
    try:
        yield store
    finally:
        store.close()
