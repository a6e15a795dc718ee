"""Database schema initialization and migrations."""

import os
import sqlite3
from pathlib import Path


def get_xdg_data_home() -> Path:
    """Get XDG data directory, with fallback to ~/.local/share."""
    xdg_data = os.environ.get("XDG_DATA_HOME")
    if xdg_data:
        return Path(xdg_data)
    return Path.home() / ".local" / "share"


def get_db_path() -> Path:
    """Get the default database path (XDG compliant)."""
    return get_xdg_data_home() / "fintrack" / "fintrack.db"


def database_exists(db_path: Path | None = None) -> bool:
    """Check if the database file exists.

    Args:
        db_path: Path to check. If None, uses default location.

    Returns:
        True if database exists, False otherwise.
    """
    if db_path is None:
        db_path = get_db_path()
    return db_path.exists()


def init_database(conn: sqlite3.Connection) -> None:
    """Create the required tables and indexes on an open connection.

    Safe to run on every open; existing tables are left untouched.

    Args:
        conn: Open database connection.

    Raises:
        sqlite3.Error: If database initialization fails.
    """
    cursor = conn.cursor()

    try:
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS transactions (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                amount INTEGER NOT NULL,
                date TEXT NOT NULL,
                description TEXT NOT NULL,
                category TEXT NOT NULL,
                type TEXT NOT NULL,
                created_at TEXT NOT NULL DEFAULT (datetime('now'))
            )
        """
        )

        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS budgets (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                month TEXT NOT NULL,
                category TEXT NOT NULL,
                budget_amount INTEGER NOT NULL,
                created_at TEXT NOT NULL DEFAULT (datetime('now')),
                UNIQUE (month, category)
            )
        """
        )

        cursor.execute("CREATE INDEX IF NOT EXISTS idx_txn_date ON transactions(date)")
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_budget_month ON budgets(month)")

        conn.commit()

    except sqlite3.Error:
        conn.rollback()
        raise
