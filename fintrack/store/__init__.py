"""Database store layer - provides persistence for the application.

This module re-exports the record store client and schema helpers for easy importing.
"""

from fintrack.store.client import RecordStore, open_store
from fintrack.store.schema import database_exists, get_db_path, init_database

__all__ = [
    # Client
    "RecordStore",
    "open_store",
    # Schema
    "database_exists",
    "get_db_path",
    "init_database",
]
