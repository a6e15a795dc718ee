"""Tests for the SQLite record store."""

import logging
import sqlite3
from pathlib import Path

import pytest

from fintrack.domain.transactions import TransactionType
from fintrack.errors import DuplicateBudgetError, NotFoundError, StoreUnavailableError, ValidationError
from fintrack.store.client import RecordStore, open_store
from fintrack.store.schema import database_exists


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "data" / "fintrack.db"


@pytest.fixture
def store(db_path: Path):
    with RecordStore(db_path) as record_store:
        yield record_store


def txn_fields(**overrides: object) -> dict[str, object]:
    fields: dict[str, object] = {
        "amount": 150,
        "date": "2024-01-10",
        "description": "January rent",
        "category": "Rent",
        "type": "expense",
    }
    fields.update(overrides)
    return fields


class TestLifecycle:
    """Tests for opening and closing the store."""

    def test_open_creates_database(self, db_path: Path) -> None:
        """Should create the database file and parent directories."""
        assert not database_exists(db_path)

        with RecordStore(db_path) as store:
            assert store.is_open

        assert database_exists(db_path)
        assert not store.is_open

    def test_close_twice_is_harmless(self, db_path: Path) -> None:
        """Should allow closing an already closed store."""
        store = RecordStore(db_path).open()
        store.close()
        store.close()

        assert not store.is_open

    def test_use_before_open(self, db_path: Path) -> None:
        """Should raise StoreUnavailableError when the store is not open."""
        with pytest.raises(StoreUnavailableError):
            RecordStore(db_path).list_transactions()

    def test_unreachable_path(self, tmp_path: Path) -> None:
        """Should raise StoreUnavailableError when the database cannot be created."""
        blocker = tmp_path / "not-a-directory"
        blocker.write_text("")

        with pytest.raises(StoreUnavailableError):
            RecordStore(blocker / "fintrack.db").open()

    def test_failed_schema_setup_closes_connection(self, db_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should close the new connection when creating the schema fails."""
        opened: list[sqlite3.Connection] = []
        real_connect = sqlite3.connect

        def recording_connect(*args: object, **kwargs: object) -> sqlite3.Connection:
            conn = real_connect(*args, **kwargs)
            opened.append(conn)
            return conn

        def failing_init(conn: sqlite3.Connection) -> None:
            raise sqlite3.OperationalError("disk I/O error")

        monkeypatch.setattr(sqlite3, "connect", recording_connect)
        monkeypatch.setattr("fintrack.store.client.init_database", failing_init)

        store = RecordStore(db_path)
        with pytest.raises(StoreUnavailableError):
            store.open()

        assert not store.is_open
        assert len(opened) == 1
        with pytest.raises(sqlite3.ProgrammingError):
            opened[0].execute("SELECT 1")

    def test_open_store_context_manager(self, db_path: Path) -> None:
        """Should open and close the store around a block."""
        with open_store(db_path) as store:
            store.create_transaction(txn_fields())

        with open_store(db_path) as store:
            assert len(store.list_transactions()) == 1


class TestTransactions:
    """Tests for transaction CRUD."""

    def test_create_assigns_id_and_created_at(self, store: RecordStore) -> None:
        """Should persist the transaction with its server-assigned fields."""
        txn = store.create_transaction(txn_fields(amount=12.34))

        assert txn.id > 0
        assert txn.created_at
        assert txn.amount == 1234
        assert txn.type is TransactionType.EXPENSE
        assert store.get_transaction(txn.id) == txn

    def test_create_rejects_invalid_fields(self, store: RecordStore) -> None:
        """Should not persist anything when validation fails."""
        with pytest.raises(ValidationError):
            store.create_transaction(txn_fields(amount=-1))

        assert store.list_transactions() == []

    def test_create_rejects_oversized_amount(self, store: RecordStore) -> None:
        """Should raise ValidationError instead of overflowing the INTEGER column."""
        with pytest.raises(ValidationError, match="amount is too large"):
            store.create_transaction(txn_fields(amount=1e17))

        assert store.list_transactions() == []

    def test_update_rejects_oversized_amount(self, store: RecordStore) -> None:
        """Should leave the stored transaction unchanged when the new amount is too large."""
        txn = store.create_transaction(txn_fields())

        with pytest.raises(ValidationError):
            store.update_transaction(txn.id, txn_fields(amount=1e30))

        assert store.get_transaction(txn.id) == txn

    def test_list_newest_first(self, store: RecordStore) -> None:
        """Should list transactions by date descending."""
        store.create_transaction(txn_fields(date="2024-01-01"))
        store.create_transaction(txn_fields(date="2024-03-01"))
        store.create_transaction(txn_fields(date="2024-02-01"))

        assert [t.date for t in store.list_transactions()] == ["2024-03-01", "2024-02-01", "2024-01-01"]

    def test_update_replaces_fields(self, store: RecordStore) -> None:
        """Should replace every field but keep id and created_at."""
        txn = store.create_transaction(txn_fields())

        updated = store.update_transaction(
            txn.id, txn_fields(amount=2500, description="Salary", category="Salary", type="income")
        )

        assert updated.id == txn.id
        assert updated.created_at == txn.created_at
        assert updated.amount == 250000
        assert updated.type is TransactionType.INCOME
        assert updated.category == "Salary"

    def test_update_missing(self, store: RecordStore) -> None:
        """Should raise NotFoundError for an unknown id."""
        with pytest.raises(NotFoundError, match="Transaction 999 not found"):
            store.update_transaction(999, txn_fields())

    def test_delete_returns_previous_record(self, store: RecordStore) -> None:
        """Should return the deleted transaction and remove it."""
        txn = store.create_transaction(txn_fields())

        deleted = store.delete_transaction(txn.id)

        assert deleted == txn
        assert store.list_transactions() == []
        with pytest.raises(NotFoundError):
            store.get_transaction(txn.id)

    def test_delete_missing(self, store: RecordStore) -> None:
        """Should raise NotFoundError when deleting an unknown id."""
        with pytest.raises(NotFoundError):
            store.delete_transaction(42)

    def test_malformed_rows_are_logged(
        self, store: RecordStore, db_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Should return malformed rows but warn about them."""
        conn = sqlite3.connect(db_path)
        conn.execute(
            "INSERT INTO transactions (amount, date, description, category, type) VALUES (?, ?, ?, ?, ?)",
            (100, "garbage", "Imported", "Rent", "expense"),
        )
        conn.commit()
        conn.close()

        with caplog.at_level(logging.WARNING, logger="fintrack.store.client"):
            transactions = store.list_transactions()

        assert len(transactions) == 1
        assert "malformed" in caplog.text


class TestBudgets:
    """Tests for budget CRUD."""

    def test_create_and_get(self, store: RecordStore) -> None:
        """Should persist a budget with its amount in cents."""
        budget = store.create_budget({"month": "2024-01", "category": "Rent", "budgetAmount": 1200})

        assert budget.budget_amount == 120000
        assert budget.created_at
        assert store.get_budget(budget.id) == budget

    def test_duplicate_month_and_category(self, store: RecordStore) -> None:
        """Should reject a second budget for the same month and category."""
        store.create_budget({"month": "2024-01", "category": "Rent", "budgetAmount": 1200})

        with pytest.raises(DuplicateBudgetError, match="A budget for Rent in 2024-01 already exists"):
            store.create_budget({"month": "2024-01", "category": "Rent", "budgetAmount": 900})

        assert len(store.list_budgets()) == 1

    def test_create_budget_rejects_oversized_amount(self, store: RecordStore) -> None:
        """Should raise ValidationError for budgets too large to store."""
        with pytest.raises(ValidationError, match="budgetAmount is too large"):
            store.create_budget({"month": "2024-01", "category": "Rent", "budgetAmount": 1e17})

        assert store.list_budgets() == []

    def test_same_category_other_month(self, store: RecordStore) -> None:
        """Should allow the same category in different months."""
        store.create_budget({"month": "2024-01", "category": "Rent", "budgetAmount": 1200})
        store.create_budget({"month": "2024-02", "category": "Rent", "budgetAmount": 1200})

        assert [b.month for b in store.list_budgets()] == ["2024-02", "2024-01"]

    def test_update_into_existing_pair(self, store: RecordStore) -> None:
        """Should reject an update that collides with another budget."""
        store.create_budget({"month": "2024-01", "category": "Rent", "budgetAmount": 1200})
        other = store.create_budget({"month": "2024-01", "category": "Health", "budgetAmount": 50})

        with pytest.raises(DuplicateBudgetError):
            store.update_budget(other.id, {"month": "2024-01", "category": "Rent", "budgetAmount": 50})

        assert store.get_budget(other.id).category == "Health"

    def test_update_amount(self, store: RecordStore) -> None:
        """Should update a budget in place."""
        budget = store.create_budget({"month": "2024-01", "category": "Rent", "budgetAmount": 1200})

        updated = store.update_budget(budget.id, {"month": "2024-01", "category": "Rent", "budgetAmount": 0})

        assert updated.budget_amount == 0
        assert updated.id == budget.id

    def test_update_missing(self, store: RecordStore) -> None:
        """Should raise NotFoundError for an unknown id."""
        with pytest.raises(NotFoundError, match="Budget 7 not found"):
            store.update_budget(7, {"month": "2024-01", "category": "Rent", "budgetAmount": 1})

    def test_delete(self, store: RecordStore) -> None:
        """Should return the deleted budget and allow recreating the pair."""
        budget = store.create_budget({"month": "2024-01", "category": "Rent", "budgetAmount": 1200})

        assert store.delete_budget(budget.id) == budget
        store.create_budget({"month": "2024-01", "category": "Rent", "budgetAmount": 1000})
        assert len(store.list_budgets()) == 1

    def test_list_sorted(self, store: RecordStore) -> None:
        """Should list newest month first, then category ascending."""
        store.create_budget({"month": "2024-01", "category": "Rent", "budgetAmount": 1})
        store.create_budget({"month": "2024-02", "category": "Rent", "budgetAmount": 1})
        store.create_budget({"month": "2024-02", "category": "Groceries", "budgetAmount": 1})

        assert [(b.month, b.category) for b in store.list_budgets()] == [
            ("2024-02", "Groceries"),
            ("2024-02", "Rent"),
            ("2024-01", "Rent"),
        ]
