"""Tests for the sqlite-backed LedgerStore."""

import sqlite3
from datetime import datetime
from pathlib import Path

import pytest

from tally.domain.models import ExpenseId, Money, User
from tally.errors import NotFoundError, StorageError, ValidationError
from tally.store.ledger import LedgerStore


class TestCreate:
    """Tests for LedgerStore.create."""

    def test_assigns_id_and_clock_timestamp(self, store: LedgerStore, alice: User, clock) -> None:
        """Should store the expense with a fresh ID and the clock's time."""
        expense = store.create(alice.id, "Lunch", Money(1550))

        assert expense.id > 0
        assert expense.user_id == alice.id
        assert expense.created_at == clock.now
        assert store.get(expense.id) == expense

    def test_trims_description(self, store: LedgerStore, alice: User) -> None:
        expense = store.create(alice.id, "  Coffee ", Money(300))

        assert store.get(expense.id).description == "Coffee"

    def test_ids_are_unique(self, store: LedgerStore, alice: User) -> None:
        first = store.create(alice.id, "A", Money(1))
        second = store.create(alice.id, "B", Money(1))

        assert first.id != second.id

    @pytest.mark.parametrize(
        ("description", "amount"), [("", 100), ("   ", 100), ("Lunch", 0), ("Lunch", -5), ("Lunch", 2**63)]
    )
    def test_rejects_invalid_fields(self, store: LedgerStore, alice: User, description: str, amount: int) -> None:
        """Should raise ValidationError and store nothing."""
        with pytest.raises(ValidationError):
            store.create(alice.id, description, Money(amount))

        assert store.list(alice.id) == []


class TestList:
    """Tests for LedgerStore.list."""

    def test_only_returns_owned_expenses(self, store: LedgerStore, alice: User, bob: User) -> None:
        """Should never include other users' expenses."""
        mine = store.create(alice.id, "Mine", Money(100))
        store.create(bob.id, "Theirs", Money(200))

        assert store.list(alice.id) == [mine]

    def test_empty_ledger(self, store: LedgerStore, alice: User) -> None:
        assert store.list(alice.id) == []

    def test_round_trips_timestamps(self, store: LedgerStore, alice: User, clock) -> None:
        """Should read back the exact creation time."""
        clock.now = datetime(2025, 1, 12, 23, 59, 59, 999999)
        store.create(alice.id, "Late", Money(100))

        assert store.list(alice.id)[0].created_at == clock.now


class TestGet:
    """Tests for LedgerStore.get."""

    def test_missing_expense(self, store: LedgerStore) -> None:
        with pytest.raises(NotFoundError):
            store.get(ExpenseId(999))

    def test_not_scoped_by_user(self, store: LedgerStore, bob: User) -> None:
        """Should return any user's expense; ownership is checked by the service."""
        expense = store.create(bob.id, "Theirs", Money(200))

        assert store.get(expense.id).user_id == bob.id


class TestUpdate:
    """Tests for LedgerStore.update."""

    def test_replaces_fields_and_keeps_identity(self, store: LedgerStore, alice: User, clock) -> None:
        """Should change description and amount only."""
        original = store.create(alice.id, "Lunch", Money(1550))
        clock.now = datetime(2025, 2, 1, 9, 0)

        updated = store.update(original.id, "Dinner", Money(3000))

        assert updated.id == original.id
        assert updated.user_id == alice.id
        assert updated.created_at == original.created_at
        assert updated.description == "Dinner"
        assert updated.amount == Money(3000)
        assert store.get(original.id) == updated

    def test_missing_expense(self, store: LedgerStore) -> None:
        with pytest.raises(NotFoundError):
            store.update(ExpenseId(999), "Dinner", Money(100))

    def test_invalid_fields_leave_record_unchanged(self, store: LedgerStore, alice: User) -> None:
        original = store.create(alice.id, "Lunch", Money(1550))

        with pytest.raises(ValidationError):
            store.update(original.id, " ", Money(100))

        assert store.get(original.id) == original


class TestDelete:
    """Tests for LedgerStore.delete."""

    def test_removes_expense(self, store: LedgerStore, alice: User) -> None:
        expense = store.create(alice.id, "Lunch", Money(1550))

        store.delete(expense.id)

        with pytest.raises(NotFoundError):
            store.get(expense.id)

    def test_missing_expense_changes_nothing(self, store: LedgerStore, alice: User) -> None:
        """Should raise NotFoundError and leave other records alone."""
        kept = store.create(alice.id, "Lunch", Money(1550))

        with pytest.raises(NotFoundError):
            store.delete(ExpenseId(kept.id + 100))

        assert store.list(alice.id) == [kept]


class TestStorageErrors:
    """Tests for sqlite failures surfacing as StorageError."""

    def test_missing_schema(self, tmp_path: Path) -> None:
        """Should wrap sqlite errors without leaking SQL."""
        store = LedgerStore(tmp_path / "empty.db")

        with pytest.raises(StorageError) as excinfo:
            store.list(1)

        assert isinstance(excinfo.value.__cause__, sqlite3.Error)
        assert "SELECT" not in str(excinfo.value)

    def test_unopenable_database(self, tmp_path: Path) -> None:
        store = LedgerStore(tmp_path / "missing-dir" / "tally.db")

        with pytest.raises(StorageError):
            store.list(1)
