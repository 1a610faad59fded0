"""Ledger store - persistence for expense records."""

import logging
import sqlite3
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path

from tally.domain.ledger import MAX_AMOUNT, clean_description
from tally.domain.models import Description, Expense, ExpenseId, Money, UserId
from tally.errors import NotFoundError, StorageError, ValidationError
from tally.store.schema import connect, get_db_path

logger = logging.getLogger(__name__)

_COLUMNS = "id, user_id, description, amount, created_at"


@contextmanager
def transaction(db_path: Path) -> Iterator[sqlite3.Connection]:
    """Open a connection, commit on success and roll back on any error.

    sqlite errors are logged and re-raised as StorageError. The connection is
    always closed.
    """
    try:
        conn = connect(db_path)
    except sqlite3.Error as e:
        logger.exception("Could not open database %s", db_path)
        raise StorageError() from e

    try:
        yield conn
        conn.commit()
    except sqlite3.Error as e:
        conn.rollback()
        logger.exception("Database operation failed")
        raise StorageError() from e
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def row_to_expense(row: sqlite3.Row) -> Expense:
    """Convert a database row into an Expense."""
    return Expense(
        id=ExpenseId(row["id"]),
        user_id=UserId(row["user_id"]),
        description=Description(row["description"]),
        amount=Money(row["amount"]),
        created_at=datetime.fromisoformat(row["created_at"]),
    )


def _check_fields(description: str, amount: Money) -> Description:
    cleaned = clean_description(description)
    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        raise ValidationError("Amount must be greater than zero", {"description": description, "amount": amount})
    if amount > MAX_AMOUNT:
        raise ValidationError("Amount is too large", {"description": description, "amount": amount})
    return cleaned


class LedgerStore:
    """Per-user expense records backed by sqlite.

    Args:
        db_path: Path to the database file. If None, uses default location.
        clock: Returns the timestamp given to newly created expenses.
    """

    def __init__(self, db_path: Path | None = None, clock: Callable[[], datetime] = datetime.now) -> None:
        self.db_path = db_path if db_path is not None else get_db_path()
        self.clock = clock

    def list(self, user_id: UserId) -> list[Expense]:
        """Get all expenses owned by a user, oldest first.

        Raises:
            StorageError: If database operation fails.
        """
        with transaction(self.db_path) as conn:
            rows = conn.execute(
                f"SELECT {_COLUMNS} FROM expenses WHERE user_id = ? ORDER BY created_at, id",
                (user_id,),
            ).fetchall()
        return [row_to_expense(row) for row in rows]

    def create(self, user_id: UserId, description: str, amount: Money) -> Expense:
        """Insert a new expense stamped with the store's clock.

        Args:
            user_id: Owning user.
            description: Expense description (trimmed before storing).
            amount: Amount in cents, must be positive.

        Returns:
            The stored expense.

        Raises:
            ValidationError: If the description is blank or the amount is not positive.
            StorageError: If database operation fails.
        """
        cleaned = _check_fields(description, amount)
        created_at = self.clock()

        with transaction(self.db_path) as conn:
            cursor = conn.execute(
                "INSERT INTO expenses (user_id, description, amount, created_at) VALUES (?, ?, ?, ?)",
                (user_id, cleaned, amount, created_at.isoformat()),
            )
            expense_id = ExpenseId(cursor.lastrowid)

        logger.info("Created expense %s for user %s", expense_id, user_id)
        return Expense(
            id=expense_id,
            user_id=user_id,
            description=cleaned,
            amount=amount,
            created_at=created_at,
        )

    def get(self, expense_id: ExpenseId) -> Expense:
        """Get an expense by ID regardless of owner.

        Raises:
            NotFoundError: If no expense has this ID.
            StorageError: If database operation fails.
        """
        with transaction(self.db_path) as conn:
            row = conn.execute(f"SELECT {_COLUMNS} FROM expenses WHERE id = ?", (expense_id,)).fetchone()
        if row is None:
            raise NotFoundError(expense_id)
        return row_to_expense(row)

    def update(self, expense_id: ExpenseId, description: str, amount: Money) -> Expense:
        """Replace description and amount, keeping ID, owner and creation time.

        Raises:
            ValidationError: If the description is blank or the amount is not positive.
            NotFoundError: If no expense has this ID.
            StorageError: If database operation fails.
        """
        cleaned = _check_fields(description, amount)

        with transaction(self.db_path) as conn:
            cursor = conn.execute(
                "UPDATE expenses SET description = ?, amount = ? WHERE id = ?",
                (cleaned, amount, expense_id),
            )
            if cursor.rowcount == 0:
                raise NotFoundError(expense_id)
            row = conn.execute(f"SELECT {_COLUMNS} FROM expenses WHERE id = ?", (expense_id,)).fetchone()

        logger.info("Updated expense %s", expense_id)
        return row_to_expense(row)

    def delete(self, expense_id: ExpenseId) -> None:
        """Delete an expense.

        Raises:
            NotFoundError: If no expense has this ID.
            StorageError: If database operation fails.
        """
        with transaction(self.db_path) as conn:
            cursor = conn.execute("DELETE FROM expenses WHERE id = ?", (expense_id,))
            if cursor.rowcount == 0:
                raise NotFoundError(expense_id)

        logger.info("Deleted expense %s", expense_id)
