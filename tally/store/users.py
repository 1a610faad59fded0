"""User account persistence."""

import logging
import sqlite3
from datetime import datetime
from pathlib import Path

from tally.domain.models import User, UserId
from tally.errors import AccountError
from tally.store.ledger import transaction
from tally.store.schema import get_db_path

logger = logging.getLogger(__name__)


def _row_to_user(row: sqlite3.Row) -> User:
    return User(
        id=UserId(row["id"]),
        username=row["username"],
        email=row["email"],
        password_hash=row["password_hash"],
        created_at=datetime.fromisoformat(row["created_at"]),
    )


def insert_user(username: str, email: str, password_hash: str, db_path: Path | None = None) -> User:
    """Insert a new user.

    Args:
        username: Unique display name.
        email: Unique login email.
        password_hash: Already-hashed password.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        The stored user.

    Raises:
        AccountError: If the username or email is already taken.
        StorageError: If database operation fails.
    """
    if db_path is None:
        db_path = get_db_path()
    created_at = datetime.now()

    with transaction(db_path) as conn:
        taken = conn.execute(
            "SELECT 1 FROM users WHERE username = ? OR email = ?",
            (username, email),
        ).fetchone()
        if taken:
            raise AccountError("Email or username already exists")

        cursor = conn.execute(
            "INSERT INTO users (username, email, password_hash, created_at) VALUES (?, ?, ?, ?)",
            (username, email, password_hash, created_at.isoformat()),
        )
        user_id = UserId(cursor.lastrowid)

    logger.info("Registered user %s (%s)", user_id, username)
    return User(id=user_id, username=username, email=email, password_hash=password_hash, created_at=created_at)


def get_user_by_email(email: str, db_path: Path | None = None) -> User | None:
    """Look up a user by email.

    Returns:
        The user, or None if no account uses this email.

    Raises:
        StorageError: If database operation fails.
    """
    if db_path is None:
        db_path = get_db_path()

    with transaction(db_path) as conn:
        row = conn.execute(
            "SELECT id, username, email, password_hash, created_at FROM users WHERE email = ?",
            (email,),
        ).fetchone()
    return _row_to_user(row) if row else None
