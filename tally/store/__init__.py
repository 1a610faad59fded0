"""Database store layer - provides persistence for the application.

This module re-exports the public store API for easy importing.
"""

from tally.store.ledger import LedgerStore
from tally.store.schema import database_exists, get_db_path, init_database
from tally.store.users import get_user_by_email, insert_user

__all__ = [
    # Schema
    "database_exists",
    "get_db_path",
    "init_database",
    # Expenses
    "LedgerStore",
    # Users
    "get_user_by_email",
    "insert_user",
]
