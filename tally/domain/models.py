"""Domain type definitions for tally.

These NewTypes provide semantic clarity and help with type checking:
- Money: Amount in cents (minor units)
- UserId: Identity of an account, used only as a foreign key
- ExpenseId: Identity of an expense record
- Description: Expense description text
"""

from dataclasses import dataclass
from datetime import datetime
from typing import NewType

# Money amounts are stored as cents (minor units) to avoid floating point errors
Money = NewType("Money", int)

UserId = NewType("UserId", int)

ExpenseId = NewType("ExpenseId", int)

# Always trimmed and non-empty once it reaches the store
Description = NewType("Description", str)


@dataclass(frozen=True)
class Expense:
    """A single expense record owned by one user."""

    id: ExpenseId
    user_id: UserId
    description: Description
    amount: Money
    created_at: datetime


@dataclass(frozen=True)
class User:
    """A registered account."""

    id: UserId
    username: str
    email: str
    password_hash: str
    created_at: datetime
