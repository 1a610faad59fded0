"""Error types raised by the ledger, store and account layers.

Only the command layer catches these; everything below it lets them
propagate.
"""

from typing import Any


class TallyError(Exception):
    """Base class for all tally errors."""


class ValidationError(TallyError):
    """Raised when a description or amount is rejected.

    Args:
        message: Human-readable reason.
        attempted: The raw input as the user gave it, for re-display.
    """

    def __init__(self, message: str, attempted: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.attempted = dict(attempted or {})


class NotFoundError(TallyError):
    """Raised when an expense does not exist."""

    def __init__(self, expense_id: int) -> None:
        super().__init__(f"Expense {expense_id} not found")
        self.expense_id = expense_id


class AuthorizationError(NotFoundError):
    """Raised when an expense belongs to a different user.

    Shares NotFoundError's message so the existence of other users'
    records is never revealed.
    """


class StorageError(TallyError):
    """Raised when the underlying database fails."""

    def __init__(self, message: str = "Storage error, please try again") -> None:
        super().__init__(message)


class AccountError(TallyError):
    """Raised for registration conflicts and failed logins."""
