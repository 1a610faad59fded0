"""Domain models and types for tally.

This package contains the functional core:
- Pure functions with no side effects
- No I/O operations
- Easy to test
- Business logic separated from infrastructure
"""

from tally.domain.models import Description, Expense, ExpenseId, Money, User, UserId

__all__ = ["Description", "Expense", "ExpenseId", "Money", "User", "UserId"]
