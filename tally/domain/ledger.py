"""Pure functions for ledger validation and aggregation.

This module contains the functional core for expense bookkeeping:
- No I/O operations (no database, no console, no files)
- No side effects
- Pure data transformations
- Easy to test

All monetary amounts are in cents (Money type).
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from tally.dates import week_window
from tally.domain.models import Description, Expense, Money
from tally.errors import ValidationError

CENTS = Decimal("0.01")

# Largest amount sqlite can store as a signed 64-bit INTEGER of cents
MAX_AMOUNT = Money(2**63 - 1)


@dataclass(frozen=True)
class LedgerSummary:
    """Immutable ledger listing with its total."""

    expenses: list[Expense]
    total: Money


def total(expenses: Iterable[Expense]) -> Money:
    """Sum expense amounts.

    Args:
        expenses: Expenses to sum.

    Returns:
        Total in cents, Money(0) when there are no expenses.
    """
    return Money(sum(expense.amount for expense in expenses))


def within_week(expenses: Iterable[Expense], reference: datetime) -> list[Expense]:
    """Keep only the expenses created in the week containing reference.

    Both window boundaries are inclusive: an expense at Monday 00:00:00 or at
    Sunday 23:59:59.999999 is kept.

    Args:
        expenses: Expenses to filter.
        reference: Instant identifying the week.

    Returns:
        Matching expenses in their original order.
    """
    window = week_window(reference)
    return [expense for expense in expenses if expense.created_at in window]


def summarize(expenses: Iterable[Expense]) -> LedgerSummary:
    """Build a LedgerSummary from a set of expenses."""
    items = list(expenses)
    return LedgerSummary(expenses=items, total=total(items))


def clean_description(raw: Any) -> Description:
    """Validate and trim a description.

    Raises:
        ValidationError: If the description is missing or blank.
    """
    if raw is None or not str(raw).strip():
        raise ValidationError("Description cannot be empty", {"description": raw})
    return Description(str(raw).strip())


def parse_amount(raw: Any) -> Money:
    """Convert user input into a positive amount in cents.

    Accepts strings, ints, floats and Decimals. The value is rounded half-up
    to two decimal places.

    Raises:
        ValidationError: If the amount is not a finite number greater than zero
            or exceeds MAX_AMOUNT cents.
    """
    if isinstance(raw, bool) or raw is None:
        raise ValidationError("Amount must be a number", {"amount": raw})

    try:
        # str() first so floats like 15.1 keep their printed value
        value = Decimal(str(raw).strip())
    except InvalidOperation:
        raise ValidationError("Amount must be a number", {"amount": raw}) from None

    if not value.is_finite():
        raise ValidationError("Amount must be a finite number", {"amount": raw})

    if value * 100 > MAX_AMOUNT:
        raise ValidationError("Amount is too large", {"amount": raw})

    try:
        cents = int(value.quantize(CENTS, rounding=ROUND_HALF_UP) * 100)
    except InvalidOperation:
        raise ValidationError("Amount is too large", {"amount": raw}) from None
    if cents <= 0:
        raise ValidationError("Amount must be greater than zero", {"amount": raw})
    return Money(cents)


def money_to_decimal(amount: Money) -> Decimal:
    """Convert cents to a two-place Decimal (e.g., 1750 -> Decimal("17.50"))."""
    return (Decimal(amount) / 100).quantize(CENTS)


def format_money(amount: Money, currency: str = "$") -> str:
    """Format cents for display with a currency label prefix.

    Args:
        amount: Amount in cents.
        currency: Label placed before the number.

    Returns:
        String such as "$1,234.50".
    """
    return f"{currency}{money_to_decimal(amount):,.2f}"
