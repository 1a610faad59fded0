"""Pure functions for weekly report calculations and view rendering.

This module contains the functional core for reporting operations:
- No I/O operations (no database, no console, no files)
- No side effects
- Pure data transformations
- Easy to test

All monetary amounts are in cents (Money type) until rendered.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from tally.dates import WeekWindow, format_date, week_window
from tally.domain.ledger import format_money, money_to_decimal, total, within_week
from tally.domain.models import Expense, Money


@dataclass(frozen=True)
class WeeklyReport:
    """Immutable aggregate for one user's week."""

    window: WeekWindow
    expenses: list[Expense]
    total: Money


@dataclass(frozen=True)
class ViewLine:
    """Display-ready expense line."""

    description: str
    amount: Decimal
    formatted_amount: str
    formatted_date: str


@dataclass(frozen=True)
class ReportView:
    """Display-ready weekly report."""

    expenses: list[ViewLine]
    total: Decimal
    formatted_total: str
    formatted_start: str
    formatted_end: str


def build_weekly_report(expenses: Iterable[Expense], reference: datetime) -> WeeklyReport:
    """Aggregate a user's expenses for the week containing reference.

    Args:
        expenses: All expenses of one user.
        reference: Instant identifying the week.

    Returns:
        WeeklyReport with the week's expenses sorted by creation time and their total.
    """
    items = sorted(within_week(expenses, reference), key=lambda e: (e.created_at, e.id))
    return WeeklyReport(window=week_window(reference), expenses=items, total=total(items))


def render_line(expense: Expense, currency: str = "$") -> ViewLine:
    """Render a single expense for display."""
    return ViewLine(
        description=expense.description,
        amount=money_to_decimal(expense.amount),
        formatted_amount=format_money(expense.amount, currency),
        formatted_date=format_date(expense.created_at),
    )


def render_view(report: WeeklyReport, currency: str = "$") -> ReportView:
    """Turn a weekly report into a display-ready structure.

    Args:
        report: Aggregated weekly report.
        currency: Currency label prefixed to amounts.

    Returns:
        ReportView. An empty week yields no lines and a zero total.
    """
    return ReportView(
        expenses=[render_line(expense, currency) for expense in report.expenses],
        total=money_to_decimal(report.total),
        formatted_total=format_money(report.total, currency),
        formatted_start=format_date(report.window.start),
        formatted_end=format_date(report.window.end),
    )
