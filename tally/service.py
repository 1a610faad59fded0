"""Ledger service - the operations the command layer invokes.

Every operation that takes an expense ID checks that the expense belongs to
the calling user before reading or changing it.
"""

import logging
from collections.abc import Callable, Iterator
from datetime import datetime
from typing import Any

from tally.domain.ledger import LedgerSummary, clean_description, parse_amount, summarize
from tally.domain.models import Description, Expense, ExpenseId, Money, UserId
from tally.domain.report import ReportView, WeeklyReport, build_weekly_report, render_view
from tally.errors import AuthorizationError, ValidationError
from tally.render.document import render_document
from tally.store.ledger import LedgerStore

logger = logging.getLogger(__name__)


def validate_fields(description: Any, amount: Any) -> tuple[Description, Money]:
    """Validate raw description and amount input.

    Raises:
        ValidationError: With both attempted values attached, whichever field failed.
    """
    attempted = {"description": description, "amount": amount}
    try:
        return clean_description(description), parse_amount(amount)
    except ValidationError as e:
        raise ValidationError(e.message, attempted) from None


class LedgerService:
    """Expense operations for authenticated users.

    Args:
        store: Expense persistence.
        clock: Supplies the reference instant for weekly reports.
        currency: Currency label used when rendering amounts.
    """

    def __init__(
        self,
        store: LedgerStore,
        clock: Callable[[], datetime] = datetime.now,
        currency: str = "$",
    ) -> None:
        self.store = store
        self.clock = clock
        self.currency = currency

    def _owned(self, user_id: UserId, expense_id: ExpenseId) -> Expense:
        expense = self.store.get(expense_id)
        if expense.user_id != user_id:
            logger.warning("User %s attempted to access expense %s", user_id, expense_id)
            raise AuthorizationError(expense_id)
        return expense

    def list_expenses(self, user_id: UserId) -> LedgerSummary:
        """All of a user's expenses with their total."""
        logger.debug("Listing expenses for user %s", user_id)
        return summarize(self.store.list(user_id))

    def add_expense(self, user_id: UserId, description: Any, amount: Any) -> Expense:
        """Validate and record a new expense.

        Raises:
            ValidationError: If the description is blank or the amount is not a positive number.
        """
        logger.debug("User %s adding expense", user_id)
        cleaned, cents = validate_fields(description, amount)
        return self.store.create(user_id, cleaned, cents)

    def get_expense(self, user_id: UserId, expense_id: ExpenseId) -> Expense:
        """Fetch one of the user's expenses.

        Raises:
            NotFoundError: If the expense does not exist.
            AuthorizationError: If it belongs to someone else.
        """
        return self._owned(user_id, expense_id)

    def edit_expense(self, user_id: UserId, expense_id: ExpenseId, description: Any, amount: Any) -> Expense:
        """Change the description and amount of one of the user's expenses.

        Raises:
            NotFoundError: If the expense does not exist.
            AuthorizationError: If it belongs to someone else.
            ValidationError: If the new values are invalid; ``attempted`` holds them unchanged.
        """
        logger.debug("User %s editing expense %s", user_id, expense_id)
        self._owned(user_id, expense_id)
        cleaned, cents = validate_fields(description, amount)
        return self.store.update(expense_id, cleaned, cents)

    def delete_expense(self, user_id: UserId, expense_id: ExpenseId) -> None:
        """Delete one of the user's expenses.

        Raises:
            NotFoundError: If the expense does not exist.
            AuthorizationError: If it belongs to someone else.
        """
        logger.debug("User %s deleting expense %s", user_id, expense_id)
        self._owned(user_id, expense_id)
        self.store.delete(expense_id)

    def _weekly(self, user_id: UserId, reference: datetime | None) -> WeeklyReport:
        if reference is None:
            reference = self.clock()
        report = build_weekly_report(self.store.list(user_id), reference)
        logger.debug("Week %s: %d expense(s) for user %s", report.window.label, len(report.expenses), user_id)
        return report

    def weekly_report(self, user_id: UserId, reference: datetime | None = None) -> ReportView:
        """Display-ready summary of the week containing reference (default: now)."""
        return render_view(self._weekly(user_id, reference), self.currency)

    def weekly_report_document(self, user_id: UserId, reference: datetime | None = None) -> Iterator[bytes]:
        """PDF summary of the week containing reference (default: now).

        Expenses are fetched and totalled before this returns; the returned
        generator only lays out and emits the document.
        """
        return render_document(self._weekly(user_id, reference), self.currency)
