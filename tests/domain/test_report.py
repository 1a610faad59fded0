"""Tests for tally.domain.report pure functions."""

from datetime import datetime
from decimal import Decimal

from tally.domain.models import Description, Expense, ExpenseId, Money, UserId
from tally.domain.report import build_weekly_report, render_view


def make_expense(expense_id: int, description: str, amount: int, created_at: datetime) -> Expense:
    return Expense(
        id=ExpenseId(expense_id),
        user_id=UserId(1),
        description=Description(description),
        amount=Money(amount),
        created_at=created_at,
    )


REFERENCE = datetime(2025, 1, 8, 12, 0)


class TestBuildWeeklyReport:
    """Tests for build_weekly_report."""

    def test_filters_sorts_and_totals(self) -> None:
        """Should keep the week's expenses, oldest first, with their total."""
        bus = make_expense(2, "Bus", 200, datetime(2025, 1, 7, 8, 0))
        lunch = make_expense(1, "Lunch", 1550, datetime(2025, 1, 9, 13, 0))
        old = make_expense(3, "Old", 999, datetime(2024, 12, 1, 8, 0))

        report = build_weekly_report([lunch, old, bus], REFERENCE)

        assert report.expenses == [bus, lunch]
        assert report.total == Money(1750)
        assert report.window.start == datetime(2025, 1, 6)

    def test_empty_week(self) -> None:
        """Should produce an empty report rather than an error."""
        report = build_weekly_report([], REFERENCE)

        assert report.expenses == []
        assert report.total == Money(0)


class TestRenderView:
    """Tests for render_view."""

    def test_display_ready_lines(self) -> None:
        """Should format amounts with the currency label and dates without time."""
        report = build_weekly_report(
            [
                make_expense(1, "Lunch", 1550, datetime(2025, 1, 8, 13, 0)),
                make_expense(2, "Bus", 200, datetime(2025, 1, 8, 18, 0)),
            ],
            REFERENCE,
        )

        view = render_view(report, currency="€")

        assert [line.description for line in view.expenses] == ["Lunch", "Bus"]
        assert view.expenses[0].amount == Decimal("15.50")
        assert view.expenses[0].formatted_amount == "€15.50"
        assert view.expenses[1].formatted_date == "2025-01-08"
        assert view.total == Decimal("17.50")
        assert view.formatted_total == "€17.50"
        assert view.formatted_start == "2025-01-06"
        assert view.formatted_end == "2025-01-12"

    def test_empty_view(self) -> None:
        """Should render zero lines and a zero total."""
        view = render_view(build_weekly_report([], REFERENCE))

        assert view.expenses == []
        assert view.total == 0
        assert view.formatted_total == "$0.00"
