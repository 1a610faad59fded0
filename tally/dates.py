"""Date utilities for tally.

Pure functions for week window calculations and formatting.

Weeks run Monday to Sunday. A window is closed at both ends: it starts at
Monday 00:00:00 and ends at Sunday 23:59:59.999999.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

DATE_FORMAT = "%Y-%m-%d"


@dataclass(frozen=True)
class WeekWindow:
    """Closed interval covering one Monday-to-Sunday week."""

    start: datetime
    end: datetime

    def __contains__(self, instant: datetime) -> bool:
        return self.start <= instant <= self.end

    @property
    def label(self) -> str:
        """Human-readable range (e.g., "2025-01-06 - 2025-01-12")."""
        return f"{format_date(self.start)} - {format_date(self.end)}"


def week_window(reference: datetime | date) -> WeekWindow:
    """Calculate the week containing a reference instant.

    Args:
        reference: Any instant (or calendar date) inside the wanted week.

    Returns:
        WeekWindow from Monday 00:00:00 to Sunday 23:59:59.999999.
    """
    day = reference.date() if isinstance(reference, datetime) else reference
    monday = day - timedelta(days=day.weekday())
    sunday = monday + timedelta(days=6)
    return WeekWindow(
        start=datetime.combine(monday, time.min),
        end=datetime.combine(sunday, time.max),
    )


def format_date(value: datetime | date) -> str:
    """Format as a calendar date without time of day (YYYY-MM-DD)."""
    return value.strftime(DATE_FORMAT)
