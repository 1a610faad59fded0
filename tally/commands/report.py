"""Weekly report command, on screen or as a PDF file."""

import sys
from collections.abc import Iterable
from datetime import datetime
from pathlib import Path

import pandas as pd
from rich.console import Console
from rich.table import Table

from tally.commands.account import require_user_id
from tally.commands.expenses import fail, get_service
from tally.domain.report import ReportView
from tally.errors import StorageError

console = Console()


def parse_reference_date(value: str | None) -> datetime | None:
    """Parse a user-supplied date into a reference instant.

    Args:
        value: Date in YYYY-MM-DD, DD/MM/YYYY or another format pandas understands.

    Returns:
        Midday on that date, or None when no date was given.

    Raises:
        ValueError: If the value is not a recognisable date, including an empty string.
    """
    if value is None:
        return None
    parsed = pd.to_datetime(value, dayfirst=True)
    if pd.isna(parsed):
        raise ValueError(f"could not parse {value!r}")
    day = parsed.date()
    return datetime(day.year, day.month, day.day, 12)


def render_report_table(view: ReportView) -> None:
    """Print a weekly report view as a table."""
    console.print(f"[bold cyan]Week {view.formatted_start} - {view.formatted_end}[/bold cyan]\n")

    if not view.expenses:
        console.print("[dim]No expenses this week[/dim]")
    else:
        table = Table()
        table.add_column("Date", style="cyan")
        table.add_column("Description", style="white")
        table.add_column("Amount", justify="right")
        for line in view.expenses:
            table.add_row(line.formatted_date, line.description, line.formatted_amount)
        console.print(table)

    console.print(f"\n[bold]Total:[/bold] {view.formatted_total}")


def write_document(chunks: Iterable[bytes], output: Path) -> int:
    """Write document chunks to a file as they are produced.

    Returns:
        Number of bytes written.
    """
    written = 0
    with open(output, "wb") as f:
        for chunk in chunks:
            f.write(chunk)
            written += len(chunk)
    return written


def week_command(date: str | None = None, pdf: str | None = None) -> None:
    """Show the weekly report or save it as a PDF."""
    user_id = require_user_id()
    service = get_service()

    try:
        reference = parse_reference_date(date)
    except (ValueError, OverflowError) as e:
        console.print(f"[red]Invalid date format: {e}[/red]")
        console.print("[dim]Accepted formats: YYYY-MM-DD, DD/MM/YYYY, DD-MM-YYYY, etc.[/dim]")
        sys.exit(1)

    try:
        if pdf is None:
            render_report_table(service.weekly_report(user_id, reference))
            return

        output = Path(pdf).expanduser()
        written = write_document(service.weekly_report_document(user_id, reference), output)
    except StorageError as e:
        fail(e)
    except OSError as e:
        console.print(f"[red]Could not write report: {e}[/red]", style="bold")
        sys.exit(1)

    console.print(f"[green]✓[/green] Weekly report saved to {output} [dim]({written:,} bytes)[/dim]")
