"""Expense management commands (list, add, edit, delete)."""

import sys
from typing import Any, NoReturn

import typer
from rich.console import Console
from rich.table import Table

from tally.commands.account import require_user_id
from tally.config import get_setting
from tally.dates import format_date
from tally.domain.ledger import format_money, money_to_decimal
from tally.domain.models import ExpenseId
from tally.errors import NotFoundError, StorageError, ValidationError
from tally.service import LedgerService
from tally.store.ledger import LedgerStore
from tally.store.schema import get_db_path

console = Console()


def get_service() -> LedgerService:
    """Build a ledger service over the default database."""
    return LedgerService(LedgerStore(get_db_path()), currency=get_setting("currency"))


def print_attempted(attempted: dict[str, Any]) -> None:
    """Echo back what the user typed."""
    for field, value in attempted.items():
        console.print(f"  {field.capitalize()}: {value}")


def fail(error: Exception) -> NoReturn:
    """Print a ledger error the way users should see it and exit."""
    if isinstance(error, ValidationError):
        console.print(f"[red]{error.message}[/red]")
        print_attempted(error.attempted)
    elif isinstance(error, NotFoundError):
        # AuthorizationError lands here too, with the same message
        console.print(f"[red]{error}[/red]")
    else:
        console.print(f"[red]{error}[/red]", style="bold")
    sys.exit(1)


def list_command() -> None:
    """List all expenses with their total."""
    user_id = require_user_id()
    service = get_service()

    try:
        summary = service.list_expenses(user_id)
    except StorageError as e:
        fail(e)

    if not summary.expenses:
        console.print("[yellow]No expenses found[/yellow]")
        return

    table = Table(title=f"Expenses ({len(summary.expenses)})")
    table.add_column("ID", style="dim", justify="right")
    table.add_column("Date", style="cyan")
    table.add_column("Description", style="white")
    table.add_column("Amount", justify="right")

    for expense in summary.expenses:
        table.add_row(
            str(expense.id),
            format_date(expense.created_at),
            expense.description,
            format_money(expense.amount, service.currency),
        )

    console.print(table)
    console.print(f"\n[bold]Total:[/bold] {format_money(summary.total, service.currency)}")


def add_command(description: str, amount: str) -> None:
    """Add an expense."""
    user_id = require_user_id()
    service = get_service()

    try:
        expense = service.add_expense(user_id, description, amount)
    except (ValidationError, StorageError) as e:
        fail(e)

    console.print("[green]✓[/green] Expense added:")
    console.print(f"  ID: {expense.id}")
    console.print(f"  Description: {expense.description}")
    console.print(f"  Amount: {format_money(expense.amount, service.currency)}")
    console.print(f"  Date: {format_date(expense.created_at)}")


def edit_command(expense_id: int, description: str | None = None, amount: str | None = None) -> None:
    """Edit an expense, prompting for any value not given on the command line."""
    user_id = require_user_id()
    service = get_service()

    try:
        current = service.get_expense(user_id, ExpenseId(expense_id))
    except (NotFoundError, StorageError) as e:
        fail(e)

    if description is None:
        description = typer.prompt("Description", default=current.description)
    if amount is None:
        amount = typer.prompt("Amount", default=str(money_to_decimal(current.amount)))

    try:
        expense = service.edit_expense(user_id, ExpenseId(expense_id), description, amount)
    except (ValidationError, NotFoundError, StorageError) as e:
        fail(e)

    console.print(f"[green]✓[/green] Expense {expense.id} updated:")
    console.print(f"  Description: {expense.description}")
    console.print(f"  Amount: {format_money(expense.amount, service.currency)}")


def delete_command(expense_id: int, yes: bool = False) -> None:
    """Delete an expense after confirmation."""
    user_id = require_user_id()
    service = get_service()

    try:
        expense = service.get_expense(user_id, ExpenseId(expense_id))
        if not yes:
            label = f"{expense.description} ({format_money(expense.amount, service.currency)})"
            if not typer.confirm(f"Delete expense {expense.id}: {label}?"):
                console.print("[dim]Cancelled[/dim]")
                return
        service.delete_expense(user_id, ExpenseId(expense_id))
    except (NotFoundError, StorageError) as e:
        fail(e)

    console.print(f"[green]✓[/green] Expense {expense_id} deleted")
