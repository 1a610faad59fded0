"""CLI entry point for tally."""

import typer

from tally.commands.account import login_command, logout_command, register_command, whoami_command
from tally.commands.admin import init_command
from tally.commands.expenses import add_command, delete_command, edit_command, list_command
from tally.commands.report import week_command
from tally.config import get_setting
from tally.log import setup_logging

app = typer.Typer(
    name="tally",
    help="tally - track your expenses and see where each week's money went",
    add_completion=False,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """tally - track your expenses and see where each week's money went."""
    setup_logging("DEBUG" if verbose else get_setting("log_level"))


@app.command(name="init")
def init(
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing database and config"),
) -> None:
    """Initialize tally database and configuration."""
    init_command(force)


@app.command()
def register(
    username: str = typer.Option(..., prompt=True, help="Your display name"),
    email: str = typer.Option(..., prompt=True, help="Your login email"),
    password: str = typer.Option(..., prompt=True, hide_input=True, confirmation_prompt=True),
) -> None:
    """Create an account and log in."""
    register_command(username, email, password)


@app.command()
def login(
    email: str = typer.Option(..., prompt=True, help="Your login email"),
    password: str = typer.Option(..., prompt=True, hide_input=True),
) -> None:
    """Log in to your account."""
    login_command(email, password)


@app.command()
def logout() -> None:
    """Log out."""
    logout_command()


@app.command()
def whoami() -> None:
    """Show who is logged in."""
    whoami_command()


@app.command(name="list")
def list_expenses() -> None:
    """List your expenses and their total."""
    list_command()


@app.command()
def add(
    description: str,
    amount: str = typer.Argument(..., help="Amount, e.g. 15.50"),
) -> None:
    """Add an expense."""
    add_command(description, amount)


@app.command()
def edit(
    expense_id: int,
    description: str = typer.Option(None, "--description", "-d", help="New description"),
    amount: str = typer.Option(None, "--amount", "-a", help="New amount"),
) -> None:
    """Edit one of your expenses."""
    edit_command(expense_id, description, amount)


@app.command()
def delete(
    expense_id: int,
    yes: bool = typer.Option(False, "--yes", "-y", help="Don't ask for confirmation"),
) -> None:
    """Delete one of your expenses."""
    delete_command(expense_id, yes)


@app.command()
def week(
    date: str = typer.Option(None, "--date", help="Any day in the week to report (default: today)"),
    pdf: str = typer.Option(None, "--pdf", help="Save the report as a PDF file instead of printing it"),
) -> None:
    """Show your spending for the week."""
    week_command(date, pdf)


if __name__ == "__main__":
    app()
