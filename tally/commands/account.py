"""Account commands (register, login, logout, whoami)."""

import sys

from rich.console import Console

from tally.auth import authenticate, clear_session, current_session, register_user, save_session
from tally.domain.models import UserId
from tally.errors import AccountError, StorageError
from tally.store.schema import database_exists, get_db_path

console = Console()


def require_database() -> None:
    """Exit unless the database has been initialized."""
    if not database_exists():
        console.print("[red]Database not found. Run 'tally init' first.[/red]", style="bold")
        sys.exit(1)


def require_user_id() -> UserId:
    """Get the logged-in user's ID or exit."""
    require_database()
    session = current_session()
    if session is None:
        console.print("[red]Not logged in. Run 'tally login' first.[/red]", style="bold")
        sys.exit(1)
    return session["user_id"]


def register_command(username: str, email: str, password: str) -> None:
    """Create an account and log in as it."""
    require_database()

    try:
        user = register_user(username, email, password, get_db_path())
    except AccountError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    except StorageError as e:
        console.print(f"[red]{e}[/red]", style="bold")
        sys.exit(1)

    save_session(user)
    console.print(f"[green]✓[/green] Registered and logged in as [bold]{user.username}[/bold]")


def login_command(email: str, password: str) -> None:
    """Log in with email and password."""
    require_database()

    try:
        user = authenticate(email, password, get_db_path())
    except AccountError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    except StorageError as e:
        console.print(f"[red]{e}[/red]", style="bold")
        sys.exit(1)

    save_session(user)
    console.print(f"[green]✓[/green] Welcome, [bold]{user.username}[/bold]")


def logout_command() -> None:
    """Forget the logged-in user."""
    if clear_session():
        console.print("[green]✓[/green] Logged out")
    else:
        console.print("[yellow]Not logged in[/yellow]")


def whoami_command() -> None:
    """Show the logged-in user."""
    session = current_session()
    if session is None:
        console.print("[yellow]Not logged in[/yellow]")
        sys.exit(1)
    console.print(f"{session['username']} [dim](id {session['user_id']})[/dim]")
