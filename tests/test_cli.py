"""End-to-end tests for the command line through typer's test runner."""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from tally.cli import app

runner = CliRunner()


@pytest.fixture
def home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    return tmp_path


@pytest.fixture
def logged_in(home: Path) -> Path:
    assert runner.invoke(app, ["init"]).exit_code == 0
    result = runner.invoke(
        app,
        ["register", "--username", "alice", "--email", "alice@example.com", "--password", "pw"],
    )
    assert result.exit_code == 0, result.output
    return home


class TestSetup:
    """Tests for init and account commands."""

    def test_init_creates_files(self, home: Path) -> None:
        result = runner.invoke(app, ["init"])

        assert result.exit_code == 0
        assert (home / "data" / "tally" / "tally.db").exists()
        assert (home / "config" / "tally" / "config.toml").exists()

    def test_init_refuses_to_overwrite(self, home: Path) -> None:
        runner.invoke(app, ["init"])

        assert runner.invoke(app, ["init"]).exit_code == 1
        assert runner.invoke(app, ["init", "--force"]).exit_code == 0

    def test_commands_require_login(self, home: Path) -> None:
        runner.invoke(app, ["init"])

        result = runner.invoke(app, ["list"])

        assert result.exit_code == 1
        assert "Not logged in" in result.output

    def test_login_logout(self, logged_in: Path) -> None:
        assert runner.invoke(app, ["logout"]).exit_code == 0
        assert runner.invoke(app, ["whoami"]).exit_code == 1

        bad = runner.invoke(app, ["login", "--email", "alice@example.com", "--password", "nope"])
        assert bad.exit_code == 1
        assert "Invalid email or password" in bad.output

        good = runner.invoke(app, ["login", "--email", "alice@example.com", "--password", "pw"])
        assert good.exit_code == 0
        assert "alice" in runner.invoke(app, ["whoami"]).output


class TestExpenses:
    """Tests for the expense commands."""

    def test_add_list_edit_delete(self, logged_in: Path) -> None:
        assert runner.invoke(app, ["add", "Lunch", "15.50"]).exit_code == 0
        assert runner.invoke(app, ["add", "Bus", "2"]).exit_code == 0

        listing = runner.invoke(app, ["list"])
        assert "Lunch" in listing.output
        assert "$17.50" in listing.output

        edited = runner.invoke(app, ["edit", "1", "--description", "Brunch", "--amount", "20"])
        assert edited.exit_code == 0
        assert "$20.00" in edited.output

        assert runner.invoke(app, ["delete", "2", "--yes"]).exit_code == 0
        listing = runner.invoke(app, ["list"])
        assert "Bus" not in listing.output
        assert "$20.00" in listing.output

    def test_invalid_amount_echoes_input(self, logged_in: Path) -> None:
        result = runner.invoke(app, ["add", "Lunch", "lots"])

        assert result.exit_code == 1
        assert "Amount must be a number" in result.output
        assert "lots" in result.output

    def test_missing_expense(self, logged_in: Path) -> None:
        result = runner.invoke(app, ["delete", "99", "--yes"])

        assert result.exit_code == 1
        assert "Expense 99 not found" in result.output

    def test_week_report_and_pdf(self, logged_in: Path) -> None:
        runner.invoke(app, ["add", "Lunch", "15.50"])
        runner.invoke(app, ["add", "Bus", "2.00"])

        view = runner.invoke(app, ["week"])
        assert view.exit_code == 0
        assert "$17.50" in view.output

        output = logged_in / "week.pdf"
        result = runner.invoke(app, ["week", "--pdf", str(output)])
        assert result.exit_code == 0
        data = output.read_bytes()
        assert data.startswith(b"%PDF-")
        assert b"Lunch" in data
        assert b"17.50" in data

    def test_week_with_other_date_is_empty(self, logged_in: Path) -> None:
        runner.invoke(app, ["add", "Lunch", "15.50"])

        result = runner.invoke(app, ["week", "--date", "2001-01-03"])

        assert result.exit_code == 0
        assert "No expenses this week" in result.output
        assert "$0.00" in result.output

    @pytest.mark.parametrize("value", ["", "not a date"])
    def test_week_rejects_bad_date(self, logged_in: Path, value: str) -> None:
        result = runner.invoke(app, ["week", "--date", value])

        assert result.exit_code == 1
        assert "Invalid date format" in result.output
