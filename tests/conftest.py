"""Shared fixtures: isolated databases, users and a controllable clock."""

from datetime import datetime
from pathlib import Path

import pytest

from tally.domain.models import User
from tally.store.ledger import LedgerStore
from tally.store.schema import init_database
from tally.store.users import insert_user


class FakeClock:
    """Clock returning a settable instant."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    path = tmp_path / "tally.db"
    init_database(path)
    return path


@pytest.fixture
def clock() -> FakeClock:
    # Wednesday
    return FakeClock(datetime(2025, 1, 8, 12, 0, 0))


@pytest.fixture
def store(db_path: Path, clock: FakeClock) -> LedgerStore:
    return LedgerStore(db_path, clock=clock)


@pytest.fixture
def alice(db_path: Path) -> User:
    return insert_user("alice", "alice@example.com", "not-a-real-hash", db_path)


@pytest.fixture
def bob(db_path: Path) -> User:
    return insert_user("bob", "bob@example.com", "not-a-real-hash", db_path)
