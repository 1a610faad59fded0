"""Account registration, login and the persisted CLI session.

The session is the ``[session]`` table of the config file. Commands read the
logged-in user's ID from it and pass it to the ledger service.
"""

import logging
from pathlib import Path
from typing import Any

import bcrypt

from tally.config import load_config, save_config
from tally.domain.models import User, UserId
from tally.errors import AccountError
from tally.store.users import get_user_by_email, insert_user

logger = logging.getLogger(__name__)

BCRYPT_ROUNDS = 10
INVALID_LOGIN = "Invalid email or password"


def hash_password(password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    """Hash a password with bcrypt."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("ascii")


def check_password(password: str, password_hash: str) -> bool:
    """Check a password against a bcrypt hash."""
    return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("ascii"))


def register_user(
    username: str,
    email: str,
    password: str,
    db_path: Path | None = None,
    rounds: int = BCRYPT_ROUNDS,
) -> User:
    """Create an account.

    Raises:
        AccountError: If a field is blank or the username/email is taken.
        StorageError: If database operation fails.
    """
    username = username.strip()
    email = email.strip().lower()
    if not username or not email or not password:
        raise AccountError("Username, email and password are required")

    return insert_user(username, email, hash_password(password, rounds), db_path)


def authenticate(email: str, password: str, db_path: Path | None = None) -> User:
    """Check credentials.

    Raises:
        AccountError: If the email is unknown or the password is wrong (same message for both).
        StorageError: If database operation fails.
    """
    user = get_user_by_email(email.strip().lower(), db_path)
    if user is None or not check_password(password, user.password_hash):
        logger.info("Failed login for %s", email)
        raise AccountError(INVALID_LOGIN)
    return user


def save_session(user: User, config_path: Path | None = None) -> None:
    """Remember the logged-in user in the config file."""
    try:
        config = load_config(config_path)
    except FileNotFoundError:
        config = {}
    config["session"] = {"user_id": user.id, "username": user.username}
    save_config(config, config_path)


def clear_session(config_path: Path | None = None) -> bool:
    """Forget the logged-in user.

    Returns:
        True if a session was removed, False if nobody was logged in.
    """
    try:
        config = load_config(config_path)
    except FileNotFoundError:
        return False
    if config.pop("session", None) is None:
        return False
    save_config(config, config_path)
    return True


def current_session(config_path: Path | None = None) -> dict[str, Any] | None:
    """Get the logged-in user's session, or None."""
    try:
        config = load_config(config_path)
    except FileNotFoundError:
        return None
    session = config.get("session")
    if not isinstance(session, dict) or "user_id" not in session:
        return None
    return {"user_id": UserId(int(session["user_id"])), "username": session.get("username", "")}
