"""Plain-text account database used by the board server.

Each record is a username followed by a status number (1 active, 0 banned),
separated by whitespace, one record per line.
"""

from __future__ import annotations

import threading
from os import PathLike
from pathlib import Path
from typing import Iterator

from .codes import AccountStatus, LoginStatus

__all__ = ["MAX_USERNAME_LENGTH", "AccountStore"]

MAX_USERNAME_LENGTH = 100


def _parse_status(token: str) -> int | None:
    try:
        return int(token)
    except ValueError:
        return None


class AccountStore:
    """Reads and extends the account file at ``path``."""

    def __init__(self, path: str | PathLike[str]) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def _records(self) -> Iterator[tuple[str, int]]:
        """Yield (username, status) pairs until the data stops parsing."""
        tokens = self.path.read_text(encoding="utf-8").split()
        for name, status_token in zip(tokens[::2], tokens[1::2]):
            status = _parse_status(status_token)
            if status is None:
                return
            yield name, status

    def verify(self, username: str) -> LoginStatus:
        """Check ``username`` against the database.

        Returns ACCOUNT_BANNED or ACCOUNT_VALID for the first record with a
        known status, UNDEFINED when an over-long username is met in the
        database first, and ACCOUNT_NOT_EXIST otherwise. A missing database
        raises FileNotFoundError.
        """
        for name, status in self._records():
            if len(name) >= MAX_USERNAME_LENGTH:
                return LoginStatus.UNDEFINED
            if name != username:
                continue
            if status == AccountStatus.BAN:
                return LoginStatus.ACCOUNT_BANNED
            if status == AccountStatus.ACTIVE:
                return LoginStatus.ACCOUNT_VALID
        return LoginStatus.ACCOUNT_NOT_EXIST

    def exists(self, username: str) -> bool:
        """Return True if any record, whatever its status, names ``username``."""
        with self.path.open(encoding="utf-8") as handle:
            for line in handle:
                fields = line.split()
                if len(fields) < 2 or _parse_status(fields[1]) is None:
                    continue
                if fields[0] == username:
                    return True
        return False

    def add(self, username: str) -> None:
        """Append ``username`` as an active account.

        Raises ValueError for a name that is empty or holds whitespace, since
        such a name cannot be stored as one field.
        """
        if not username or any(ch.isspace() for ch in username):
            raise ValueError(f"invalid username {username!r}")
        with self._lock, self.path.open("a", encoding="utf-8") as handle:
            handle.write(f"{username} {int(AccountStatus.ACTIVE)}\n")