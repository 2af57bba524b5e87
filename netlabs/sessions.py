"""Thread-safe registry of logged-in client sessions."""

from __future__ import annotations

import threading
from dataclasses import dataclass

__all__ = ["Session", "SessionRegistry"]


@dataclass(frozen=True)
class Session:
    """One logged-in client."""

    socket_id: int
    client_addr: str
    port: int
    username: str
    login_status: int


class SessionRegistry:
    """Sessions ordered newest first, guarded by a lock."""

    def __init__(self) -> None:
        self._sessions: list[Session] = []
        self._lock = threading.RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def add(
        self,
        socket_id: int,
        client_addr: str,
        port: int,
        username: str,
        login_status: int,
    ) -> Session:
        """Record a new session and return it."""
        session = Session(socket_id, client_addr, port, username, login_status)
        with self._lock:
            self._sessions.insert(0, session)
        return session

    def find_by_username(self, username: str) -> Session | None:
        """Return the newest session for ``username``, or None."""
        with self._lock:
            return next((s for s in self._sessions if s.username == username), None)

    def find_by_socket(self, socket_id: int) -> Session | None:
        """Return the newest session on ``socket_id``, or None."""
        with self._lock:
            return next((s for s in self._sessions if s.socket_id == socket_id), None)

    def remove_by_socket(self, socket_id: int) -> Session | None:
        """Remove the newest session on ``socket_id`` and return it, or None."""
        with self._lock:
            session = self.find_by_socket(socket_id)
            if session is not None:
                self._sessions.remove(session)
            return session

    def clear(self) -> None:
        """Drop every session."""
        with self._lock:
            self._sessions.clear()

    def usernames(self) -> list[str]:
        """Return the usernames of all sessions, newest first."""
        with self._lock:
            return [s.username for s in self._sessions]

    def online_list(self) -> str:
        """Return the online-users reply: a leading space, then each name followed by a space."""
        return " " + "".join(f"{name} " for name in self.usernames())

    def format_table(self) -> str:
        """Return a tab-separated table of all sessions."""
        with self._lock:
            rows = [
                f"{s.socket_id}\t\t{s.client_addr}\t\t{s.username}\t\t{s.login_status}"
                for s in self._sessions
            ]
        header = "Socket ID\tClient Address\t\t\tUsername\tLogin Status"
        return "\n".join([header, *rows]) + "\n"