"""Multi-client message board server speaking the framed text protocol.

Requests are ``KEYWORD parameter`` lines: ``USER name`` logs in, ``SIGNUP name``
creates an account, ``POST text`` posts an article, ``ONLINE`` lists the
logged-in users and ``BYE`` logs out. Every reply is a status code, except the
online list, which is the space-separated usernames.
"""

from __future__ import annotations

import argparse
import logging
import socket
import sys
import threading

from .accounts import AccountStore
from .codes import Code, LoginStatus
from .framing import ConnectionClosed, FramingError, recv_frame, send_frame
from .sessions import SessionRegistry

__all__ = ["DEFAULT_ACCOUNTS_PATH", "BoardService", "serve_client", "serve", "main"]

DEFAULT_ACCOUNTS_PATH = "./TCP_Server/database/account.txt"

log = logging.getLogger(__name__)


def _split_command(message: str) -> tuple[str, str]:
    """Split a request into its keyword and the rest of its first line."""
    parts = message.split(maxsplit=1)
    if not parts:
        return "", ""
    keyword = parts[0]
    rest = parts[1] if len(parts) > 1 else ""
    return keyword, rest.split("\n", 1)[0]


class BoardService:
    """Request handling shared by all client connections."""

    def __init__(self, accounts: AccountStore, sessions: SessionRegistry) -> None:
        self.accounts = accounts
        self.sessions = sessions
        self.articles: list[tuple[str, str]] = []

    def _logged_in(self, client_id: int) -> bool:
        return self.sessions.find_by_socket(client_id) is not None

    def handle(self, client_id: int, message: str) -> str:
        """Process one request from ``client_id`` and return the reply text."""
        log.info("Recv from client %d: %s", client_id, message)
        keyword, parameter = _split_command(message)
        if keyword == "USER":
            reply: object = self.login(client_id, parameter)
        elif keyword == "SIGNUP":
            reply = self.sign_up(client_id, parameter)
        elif keyword == "POST":
            reply = self.post_article(client_id, parameter)
        elif keyword == "ONLINE":
            reply = self.online_users(client_id)
        elif keyword == "BYE":
            reply = self.logout(client_id)
        else:
            reply = Code.UNDEFINED_MESSAGE_TYPE
        return str(reply)

    def login(self, client_id: int, username: str) -> Code:
        """Log ``client_id`` in as ``username``."""
        if self._logged_in(client_id):
            return Code.ACCOUNT_ALREADY_LOGGED_IN
        other = self.sessions.find_by_username(username)
        if other is not None and other.socket_id != client_id:
            return Code.ACCOUNT_ALREADY_LOGGED_IN_ANOTHER_DEVICE
        result = self.accounts.verify(username)
        if result == LoginStatus.ACCOUNT_BANNED:
            return Code.ACCOUNT_LOCKED
        if result == LoginStatus.ACCOUNT_NOT_EXIST:
            return Code.ACCOUNT_NOT_FOUND
        if result == LoginStatus.ACCOUNT_VALID:
            self.sessions.add(client_id, "", 0, username, LoginStatus.LOGGED_IN)
            return Code.ACCOUNT_EXISTS_AND_ACTIVE
        return Code.DATABASE_ERROR

    def sign_up(self, client_id: int, username: str) -> Code:
        """Create an active account named ``username``."""
        if self._logged_in(client_id):
            return Code.ACCOUNT_ALREADY_LOGGED_IN
        if self.accounts.exists(username):
            return Code.ACCOUNT_EXISTED
        try:
            self.accounts.add(username)
        except ValueError:
            return Code.UNDEFINED_MESSAGE_TYPE
        return Code.SIGN_UP_SUCCESSFULLY

    def logout(self, client_id: int) -> Code:
        """End the session of ``client_id``."""
        if self.sessions.remove_by_socket(client_id) is None:
            return Code.NOT_HAVE_ACCESS
        return Code.LOGOUT_SUCCESSFULLY

    def post_article(self, client_id: int, article: str) -> Code:
        """Accept an article from a logged-in client."""
        session = self.sessions.find_by_socket(client_id)
        if session is None:
            return Code.NOT_HAVE_ACCESS
        self.articles.append((session.username, article))
        log.info("Client post article: %s", article)
        return Code.POST_SUCCESSFULLY

    def online_users(self, client_id: int) -> str:
        """Return the list of logged-in usernames as sent on the wire."""
        users = self.sessions.online_list()
        log.info("Client %d asked for online users: %s", client_id, users)
        return users

    def disconnect(self, client_id: int) -> None:
        """Forget any session left by a client that went away."""
        self.sessions.remove_by_socket(client_id)


def serve_client(service: BoardService, conn: socket.socket, client_id: int) -> None:
    """Talk to one client until it disconnects, then close ``conn``."""
    log.info("Client %d request connect", client_id)
    with conn:
        try:
            send_frame(conn, str(Code.CONNECTED_SUCCESSFULLY))
            while True:
                message = recv_frame(conn)
                reply = service.handle(client_id, message)
                send_frame(conn, reply)
                log.info("Send to client %d: %s", client_id, reply)
        except ConnectionClosed:
            log.info("Client %d disconnect", client_id)
        except FramingError:
            log.warning("Invalid message length. Disconnecting client %d.", client_id)
        except OSError as exc:
            log.warning("Error with client %d: %s", client_id, exc)
        finally:
            service.disconnect(client_id)


def serve(service: BoardService, host: str = "", port: int = 0) -> None:
    """Accept clients forever, each in its own thread."""
    with socket.create_server((host, port), backlog=5) as server:
        print(f"Server is listening on port {server.getsockname()[1]}")
        while True:
            try:
                conn, _ = server.accept()
            except (InterruptedError, ConnectionAbortedError) as exc:
                log.warning("Error accepting connection: %s", exc)
                continue
            threading.Thread(
                target=serve_client,
                args=(service, conn, conn.fileno()),
                daemon=True,
            ).start()


def main(argv: list[str] | None = None) -> int:
    """Run the board server from the command line."""
    parser = argparse.ArgumentParser(prog="board-server")
    parser.add_argument("port", type=int, help="port number to listen on")
    parser.add_argument(
        "--accounts", default=DEFAULT_ACCOUNTS_PATH, help="account database file"
    )
    args = parser.parse_args(sys.argv[1:] if argv is None else argv)
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    service = BoardService(AccountStore(args.accounts), SessionRegistry())
    try:
        serve(service, "", args.port)
    except KeyboardInterrupt:
        return 0
    except OSError as exc:
        print(f"Error binding: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())