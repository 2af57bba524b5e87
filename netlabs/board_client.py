"""Interactive client for the message board server."""

from __future__ import annotations

import argparse
import socket
import sys
from typing import Callable

from .codes import status_message
from .framing import ConnectionClosed, FramingError, recv_frame, send_frame

__all__ = ["GREETING_LIMIT", "BoardClient", "parse_user_list", "render_menu", "main"]

GREETING_LIMIT = 1024


def parse_user_list(text: str) -> list[str]:
    """Split the server's online-users reply into usernames."""
    return [name for name in text.split(" ") if name]


def render_menu() -> str:
    """Return the text of the main menu."""
    return (
        "\n ------------------------------------------------------------------\n"
        "Menu:\n"
        "0. Sign up\n"
        "1. Log in\n"
        "2. View all user online\n"
        "3. Logout\n"
        "4. Exit\n"
        "5. Post article\n"
        "------------------------------------------------------------------\n"
    )


class BoardClient:
    """A connection to the board server."""

    def __init__(self, sock: socket.socket) -> None:
        self.sock = sock
        self.greeting: str | None = None

    @classmethod
    def connect(cls, host: str, port: int) -> "BoardClient":
        """Connect to the server and read its greeting."""
        sock = socket.create_connection((host, port))
        try:
            greeting = recv_frame(sock, GREETING_LIMIT)
        except BaseException:
            sock.close()
            raise
        client = cls(sock)
        client.greeting = greeting
        return client

    def __enter__(self) -> "BoardClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def request(self, message: str) -> str:
        """Send one request and return the server's reply."""
        send_frame(self.sock, message)
        return recv_frame(self.sock)

    def login(self, username: str) -> str:
        """Log in as ``username``; return the reply code."""
        return self.request(f"USER {username}")

    def sign_up(self, username: str) -> str:
        """Create the account ``username``; return the reply code."""
        return self.request(f"SIGNUP {username}")

    def logout(self) -> str:
        """Log out; return the reply code."""
        return self.request("BYE")

    def post_article(self, article: str) -> str:
        """Post ``article``; return the reply code."""
        return self.request(f"POST {article}")

    def online_users(self) -> list[str]:
        """Return the usernames currently logged in."""
        return parse_user_list(self.request("ONLINE 1"))

    def close(self) -> None:
        """Close the connection."""
        self.sock.close()


def _sign_up(client: BoardClient) -> None:
    username = input("Enter username: ")
    print(status_message(client.sign_up(username)))


def _login(client: BoardClient) -> None:
    username = input("Enter username: ")
    print(status_message(client.login(username)))


def _online(client: BoardClient) -> None:
    users = client.online_users()
    for name in users:
        print(f"{name} online")
    if not users:
        print("No users online")


def _logout(client: BoardClient) -> None:
    print(status_message(client.logout()))


def _post(client: BoardClient) -> None:
    article = input("Post article: ")
    print(status_message(client.post_article(article)))


_ACTIONS: dict[int, Callable[[BoardClient], None]] = {
    0: _sign_up,
    1: _login,
    2: _online,
    3: _logout,
    5: _post,
}
_EXIT_CHOICE = 4


def _parse_choice(raw: str) -> int | None:
    try:
        return int(raw.strip())
    except ValueError:
        return None


def main(argv: list[str] | None = None) -> int:
    """Run the interactive client from the command line."""
    parser = argparse.ArgumentParser(prog="board-client")
    parser.add_argument("ip_address", help="server IP address")
    parser.add_argument("port", type=int, help="server port number")
    args = parser.parse_args(sys.argv[1:] if argv is None else argv)

    try:
        client = BoardClient.connect(args.ip_address, args.port)
    except (OSError, FramingError) as exc:
        print(f"Error connecting to the server: {exc}", file=sys.stderr)
        return 1
    print(status_message(client.greeting or ""))

    with client:
        while True:
            print(render_menu(), end="")
            try:
                raw = input("Enter your choice(0-5): ")
            except EOFError:
                return 0
            choice = _parse_choice(raw)
            if choice == _EXIT_CHOICE:
                return 0
            action = _ACTIONS.get(choice) if choice is not None else None
            if action is None:
                print("Invalid choice. Please enter a valid option (0-5).")
                continue
            try:
                action(client)
            except EOFError:
                return 0
            except ConnectionClosed:
                print("Server disconnect")
                return 1
            except FramingError:
                print("Invalid message length. Disconnecting Server.", file=sys.stderr)
                return 1
            except OSError as exc:
                print(f"Error: {exc}", file=sys.stderr)
                return 1


if __name__ == "__main__":
    sys.exit(main())