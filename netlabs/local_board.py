"""Single-user message board run from the terminal, with an action log.

Each action is appended to a log file as
``[dd/mm/YYYY HH:MM:SS] $ <function> $ <user> $ <result>``, where the function
is the menu number of the action and the result is ``+OK`` or ``-ERROR``.
"""

from __future__ import annotations

import argparse
import sys
from datetime import datetime
from os import PathLike
from pathlib import Path

from .accounts import AccountStore
from .codes import LoginStatus

__all__ = [
    "DEFAULT_ACCOUNTS_PATH",
    "DEFAULT_LOG_PATH",
    "RESULT_OK",
    "RESULT_ERROR",
    "LocalBoard",
    "main",
]

DEFAULT_ACCOUNTS_PATH = "./database/account.txt"
DEFAULT_LOG_PATH = "logs/board.log"
RESULT_OK = "+OK"
RESULT_ERROR = "-ERROR"

_MENU = (
    "\n ------------------------------------------------------------------\n"
    "Menu:\n"
    "1. Log in\n"
    "2. Post message\n"
    "3. Logout\n"
    "4. Exit\n"
    "------------------------------------------------------------------\n"
)


class LocalBoard:
    """Tracks the logged-in user and records every action in a log file."""

    def __init__(
        self,
        accounts: AccountStore | str | PathLike[str],
        log_path: str | PathLike[str] = DEFAULT_LOG_PATH,
    ) -> None:
        self.accounts = (
            accounts if isinstance(accounts, AccountStore) else AccountStore(accounts)
        )
        self.log_path = Path(log_path)
        self.current_user: str | None = None

    @property
    def logged_in(self) -> bool:
        """True while a user is logged in."""
        return self.current_user is not None

    def _log(self, function: str, user: str, result: str) -> str:
        """Append one log line and return it; raises OSError if the log cannot be opened."""
        stamp = datetime.now().strftime("[%d/%m/%Y %H:%M:%S]")
        line = f"{stamp} $ {function} $ {user} $ {result}\n"
        with self.log_path.open("a", encoding="utf-8") as handle:
            handle.write(line)
        return line

    def _verify(self, username: str) -> LoginStatus:
        if self.logged_in:
            return LoginStatus.LOGGED_IN
        return self.accounts.verify(username)

    def login(self, username: str) -> str:
        """Log in as ``username`` and return the message for the user.

        Raises FileNotFoundError when the account database is missing and
        OSError when the log cannot be written.
        """
        result = self._verify(username)
        if result == LoginStatus.LOGGED_IN:
            message, outcome = "You have already logged in", RESULT_ERROR
        elif result == LoginStatus.ACCOUNT_BANNED:
            message, outcome = "Account is banned ", RESULT_ERROR
        elif result == LoginStatus.ACCOUNT_NOT_EXIST:
            message, outcome = "Account is not exist", RESULT_ERROR
        elif result == LoginStatus.ACCOUNT_VALID:
            self.current_user = username
            message, outcome = f"Hello {username}", RESULT_OK
        else:
            return ""
        self._log("1", username, outcome)
        return message

    def logout(self) -> str:
        """Log the current user out and return the message for the user."""
        if self.logged_in:
            self.current_user = None
            self._log("3", "", RESULT_OK)
            return "Successful log out"
        self._log("3", "", RESULT_ERROR)
        return "You have not logged in."

    def post_message(self, message: str) -> str:
        """Post ``message`` if a user is logged in; return the message for the user."""
        if not self.logged_in:
            self._log("2", message, RESULT_ERROR)
            return "You have not logged in."
        self._log("2", message, RESULT_OK)
        return "Successful post "


def _parse_choice(raw: str) -> int | None:
    fields = raw.split()
    if not fields:
        return None
    try:
        return int(fields[0])
    except ValueError:
        return None


def main(argv: list[str] | None = None) -> int:
    """Run the interactive board from the command line."""
    parser = argparse.ArgumentParser(prog="local-board")
    parser.add_argument(
        "--accounts", default=DEFAULT_ACCOUNTS_PATH, help="account database file"
    )
    parser.add_argument("--log", default=DEFAULT_LOG_PATH, help="log file")
    args = parser.parse_args(sys.argv[1:] if argv is None else argv)
    board = LocalBoard(args.accounts, args.log)

    while True:
        print(_MENU, end="")
        try:
            choice = _parse_choice(input("Enter your choice(1-4): "))
            if choice == 1:
                reply = board.login(input("Enter username: "))
            elif choice == 2:
                reply = board.post_message(input("Post message: "))
            elif choice == 3:
                reply = board.logout()
            elif choice == 4:
                board._log("4", "", RESULT_OK)
                print("Exit successfully")
                return 0
            else:
                print("Invalid choice. Please enter a valid option (1-4).")
                continue
        except EOFError:
            return 0
        except FileNotFoundError:
            print("Unable to open the file.")
            return 1
        except OSError:
            print("Can not open file log")
            continue
        if reply:
            print(reply)


if __name__ == "__main__":
    sys.exit(main())