"""Status codes exchanged between the board server and its clients."""

from __future__ import annotations

import re
from enum import IntEnum

__all__ = ["Code", "LoginStatus", "AccountStatus", "status_message"]


class Code(IntEnum):
    """Reply codes sent by the board server."""

    CONNECTED_SUCCESSFULLY = 100

    ACCOUNT_EXISTS_AND_ACTIVE = 110
    POST_SUCCESSFULLY = 120
    LOGOUT_SUCCESSFULLY = 130

    ACCOUNT_LOCKED = 211
    ACCOUNT_NOT_FOUND = 212
    ACCOUNT_ALREADY_LOGGED_IN_ANOTHER_DEVICE = 213
    ACCOUNT_ALREADY_LOGGED_IN = 214
    DATABASE_ERROR = 215

    NOT_HAVE_ACCESS = 221

    UNDEFINED_MESSAGE_TYPE = 300

    ACCOUNT_EXISTED = 410
    SIGN_UP_SUCCESSFULLY = 411

    GET_LIST_USER_ONLINE_SUCCESSFULLY = 511

    def __str__(self) -> str:
        return str(self.value)


class LoginStatus(IntEnum):
    """Outcome of checking an account or a client's login state."""

    ACCOUNT_NOT_EXIST = 1
    ACCOUNT_BANNED = 2
    LOGGED_IN = 3
    NOT_LOGGED_IN = 4
    ACCOUNT_VALID = 5
    LOGGED_IN_ON_ANOTHER_DEVICE = 6
    UNDEFINED = 7


class AccountStatus(IntEnum):
    """Status column of the account database."""

    BAN = 0
    ACTIVE = 1


_MESSAGES: dict[int, str] = {
    Code.CONNECTED_SUCCESSFULLY: "Connection to the service successful.",
    Code.ACCOUNT_EXISTS_AND_ACTIVE: "Login successfully.",
    Code.ACCOUNT_LOCKED: "Login failed: Account is locked.",
    Code.ACCOUNT_NOT_FOUND: "Login failed: Account does not exist.",
    Code.ACCOUNT_ALREADY_LOGGED_IN_ANOTHER_DEVICE: (
        "Login failed: Account is already logged in on another client."
    ),
    Code.ACCOUNT_ALREADY_LOGGED_IN: "Login failed: You are already logged in.",
    Code.DATABASE_ERROR: "Login failed: Database error.",
    Code.UNDEFINED_MESSAGE_TYPE: "Login failed: Undefined message request type.",
    Code.POST_SUCCESSFULLY: "Post article successful.",
    Code.NOT_HAVE_ACCESS: "Cannot use the service, you are not logged in.",
    Code.LOGOUT_SUCCESSFULLY: "Logout successful.",
    Code.ACCOUNT_EXISTED: "Account exited, please other username",
    Code.SIGN_UP_SUCCESSFULLY: "Sign up successfully, please login to use services",
    Code.GET_LIST_USER_ONLINE_SUCCESSFULLY: "Get list user successfully",
}

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _leading_int(text: str) -> int:
    """Read the integer at the start of ``text`` the way atoi does; 0 if none."""
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def status_message(code: int | str) -> str:
    """Return the human-readable text for a reply code or a reply string."""
    number = code if isinstance(code, int) else _leading_int(code)
    try:
        return _MESSAGES[number]
    except KeyError:
        return f"Unknown status code: {int(number)}"