"""Length-prefixed message frames used by the board protocol.

A frame is the UTF-8 message preceded by its byte length written as a
four-character, space-padded decimal number.
"""

from __future__ import annotations

import re
import socket

__all__ = [
    "HEADER_SIZE",
    "MAX_MESSAGE_LENGTH",
    "FramingError",
    "ConnectionClosed",
    "encode_frame",
    "parse_length",
    "send_frame",
    "recv_frame",
]

HEADER_SIZE = 4
MAX_MESSAGE_LENGTH = 100

_MAX_ENCODABLE = 10**HEADER_SIZE - 1
_LENGTH_FIELD = re.compile(rb"\s*[+-]?\d+")


class FramingError(ValueError):
    """A frame header or body is not valid."""


class ConnectionClosed(ConnectionError):
    """The peer closed the connection."""


def encode_frame(message: str) -> bytes:
    """Return the bytes of a frame carrying ``message``."""
    body = message.encode("utf-8")
    if len(body) > _MAX_ENCODABLE:
        raise FramingError(
            f"message of {len(body)} bytes does not fit a {HEADER_SIZE}-digit header"
        )
    return f"{len(body):{HEADER_SIZE}d}".encode("ascii") + body


def parse_length(header: bytes | str, limit: int = MAX_MESSAGE_LENGTH) -> int:
    """Return the body length announced by ``header``.

    The field may have leading whitespace and a sign but nothing after the
    digits; the length must be positive and at most ``limit``.
    """
    if isinstance(header, str):
        header = header.encode("ascii", errors="replace")
    field = header.split(b"\0", 1)[0]
    if not _LENGTH_FIELD.fullmatch(field):
        raise FramingError(f"invalid message length field {field!r}")
    length = int(field)
    if length <= 0 or length > limit:
        raise FramingError(f"invalid message length {length}")
    return length


def _recv_exactly(sock: socket.socket, count: int) -> bytes:
    chunks = bytearray()
    while len(chunks) < count:
        chunk = sock.recv(count - len(chunks))
        if not chunk:
            break
        chunks.extend(chunk)
    return bytes(chunks)


def send_frame(sock: socket.socket, message: str) -> None:
    """Send ``message`` as one frame."""
    sock.sendall(encode_frame(message))


def recv_frame(sock: socket.socket, limit: int = MAX_MESSAGE_LENGTH) -> str:
    """Receive one frame and return its message.

    Raises ConnectionClosed when the peer has gone and FramingError when the
    header is invalid; closing the socket is left to the caller.
    """
    header = _recv_exactly(sock, HEADER_SIZE)
    if not header:
        raise ConnectionClosed("peer closed the connection")
    length = parse_length(header, limit)
    body = _recv_exactly(sock, length)
    if len(body) < length:
        raise ConnectionClosed(
            f"peer closed the connection after {len(body)} of {length} bytes"
        )
    return body.decode("utf-8", errors="replace")