"""File upload over TCP: a receiving server and a sending client.

The client sends an upload request ``UPLD <name> <size>`` padded with NUL
bytes to a fixed size. The server answers ``+OK Please send file`` or a
``-ERR`` reply, the client then streams exactly ``size`` bytes, and the server
confirms with ``+OK Successful upload``. Replies are ``<status> <message>``
where the status is ``+OK`` or ``-ERR``.
"""

from __future__ import annotations

import argparse
import os
import re
import socket
import sys
from dataclasses import dataclass
from datetime import datetime
from os import PathLike
from pathlib import Path

from .framing import ConnectionClosed

__all__ = [
    "BASE_DIRECTORY",
    "DEFAULT_LOG_PATH",
    "FILE_SIZE_LIMIT",
    "REQUEST_SIZE",
    "CHUNK_SIZE",
    "WELCOME",
    "READY",
    "UPLOADED",
    "TOO_LARGE",
    "INVALID_REQUEST",
    "OPEN_FAILED",
    "RECV_FAILED",
    "ServerReply",
    "FileReceiver",
    "parse_reply",
    "parse_upload_request",
    "format_upload_request",
    "send_file",
    "log_event",
    "server_main",
    "client_main",
]

BASE_DIRECTORY = "TCP_Server/data"
DEFAULT_LOG_PATH = "TCP_Server/logs/server.log"
FILE_SIZE_LIMIT = 4294967296
REQUEST_SIZE = 1024
CHUNK_SIZE = 1024

WELCOME = "+OK Welcome to file server"
READY = "+OK Please send file"
UPLOADED = "+OK Successful upload"
TOO_LARGE = (
    "-ERR The file is too large, please make sure the file is smaller than "
    f"{FILE_SIZE_LIMIT} byte"
)
INVALID_REQUEST = "-ERR Invalid upload request"
OPEN_FAILED = "-ERR Error opening file for writing"
RECV_FAILED = "-ERR Error receiving data from the client"

_STATUSES = ("+OK", "-ERR")
_REPLY = re.compile(r"\s*(\S+)\s+([^\n]+)")
_UPLOAD = re.compile(r"UPLD\s+(\S+)\s+(\d+)")


def _text(data: bytes | str) -> str:
    """Decode ``data`` if needed and cut it at the first NUL."""
    if isinstance(data, bytes):
        data = data.decode("utf-8", errors="replace")
    return data.split("\0", 1)[0]


@dataclass(frozen=True)
class ServerReply:
    """A status and message sent by the file server."""

    status: str
    message: str

    @property
    def ok(self) -> bool:
        """True for a ``+OK`` reply."""
        return self.status == "+OK"

    def __str__(self) -> str:
        return f"{self.status} {self.message}"


def parse_reply(text: bytes | str) -> ServerReply:
    """Split a server reply into status and message.

    Raises ValueError when the reply has no message or an unknown status.
    """
    match = _REPLY.match(_text(text))
    if match is None:
        raise ValueError(f"invalid reply format {text!r}")
    status, message = match.groups()
    if status not in _STATUSES:
        raise ValueError(f"invalid reply status {status!r}")
    return ServerReply(status, message)


def parse_upload_request(text: bytes | str) -> tuple[str, int]:
    """Return the file name and size of an ``UPLD`` request.

    Raises ValueError when the request does not have that form.
    """
    match = _UPLOAD.match(_text(text))
    if match is None:
        raise ValueError(f"invalid upload request {text!r}")
    return match.group(1), int(match.group(2))


def format_upload_request(name: str, size: int) -> str:
    """Return the ``UPLD`` request for a file called ``name`` of ``size`` bytes."""
    if not name or any(ch.isspace() for ch in name):
        raise ValueError(f"invalid file name {name!r}")
    if size < 0:
        raise ValueError(f"invalid file size {size}")
    return f"UPLD {name} {size}"


def log_event(
    path: str | PathLike[str], ip: str, port: int, request: str, response: str
) -> str | None:
    """Append a timestamped line for one exchange to ``path`` and return it.

    Returns None when the log file cannot be opened.
    """
    stamp = datetime.now().strftime("[%d/%m/%Y %H:%M:%S]")
    line = f"{stamp} ${ip}:{port} ${request} ${response}\n"
    try:
        with open(path, "a", encoding="utf-8") as handle:
            handle.write(line)
    except OSError:
        print("Can not open file log")
        return None
    return line


def _recv_exactly(sock: socket.socket, count: int) -> bytes:
    chunks = bytearray()
    while len(chunks) < count:
        chunk = sock.recv(count - len(chunks))
        if not chunk:
            break
        chunks.extend(chunk)
    return bytes(chunks)


def _recv_reply(sock: socket.socket) -> bytes:
    data = sock.recv(REQUEST_SIZE)
    if not data:
        raise ConnectionClosed("server closed the connection")
    return data


class FileReceiver:
    """Stores uploaded files in ``directory`` and logs each exchange."""

    def __init__(
        self,
        directory: str | PathLike[str],
        log_path: str | PathLike[str] = DEFAULT_LOG_PATH,
    ) -> None:
        self.directory = Path(directory)
        self.log_path = log_path

    def _target(self, name: str) -> Path:
        base = Path(name).name
        if base in ("", ".", ".."):
            raise ValueError(f"invalid file name {name!r}")
        return self.directory / base

    def _reply(self, conn: socket.socket, message: str) -> None:
        conn.sendall(message.encode("utf-8"))
        print(f"Send: {message}")

    def receive(self, conn: socket.socket, client_ip: str, client_port: int) -> int:
        """Serve upload requests on ``conn`` until the client leaves.

        Returns the number of files stored. The connection is not closed.
        """
        uploaded = 0
        try:
            while True:
                raw = _recv_exactly(conn, REQUEST_SIZE)
                if len(raw) < REQUEST_SIZE:
                    print("Client disconnect")
                    return uploaded
                request = _text(raw)
                try:
                    name, size = parse_upload_request(request)
                    target = self._target(name)
                except ValueError:
                    self._reply(conn, INVALID_REQUEST)
                    log_event(
                        self.log_path, client_ip, client_port, request, INVALID_REQUEST
                    )
                    continue
                print(f"File name: {name}, file size: {size}")
                if size > FILE_SIZE_LIMIT:
                    self._reply(conn, TOO_LARGE)
                    continue
                self._reply(conn, READY)
                try:
                    handle = target.open("wb")
                except OSError as exc:
                    print(f"Error opening file for writing: {exc}", file=sys.stderr)
                    log_event(self.log_path, client_ip, client_port, request, OPEN_FAILED)
                    return uploaded
                print("Receiving ...")
                with handle:
                    received = 0
                    while received < size:
                        chunk = conn.recv(min(CHUNK_SIZE, size - received))
                        if not chunk:
                            log_event(
                                self.log_path, client_ip, client_port, request, RECV_FAILED
                            )
                            return uploaded
                        handle.write(chunk)
                        received += len(chunk)
                self._reply(conn, UPLOADED)
                log_event(self.log_path, client_ip, client_port, request, UPLOADED)
                uploaded += 1
        except OSError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            log_event(self.log_path, client_ip, client_port, " ", RECV_FAILED)
            return uploaded


def send_file(sock: socket.socket, path: str | PathLike[str]) -> list[ServerReply]:
    """Upload the file at ``path`` and return the server's replies in order.

    A refused request yields only the refusal; an accepted one yields the
    acceptance and the final result. Raises OSError if the file cannot be read,
    ConnectionClosed if the server goes away, ValueError for a malformed reply
    or a name that cannot be sent.
    """
    path = Path(path)
    with path.open("rb") as handle:
        size = os.fstat(handle.fileno()).st_size
        request = format_upload_request(path.name, size).encode("utf-8")
        if len(request) > REQUEST_SIZE:
            raise ValueError(f"upload request for {path.name!r} is too long")
        sock.sendall(request.ljust(REQUEST_SIZE, b"\0"))
        first = parse_reply(_recv_reply(sock))
        if not first.ok:
            return [first]
        while chunk := handle.read(CHUNK_SIZE):
            sock.sendall(chunk)
        return [first, parse_reply(_recv_reply(sock))]


def _show_reply(data: bytes | str) -> None:
    try:
        reply = parse_reply(data)
    except ValueError:
        print("Server: Invalid format.")
        return
    print(f'Server: "{reply.status}", "{reply.message}"')


def _serve(receiver: FileReceiver, port: int) -> None:
    with socket.create_server(("", port), backlog=5) as server:
        print(f"Server is listening on port {port}")
        while True:
            print("\nWaiting client connect ....")
            try:
                conn, addr = server.accept()
            except OSError as exc:
                print(f"Error accepting connection: {exc}", file=sys.stderr)
                continue
            client_ip, client_port = addr[0], addr[1]
            with conn:
                try:
                    conn.sendall(WELCOME.encode("utf-8"))
                    print(f"Send: {WELCOME}")
                except OSError as exc:
                    print(f"Send welcome message failed: {exc}", file=sys.stderr)
                    continue
                log_event(receiver.log_path, client_ip, client_port, " ", WELCOME)
                receiver.receive(conn, client_ip, client_port)


def server_main(argv: list[str] | None = None) -> int:
    """Run the file server from the command line."""
    parser = argparse.ArgumentParser(prog="file-server")
    parser.add_argument("port", type=int, help="port number to listen on")
    parser.add_argument("directory", help="directory name for uploaded files")
    parser.add_argument("--base", default=BASE_DIRECTORY, help="parent directory")
    parser.add_argument("--log", default=DEFAULT_LOG_PATH, help="log file")
    args = parser.parse_args(sys.argv[1:] if argv is None else argv)

    directory = Path(args.base) / args.directory
    try:
        directory.mkdir(parents=True)
    except FileExistsError:
        print(
            f"Directory {args.directory} already exists, "
            "no need to create a new directory"
        )
    receiver = FileReceiver(directory, args.log)
    try:
        _serve(receiver, args.port)
    except KeyboardInterrupt:
        return 0
    except OSError as exc:
        print(f"Error binding: {exc}", file=sys.stderr)
        return 1
    return 0


def client_main(argv: list[str] | None = None) -> int:
    """Prompt for file paths and upload each one to the server."""
    parser = argparse.ArgumentParser(prog="file-client")
    parser.add_argument("ip_address", help="server IP address")
    parser.add_argument("port", type=int, help="server port number")
    args = parser.parse_args(sys.argv[1:] if argv is None else argv)

    try:
        sock = socket.create_connection((args.ip_address, args.port))
    except OSError as exc:
        print(f"Error connecting to the server: {exc}", file=sys.stderr)
        return 1
    with sock:
        try:
            _show_reply(_recv_reply(sock))
        except OSError as exc:
            print(f"Error receiving welcome message: {exc}", file=sys.stderr)
            return 1
        while True:
            try:
                file_path = input("Enter file path (empty to exit): ")
            except EOFError:
                break
            if not file_path:
                break
            try:
                replies = send_file(sock, file_path)
            except (FileNotFoundError, IsADirectoryError, PermissionError):
                print(f"Error: Cannot open file '{file_path}'", file=sys.stderr)
                continue
            except ConnectionClosed:
                print("Server disconnect")
                return 1
            except ValueError as exc:
                print(f"Server: Invalid format. ({exc})")
                continue
            except OSError as exc:
                print(f"Error: {exc}", file=sys.stderr)
                return 1
            for reply in replies:
                print(f'Server: "{reply.status}", "{reply.message}"')
    return 0


if __name__ == "__main__":
    sys.exit(server_main())