"""Line echo server over TCP and a client that sends two lines to it."""

from __future__ import annotations

import argparse
import re
import socket
import sys

__all__ = [
    "SERVER_ADDRESS",
    "SERVER_PORT",
    "BUFF_SIZE",
    "split_lines",
    "handle_connection",
    "serve",
    "server_main",
    "client_main",
]

SERVER_ADDRESS = "127.0.0.1"
SERVER_PORT = 12345
BUFF_SIZE = 1024

_LINE_BREAKS = re.compile(rb"[\r\n]+")


def split_lines(data: bytes) -> list[bytes]:
    """Split ``data`` on CR and LF characters, dropping empty pieces."""
    return [piece for piece in _LINE_BREAKS.split(data) if piece]


def _describe_peer(conn: socket.socket) -> str:
    try:
        peer = conn.getpeername()
    except OSError:
        return "unknown"
    if isinstance(peer, tuple):
        return f"{peer[0]}:{peer[1]}"
    return str(peer) or "local"


def handle_connection(conn: socket.socket) -> int:
    """Echo each received line back until the client leaves; close ``conn``.

    Returns the number of lines echoed.
    """
    peer = _describe_peer(conn)
    echoed = 0
    with conn:
        while True:
            try:
                data = conn.recv(BUFF_SIZE)
            except OSError as exc:
                print(f"Error: {exc}", file=sys.stderr)
                break
            if not data:
                print("Client disconnected.")
                break
            for token in split_lines(data):
                text = token.decode("utf-8", errors="replace")
                print(f"Received from client[{peer}]: {text}")
                try:
                    conn.sendall(token)
                except OSError as exc:
                    print(f"Error: {exc}", file=sys.stderr)
                    break
                echoed += 1
    return echoed


def serve(port: int = SERVER_PORT) -> None:
    """Accept clients on ``port`` one after another, forever."""
    with socket.create_server(("", port), backlog=10) as server:
        print("Server started!")
        while True:
            conn, _ = server.accept()
            handle_connection(conn)


def server_main(argv: list[str] | None = None) -> int:
    """Run the echo server from the command line."""
    parser = argparse.ArgumentParser(prog="echo-server")
    parser.add_argument("--port", type=int, default=SERVER_PORT)
    args = parser.parse_args(sys.argv[1:] if argv is None else argv)
    try:
        serve(args.port)
    except KeyboardInterrupt:
        return 0
    except OSError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


def client_main(argv: list[str] | None = None) -> int:
    """Send two lines to the echo server and print what comes back."""
    parser = argparse.ArgumentParser(prog="echo-client")
    parser.add_argument("--host", default=SERVER_ADDRESS)
    parser.add_argument("--port", type=int, default=SERVER_PORT)
    args = parser.parse_args(sys.argv[1:] if argv is None else argv)
    try:
        sock = socket.create_connection((args.host, args.port))
    except OSError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    with sock:
        try:
            for _ in range(2):
                try:
                    line = input("Send to server: ")
                except EOFError:
                    break
                sock.sendall(line.encode("utf-8") + b"\r\n")
            sock.shutdown(socket.SHUT_WR)
            while True:
                data = sock.recv(BUFF_SIZE)
                if not data:
                    break
                print(f"Receive from server: {data.decode('utf-8', errors='replace')}")
        except OSError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(server_main())