"""Name resolution served over UDP, with a matching interactive client."""

from __future__ import annotations

import socket
import sys
from datetime import datetime
from os import PathLike

from .resolver import ResolutionError, domain_to_ipv4, is_ipv4

__all__ = [
    "DEFAULT_LOG_PATH",
    "NOT_FOUND_REPLY",
    "format_response",
    "log_request",
    "serve",
    "query",
    "server_main",
    "client_main",
]

DEFAULT_LOG_PATH = "UDP_Server/logs/server.log"
NOT_FOUND_REPLY = "\u2013Not found information"
SERVER_BUFFER_SIZE = 1024
CLIENT_BUFFER_SIZE = 10000


def _reverse_lookup(ipv4: str) -> str:
    try:
        host, _ = socket.getnameinfo((ipv4, 0), 0)
    except OSError as exc:
        raise ResolutionError(f"no name for {ipv4}: {exc}") from exc
    return host


def format_response(query: str) -> str:
    """Return the reply for one request.

    An address gets ``+name``, a domain gets ``+`` and its addresses separated
    by spaces; a failed lookup gets the not-found reply.
    """
    try:
        if is_ipv4(query):
            return "+" + _reverse_lookup(query)
        return "+" + " ".join(domain_to_ipv4(query))
    except ResolutionError:
        return NOT_FOUND_REPLY


def log_request(
    path: str | PathLike[str], request: str, response: str
) -> str | None:
    """Append a timestamped request/response line to ``path`` and return it.

    Returns None when the log file cannot be opened.
    """
    stamp = datetime.now().strftime("[%d/%m/%Y %H:%M:%S]")
    line = f"{stamp} $ {request} $ {response}\n"
    try:
        with open(path, "a", encoding="utf-8") as handle:
            handle.write(line)
    except OSError:
        print("Can not open file log")
        return None
    print(f"Response: {response}")
    return line


def serve(port: int, log_path: str | PathLike[str] = DEFAULT_LOG_PATH) -> None:
    """Answer resolution requests on UDP ``port`` forever."""
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
        sock.bind(("", port))
        print("Server is ready to receive requests...")
        while True:
            try:
                data, addr = sock.recvfrom(SERVER_BUFFER_SIZE)
            except ConnectionResetError:
                continue
            request = data.decode("utf-8", errors="replace")
            print(f"Received request: {request}")
            response = format_response(request)
            log_request(log_path, request, response)
            sock.sendto(response.encode("utf-8"), addr)


def query(host: str, port: int, text: str, timeout: float = 5.0) -> str:
    """Send ``text`` to the server and return its reply."""
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
        sock.settimeout(timeout)
        sock.sendto(text.encode("utf-8"), (host, port))
        data, _ = sock.recvfrom(CLIENT_BUFFER_SIZE)
    return data.decode("utf-8", errors="replace")


def server_main(argv: list[str] | None = None) -> int:
    """Run the UDP resolution server from the command line."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 1:
        print("Usage: server PortNumber")
        return 1
    try:
        port = int(args[0])
    except ValueError:
        print("Usage: server PortNumber")
        return 1
    try:
        serve(port)
    except KeyboardInterrupt:
        return 0
    except OSError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


def client_main(argv: list[str] | None = None) -> int:
    """Prompt for names or addresses and print the server's replies."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 2:
        print("Usage: client IPAddress PortNumber")
        return 1
    host = args[0]
    try:
        port = int(args[1])
    except ValueError:
        print("Usage: client IPAddress PortNumber")
        return 1
    while True:
        try:
            text = input("Enter an IP address or hostname (or press Enter to exit): ")
        except EOFError:
            break
        if len(text) <= 1:
            break
        try:
            reply = query(host, port, text)
        except TimeoutError:
            print("Error: no response from server")
            continue
        except OSError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 1
        print(f"Server response: {reply}")
    return 0


if __name__ == "__main__":
    sys.exit(server_main())