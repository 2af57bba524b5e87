"""Forward and reverse IPv4 name resolution from the command line."""

from __future__ import annotations

import socket
import sys

__all__ = [
    "NOT_FOUND",
    "ResolutionError",
    "is_ipv4",
    "domain_to_ipv4",
    "ipv4_to_domain",
    "resolve",
    "main",
]

NOT_FOUND = "Not found information"


class ResolutionError(LookupError):
    """A name or an address could not be resolved."""


def is_ipv4(text: str) -> bool:
    """Return True if ``text`` is a dotted-quad IPv4 address."""
    try:
        socket.inet_pton(socket.AF_INET, text)
    except (OSError, ValueError):
        return False
    return True


def domain_to_ipv4(domain: str) -> list[str]:
    """Return the IPv4 addresses that ``domain`` resolves to, in resolver order."""
    try:
        infos = socket.getaddrinfo(domain, None, socket.AF_INET, socket.SOCK_STREAM)
    except (OSError, UnicodeError, ValueError) as exc:
        raise ResolutionError(f"cannot resolve {domain!r}: {exc}") from exc
    return [info[4][0] for info in infos]


def ipv4_to_domain(ipv4: str) -> list[str]:
    """Return the host name of ``ipv4`` followed by its aliases."""
    if not is_ipv4(ipv4):
        raise ResolutionError(f"{ipv4!r} is not an IPv4 address")
    try:
        name, aliases, _ = socket.gethostbyaddr(ipv4)
    except OSError as exc:
        raise ResolutionError(f"no name for {ipv4}: {exc}") from exc
    return [name, *aliases]


def resolve(parameter: str) -> list[str]:
    """Resolve an address to names, or a name to addresses."""
    if is_ipv4(parameter):
        return ipv4_to_domain(parameter)
    return domain_to_ipv4(parameter)


def main(argv: list[str] | None = None) -> int:
    """Resolve the single command-line parameter and print the result."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 1:
        print("Usage: resolver parameter")
        return 1
    try:
        results = resolve(args[0])
    except ResolutionError:
        print(NOT_FOUND)
        return 0
    print("Result: ")
    for line in results:
        print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())