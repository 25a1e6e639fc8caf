import asyncio
import socket
from typing import List, Set

from .errors import PortSpecError, TargetResolutionError

MIN_PORT = 1
MAX_PORT = 65535


class ConcurrencyLimiter:
    """
    Bounded admission for connect probes.
    Wraps a semaphore and keeps track of how many probes are in flight,
    plus the highest value seen during the scan.
    """
    def __init__(self, max_in_flight: int = 1000):
        if max_in_flight < 1:
            raise ValueError("max_in_flight must be at least 1")
        self.max = max_in_flight
        self.in_flight = 0
        self.peak = 0
        self._semaphore = asyncio.Semaphore(max_in_flight)

    async def __aenter__(self):
        await self._semaphore.acquire()
        self.in_flight += 1
        self.peak = max(self.peak, self.in_flight)
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.in_flight -= 1
        self._semaphore.release()
        return False


def _parse_port(text: str, token: str) -> int:
    text = text.strip()
    if not text:
        raise PortSpecError(token, "empty")
    # isdigit alone admits non-ASCII digits such as "²" and "٨"
    if not (text.isascii() and text.isdigit()):
        raise PortSpecError(token, "non-numeric")
    port = int(text)
    if not MIN_PORT <= port <= MAX_PORT:
        raise PortSpecError(token, "out of range")
    return port


def parse_ports(port_input: str) -> List[int]:
    """
    Parses a comma separated port specification into a sorted list of unique ports.
    Example: "22,80,8000-8002" -> [22, 80, 8000, 8001, 8002]

    Raises PortSpecError on the first malformed token.
    """
    if not port_input or not port_input.strip():
        raise PortSpecError(port_input or "", "empty")

    ports: Set[int] = set()
    for raw in port_input.split(','):
        token = raw.strip()
        if not token:
            raise PortSpecError(raw, "empty")

        if '-' in token:
            parts = token.split('-')
            if len(parts) != 2:
                raise PortSpecError(token, "non-numeric")
            start = _parse_port(parts[0], token)
            end = _parse_port(parts[1], token)
            if start > end:
                raise PortSpecError(token, "inverted range")
            ports.update(range(start, end + 1))
        else:
            ports.add(_parse_port(token, token))

    return sorted(ports)


def resolve_target(target: str) -> str:
    """
    Resolves a hostname or address literal to the first usable address.
    IPv4 and IPv6 literals come back unchanged.
    """
    try:
        infos = socket.getaddrinfo(target, None, type=socket.SOCK_STREAM)
    except (socket.gaierror, UnicodeError) as e:
        raise TargetResolutionError(target, str(e)) from e

    if not infos:
        raise TargetResolutionError(target, "no addresses returned")
    # sockaddr is (host, port) for IPv4, (host, port, flow, scope) for IPv6
    return infos[0][4][0]
