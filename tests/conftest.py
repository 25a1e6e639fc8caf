import io
import socket
import time

import pytest
from rich.console import Console


@pytest.fixture
def listener():
    """Port on 127.0.0.1 with a listening socket; the kernel completes handshakes from the backlog."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    sock.listen(128)
    yield sock.getsockname()[1]
    sock.close()


@pytest.fixture
def saturated_listener():
    """
    Port on 127.0.0.1 whose accept queue is already full.
    Linux drops further SYNs, so new connects stay pending.
    """
    server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    server.bind(("127.0.0.1", 0))
    server.listen(0)
    port = server.getsockname()[1]
    fillers = []
    for _ in range(4):
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        sock.setblocking(False)
        sock.connect_ex(("127.0.0.1", port))
        fillers.append(sock)
    time.sleep(0.2)
    yield port
    for sock in fillers:
        sock.close()
    server.close()


@pytest.fixture
def closed_port():
    """Port on 127.0.0.1 that nothing is listening on"""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    return port


@pytest.fixture
def output():
    """Rich console writing plain text into a buffer"""
    buf = io.StringIO()
    return Console(file=buf, width=200, color_system=None), buf
