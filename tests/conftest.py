"""Shared pytest fixtures and configuration for the jsondb-client test suite.

Guidelines
----------
* No internet access in any test — only loopback sockets and socket pairs.
* Core tests must be pure — transports are mocked at the protocol boundary.
* Tests must not depend on OS state.
"""

from __future__ import annotations

import logging
import socket
import threading
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field

import pytest

from jsondb_client.cli.log import PACKAGE_LOGGER


@dataclass
class LoopbackServer:
    """A one-shot framed server running on 127.0.0.1."""

    port: int
    received: list[bytes] = field(default_factory=list)

    @property
    def address(self) -> str:
        return f"127.0.0.1:{self.port}"


def _recv_exact(conn: socket.socket, size: int) -> bytes:
    buffer = bytearray()
    while len(buffer) < size:
        chunk = conn.recv(size - len(buffer))
        if not chunk:
            break
        buffer.extend(chunk)
    return bytes(buffer)


@pytest.fixture
def serve_once() -> Iterator[Callable[..., LoopbackServer]]:
    """Start a server that reads one framed request and writes *reply*.

    ``reply=None`` keeps the connection open without answering until the
    test finishes (used for timeout scenarios).
    """
    release = threading.Event()
    listeners: list[socket.socket] = []
    threads: list[threading.Thread] = []

    def _start(reply: bytes | None) -> LoopbackServer:
        listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        listener.bind(("127.0.0.1", 0))
        listener.listen(1)
        listener.settimeout(5)
        server = LoopbackServer(port=listener.getsockname()[1])

        def _serve() -> None:
            try:
                conn, _ = listener.accept()
            except OSError:
                return
            with conn:
                conn.settimeout(5)
                header = _recv_exact(conn, 2)
                if len(header) == 2:
                    length = int.from_bytes(header, "big")
                    server.received.append(_recv_exact(conn, length))
                if reply is None:
                    release.wait(5)
                    return
                conn.sendall(reply)

        thread = threading.Thread(target=_serve, daemon=True)
        thread.start()
        listeners.append(listener)
        threads.append(thread)
        return server

    yield _start

    release.set()
    for thread in threads:
        thread.join(timeout=5)
    for listener in listeners:
        listener.close()


@pytest.fixture
def closed_port() -> int:
    """Return a loopback port that nothing is listening on."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    port = int(sock.getsockname()[1])
    sock.close()
    return port


@pytest.fixture(autouse=True)
def _reset_package_logger() -> Iterator[None]:
    yield
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
