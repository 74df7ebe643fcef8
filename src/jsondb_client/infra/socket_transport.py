"""TCP implementation of :class:`~jsondb_client.core.protocols.Transport`.

This module is the **only** place in the codebase that imports
``socket``.  All ``OSError`` variants are caught here and re-raised as
typed :class:`~jsondb_client.exceptions.JsonDbClientError` subclasses —
nothing raw escapes the infrastructure boundary.
"""

from __future__ import annotations

import logging
import socket
import time

from jsondb_client import config
from jsondb_client.core.models import Endpoint
from jsondb_client.exceptions import (
    ConnectionFailedError,
    MalformedResponseError,
    ResponseTimeoutError,
)
from jsondb_client.infra.framing import decode_modified_utf8, frame_length, pack_frame

logger = logging.getLogger(__name__)


class SocketConnection:
    """One framed request/response conversation over a connected socket.

    The receive deadline is measured from the start of :meth:`receive`,
    so a slow trickle of bytes cannot extend it.
    """

    def __init__(self, sock: socket.socket, *, timeout: float) -> None:
        self._sock: socket.socket | None = sock
        self._timeout = timeout

    def _socket(self) -> socket.socket:
        if self._sock is None:
            raise ConnectionFailedError("Connection is already closed.")
        return self._sock

    # ------------------------------------------------------------------
    # Protocol methods
    # ------------------------------------------------------------------

    def send(self, frame: bytes) -> None:
        sock = self._socket()
        sock.settimeout(self._timeout)
        try:
            sock.sendall(frame)
        except TimeoutError as exc:
            raise ResponseTimeoutError(
                f"Timed out after {self._timeout:g}s while sending the request.",
            ) from exc
        except OSError as exc:
            raise ConnectionFailedError(
                f"Connection lost while sending: {exc}",
            ) from exc

    def receive(self) -> str:
        deadline = time.monotonic() + self._timeout
        header = self._recv_exact(config.FRAME_HEADER_SIZE, deadline)
        body = self._recv_exact(frame_length(header), deadline)
        return decode_modified_utf8(body)

    def close(self) -> None:
        if self._sock is None:
            return
        sock, self._sock = self._sock, None
        sock.close()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _recv_exact(self, size: int, deadline: float) -> bytes:
        """Read exactly *size* bytes or raise before *deadline* passes."""
        sock = self._socket()
        buffer = bytearray()
        while len(buffer) < size:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise self._timed_out()
            sock.settimeout(remaining)
            try:
                chunk = sock.recv(size - len(buffer))
            except TimeoutError as exc:
                raise self._timed_out() from exc
            except OSError as exc:
                raise ConnectionFailedError(
                    f"Connection lost while waiting for the response: {exc}",
                ) from exc
            if not chunk:
                raise self._closed_early(len(buffer), size)
            buffer.extend(chunk)
        return bytes(buffer)

    def _timed_out(self) -> ResponseTimeoutError:
        return ResponseTimeoutError(
            f"No complete response within {self._timeout:g}s.",
            hint="Increase --timeout or check that the server is responsive.",
        )

    @staticmethod
    def _closed_early(received: int, expected: int) -> Exception:
        if received == 0 and expected == config.FRAME_HEADER_SIZE:
            return ConnectionFailedError(
                "Server closed the connection without responding.",
            )
        return MalformedResponseError(
            f"Connection closed after {received} of {expected} bytes.",
        )


class SocketTransport:
    """Concrete :class:`Transport` opening plain TCP connections.

    This class satisfies the :class:`~jsondb_client.core.protocols.Transport`
    protocol structurally — no explicit inheritance required.
    """

    def encode(self, message: str) -> bytes:
        return pack_frame(message)

    def connect(self, endpoint: Endpoint, timeout: float) -> SocketConnection:
        try:
            sock = socket.create_connection(
                (endpoint.host, endpoint.port),
                timeout=timeout,
            )
        except TimeoutError as exc:
            raise ConnectionFailedError(
                f"Timed out connecting to {endpoint} after {timeout:g}s.",
                hint="Check the address and that the server is running.",
            ) from exc
        except OSError as exc:
            raise ConnectionFailedError(
                f"Cannot connect to {endpoint}: {exc.strerror or exc}",
                hint="Check the address and that the server is running.",
            ) from exc

        logger.debug("Connected to %s", endpoint)
        return SocketConnection(sock, timeout=timeout)
