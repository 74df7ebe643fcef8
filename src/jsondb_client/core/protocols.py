"""Protocols (interfaces) consumed by the core layer.

These define the contracts that infrastructure adapters must satisfy.
Core code depends ONLY on these protocols — never on concrete
implementations — preserving the dependency inversion principle.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Protocol

from jsondb_client.core.models import Endpoint


class Connection(Protocol):
    """An open, single-use connection to the database server."""

    def send(self, frame: bytes) -> None:
        """Send one message encoded by :meth:`Transport.encode`.

        Raises
        ------
        ResponseTimeoutError
            When the peer does not accept the bytes in time.
        ConnectionFailedError
            When the peer is gone.
        """
        ...  # pragma: no cover

    def receive(self) -> str:
        """Block until one complete message has arrived and return it.

        Raises
        ------
        ResponseTimeoutError
            When the deadline elapses before the message is complete.
        ConnectionFailedError
            When the connection breaks while reading.
        MalformedResponseError
            When the bytes cannot be decoded or the stream ends early.
        """
        ...  # pragma: no cover

    def close(self) -> None:
        """Release the connection.  Must be safe to call more than once."""
        ...  # pragma: no cover


class Transport(Protocol):
    """Factory for :class:`Connection` objects."""

    def encode(self, message: str) -> bytes:
        """Return *message* in the transport's wire form.

        Called before :meth:`connect`, so an unsendable request fails
        without touching the network.

        Raises
        ------
        PayloadTooLargeError
            When *message* does not fit into a single frame.
        """
        ...  # pragma: no cover

    def connect(self, endpoint: Endpoint, timeout: float) -> Connection:
        """Open a connection to *endpoint*.

        *timeout* bounds the connect and every later receive.

        Raises
        ------
        ConnectionFailedError
            When the endpoint is unreachable.
        """
        ...  # pragma: no cover


class RequestLoader(Protocol):
    """Source of pre-written requests (``--input FILE``)."""

    def load(self, path: Path) -> dict[str, Any]:
        """Return the JSON object stored at *path*.

        Raises
        ------
        InputFileError
            When the file is missing, unreadable, or not a JSON object.
        """
        ...  # pragma: no cover
