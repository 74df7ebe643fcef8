"""Exit-code constants used by the CLI layer.

Centralised here so that every exit path uses a well-known, tested
value rather than magic integers scattered across the codebase.  Each
error category gets its own code so scripts can branch on the failure.
"""

from __future__ import annotations

from jsondb_client.exceptions import (
    ConnectionFailedError,
    JsonDbClientError,
    MalformedResponseError,
    ParseError,
    RemoteError,
    RequestError,
    ResponseTimeoutError,
)

SUCCESS: int = 0
"""Clean exit — the server answered OK."""

GENERAL_ERROR: int = 1
"""A known JsonDbClientError without a more specific code was caught."""

UNEXPECTED_ERROR: int = 2
"""An unhandled exception escaped all known error boundaries."""

PARSE_ERROR: int = 3
"""The command line could not be turned into a configuration."""

REQUEST_ERROR: int = 4
"""The request could not be built (request file, frame size)."""

CONNECTION_FAILED: int = 5
"""The server was unreachable or dropped the connection."""

TIMEOUT: int = 6
"""No complete response arrived before the deadline."""

MALFORMED_RESPONSE: int = 7
"""The reply was not a well-formed response object."""

REMOTE_ERROR: int = 8
"""The server reported an application-level failure."""

KEYBOARD_INTERRUPT: int = 130
"""User pressed Ctrl+C.  Follows POSIX convention (128 + SIGINT=2)."""

_BY_ERROR: tuple[tuple[type[JsonDbClientError], int], ...] = (
    (ParseError, PARSE_ERROR),
    (RequestError, REQUEST_ERROR),
    (ConnectionFailedError, CONNECTION_FAILED),
    (ResponseTimeoutError, TIMEOUT),
    (MalformedResponseError, MALFORMED_RESPONSE),
    (RemoteError, REMOTE_ERROR),
)


def for_error(exc: JsonDbClientError) -> int:
    """Return the exit code for a caught client error."""
    for error_class, code in _BY_ERROR:
        if isinstance(exc, error_class):
            return code
    return GENERAL_ERROR
