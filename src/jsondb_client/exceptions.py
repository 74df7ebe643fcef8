"""Custom exception hierarchy for jsondb-client.

All exceptions that cross layer boundaries must inherit from
:class:`JsonDbClientError`.  Raw standard-library exceptions (``OSError``,
``socket.timeout``, ``json.JSONDecodeError``) must NEVER propagate beyond
the layer that produced them — they are caught and re-raised as a typed
subclass defined here.

Hierarchy
---------
JsonDbClientError
├── ParseError
│   ├── UnrecognizedOptionError
│   ├── MissingRequiredOptionError
│   └── InvalidOptionValueError
├── RequestError
│   ├── InputFileError
│   └── PayloadTooLargeError
├── TransportError
│   ├── ConnectionFailedError
│   └── ResponseTimeoutError
├── ProtocolError
│   ├── MalformedResponseError
│   └── RemoteError
└── DependencyMissingError
"""

from __future__ import annotations


class JsonDbClientError(Exception):
    """Base exception for all jsondb-client errors.

    Every user-visible error condition must map to a subclass of this
    exception so that the CLI error boundary can render a clean message
    without leaking internal stack traces.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Argument parsing ------------------------------------------------------

class ParseError(JsonDbClientError):
    """Raised when the command line cannot be turned into a configuration."""


class UnrecognizedOptionError(ParseError):
    """Raised for a token that matches no option in the schema."""

    def __init__(self, token: str, *, hint: str | None = None) -> None:
        super().__init__(f"Unrecognized option: {token}", hint=hint)
        self.token: str = token


class MissingRequiredOptionError(ParseError):
    """Raised when a required option was not supplied."""

    def __init__(self, option: str, *, hint: str | None = None) -> None:
        super().__init__(f"Missing required option: {option}", hint=hint)
        self.option: str = option


class InvalidOptionValueError(ParseError):
    """Raised when an option value fails coercion or validation."""

    def __init__(
        self,
        option: str,
        value: str,
        reason: str,
        *,
        hint: str | None = None,
    ) -> None:
        super().__init__(
            f"Invalid value for {option}: {value!r} ({reason})",
            hint=hint,
        )
        self.option: str = option
        self.value: str = value
        self.reason: str = reason


# --- Request building ------------------------------------------------------

class RequestError(JsonDbClientError):
    """Raised when a request cannot be built from a valid configuration."""


class InputFileError(RequestError):
    """Raised when a request file is missing, unreadable, or not a JSON object."""


class PayloadTooLargeError(RequestError):
    """Raised when a serialized request does not fit into a single frame."""


# --- Transport -------------------------------------------------------------

class TransportError(JsonDbClientError):
    """Raised when network I/O with the server fails."""


class ConnectionFailedError(TransportError):
    """Raised when the server is unreachable or drops the connection."""


class ResponseTimeoutError(TransportError):
    """Raised when no complete response arrives before the deadline."""


# --- Protocol --------------------------------------------------------------

class ProtocolError(JsonDbClientError):
    """Raised after bytes were received but could not be used."""


class MalformedResponseError(ProtocolError):
    """Raised when the reply is not valid JSON or has the wrong shape."""


class RemoteError(ProtocolError):
    """Raised when the server answers with an application-level failure."""

    def __init__(
        self,
        message: str,
        *,
        code: str,
        hint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.code: str = code
        """Status reported by the server (e.g. ``"ERROR"``)."""


# --- Environment -----------------------------------------------------------

class DependencyMissingError(JsonDbClientError):
    """Raised when a runtime dependency (e.g. Rich) cannot be imported."""
