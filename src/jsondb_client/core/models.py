"""Domain models for jsondb-client.

All models are **frozen** dataclasses — immutable value objects with no
behaviour beyond data access and (de)serialisation of their own fields.
They carry zero I/O and no dependencies on external packages.
"""

from __future__ import annotations

import enum
import json
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class RequestType(str, enum.Enum):
    """Request types understood by the database server."""

    GET = "get"
    SET = "set"
    DELETE = "delete"
    EXIT = "exit"

    @property
    def needs_key(self) -> bool:
        return self is not RequestType.EXIT

    @property
    def needs_value(self) -> bool:
        return self is RequestType.SET


class OutputMode(str, enum.Enum):
    """How the CLI renders a successful exchange."""

    TEXT = "text"
    """``Sent: ...`` / ``Received: ...`` lines."""

    JSON = "json"
    """Only the response object, as JSON."""


class ExchangeState(enum.Enum):
    """Lifecycle of a single request/response exchange."""

    IDLE = "idle"
    BUILDING = "building"
    SENDING = "sending"
    AWAITING_RESPONSE = "awaiting_response"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (ExchangeState.SUCCEEDED, ExchangeState.FAILED)


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Endpoint:
    """Host and TCP port of the database server."""

    host: str
    port: int

    def __str__(self) -> str:
        if ":" in self.host:
            return f"[{self.host}]:{self.port}"
        return f"{self.host}:{self.port}"


@dataclass(frozen=True, slots=True)
class ClientConfig:
    """Validated, immutable configuration for one invocation.

    Built by :func:`~jsondb_client.core.configuration.build_config`; an
    instance is only ever created after every cross-option rule passed.
    """

    endpoint: Endpoint

    request_type: RequestType | None
    """Request type given with ``--type``; ``None`` when ``input_file`` is set."""

    key: str | None

    value: str | None

    input_file: Path | None
    """Request file resolved against the data directory."""

    timeout: float
    """Seconds allowed for connecting and for receiving the full response."""

    output: OutputMode = OutputMode.TEXT

    verbose: bool = False


# ---------------------------------------------------------------------------
# Wire values
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Request:
    """A request ready to be serialised and sent.

    *payload* is copied into a read-only mapping on construction.
    """

    payload: Mapping[str, Any]

    def __post_init__(self) -> None:
        object.__setattr__(self, "payload", MappingProxyType(dict(self.payload)))

    @property
    def type(self) -> str | None:
        raw = self.payload.get("type")
        return raw if isinstance(raw, str) else None

    def to_json(self) -> str:
        """Compact JSON, keys in insertion order, non-ASCII kept as-is."""
        return json.dumps(dict(self.payload), separators=(",", ":"), ensure_ascii=False)


@dataclass(frozen=True, slots=True)
class Response:
    """A fully decoded reply from the server."""

    status: str
    """``"OK"``/``"ok"`` on success; anything else is a remote failure."""

    data: Any
    """Payload (``value`` on the server wire, ``data`` in generic replies)."""

    reason: str | None
    """Failure reason supplied by the server, if any."""

    raw: Mapping[str, Any]
    """The decoded JSON object, as a read-only copy."""

    def __post_init__(self) -> None:
        object.__setattr__(self, "raw", MappingProxyType(dict(self.raw)))

    @property
    def ok(self) -> bool:
        return self.status.lower() == "ok"
