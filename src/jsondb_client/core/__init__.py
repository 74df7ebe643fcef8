"""Core / service layer — pure logic and data transformations.

Rules
-----
* No ``print()`` calls.
* No filesystem or network I/O.
* No imports from ``cli`` or ``infra``.
* All functions must be fully typed and deterministic.
"""

from jsondb_client.core.configuration import build_config, client_schema, parse_endpoint
from jsondb_client.core.models import (
    ClientConfig,
    Endpoint,
    ExchangeState,
    OutputMode,
    Request,
    RequestType,
    Response,
)
from jsondb_client.core.options import (
    OptionKind,
    OptionSchema,
    OptionSpec,
    ParsedOptions,
    format_help,
    format_options,
    format_usage,
    parse_options,
)
from jsondb_client.core.protocols import Connection, RequestLoader, Transport
from jsondb_client.core.request_service import (
    RequestExchange,
    RequestService,
    build_request,
    decode_response,
)

__all__: list[str] = [
    "ClientConfig",
    "Connection",
    "Endpoint",
    "ExchangeState",
    "OptionKind",
    "OptionSchema",
    "OptionSpec",
    "OutputMode",
    "ParsedOptions",
    "Request",
    "RequestExchange",
    "RequestLoader",
    "RequestService",
    "RequestType",
    "Response",
    "Transport",
    "build_config",
    "build_request",
    "client_schema",
    "decode_response",
    "format_help",
    "format_options",
    "format_usage",
    "parse_endpoint",
    "parse_options",
]
