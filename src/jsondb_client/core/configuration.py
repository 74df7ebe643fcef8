"""Client option schema and the parsed-options → :class:`ClientConfig` step.

:func:`client_schema` describes the command-line surface;
:func:`build_config` applies the rules that span several options (request
type vs. input file, key/value requirements, endpoint syntax) and returns
a :class:`ClientConfig` only when all of them hold.

Guarantees
----------
* Pure — the data directory is joined with the file name but never
  touched on disk.
* Only :class:`~jsondb_client.exceptions.ParseError` subclasses escape.
"""

from __future__ import annotations

from pathlib import Path

from jsondb_client import config
from jsondb_client.core.models import ClientConfig, Endpoint, OutputMode, RequestType
from jsondb_client.core.options import OptionKind, OptionSchema, OptionSpec, ParsedOptions
from jsondb_client.exceptions import InvalidOptionValueError, MissingRequiredOptionError


# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

def client_schema(version: str | None = None) -> OptionSchema:
    """Return the option schema of the ``jsondb-client`` command."""
    return OptionSchema(
        prog="jsondb-client",
        description="Send one request to a JSON key/value database server.",
        version=version,
        options=(
            OptionSpec(
                name="endpoint",
                flags=("-e", "--endpoint"),
                default=f"{config.DEFAULT_HOST}:{config.DEFAULT_PORT}",
                metavar="HOST[:PORT]",
                help="Server address.",
            ),
            OptionSpec(
                name="type",
                flags=("-t", "--type"),
                kind=OptionKind.CHOICE,
                choices=tuple(member.value for member in RequestType),
                metavar="TYPE",
                help="Type of the request.",
            ),
            OptionSpec(
                name="key",
                flags=("-k", "--key"),
                help="Key to be accessed.",
            ),
            OptionSpec(
                name="value",
                flags=("-v", "--value"),
                help="Value to be set.",
            ),
            OptionSpec(
                name="input",
                flags=("-in", "--input"),
                metavar="FILE",
                help="Read the request from FILE inside the data directory.",
            ),
            OptionSpec(
                name="data_dir",
                flags=("-d", "--data-dir"),
                default=config.DEFAULT_DATA_DIR,
                metavar="DIR",
                help="Directory holding request files.",
            ),
            OptionSpec(
                name="timeout",
                flags=("--timeout",),
                kind=OptionKind.NUMBER,
                default=config.DEFAULT_TIMEOUT,
                metavar="SECONDS",
                help="Deadline for connecting and for the full response.",
            ),
            OptionSpec(
                name="output",
                flags=("-o", "--output"),
                kind=OptionKind.CHOICE,
                choices=tuple(member.value for member in OutputMode),
                default=OutputMode.TEXT.value,
                metavar="MODE",
                help="Output format.",
            ),
            OptionSpec(
                name="verbose",
                flags=("--verbose",),
                kind=OptionKind.FLAG,
                help="Log connection details to stderr.",
            ),
        ),
    )


# ---------------------------------------------------------------------------
# Endpoint syntax
# ---------------------------------------------------------------------------

def parse_endpoint(text: str, *, option: str = "--endpoint") -> Endpoint:
    """Parse ``HOST``, ``HOST:PORT`` or ``[IPV6]:PORT``.

    A missing port falls back to :data:`~jsondb_client.config.DEFAULT_PORT`.
    """
    stripped = text.strip()
    if not stripped:
        raise InvalidOptionValueError(option, text, "host must not be empty")

    host = stripped
    port_text: str | None = None
    if stripped.startswith("["):
        closing = stripped.find("]")
        if closing == -1:
            raise InvalidOptionValueError(option, text, "unterminated '['")
        host = stripped[1:closing]
        rest = stripped[closing + 1:]
        if rest:
            if not rest.startswith(":"):
                raise InvalidOptionValueError(option, text, "expected ':' after ']'")
            port_text = rest[1:]
    elif stripped.count(":") == 1:
        host, port_text = stripped.split(":")

    if not host:
        raise InvalidOptionValueError(option, text, "host must not be empty")

    if port_text is None:
        return Endpoint(host=host, port=config.DEFAULT_PORT)

    try:
        port = int(port_text)
    except ValueError as exc:
        raise InvalidOptionValueError(option, text, "port must be an integer") from exc
    if not config.MIN_PORT <= port <= config.MAX_PORT:
        raise InvalidOptionValueError(
            option,
            text,
            f"port must be between {config.MIN_PORT} and {config.MAX_PORT}",
        )
    return Endpoint(host=host, port=port)


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

def build_config(parsed: ParsedOptions) -> ClientConfig:
    """Validate cross-option rules and return the invocation's configuration.

    Raises
    ------
    MissingRequiredOptionError
        When neither ``--type`` nor ``--input`` is given, or when the
        request type needs ``--key``/``--value`` and they are absent.
    InvalidOptionValueError
        For a malformed endpoint, a timeout outside (0, MAX_TIMEOUT], or when
        ``--input`` is combined with request options.
    """
    endpoint = parse_endpoint(str(parsed["endpoint"]))

    timeout = parsed["timeout"]
    if timeout <= 0:
        raise InvalidOptionValueError("--timeout", str(timeout), "must be positive")
    if timeout > config.MAX_TIMEOUT:
        raise InvalidOptionValueError(
            "--timeout",
            str(timeout),
            f"must not exceed {config.MAX_TIMEOUT} seconds",
        )

    raw_type: str | None = parsed["type"]
    key: str | None = parsed["key"]
    value: str | None = parsed["value"]
    input_name: str | None = parsed["input"]

    input_file: Path | None = None
    request_type: RequestType | None = None

    if input_name is not None:
        conflicting = [
            flag
            for flag, given in (("--type", raw_type), ("--key", key), ("--value", value))
            if given is not None
        ]
        if conflicting:
            raise InvalidOptionValueError(
                "--input",
                input_name,
                f"cannot be combined with {', '.join(conflicting)}",
                hint="The request file already holds the whole request.",
            )
        if not input_name.strip():
            raise InvalidOptionValueError("--input", input_name, "file name must not be empty")
        input_file = Path(str(parsed["data_dir"])) / input_name
    else:
        if raw_type is None:
            raise MissingRequiredOptionError(
                "--type",
                hint="Pass --type get|set|delete|exit, or --input FILE.",
            )
        request_type = RequestType(raw_type)
        if request_type.needs_key and key is None:
            raise MissingRequiredOptionError(
                "--key",
                hint=f"A '{request_type.value}' request needs a key.",
            )
        if request_type.needs_value and value is None:
            raise MissingRequiredOptionError(
                "--value",
                hint="A 'set' request needs a value.",
            )

    return ClientConfig(
        endpoint=endpoint,
        request_type=request_type,
        key=key,
        value=value,
        input_file=input_file,
        timeout=float(timeout),
        output=OutputMode(parsed["output"]),
        verbose=bool(parsed["verbose"]),
    )
