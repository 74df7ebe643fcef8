"""CLI application entry point for jsondb-client.

This module is the **sole error boundary** for the entire application.
It catches :class:`~jsondb_client.exceptions.JsonDbClientError`,
``KeyboardInterrupt``, and any unexpected ``Exception``, rendering
user-friendly messages via Rich and returning well-defined exit codes.

Architecture notes
------------------
* No business logic lives here — parsing, validation and the exchange
  itself are delegated to the core and infrastructure layers.
* ``print()`` is forbidden outside the CLI layer; Rich console is used
  exclusively.
* This module is the only place that translates between the domain world
  and the OS process exit code.
"""

from __future__ import annotations

import sys
from collections.abc import Sequence

from jsondb_client.cli import exit_codes
from jsondb_client.cli.console import console, output
from jsondb_client.cli.log import configure_logging
from jsondb_client.core.configuration import build_config, client_schema
from jsondb_client.core.models import ClientConfig, OutputMode, Request
from jsondb_client.core.options import format_help, format_usage, parse_options
from jsondb_client.exceptions import JsonDbClientError, ParseError, RemoteError
from jsondb_client.version import __version__


# ---------------------------------------------------------------------------
# Command dispatch
# ---------------------------------------------------------------------------

def _handle_request(config: ClientConfig) -> int:
    """Run one request/response exchange and render the result.

    Flow:
    1. Instantiate infra adapters + the core service.
    2. Build and send the request (``Sent:`` line in text mode).
    3. Print the reply as received (``Received:`` line, or the bare
       reply in json mode), then decode it.  The reply is printed even
       when decoding or the server status fails; the error boundary
       still picks the exit code.
    """
    from jsondb_client.core.request_service import RequestService
    from jsondb_client.infra.request_files import FileRequestLoader
    from jsondb_client.infra.socket_transport import SocketTransport

    service = RequestService(SocketTransport(), FileRequestLoader())

    def _report_sent(request: Request) -> None:
        if config.output is OutputMode.TEXT:
            output.print_plain(f"Sent: {request.to_json()}")

    def _report_received(reply: str) -> None:
        if config.output is OutputMode.JSON:
            output.print_plain(reply)
        else:
            output.print_plain(f"Received: {reply}")

    service.execute(config, on_sent=_report_sent, on_received=_report_received)
    return exit_codes.SUCCESS


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: Sequence[str] | None = None) -> int:
    """Run the jsondb-client CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.  Accepting *argv* enables deterministic testing without
        monkeypatching.

    Returns
    -------
    int
        OS process exit code.

    Raises
    ------
    JsonDbClientError
        Any typed failure; :func:`cli` turns it into an exit code.
    """
    tokens = list(sys.argv[1:] if argv is None else argv)
    schema = client_schema(__version__)

    if not tokens:
        output.print_plain(format_help(schema).rstrip("\n"))
        return exit_codes.SUCCESS

    config = build_config(parse_options(tokens, schema))
    configure_logging(verbose=config.verbose)
    return _handle_request(config)


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def _escape(text: str) -> str:
    """Escape Rich markup in *text*; identity when Rich is unavailable."""
    try:
        from rich.markup import escape
    except ModuleNotFoundError:
        return text
    return escape(text)


def _render_error(exc: JsonDbClientError) -> None:
    message = _escape(str(exc))
    if isinstance(exc, RemoteError):
        console.print(f"[bold red]Server error ({_escape(exc.code)}):[/bold red] {message}")
    else:
        console.print(f"[bold red]Error:[/bold red] {message}")
    if exc.hint:
        console.print(f"[yellow]Hint:[/yellow] {_escape(exc.hint)}")


def run(argv: Sequence[str] | None = None) -> int:
    """Run :func:`main` behind the error boundary and return the exit code."""
    try:
        return main(argv)
    except JsonDbClientError as exc:
        _render_error(exc)
        if isinstance(exc, ParseError):
            console.print_plain(format_usage(client_schema(__version__)).rstrip("\n"))
        return exit_codes.for_error(exc)
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        return exit_codes.KEYBOARD_INTERRUPT
    except Exception as exc:  # noqa: BLE001
        console.print(
            "[bold red]Unexpected error.[/bold red] "
            "Please report this issue.\n"
            f"  {type(exc).__name__}: {exc}"
        )
        return exit_codes.UNEXPECTED_ERROR


def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    This function wraps :func:`main` and guarantees the process never
    exits with a raw stack trace during normal usage.
    """
    sys.exit(run())
