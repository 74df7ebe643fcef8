"""Logging setup for the CLI.

Modules log through ``logging.getLogger(__name__)``; this module attaches
a single handler to the ``jsondb_client`` package logger.  Rich's
``RichHandler`` renders to stderr when Rich is importable, otherwise a
plain ``StreamHandler`` is used, mirroring :mod:`jsondb_client.cli.console`.
"""

from __future__ import annotations

import logging
import sys

PACKAGE_LOGGER = "jsondb_client"

_HANDLER_NAME = "jsondb-client-cli"


def _build_handler() -> logging.Handler:
    try:
        from rich.logging import RichHandler
    except ModuleNotFoundError:
        handler: logging.Handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        return handler

    from jsondb_client.cli.console import get_rich_console

    handler = RichHandler(
        console=get_rich_console(stderr=True),
        show_path=False,
        markup=False,
        rich_tracebacks=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    return handler


def configure_logging(*, verbose: bool) -> logging.Logger:
    """Install the CLI handler on the package logger.

    Calling this again replaces the previously installed handler, so
    repeated invocations in one process (tests) do not stack handlers.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    for existing in list(logger.handlers):
        if existing.get_name() == _HANDLER_NAME:
            logger.removeHandler(existing)

    handler = _build_handler()
    handler.set_name(_HANDLER_NAME)
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    return logger
