"""Allow ``python -m jsondb_client`` invocation.

This module simply delegates to the CLI error-boundary entry point so
that ``python -m jsondb_client`` behaves identically to the
``jsondb-client`` console script.
"""

from __future__ import annotations

from jsondb_client.cli.app import cli

if __name__ == "__main__":
    cli()
