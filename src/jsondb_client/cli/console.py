"""CLI console helpers with optional Rich support.

This module intentionally avoids module-level imports of Rich so
bootstrap paths (``--help``, ``--version``) remain functional even when
Rich is not installed.

Two proxies are exported: :data:`console` writes diagnostics to stderr,
:data:`output` writes results to stdout.
"""

from __future__ import annotations

import sys
from typing import Any

from jsondb_client.exceptions import DependencyMissingError


def _load_rich_console_class() -> type[Any]:
	"""Return ``rich.console.Console`` class or raise ``DependencyMissingError``."""
	try:
		from rich.console import Console
	except ModuleNotFoundError as exc:
		raise DependencyMissingError(
			"rich is not installed. Install with: pip install rich",
		) from exc
	return Console


def get_rich_console(*, stderr: bool = True) -> Any:
	"""Create a Rich console instance targeting stderr (or stdout)."""
	console_class = _load_rich_console_class()
	return console_class(stderr=stderr)


class _ConsoleProxy:
	"""Minimal ``print``-compatible proxy with Rich fallback."""

	def __init__(self, *, stderr: bool) -> None:
		self._stderr = stderr

	def print(self, *objects: object, **rich_options: Any) -> None:
		"""Render with Rich when available, else plain ``print``.

		*rich_options* (``markup``, ``highlight``, ``soft_wrap`` …) are
		forwarded to Rich and ignored by the plain fallback.
		"""
		stream = sys.stderr if self._stderr else sys.stdout
		try:
			rich_console = get_rich_console(stderr=self._stderr)
		except DependencyMissingError:
			print(*objects, file=stream)
			return
		rich_console.print(*objects, **rich_options)

	def print_plain(self, text: str) -> None:
		"""Print *text* verbatim: no markup, emoji codes, highlighting or wrapping."""
		self.print(text, markup=False, highlight=False, emoji=False, soft_wrap=True)


console = _ConsoleProxy(stderr=True)
output = _ConsoleProxy(stderr=False)
