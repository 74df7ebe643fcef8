"""Filesystem implementation of :class:`~jsondb_client.core.protocols.RequestLoader`.

Reads pre-written requests for ``--input FILE``.  Every ``OSError`` and
JSON error is re-raised as :class:`~jsondb_client.exceptions.InputFileError`.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from jsondb_client.exceptions import InputFileError


class FileRequestLoader:
    """Load a request object from a UTF-8 JSON file."""

    def load(self, path: Path) -> dict[str, Any]:
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise InputFileError(
                f"Request file not found: {path}",
                hint="File names are resolved against --data-dir.",
            ) from exc
        except (OSError, UnicodeDecodeError) as exc:
            raise InputFileError(f"Cannot read request file {path}: {exc}") from exc

        try:
            payload: Any = json.loads(text)
        except json.JSONDecodeError as exc:
            raise InputFileError(
                f"Request file {path} is not valid JSON: {exc.msg} "
                f"(line {exc.lineno}, column {exc.colno})",
            ) from exc

        if not isinstance(payload, dict):
            raise InputFileError(
                f"Request file {path} must contain a JSON object, "
                f"got {type(payload).__name__}.",
            )
        return payload
