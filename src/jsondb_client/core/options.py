"""Schema-driven command-line option parser.

The schema is an explicit :class:`OptionSchema` value handed to
:func:`parse_options` — there is no process-wide parser state.  Option
kinds form a closed set (:class:`OptionKind`); coercion is a plain
dispatch over that set.

``argparse`` does the tokenising (short/long flags, ``--flag=value``,
``--help``, ``--version``).  Everything that decides *whether* the
result is valid — unknown tokens, required options, type coercion,
choices — happens here so each failure maps onto a typed
:class:`~jsondb_client.exceptions.ParseError` subclass instead of an
``argparse`` ``SystemExit(2)``.

Guarantees
----------
* Pure: no I/O besides ``--help``/``--version`` output.
* Returned values are immutable.
"""

from __future__ import annotations

import argparse
import enum
import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, NoReturn

from jsondb_client.exceptions import (
    InvalidOptionValueError,
    MissingRequiredOptionError,
    ParseError,
    UnrecognizedOptionError,
)


# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

class OptionKind(enum.Enum):
    """Closed set of option value kinds."""

    STRING = "string"
    NUMBER = "number"
    FLAG = "flag"
    CHOICE = "choice"


@dataclass(frozen=True, slots=True)
class OptionSpec:
    """Declarative description of a single option."""

    name: str
    """Key under which the parsed value is stored."""

    flags: tuple[str, ...]
    """Option strings accepted on the command line (e.g. ``("-k", "--key")``)."""

    kind: OptionKind = OptionKind.STRING

    required: bool = False

    default: Any = None
    """Value used when the option is absent.  Flags default to ``False``."""

    choices: tuple[str, ...] = ()
    """Allowed values for :attr:`OptionKind.CHOICE`."""

    help: str = ""

    metavar: str | None = None

    def __post_init__(self) -> None:
        if not self.flags:
            raise ValueError(f"Option {self.name!r} declares no flags.")
        if self.kind is OptionKind.CHOICE and not self.choices:
            raise ValueError(f"Choice option {self.name!r} declares no choices.")
        if self.kind is OptionKind.FLAG and self.required:
            raise ValueError(f"Flag option {self.name!r} cannot be required.")

    @property
    def display_name(self) -> str:
        """Longest flag, used in error messages (``--key`` over ``-k``)."""
        return max(self.flags, key=len)


@dataclass(frozen=True, slots=True)
class OptionSchema:
    """Ordered collection of :class:`OptionSpec` plus help metadata."""

    prog: str
    options: tuple[OptionSpec, ...]
    description: str = ""
    version: str | None = None

    def __post_init__(self) -> None:
        names = [spec.name for spec in self.options]
        if len(names) != len(set(names)):
            raise ValueError("Option names must be unique.")


@dataclass(frozen=True, slots=True)
class ParsedOptions:
    """Immutable result of :func:`parse_options`.

    Every option in the schema has an entry; absent optional options
    hold their default.
    """

    values: Mapping[str, Any]

    def __getitem__(self, name: str) -> Any:
        return self.values[name]

    def as_dict(self) -> dict[str, Any]:
        return dict(self.values)


# ---------------------------------------------------------------------------
# argparse bridge
# ---------------------------------------------------------------------------

class _SchemaArgumentParser(argparse.ArgumentParser):
    """``ArgumentParser`` that raises instead of exiting on bad input."""

    def error(self, message: str) -> NoReturn:
        raise ParseError(
            message,
            hint=f"Run '{self.prog} --help' for usage.",
        )


def _build_argparser(schema: OptionSchema) -> _SchemaArgumentParser:
    parser = _SchemaArgumentParser(
        prog=schema.prog,
        description=schema.description or None,
        allow_abbrev=False,
    )
    if schema.version is not None:
        parser.add_argument(
            "-V",
            "--version",
            action="version",
            version=f"%(prog)s {schema.version}",
        )

    for spec in schema.options:
        if spec.kind is OptionKind.FLAG:
            parser.add_argument(
                *spec.flags,
                dest=spec.name,
                action="store_true",
                default=None,
                help=spec.help,
            )
            continue

        help_text = spec.help
        if spec.kind is OptionKind.CHOICE:
            help_text = f"{help_text} (one of: {', '.join(spec.choices)})".strip()
        if spec.default is not None:
            help_text = f"{help_text} [default: {spec.default}]".strip()
        if spec.required:
            help_text = f"{help_text} (required)".strip()

        # Values stay raw strings here; coercion is ours.
        parser.add_argument(
            *spec.flags,
            dest=spec.name,
            default=None,
            metavar=spec.metavar or spec.name.upper().replace("-", "_"),
            help=help_text,
        )
    return parser


# ---------------------------------------------------------------------------
# Coercion
# ---------------------------------------------------------------------------

def _coerce_number(spec: OptionSpec, raw: str) -> int | float:
    text = raw.strip()
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError as exc:
        raise InvalidOptionValueError(
            spec.display_name, raw, "expected a number",
        ) from exc
    if not math.isfinite(number):
        raise InvalidOptionValueError(
            spec.display_name, raw, "expected a finite number",
        )
    return number


def _coerce_choice(spec: OptionSpec, raw: str) -> str:
    if raw not in spec.choices:
        raise InvalidOptionValueError(
            spec.display_name,
            raw,
            f"expected one of: {', '.join(spec.choices)}",
        )
    return raw


def _coerce(spec: OptionSpec, raw: Any) -> Any:
    """Convert the raw token captured by argparse into the typed value."""
    if spec.kind is OptionKind.FLAG:
        return bool(raw)
    if spec.kind is OptionKind.NUMBER:
        return _coerce_number(spec, raw)
    if spec.kind is OptionKind.CHOICE:
        return _coerce_choice(spec, raw)
    return raw


def _default_for(spec: OptionSpec) -> Any:
    if spec.kind is OptionKind.FLAG:
        return bool(spec.default)
    return spec.default


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def parse_options(tokens: Sequence[str], schema: OptionSchema) -> ParsedOptions:
    """Parse *tokens* against *schema*.

    Raises
    ------
    UnrecognizedOptionError
        For the first token that no option in *schema* accepts.
    MissingRequiredOptionError
        For the first required option (in schema order) that is absent.
    InvalidOptionValueError
        When a value fails coercion or is not one of the declared choices.
    ParseError
        For structural problems such as an option given without its value.
    """
    parser = _build_argparser(schema)
    namespace, extras = parser.parse_known_args(list(tokens))

    if extras:
        raise UnrecognizedOptionError(
            extras[0],
            hint=f"Run '{schema.prog} --help' to list the accepted options.",
        )

    values: dict[str, Any] = {}
    for spec in schema.options:
        raw = getattr(namespace, spec.name, None)
        if raw is None:
            if spec.required:
                raise MissingRequiredOptionError(spec.display_name)
            values[spec.name] = _default_for(spec)
            continue
        values[spec.name] = _coerce(spec, raw)

    return ParsedOptions(values=MappingProxyType(values))


def format_options(values: Mapping[str, Any], schema: OptionSchema) -> list[str]:
    """Render *values* back into command-line tokens.

    Options whose value is ``None`` (or ``False`` for flags) are omitted.
    ``parse_options(format_options(v, s), s)`` yields *v* for any *v* that
    satisfies *s*.
    """
    tokens: list[str] = []
    for spec in schema.options:
        value = values.get(spec.name)
        if value is None:
            continue
        if spec.kind is OptionKind.FLAG:
            if value:
                tokens.append(spec.display_name)
            continue
        # ``--opt=value`` keeps values that start with "-" attached.
        tokens.append(f"{spec.display_name}={value}")
    return tokens


def format_help(schema: OptionSchema) -> str:
    """Return the full help text for *schema*."""
    return _build_argparser(schema).format_help()


def format_usage(schema: OptionSchema) -> str:
    """Return the one-paragraph usage line for *schema*."""
    return _build_argparser(schema).format_usage()
