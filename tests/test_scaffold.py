"""Smoke tests — verify scaffold wiring.

These tests prove that:
* The CLI entry point is importable and callable.
* The exception hierarchy is correctly structured.
* Version is accessible.
* Exit codes are defined and distinct per error kind.
"""

from __future__ import annotations

import pytest

from jsondb_client import __version__
from jsondb_client.cli import exit_codes
from jsondb_client.cli.app import main
from jsondb_client.exceptions import (
    ConnectionFailedError,
    DependencyMissingError,
    InputFileError,
    InvalidOptionValueError,
    JsonDbClientError,
    MalformedResponseError,
    MissingRequiredOptionError,
    ParseError,
    PayloadTooLargeError,
    ProtocolError,
    RemoteError,
    RequestError,
    ResponseTimeoutError,
    TransportError,
    UnrecognizedOptionError,
)


# ---------------------------------------------------------------------------
# Version
# ---------------------------------------------------------------------------

class TestVersion:
    def test_version_is_string(self) -> None:
        assert isinstance(__version__, str)

    def test_version_is_semver_like(self) -> None:
        parts = __version__.split(".")
        assert len(parts) == 3
        assert all(part.isdigit() for part in parts)


# ---------------------------------------------------------------------------
# Exception hierarchy
# ---------------------------------------------------------------------------

class TestExceptions:
    @pytest.mark.parametrize(
        ("exc_class", "parent"),
        [
            (UnrecognizedOptionError, ParseError),
            (MissingRequiredOptionError, ParseError),
            (InvalidOptionValueError, ParseError),
            (InputFileError, RequestError),
            (PayloadTooLargeError, RequestError),
            (ConnectionFailedError, TransportError),
            (ResponseTimeoutError, TransportError),
            (MalformedResponseError, ProtocolError),
            (RemoteError, ProtocolError),
        ],
    )
    def test_subtypes_sit_under_their_category(
        self, exc_class: type[JsonDbClientError], parent: type[JsonDbClientError]
    ) -> None:
        assert issubclass(exc_class, parent)
        assert issubclass(exc_class, JsonDbClientError)

    def test_base_inherits_from_exception(self) -> None:
        assert issubclass(JsonDbClientError, Exception)

    def test_dependency_missing_is_a_client_error(self) -> None:
        assert issubclass(DependencyMissingError, JsonDbClientError)

    def test_hint_is_stored(self) -> None:
        err = JsonDbClientError("boom", hint="try this")
        assert str(err) == "boom"
        assert err.hint == "try this"

    def test_hint_defaults_to_none(self) -> None:
        err = JsonDbClientError("boom")
        assert err.hint is None

    def test_unrecognized_option_carries_token(self) -> None:
        err = UnrecognizedOptionError("--bogus")
        assert err.token == "--bogus"
        assert "--bogus" in str(err)

    def test_missing_option_carries_name(self) -> None:
        err = MissingRequiredOptionError("--key")
        assert err.option == "--key"
        assert "--key" in str(err)

    def test_invalid_value_carries_details(self) -> None:
        err = InvalidOptionValueError("--timeout", "abc", "expected a number")
        assert err.option == "--timeout"
        assert err.value == "abc"
        assert err.reason == "expected a number"
        assert "'abc'" in str(err)

    def test_remote_error_carries_code(self) -> None:
        err = RemoteError("No such key", code="ERROR")
        assert err.code == "ERROR"
        assert str(err) == "No such key"


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------

class TestExitCodes:
    def test_success_is_zero(self) -> None:
        assert exit_codes.SUCCESS == 0

    def test_general_error_is_one(self) -> None:
        assert exit_codes.GENERAL_ERROR == 1

    def test_unexpected_error_is_two(self) -> None:
        assert exit_codes.UNEXPECTED_ERROR == 2

    def test_keyboard_interrupt_is_130(self) -> None:
        assert exit_codes.KEYBOARD_INTERRUPT == 130

    def test_failure_codes_are_distinct_and_non_zero(self) -> None:
        codes = [
            exit_codes.GENERAL_ERROR,
            exit_codes.UNEXPECTED_ERROR,
            exit_codes.PARSE_ERROR,
            exit_codes.REQUEST_ERROR,
            exit_codes.CONNECTION_FAILED,
            exit_codes.TIMEOUT,
            exit_codes.MALFORMED_RESPONSE,
            exit_codes.REMOTE_ERROR,
            exit_codes.KEYBOARD_INTERRUPT,
        ]
        assert len(set(codes)) == len(codes)
        assert exit_codes.SUCCESS not in codes

    @pytest.mark.parametrize(
        ("error", "expected"),
        [
            (MissingRequiredOptionError("--key"), exit_codes.PARSE_ERROR),
            (ParseError("expected one argument"), exit_codes.PARSE_ERROR),
            (InputFileError("missing"), exit_codes.REQUEST_ERROR),
            (PayloadTooLargeError("big"), exit_codes.REQUEST_ERROR),
            (ConnectionFailedError("refused"), exit_codes.CONNECTION_FAILED),
            (ResponseTimeoutError("slow"), exit_codes.TIMEOUT),
            (MalformedResponseError("junk"), exit_codes.MALFORMED_RESPONSE),
            (RemoteError("No such key", code="ERROR"), exit_codes.REMOTE_ERROR),
            (DependencyMissingError("rich"), exit_codes.GENERAL_ERROR),
        ],
    )
    def test_for_error(self, error: JsonDbClientError, expected: int) -> None:
        assert exit_codes.for_error(error) == expected


# ---------------------------------------------------------------------------
# CLI routing
# ---------------------------------------------------------------------------

class TestCLIRouting:
    def test_no_args_returns_success(self, capsys: pytest.CaptureFixture[str]) -> None:
        """No arguments should print help and exit 0."""
        code = main([])
        assert code == exit_codes.SUCCESS
        assert "jsondb-client" in capsys.readouterr().out

    def test_version_flag(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out

    def test_help_flag(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--help"])
        assert exc_info.value.code == 0

    def test_request_routes_to_handler(
        self, monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Valid options should route to _handle_request (mocked)."""
        from jsondb_client.cli import app as app_module

        seen = []
        monkeypatch.setattr(
            app_module,
            "_handle_request",
            lambda config: seen.append(config) or exit_codes.SUCCESS,
        )
        code = main(["-t", "get", "-k", "name"])
        assert code == exit_codes.SUCCESS
        assert seen[0].key == "name"

    def test_invalid_options_raise_before_any_request(
        self, monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        from jsondb_client.cli import app as app_module

        def _fail(config: object) -> int:
            raise AssertionError("must not be reached")

        monkeypatch.setattr(app_module, "_handle_request", _fail)
        with pytest.raises(MissingRequiredOptionError):
            main(["-t", "set", "-k", "name"])
