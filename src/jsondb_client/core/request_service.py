"""Core request service — one request/response exchange per invocation.

This is the central service consumed by the CLI layer.  It depends on a
:class:`~jsondb_client.core.protocols.Transport` and a
:class:`~jsondb_client.core.protocols.RequestLoader` injected at
construction time (dependency inversion), keeping the core free of any
socket or filesystem code.

Exchange lifecycle
------------------
::

    IDLE → BUILDING → SENDING → AWAITING_RESPONSE → SUCCEEDED
                 └────────┴──────────┴──────────────→ FAILED

Terminal states are final; a :class:`RequestExchange` runs once.

Guarantees
----------
* Network failures escape only as
  :class:`~jsondb_client.exceptions.JsonDbClientError` subclasses; any
  other exception is a bug and propagates unchanged.
* The connection is closed on every exit path.
* The raw reply is handed to ``on_received`` before it is decoded, so
  callers can show it even when decoding or the server status fails.
* A :class:`Response` is returned only when it was decoded completely
  and the server reported success.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from typing import Any

from jsondb_client.core.models import (
    ClientConfig,
    ExchangeState,
    Request,
    RequestType,
    Response,
)
from jsondb_client.core.protocols import Connection, RequestLoader, Transport
from jsondb_client.exceptions import (
    ConnectionFailedError,
    InputFileError,
    JsonDbClientError,
    MalformedResponseError,
    RemoteError,
)

logger = logging.getLogger(__name__)

_TRANSITIONS: dict[ExchangeState, frozenset[ExchangeState]] = {
    ExchangeState.IDLE: frozenset({ExchangeState.BUILDING}),
    ExchangeState.BUILDING: frozenset({ExchangeState.SENDING, ExchangeState.FAILED}),
    ExchangeState.SENDING: frozenset(
        {ExchangeState.AWAITING_RESPONSE, ExchangeState.FAILED},
    ),
    ExchangeState.AWAITING_RESPONSE: frozenset(
        {ExchangeState.SUCCEEDED, ExchangeState.FAILED},
    ),
    ExchangeState.SUCCEEDED: frozenset(),
    ExchangeState.FAILED: frozenset(),
}


# ---------------------------------------------------------------------------
# Request construction (pure apart from the injected loader)
# ---------------------------------------------------------------------------

def build_request(config: ClientConfig, loader: RequestLoader) -> Request:
    """Build the request described by *config*.

    Generated payloads keep the field order ``type``, ``key``, ``value``
    so the serialised form matches what the server's own client sends.
    """
    if config.input_file is not None:
        loaded = loader.load(config.input_file)
        if not isinstance(loaded, dict):
            raise InputFileError(
                f"Request file does not contain a JSON object: {config.input_file}",
            )
        return Request(payload=dict(loaded))

    if config.request_type is None:
        # build_config never produces this; guard against hand-built configs.
        raise ValueError("ClientConfig has neither a request type nor an input file.")

    payload: dict[str, Any] = {"type": config.request_type.value}
    if config.request_type.needs_key:
        payload["key"] = config.key
    if config.request_type is RequestType.SET:
        payload["value"] = config.value
    return Request(payload=payload)


# ---------------------------------------------------------------------------
# Response decoding (pure)
# ---------------------------------------------------------------------------

def decode_response(text: str) -> Response:
    """Decode the server's reply.

    The status is read from ``response`` (server wire form) or
    ``status``; the payload from ``value`` or ``data``.

    Raises
    ------
    MalformedResponseError
        When *text* is not JSON, not an object, or has no string status.
    """
    try:
        decoded: Any = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MalformedResponseError(
            f"Response is not valid JSON: {exc.msg} (line {exc.lineno}, column {exc.colno})",
        ) from exc

    if not isinstance(decoded, dict):
        raise MalformedResponseError(
            f"Response must be a JSON object, got {type(decoded).__name__}.",
        )

    status = decoded.get("response", decoded.get("status"))
    if not isinstance(status, str):
        raise MalformedResponseError(
            "Response has no 'response' or 'status' string field.",
        )

    reason = decoded.get("reason")
    if reason is not None and not isinstance(reason, str):
        reason = json.dumps(reason, ensure_ascii=False)

    data = decoded["value"] if "value" in decoded else decoded.get("data")
    return Response(status=status, data=data, reason=reason, raw=decoded)


# ---------------------------------------------------------------------------
# Exchange
# ---------------------------------------------------------------------------

class RequestExchange:
    """A single, non-reusable request/response cycle.

    Parameters
    ----------
    config:
        Validated configuration of the invocation.
    transport:
        Any object satisfying the :class:`Transport` protocol.
    loader:
        Any object satisfying the :class:`RequestLoader` protocol.
    """

    def __init__(
        self,
        config: ClientConfig,
        transport: Transport,
        loader: RequestLoader,
    ) -> None:
        self._config = config
        self._transport = transport
        self._loader = loader
        self._state = ExchangeState.IDLE
        self._history: list[ExchangeState] = [ExchangeState.IDLE]
        self.request: Request | None = None
        self.response: Response | None = None

    @property
    def state(self) -> ExchangeState:
        return self._state

    @property
    def history(self) -> tuple[ExchangeState, ...]:
        """Every state entered so far, in order."""
        return tuple(self._history)

    def _advance(self, new_state: ExchangeState) -> None:
        if new_state not in _TRANSITIONS[self._state]:
            raise RuntimeError(
                f"Illegal exchange transition {self._state.name} → {new_state.name}",
            )
        logger.debug("Exchange %s → %s", self._state.name, new_state.name)
        self._state = new_state
        self._history.append(new_state)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def run(
        self,
        *,
        on_sent: Callable[[Request], None] | None = None,
        on_received: Callable[[str], None] | None = None,
    ) -> Response:
        """Execute the exchange and return the server's successful reply.

        Parameters
        ----------
        on_sent:
            Optional callable invoked with the request once it has been
            written to the connection.
        on_received:
            Optional callable invoked with the reply text exactly as it
            arrived, before it is decoded.  It also runs for replies that
            later fail with :class:`MalformedResponseError` or
            :class:`RemoteError`.

        Raises
        ------
        RuntimeError
            When the exchange has already been run.
        JsonDbClientError
            Any typed failure; the exchange ends in ``FAILED``.
        """
        self._advance(ExchangeState.BUILDING)
        try:
            response = self._run(on_sent, on_received)
        except BaseException:
            self._advance(ExchangeState.FAILED)
            raise
        self._advance(ExchangeState.SUCCEEDED)
        self.response = response
        return response

    def _run(
        self,
        on_sent: Callable[[Request], None] | None,
        on_received: Callable[[str], None] | None,
    ) -> Response:
        request = build_request(self._config, self._loader)
        message = request.to_json()
        frame: bytes = self._guarded(self._transport.encode, message)
        self.request = request

        self._advance(ExchangeState.SENDING)
        logger.debug(
            "Connecting to %s (timeout %.1fs)",
            self._config.endpoint,
            self._config.timeout,
        )
        connection: Connection = self._guarded(
            self._transport.connect,
            self._config.endpoint,
            self._config.timeout,
        )
        try:
            self._guarded(connection.send, frame)
            logger.debug("Sent: %s", message)
            if on_sent is not None:
                on_sent(request)

            self._advance(ExchangeState.AWAITING_RESPONSE)
            reply: str = self._guarded(connection.receive)
        finally:
            connection.close()

        logger.debug("Received: %s", reply)
        if on_received is not None:
            on_received(reply)

        response = decode_response(reply)
        if not response.ok:
            raise RemoteError(
                response.reason or f"Server answered {response.status}",
                code=response.status,
            )
        return response

    @staticmethod
    def _guarded(call: Callable[..., Any], *args: Any) -> Any:
        """Call into the transport, turning a stray ``OSError`` into ours.

        Anything else is a bug, not a network condition, and propagates
        unchanged.
        """
        try:
            return call(*args)
        except JsonDbClientError:
            raise
        except OSError as exc:
            raise ConnectionFailedError(f"Transport error: {exc}") from exc


class RequestService:
    """Stateless service that runs one :class:`RequestExchange` per call.

    Parameters
    ----------
    transport:
        Any object satisfying the :class:`Transport` protocol.
    loader:
        Any object satisfying the :class:`RequestLoader` protocol.
    """

    def __init__(self, transport: Transport, loader: RequestLoader) -> None:
        self._transport: Transport = transport
        self._loader: RequestLoader = loader

    def execute(
        self,
        config: ClientConfig,
        *,
        on_sent: Callable[[Request], None] | None = None,
        on_received: Callable[[str], None] | None = None,
    ) -> Response:
        """Send the request described by *config* and return the reply."""
        exchange = RequestExchange(config, self._transport, self._loader)
        return exchange.run(on_sent=on_sent, on_received=on_received)
