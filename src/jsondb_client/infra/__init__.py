"""Infrastructure layer — external system integration.

This layer wraps all interaction with the network and the filesystem.
Every raw standard-library exception must be caught here and re-raised
as a :class:`~jsondb_client.exceptions.JsonDbClientError` subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
* Must expose clean, typed interfaces consumed by the core layer.
"""

from jsondb_client.infra.framing import decode_modified_utf8, encode_modified_utf8, pack_frame
from jsondb_client.infra.request_files import FileRequestLoader
from jsondb_client.infra.socket_transport import SocketConnection, SocketTransport

__all__: list[str] = [
    "FileRequestLoader",
    "SocketConnection",
    "SocketTransport",
    "decode_modified_utf8",
    "encode_modified_utf8",
    "pack_frame",
]
