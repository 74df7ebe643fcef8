"""Wire framing used by the database server.

Each message is a 2-byte big-endian unsigned length followed by that
many bytes of *modified* UTF-8 — the encoding used by
``DataOutputStream.writeUTF`` on the server side:

* ``U+0000`` is written as ``C0 80`` instead of a single zero byte.
* Characters outside the BMP are written as a UTF-16 surrogate pair,
  each surrogate encoded as its own 3-byte sequence.

Rules
-----
* Pure byte/str transforms — no sockets here.
* Encoding errors surface as typed exceptions.
"""

from __future__ import annotations

import struct

from jsondb_client import config
from jsondb_client.exceptions import MalformedResponseError, PayloadTooLargeError

HEADER = struct.Struct(">H")
"""Length prefix of every frame."""

_ENCODED_NUL = b"\xc0\x80"


def encode_modified_utf8(text: str) -> bytes:
    """Encode *text* the way the server's ``writeUTF`` does."""
    if any(ord(char) > 0xFFFF for char in text):
        utf16 = text.encode("utf-16-be", "surrogatepass")
        text = "".join(
            chr(int.from_bytes(utf16[index:index + 2], "big"))
            for index in range(0, len(utf16), 2)
        )
    return text.encode("utf-8", "surrogatepass").replace(b"\x00", _ENCODED_NUL)


def decode_modified_utf8(data: bytes) -> str:
    """Decode bytes produced by ``writeUTF`` (plain UTF-8 is accepted too).

    Raises
    ------
    MalformedResponseError
        When *data* is not valid (modified) UTF-8.
    """
    try:
        text = data.replace(_ENCODED_NUL, b"\x00").decode("utf-8", "surrogatepass")
        # Join surrogate pairs back into single code points.
        return text.encode("utf-16-be", "surrogatepass").decode("utf-16-be")
    except UnicodeDecodeError as exc:
        raise MalformedResponseError(
            f"Response is not valid UTF-8: {exc.reason}",
        ) from exc


def pack_frame(message: str) -> bytes:
    """Return the length-prefixed frame for *message*.

    Raises
    ------
    PayloadTooLargeError
        When the encoded message exceeds
        :data:`~jsondb_client.config.MAX_FRAME_BYTES`.
    """
    body = encode_modified_utf8(message)
    if len(body) > config.MAX_FRAME_BYTES:
        raise PayloadTooLargeError(
            f"Request is {len(body)} bytes; a single message holds at most "
            f"{config.MAX_FRAME_BYTES} bytes.",
            hint="Shorten the key or value.",
        )
    return HEADER.pack(len(body)) + body


def frame_length(header: bytes) -> int:
    """Return the body length announced by a frame *header*."""
    (length,) = HEADER.unpack(header)
    return int(length)
