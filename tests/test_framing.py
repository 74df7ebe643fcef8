"""Tests for the wire framing helpers (infra/framing.py)."""

from __future__ import annotations

import pytest

from jsondb_client import config
from jsondb_client.exceptions import MalformedResponseError, PayloadTooLargeError
from jsondb_client.infra.framing import (
    HEADER,
    decode_modified_utf8,
    encode_modified_utf8,
    frame_length,
    pack_frame,
)


# ---------------------------------------------------------------------------
# Modified UTF-8
# ---------------------------------------------------------------------------

class TestEncode:
    def test_ascii_is_unchanged(self) -> None:
        assert encode_modified_utf8('{"type":"exit"}') == b'{"type":"exit"}'

    def test_bmp_text_is_plain_utf8(self) -> None:
        assert encode_modified_utf8("é€") == "é€".encode("utf-8")

    def test_nul_uses_two_bytes(self) -> None:
        assert encode_modified_utf8("a\x00b") == b"a\xc0\x80b"

    def test_supplementary_character_becomes_surrogate_pair(self) -> None:
        # U+1F600 → D83D DE00, each surrogate as a 3-byte sequence.
        assert encode_modified_utf8("\U0001F600") == b"\xed\xa0\xbd\xed\xb8\x80"


class TestDecode:
    def test_nul(self) -> None:
        assert decode_modified_utf8(b"a\xc0\x80b") == "a\x00b"

    def test_surrogate_pair_is_joined(self) -> None:
        assert decode_modified_utf8(b"\xed\xa0\xbd\xed\xb8\x80") == "\U0001F600"

    def test_plain_utf8_is_accepted(self) -> None:
        assert decode_modified_utf8("x\U0001F600y".encode("utf-8")) == "x\U0001F600y"

    @pytest.mark.parametrize(
        "data",
        [
            b"\xff",
            b"\xe2\x82",
            b"\xed\xa0\xbd",  # unpaired high surrogate
        ],
    )
    def test_invalid_bytes(self, data: bytes) -> None:
        with pytest.raises(MalformedResponseError, match="UTF-8"):
            decode_modified_utf8(data)

    def test_server_reply_with_unicode(self) -> None:
        text = '{"response":"OK","value":"naïve \U0001F600"}'
        assert decode_modified_utf8(encode_modified_utf8(text)) == text


# ---------------------------------------------------------------------------
# Frames
# ---------------------------------------------------------------------------

class TestPackFrame:
    def test_prefixes_big_endian_length(self) -> None:
        assert pack_frame("hi") == b"\x00\x02hi"

    def test_length_counts_encoded_bytes(self) -> None:
        frame = pack_frame("é")
        assert frame[:2] == b"\x00\x02"
        assert frame_length(frame[:2]) == 2

    def test_empty_message(self) -> None:
        assert pack_frame("") == b"\x00\x00"

    def test_largest_message_fits(self) -> None:
        frame = pack_frame("a" * config.MAX_FRAME_BYTES)
        assert frame[:2] == b"\xff\xff"
        assert len(frame) == config.MAX_FRAME_BYTES + HEADER.size

    def test_oversized_message(self) -> None:
        with pytest.raises(PayloadTooLargeError) as exc_info:
            pack_frame("é" * (config.MAX_FRAME_BYTES // 2 + 1))
        assert exc_info.value.hint is not None


class TestFrameLength:
    @pytest.mark.parametrize(
        ("header", "length"),
        [(b"\x00\x00", 0), (b"\x01\x00", 256), (b"\xff\xff", 65535)],
    )
    def test_header_values(self, header: bytes, length: int) -> None:
        assert frame_length(header) == length

    def test_header_size_matches_config(self) -> None:
        assert HEADER.size == config.FRAME_HEADER_SIZE
