"""Default values for the client.

Every default used by the option schema or the transport lives here so
that the CLI surface and the tests agree on the same numbers.

Usage:
    from jsondb_client.config import DEFAULT_HOST, DEFAULT_PORT
"""

from __future__ import annotations

# Server address
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 22222

# Seconds to wait for the connection and for the full response
DEFAULT_TIMEOUT = 10
MAX_TIMEOUT = 24 * 60 * 60

# Directory that ``--input`` file names are resolved against
DEFAULT_DATA_DIR = "./data"

# Frame limits (2-byte unsigned length prefix)
FRAME_HEADER_SIZE = 2
MAX_FRAME_BYTES = 0xFFFF

MIN_PORT = 1
MAX_PORT = 65535
