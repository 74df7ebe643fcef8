"""jsondb-client — command-line client for a JSON key/value database.

Sends one ``get``/``set``/``delete``/``exit`` request per invocation
over a length-prefixed TCP connection and reports the server's reply.
"""

from jsondb_client.version import __version__

__all__: list[str] = ["__version__"]
