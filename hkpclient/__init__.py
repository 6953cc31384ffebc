from hkpclient._version import __version__
from hkpclient.client import KeyserverClient, UploadResult, short_key_id
from hkpclient.errors import (
    KeyExistsError,
    KeyserverError,
    KeyUnavailableError,
    MalformedInputError,
    TransportError,
)
from hkpclient.index import IndexEntry, parse_index, select_newest
from hkpclient.keys import PublicKey

__all__ = [
    "__version__",
    "KeyserverClient",
    "UploadResult",
    "short_key_id",
    "IndexEntry",
    "parse_index",
    "select_newest",
    "PublicKey",
    "KeyserverError",
    "TransportError",
    "KeyUnavailableError",
    "KeyExistsError",
    "MalformedInputError",
]
