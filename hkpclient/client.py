# client:
#   talk to a public keyserver over HKP (the HTTP Keyserver Protocol,
#   https://datatracker.ietf.org/doc/html/draft-shaw-openpgp-hkp-00):
#   fetch a key by ID, find a key by e-mail address, publish a key.

import enum
import logging
import os
from urllib.parse import quote_plus, urlencode

import requests

from hkpclient import index, keys
from hkpclient._version import __version__
from hkpclient.errors import (
    KeyExistsError,
    KeyUnavailableError,
    MalformedInputError,
    TransportError,
)
from hkpclient.keys import PublicKey

logger = logging.getLogger(__name__)

DEFAULT_KEYSERVER = "pool.sks-keyservers.net"
DEFAULT_PORT = 11371

_LOOKUP_PATH = "/pks/lookup"
_ADD_PATH = "/pks/add"
_ARMOR_MARKER = "-----BEGIN PGP PUBLIC KEY BLOCK"
_USER_AGENT = f"hkpclient/{__version__}"


class UploadResult(enum.Enum):
    ALREADY_EXISTS = "already-exists"
    UPLOADED = "uploaded"


def short_key_id(key_id: str) -> str:
    """
    Returns the 8 character, 0x-prefixed form of a key ID or fingerprint,
    e.g. 0xDEADBEEF.
    """
    if key_id.startswith("0x"):
        key_id = key_id[2:]
    if len(key_id) > 8:
        key_id = key_id[-8:]
    return f"0x{key_id}"


class KeyserverClient:
    def __repr__(self) -> str:
        return f"<KeyserverClient {self._keyserver}>"

    def __init__(
        self,
        session: requests.Session | None = None,
        keyserver: str = DEFAULT_KEYSERVER,
        port: int = DEFAULT_PORT,
        *,
        strict_put: bool = True,
    ):
        self._session = session if session is not None else requests.Session()
        self._keyserver = f"{keyserver}:{port}"
        self._strict_put = strict_put

    @classmethod
    def from_env(
        cls,
        session: requests.Session | None = None,
        keyserver: str | None = None,
        port: int | None = None,
        **kwargs,
    ) -> "KeyserverClient":
        """
        Builds a client from HKP_KEYSERVER and HKP_PORT, with any explicitly
        passed value taking precedence over the environment.
        """
        if keyserver is None:
            keyserver = os.getenv("HKP_KEYSERVER", DEFAULT_KEYSERVER)
        if port is None:
            raw_port = os.getenv("HKP_PORT", str(DEFAULT_PORT))
            try:
                port = int(raw_port)
            except ValueError:
                raise ValueError(f"HKP_PORT is not a port number: {raw_port!r}") from None
        return cls(session, keyserver, port, **kwargs)

    @property
    def keyserver(self) -> str:
        return self._keyserver

    def _url(self, path: str, params: dict[str, str] | None = None) -> str:
        url = f"http://{self._keyserver}{path}"
        if params:
            url = f"{url}?{urlencode(params)}"
        return url

    def _get(self, url: str) -> str:
        logger.debug("GET %s", url)
        try:
            resp = self._session.get(url)
        except requests.RequestException as exc:
            raise TransportError(f"GET {url} failed: {exc}") from exc

        # Keyservers answer "nothing matched" with a 404; that's for the
        # caller to interpret, not a transport problem.
        if not resp.ok and resp.status_code != 404:
            try:
                resp.raise_for_status()
            except requests.HTTPError as exc:
                raise TransportError(str(exc), status_code=resp.status_code) from exc

        return resp.text

    def _post(self, url: str, body: str, headers: dict[str, str]) -> None:
        logger.debug("POST %s (%d bytes)", url, len(body))
        try:
            resp = self._session.post(url, data=body, headers=headers)
        except requests.RequestException as exc:
            raise TransportError(f"POST {url} failed: {exc}") from exc

        try:
            resp.raise_for_status()
        except requests.HTTPError as exc:
            raise TransportError(str(exc), status_code=resp.status_code) from exc

    def get_by_id(self, key_id: str) -> PublicKey:
        url = self._url(
            _LOOKUP_PATH,
            {"op": "get", "options": "mr", "search": short_key_id(key_id)},
        )
        output = self._get(url)

        try:
            return keys.parse(output)
        except MalformedInputError as exc:
            logger.info("%s: no usable key for ID %s: %s", self._keyserver, key_id, exc)
            raise KeyUnavailableError() from None

    def search(self, address: str) -> list[index.IndexEntry]:
        """
        Returns the unexpired keys the keyserver lists for `address`,
        without fetching any of them.
        """
        output = self._get(self._index_url(address))
        return index.parse_index(output)

    def get_by_email(self, address: str) -> PublicKey:
        output = self._get(self._index_url(address))

        if _ARMOR_MARKER in output:
            # Some keyservers skip the index and hand back the key itself.
            try:
                return keys.parse(output)
            except MalformedInputError:
                raise KeyUnavailableError() from None

        if "pub:" in output:
            newest = index.select_newest(index.parse_index(output), address)
            if newest is not None:
                logger.debug("%s: newest key for %s is %s", self._keyserver, address, newest.key_id)
                return self.get_by_id(newest.key_id)

        logger.info("%s: no key found for %s", self._keyserver, address)
        raise KeyUnavailableError()

    def upload(self, text: str) -> UploadResult:
        """
        Publishes the armored public key in `text` unless the keyserver
        already has a key with its ID.
        """
        key = keys.parse(text)

        try:
            self.get_by_id(key.id)
        except (KeyUnavailableError, TransportError):
            logger.info("%s: %s not present, uploading", self._keyserver, key.id)
        else:
            return UploadResult.ALREADY_EXISTS

        body = "keytext=" + quote_plus(key.armored().rstrip())
        headers = {
            "User-Agent": _USER_AGENT,
            "Content-Type": "application/x-www-form-urlencoded",
            "Content-Length": str(len(body.encode())),
            "Connection": "close",
        }
        self._post(self._url(_ADD_PATH), body, headers)
        return UploadResult.UPLOADED

    def put(self, text: str) -> UploadResult:
        """
        Like `upload`, but with the historic contract: every call that gets
        past the network ends in KeyExistsError, even right after a
        successful upload. Clients built with `strict_put=False` only raise
        when the key really was there already.
        """
        result = self.upload(text)
        if self._strict_put or result is UploadResult.ALREADY_EXISTS:
            raise KeyExistsError()
        return result

    def _index_url(self, address: str) -> str:
        return self._url(
            _LOOKUP_PATH,
            {"op": "index", "options": "mr", "search": address},
        )
